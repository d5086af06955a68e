"""Structural combinators: tagged fields, sequences, aggregates and mappings.

These wrap other Trans objects to describe whole documents. A schema for the
products demo reads::

    tagged_sequence("products",
        combine_trans(
            Product,
            lambda p: (p.name, p.cost, p.description),
            string_trans(),
            ensure_tag("cost", float_trans()),
            ensure_tag("description", string_trans())))

``check`` fails fast: the first error is propagated, with the enclosing tags
and child indices prepended to its path on the way out.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

from termpose.core.errors import (
    AmbiguousField,
    MissingField,
    SchemaError,
    TagMismatch,
    TypeMismatch,
)
from termpose.core.term import Term
from termpose.trans.base import Trans
from termpose.trans.leaves import describe

logger = logging.getLogger(__name__)

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")

DUPLICATE_POLICIES = ("first", "error")


def _reject_scalar(term: Term, expected: str) -> None:
    if term.value is not None and not term.children:
        raise TypeMismatch(f"expected {expected}, found {describe(term)}", term)


class EnsureTag(Trans[T]):
    """Field locator: finds the child tagged ``tag`` and checks its content.

    When several children carry the tag, ``duplicates="first"`` uses the first
    one and ignores the rest; ``duplicates="error"`` raises AmbiguousField.
    """

    locates_field = True

    def __init__(self, tag: str, inner: Trans[T], duplicates: str = "first") -> None:
        if duplicates not in DUPLICATE_POLICIES:
            raise ValueError(f"Unknown duplicate policy: {duplicates}. Valid: {list(DUPLICATE_POLICIES)}")
        self.tag = tag
        self.inner = inner
        self.duplicates = duplicates

    def check(self, term: Term) -> T:
        matches = term.find(self.tag)
        if not matches:
            raise MissingField(self.tag, term)
        if len(matches) > 1:
            if self.duplicates == "error":
                raise AmbiguousField(self.tag, len(matches), matches[1])
            logger.debug(f"Field '{self.tag}' appears {len(matches)} times, using the first")
        field = matches[0]
        try:
            return self.inner.check(self._body(field))
        except SchemaError as e:
            e.prepend([self.tag])
            raise

    def _body(self, field: Term) -> Term:
        if self.inner.locates_field:
            return field
        if self.inner.reads_children:
            return Term(children=field.children, line=field.line, column=field.column)
        if len(field.children) == 1:
            return field.children[0]
        if field.value is not None:
            return Term.atom(field.value, field.line, field.column)
        if not field.children:
            raise TypeMismatch(f"field '{self.tag}' has no content", field)
        return Term(children=field.children, line=field.line, column=field.column)

    def termify(self, value: T) -> Term:
        inner = self.inner.termify(value)
        if self.inner.reads_children:
            return Term(tag=self.tag, children=inner.children)
        return Term(tag=self.tag, children=(inner,))


class TaggedSequence(Trans[List[T]]):
    """Root tag match plus an ordered decode of every child."""

    def __init__(self, tag: str, inner: Trans[T]) -> None:
        self.tag = tag
        self.inner = inner

    def check(self, term: Term) -> List[T]:
        if term.tag != self.tag:
            raise TagMismatch(self.tag, term.tag, term)
        _reject_scalar(term, f"a '{self.tag}' sequence")
        return _check_items(self.inner, term.children, [self.tag])

    def termify(self, value: Sequence[T]) -> Term:
        return Term(tag=self.tag, children=tuple(self.inner.termify(item) for item in value))


class SequenceTrans(Trans[List[T]]):
    """Untagged list whose children all decode with ``inner``."""

    reads_children = True

    def __init__(self, inner: Trans[T]) -> None:
        self.inner = inner

    def check(self, term: Term) -> List[T]:
        _reject_scalar(term, "a list")
        return _check_items(self.inner, term.children, [])

    def termify(self, value: Sequence[T]) -> Term:
        return Term(children=tuple(self.inner.termify(item) for item in value))


def _check_items(inner: Trans[T], children: Sequence[Term], path: List[Any]) -> List[T]:
    results = []
    for index, child in enumerate(children):
        try:
            results.append(inner.check(child))
        except SchemaError as e:
            e.prepend(path + [index])
            raise
    return results


class CombineTrans(Trans[T]):
    """Aggregate built from field Trans plus constructor/destructor functions.

    Positional fields read the child at their own declared position; field
    locators (``ensure_tag``) search the whole node. ``termify`` emits the
    fields in declared order, so both directions agree on positions.
    """

    reads_children = True

    def __init__(
        self,
        constructor: Callable[..., T],
        destructor: Callable[[T], Sequence[Any]],
        fields: Sequence[Trans[Any]],
    ) -> None:
        if not fields:
            raise ValueError("combine_trans needs at least one field")
        self.constructor = constructor
        self.destructor = destructor
        self.fields = tuple(fields)

    def check(self, term: Term) -> T:
        _reject_scalar(term, "a term with fields")
        values = []
        for position, field in enumerate(self.fields):
            if field.locates_field:
                values.append(field.check(term))
                continue
            if position >= len(term.children):
                raise MissingField(position, term)
            try:
                values.append(field.check(term.children[position]))
            except SchemaError as e:
                e.prepend([position])
                raise
        return self.constructor(*values)

    def termify(self, value: T) -> Term:
        parts = tuple(self.destructor(value))
        if len(parts) != len(self.fields):
            raise ValueError(f"Destructor returned {len(parts)} fields, expected {len(self.fields)}")
        return Term(children=tuple(field.termify(part) for field, part in zip(self.fields, parts)))


class PairTrans(Trans[Tuple[K, V]]):
    reads_children = True

    def __init__(self, key: Trans[K], value: Trans[V]) -> None:
        self.key = key
        self.value = value

    def check(self, term: Term) -> Tuple[K, V]:
        if len(term.children) != 2:
            raise TypeMismatch(f"expected a pair, two elements, but found {describe(term)}", term)
        first, second = term.children
        return _check_entry(self.key, self.value, first, second)

    def termify(self, value: Tuple[K, V]) -> Term:
        k, v = value
        return Term.list(self.key.termify(k), self.value.termify(v))


def _check_entry(key: Trans[K], value: Trans[V], key_term: Term, value_term: Term) -> Tuple[K, V]:
    k = key.check(key_term)
    try:
        v = value.check(value_term)
    except SchemaError as e:
        if key_term.is_atom:
            e.prepend([key_term.value])
        raise
    return k, v


class MappingTrans(Trans[Dict[K, V]]):
    """Dict encoded as ``key:value`` children, or ``(key value)`` pairs for
    keys that do not termify to a plain atom. Later duplicates win."""

    def __init__(self, key: Trans[K], value: Trans[V], tag: Optional[str] = None) -> None:
        self.key = key
        self.value = value
        self.tag = tag
        self.reads_children = tag is None

    def check(self, term: Term) -> Dict[K, V]:
        if self.tag is not None and term.tag != self.tag:
            raise TagMismatch(self.tag, term.tag, term)
        _reject_scalar(term, "a mapping")
        result: Dict[K, V] = {}
        for index, child in enumerate(term.children):
            try:
                k, v = self._entry(child)
            except SchemaError as e:
                e.prepend([index])
                if self.tag is not None:
                    e.prepend([self.tag])
                raise
            result[k] = v
        return result

    def _entry(self, child: Term) -> Tuple[K, V]:
        if child.tag is not None and len(child.children) == 1:
            key_term = Term.atom(child.tag, child.line, child.column)
            return _check_entry(self.key, self.value, key_term, child.children[0])
        if child.tag is None and len(child.children) == 2:
            return _check_entry(self.key, self.value, child.children[0], child.children[1])
        raise TypeMismatch(f"expected 'key:value' or a two-item list, found {describe(child)}", child)

    def termify(self, value: Dict[K, V]) -> Term:
        entries = []
        for k, v in value.items():
            key_term = self.key.termify(k)
            value_term = self.value.termify(v)
            if key_term.is_atom:
                entries.append(Term(tag=key_term.value, children=(value_term,)))
            else:
                entries.append(Term.list(key_term, value_term))
        return Term(tag=self.tag, children=tuple(entries))


def ensure_tag(tag: str, inner: Trans[T], duplicates: str = "first") -> EnsureTag[T]:
    """Locate the child tagged ``tag`` and check its content with ``inner``.

    Args:
        tag: Tag of the field to find among a node's direct children
        inner: Trans applied to the field's content
        duplicates: "first" (default) uses the first matching child;
                    "error" raises AmbiguousField when the tag repeats

    Returns:
        Field-locating Trans for use inside combine_trans
    """
    return EnsureTag(tag, inner, duplicates)


def tagged_sequence(tag: str, inner: Trans[T]) -> TaggedSequence[T]:
    """Match a node tagged ``tag`` and decode each of its children with ``inner``."""
    return TaggedSequence(tag, inner)


def sequence_trans(inner: Trans[T]) -> SequenceTrans[T]:
    return SequenceTrans(inner)


def combine_trans(
    constructor: Callable[..., T],
    destructor: Callable[[T], Sequence[Any]],
    *fields: Trans[Any],
) -> CombineTrans[T]:
    """Build a Trans for an aggregate type out of per-field Trans.

    Args:
        constructor: Called with the decoded fields, in order, to build the value
        destructor: Returns the value's fields as a tuple, in the same order
        *fields: One Trans per field; positional ones read the child at their
                 position, ensure_tag ones search by tag

    Returns:
        CombineTrans producing untagged nodes whose children are the fields

    Example:
        >>> point = combine_trans(lambda x, y: (x, y), lambda p: p, float_trans(), float_trans())
        >>> point.check(parse("1 2"))
        (1.0, 2.0)
    """
    return CombineTrans(constructor, destructor, fields)


def pair_trans(key: Trans[K], value: Trans[V]) -> PairTrans[K, V]:
    return PairTrans(key, value)


def mapping_trans(key: Trans[K], value: Trans[V]) -> MappingTrans[K, V]:
    """Dict Trans over an untagged node of ``key:value`` entries."""
    return MappingTrans(key, value)


def tagged_mapping_trans(tag: str, key: Trans[K], value: Trans[V]) -> MappingTrans[K, V]:
    """Dict Trans over a node tagged ``tag``."""
    return MappingTrans(key, value, tag)
