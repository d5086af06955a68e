"""Leaf combinators converting a single scalar term to and from a primitive."""

import re

from termpose.core.errors import ConversionError, TypeMismatch
from termpose.core.term import Term
from termpose.trans.base import Trans

_FLOAT_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
_FLOAT_SPECIALS = {"inf", "+inf", "-inf", "nan"}
_INT_RE = re.compile(r"[+-]?\d+")

TRUE_WORDS = ("true", "yes", "⊤")
FALSE_WORDS = ("false", "no", "⟂")


def describe(term: Term) -> str:
    """Short human description of a term's shape for error messages."""
    if term.tag is not None:
        return f"a term tagged '{term.tag}'"
    if term.value is not None:
        return f"the value '{term.value}'"
    if not term.children:
        return "an empty term"
    return f"a list of {len(term.children)} terms"


def leaf_value(term: Term, expected: str) -> str:
    """Return the value of a leaf term, raising TypeMismatch for anything else."""
    if term.children or term.value is None:
        raise TypeMismatch(f"expected {expected}, found {describe(term)}", term)
    return term.value


class StringTrans(Trans[str]):
    def check(self, term: Term) -> str:
        return leaf_value(term, "a string")

    def termify(self, value: str) -> Term:
        if not isinstance(value, str):
            raise TypeError(f"StringTrans can only termify str, got {type(value).__name__}")
        return Term.atom(value)


class FloatTrans(Trans[float]):
    """Floats are written with ``repr`` so re-parsing yields the same value."""

    def check(self, term: Term) -> float:
        text = leaf_value(term, "a number").strip()
        if not _FLOAT_RE.fullmatch(text) and text.lower() not in _FLOAT_SPECIALS:
            raise ConversionError(f"'{text}' is not a number", term)
        return float(text)

    def termify(self, value: float) -> Term:
        return Term.atom(repr(float(value)))


class IntTrans(Trans[int]):
    def check(self, term: Term) -> int:
        text = leaf_value(term, "an integer").strip()
        if not _INT_RE.fullmatch(text):
            raise ConversionError(f"'{text}' is not an integer", term)
        return int(text)

    def termify(self, value: int) -> Term:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"IntTrans can only termify int, got {type(value).__name__}")
        return Term.atom(str(value))


class BoolTrans(Trans[bool]):
    def check(self, term: Term) -> bool:
        text = leaf_value(term, "a bool")
        if text in TRUE_WORDS:
            return True
        if text in FALSE_WORDS:
            return False
        raise ConversionError(f"expected a bool here, found '{text}'", term)

    def termify(self, value: bool) -> Term:
        return Term.atom("true" if value else "false")


def string_trans() -> StringTrans:
    """Trans for plain string leaves."""
    return StringTrans()


def float_trans() -> FloatTrans:
    """Trans for numeric leaves decoded as ``float``."""
    return FloatTrans()


def int_trans() -> IntTrans:
    return IntTrans()


def bool_trans() -> BoolTrans:
    """Trans for ``true``/``false`` leaves (``yes``/``no`` and ``⊤``/``⟂`` also accepted)."""
    return BoolTrans()
