"""Term tree model.

A Term is the universal intermediate representation of termpose data: an
ordered, optionally tagged tree. Leaves may carry a scalar ``value``; interior
nodes carry ``children``. Tags are orthogonal to that distinction.

Terms are immutable. Children are stored in a tuple, so a tree is a strict
parent-owns-children structure and cannot contain cycles.
"""

from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, Tuple


@dataclass(frozen=True, eq=False)
class Term:
    """Immutable tagged tree node.

    Equality and hashing consider ``tag``, ``value`` and ``children``
    (the whole tree, order-sensitive, walked without recursion). Source
    positions recorded by the parser are carried along for error messages but
    never compared.

    Attributes:
        tag: Optional label of the node
        value: Optional scalar payload; only leaves carry one
        children: Ordered child terms
        line: 1-based source line (parser-produced terms only)
        column: 1-based source column (parser-produced terms only)

    Example:
        >>> Term.tagged("cost", Term.atom("5")) == Term("cost", None, (Term(None, "5"),))
        True
    """

    tag: Optional[str] = None
    value: Optional[str] = None
    children: Tuple["Term", ...] = ()
    line: Optional[int] = field(default=None, repr=False)
    column: Optional[int] = field(default=None, repr=False)

    def __post_init__(self):
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))
        if self.value is not None and self.children:
            raise ValueError("A term cannot carry both a value and children")
        for child in self.children:
            if not isinstance(child, Term):
                raise TypeError(f"Term children must be Term instances, got {type(child).__name__}")

    @classmethod
    def atom(cls, value: str, line: Optional[int] = None, column: Optional[int] = None) -> "Term":
        """Untagged leaf holding ``value``."""
        return cls(value=value, line=line, column=column)

    @classmethod
    def tagged(cls, tag: str, *children: "Term") -> "Term":
        """Tagged node with the given children."""
        return cls(tag=tag, children=children)

    @classmethod
    def list(cls, *children: "Term") -> "Term":
        """Untagged node with the given children (an empty term when none)."""
        return cls(children=children)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def is_atom(self) -> bool:
        """True for an untagged leaf with a value, e.g. ``hammer``."""
        return self.tag is None and self.value is not None

    def find(self, tag: str) -> Tuple["Term", ...]:
        """Return all direct children tagged ``tag``, in document order."""
        return tuple(child for child in self.children if child.tag == tag)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Term):
            return NotImplemented
        stack = [(self, other)]
        while stack:
            left, right = stack.pop()
            if left is right:
                continue
            if (left.tag, left.value, len(left.children)) != (right.tag, right.value, len(right.children)):
                return False
            stack.extend(zip(left.children, right.children))
        return True

    def __hash__(self) -> int:
        # Pre-order (tag, value, child count) identifies the tree
        signature = []
        stack = [self]
        while stack:
            term = stack.pop()
            signature.append((term.tag, term.value, len(term.children)))
            stack.extend(reversed(term.children))
        return hash(tuple(signature))

    def depth(self) -> int:
        """Height of the tree rooted here (a leaf has depth 1)."""
        deepest = 0
        stack = [(self, 1)]
        while stack:
            term, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child, level + 1) for child in term.children)
        return deepest

    def with_position(self, line: Optional[int], column: Optional[int]) -> "Term":
        return replace(self, line=line, column=column)

    def with_children(self, children: Iterable["Term"]) -> "Term":
        return replace(self, value=None, children=tuple(children))

    def __str__(self) -> str:
        from termpose.core.printer import pretty_print

        return pretty_print(self)
