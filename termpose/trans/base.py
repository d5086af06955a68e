"""Trans interface: bidirectional conversion between Terms and typed values."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from termpose.core.term import Term

T = TypeVar("T")


class Trans(ABC, Generic[T]):
    """Paired ``check``/``termify`` for one target type.

    ``check`` decodes and validates a term, raising a
    :class:`~termpose.core.errors.SchemaError` on the first mismatch.
    ``termify`` encodes a value and is total for valid values.

    Implementations hold only their configuration (tags, inner Trans,
    constructor functions) and keep no state between calls, so one instance
    can be shared freely.

    Two flags tell enclosing combinators how to feed a Trans:

    Attributes:
        locates_field: The Trans searches a node's children for its own input
            (``ensure_tag``) instead of receiving a single positional child.
        reads_children: The Trans consumes a node's children as a list
            (sequences, aggregates, mappings), so a tagged field holding it
            stores those children directly under the tag.
    """

    locates_field: bool = False
    reads_children: bool = False

    @abstractmethod
    def check(self, term: Term) -> T:
        """Decode ``term`` into a value."""

    @abstractmethod
    def termify(self, value: T) -> Term:
        """Encode ``value`` into a term."""
