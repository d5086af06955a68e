"""One-call helpers joining the parser/printer with a Trans."""

from typing import TypeVar

from termpose.core.parser import DEFAULT_MAX_DEPTH, parse
from termpose.core.printer import DEFAULT_INDENT, pretty_print
from termpose.trans.base import Trans

T = TypeVar("T")


def deserialize(text: str, trans: Trans[T], max_depth: int = DEFAULT_MAX_DEPTH) -> T:
    """Parse ``text`` and check the resulting term with ``trans``.

    Raises:
        TermSyntaxError: The text is not valid termpose
        SchemaError: The term does not match the schema
    """
    return trans.check(parse(text, max_depth=max_depth))


def serialize(value: T, trans: Trans[T], indent: str = DEFAULT_INDENT) -> str:
    """Termify ``value`` with ``trans`` and print it in canonical form."""
    return pretty_print(trans.termify(value), indent=indent)
