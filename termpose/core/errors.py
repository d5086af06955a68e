"""Exceptions raised by the parser and by schema combinators.

Two families share the :class:`TermposeError` base:

- :class:`TermSyntaxError` and its subclasses are raised by the parser. They
  are always fatal for the parse call; no partial tree is ever returned.
- :class:`SchemaError` and its subclasses are raised by ``Trans.check``. They
  record the offending term's source position and a path of outer segments
  (tags and child indices) that grows while the error propagates outwards.
"""

from enum import Enum
from typing import Any, List, Optional, Sequence, Union

PathSegment = Union[str, int]


class TermposeError(Exception):
    """Base class for every error raised by termpose."""


class SyntaxErrorKind(Enum):
    """Category of a parse failure."""

    UNTERMINATED_QUOTE = "UnterminatedQuote"
    BAD_INDENTATION = "BadIndentation"
    UNEXPECTED_TOKEN = "UnexpectedToken"
    NESTING_TOO_DEEP = "NestingTooDeep"


def _format_position(line: Optional[int], column: Optional[int]) -> str:
    if line is None:
        return ""
    if column is None:
        return f" (line {line})"
    return f" (line {line}, column {column})"


class TermSyntaxError(TermposeError):
    """Raised when source text is not valid termpose.

    Attributes:
        kind: Category of the failure
        message: Description without position information
        line: 1-based line of the failure (optional)
        column: 1-based column of the failure (optional)
    """

    kind: SyntaxErrorKind = SyntaxErrorKind.UNEXPECTED_TOKEN

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}{_format_position(self.line, self.column)}"


class UnterminatedQuote(TermSyntaxError):
    """A quoted string was not closed before the end of its line."""

    kind = SyntaxErrorKind.UNTERMINATED_QUOTE


class BadIndentation(TermSyntaxError):
    """Indentation is inconsistent or opens a block where none may start."""

    kind = SyntaxErrorKind.BAD_INDENTATION


class UnexpectedToken(TermSyntaxError):
    """A character appeared where the grammar does not allow it."""

    kind = SyntaxErrorKind.UNEXPECTED_TOKEN


class NestingTooDeep(TermSyntaxError):
    """Nesting exceeded the parser's configured depth bound."""

    kind = SyntaxErrorKind.NESTING_TOO_DEEP


def format_path(path: Sequence[PathSegment]) -> str:
    """Render a path such as ``["products", 1, "cost"]`` as ``products[1].cost``."""
    text = ""
    for segment in path:
        if isinstance(segment, int):
            text += f"[{segment}]"
        elif text:
            text += f".{segment}"
        else:
            text = str(segment)
    return text


class SchemaError(TermposeError):
    """Raised when a term does not have the shape a Trans expects.

    Attributes:
        message: Description of the mismatch
        path: Segments from the outermost schema down to the failure
        line: Source line of the offending term, when known
        column: Source column of the offending term, when known
    """

    def __init__(self, message: str, term: Optional[Any] = None, path: Optional[Sequence[PathSegment]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.path: List[PathSegment] = list(path or [])
        self.line = getattr(term, "line", None)
        self.column = getattr(term, "column", None)

    def prepend(self, segments: Sequence[PathSegment]) -> "SchemaError":
        """Add outer path segments; called by enclosing combinators while re-raising."""
        self.path[:0] = segments
        return self

    def __str__(self) -> str:
        text = self.message
        if self.path:
            text += f" at {format_path(self.path)}"
        return text + _format_position(self.line, self.column)


class TagMismatch(SchemaError):
    """The term's tag is not the one the schema requires."""

    def __init__(self, expected: str, found: Optional[str], term: Optional[Any] = None) -> None:
        found_text = "no tag" if found is None else f"'{found}'"
        super().__init__(f"expected tag '{expected}', found {found_text}", term)
        self.expected = expected
        self.found = found


class MissingField(SchemaError):
    """No child matches a required field (a tag name or a position)."""

    def __init__(self, field: PathSegment, term: Optional[Any] = None) -> None:
        if isinstance(field, int):
            message = f"missing field at position {field}"
        else:
            message = f"missing field '{field}'"
        super().__init__(message, term)
        self.field = field


class AmbiguousField(SchemaError):
    """More than one child matches a field that must be unique."""

    def __init__(self, field: str, count: int, term: Optional[Any] = None) -> None:
        super().__init__(f"field '{field}' appears {count} times", term)
        self.field = field
        self.count = count


class TypeMismatch(SchemaError):
    """The term's structure (leaf, list, tagged) is not what the schema expects."""


class ConversionError(SchemaError):
    """A leaf's text could not be converted to the target scalar type."""
