"""
Core tree model for termpose.

This package contains the Term data model, the parser, the canonical printer
and the error hierarchy shared with the combinator layer.
"""

from termpose.core.errors import (
    AmbiguousField,
    BadIndentation,
    ConversionError,
    MissingField,
    NestingTooDeep,
    SchemaError,
    SyntaxErrorKind,
    TagMismatch,
    TermposeError,
    TermSyntaxError,
    TypeMismatch,
    UnexpectedToken,
    UnterminatedQuote,
)
from termpose.core.parser import DEFAULT_MAX_DEPTH, parse
from termpose.core.printer import DEFAULT_INDENT, inline, pretty_print
from termpose.core.term import Term

__all__ = [
    "Term",
    "parse",
    "pretty_print",
    "inline",
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_INDENT",
    "TermposeError",
    "TermSyntaxError",
    "SyntaxErrorKind",
    "UnterminatedQuote",
    "BadIndentation",
    "UnexpectedToken",
    "NestingTooDeep",
    "SchemaError",
    "TagMismatch",
    "MissingField",
    "AmbiguousField",
    "TypeMismatch",
    "ConversionError",
]
