"""
termpose: an indentation-based tree notation with bidirectional schemas.

Parse text into Term trees, print them back in canonical form, and convert
between trees and typed values with composable Trans combinators.
"""

from termpose.core.errors import SchemaError, TermposeError, TermSyntaxError
from termpose.core.parser import parse
from termpose.core.printer import pretty_print
from termpose.core.term import Term

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "Term",
    "parse",
    "pretty_print",
    "TermposeError",
    "TermSyntaxError",
    "SchemaError",
]
