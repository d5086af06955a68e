"""Canonical printer for Term trees.

The printer is the inverse of :func:`termpose.core.parser.parse`: for any term
the parser produces, ``parse(pretty_print(term)) == term``. Output is
deterministic; the same tree always prints to the same text.
"""

from typing import List, Sequence, Tuple, Union

from termpose.core.parser import ESCAPES, is_word_char
from termpose.core.term import Term

DEFAULT_INDENT = "\t"

_REVERSE_ESCAPES = {char: f"\\{code}" for code, char in ESCAPES.items()}


def atom_text(value: str) -> str:
    """Render a value as a bare word when possible, otherwise as a quoted string.

    Example:
        >>> atom_text("hammer")
        'hammer'
        >>> atom_text("bee's knee")
        '"bee\\'s knee"'
    """
    if value and all(is_word_char(ch) for ch in value):
        return value
    return '"' + "".join(_REVERSE_ESCAPES.get(ch, ch) for ch in value) + '"'


def is_block_safe(value: str) -> bool:
    """True when ``value`` survives the string block form verbatim."""
    if not value or "\r" in value:
        return False
    lines = value.split("\n")
    if not lines[0].strip() or not lines[-1].strip():
        return False
    if lines[0][0].isspace():
        return False
    return all(line == "" or line.strip() for line in lines)


def _is_bare(term: Term) -> bool:
    """Untagged and valueless: an untagged list or the empty term."""
    return term.tag is None and term.value is None


def _tag_body(term: Term) -> Tuple[Term, ...]:
    if term.value is not None:
        return (Term.atom(term.value),)
    return term.children


def inline(term: Term) -> str:
    """Render a term on a single line using the parenthesised form.

    Example:
        >>> inline(Term.tagged("point", Term.atom("1"), Term.atom("2")))
        'point:(1 2)'
    """
    pieces: List[str] = []
    # Work items are terms still to render or literal text to copy
    stack: List[Union[Term, str]] = [term]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            pieces.append(item)
            continue
        if item.tag is None:
            if item.value is not None:
                pieces.append(atom_text(item.value))
                continue
            opening, body = "(", item.children
        else:
            body = _tag_body(item)
            tag = atom_text(item.tag)
            if len(body) == 1 and not _is_bare(body[0]):
                pieces.append(f"{tag}:")
                stack.append(body[0])
                continue
            opening = f"{tag}:("
        pieces.append(opening)
        stack.append(")")
        for index in range(len(body) - 1, -1, -1):
            stack.append(body[index])
            if index:
                stack.append(" ")
    return "".join(pieces)


def _block_lines(value: str, depth: int, indent: str) -> List[str]:
    prefix = indent * depth
    return [prefix + line if line else "" for line in value.split("\n")]


def _tail(term: Term, depth: int, indent: str) -> Tuple[str, List[str], Tuple[Term, ...]]:
    """Render the last item of a line.

    Returns:
        Tuple of (item text, string block lines, children to print one level deeper)
    """
    if term.tag is None:
        if term.value is not None and "\n" in term.value and is_block_safe(term.value):
            return '"', _block_lines(term.value, depth + 1, indent), ()
        return inline(term), [], ()

    tag = atom_text(term.tag)
    body = _tag_body(term)
    if not body:
        return f"{tag}:", [], ()
    if len(body) == 1 and body[0].is_atom:
        value = body[0].value
        if atom_text(value) != value and is_block_safe(value):
            return f'{tag}"', _block_lines(value, depth + 1, indent), ()
        return f"{tag}:{atom_text(value)}", [], ()
    return tag, [], body


def _emit_lines(terms: Sequence[Term], indent: str) -> List[str]:
    """Print each term as a line at depth 0, with its block below it."""
    out: List[str] = []
    stack = [(term, 0) for term in reversed(terms)]
    while stack:
        term, depth = stack.pop()
        prefix = indent * depth
        if _is_bare(term) and len(term.children) >= 2:
            head = [inline(child) for child in term.children[:-1]]
            text, block, nested = _tail(term.children[-1], depth, indent)
            out.append(prefix + " ".join(head + [text]))
        else:
            text, block, nested = _tail(term, depth, indent)
            out.append(prefix + text)
        out.extend(block)
        stack.extend((child, depth + 1) for child in reversed(nested))
    return out


def pretty_print(term: Term, indent: str = DEFAULT_INDENT) -> str:
    """Render a term in canonical termpose form.

    Nesting is walked with an explicit stack, so any depth prints.

    Args:
        term: Term to render
        indent: Text used for one level of indentation (a tab or spaces)

    Returns:
        Newline-terminated text

    Raises:
        ValueError: If ``indent`` is empty or mixes tabs and spaces

    Example:
        >>> print(pretty_print(Term.tagged("products", Term.atom("hammer"), Term.atom("twine"))), end="")
        products
        	hammer
        	twine
    """
    if not indent or indent.strip(" ") and indent.strip("\t"):
        raise ValueError(f"Indent must be a non-empty run of spaces or tabs, got {indent!r}")
    if _is_bare(term) and len(term.children) >= 2:
        lines = _emit_lines(term.children, indent)
    else:
        lines = _emit_lines([term], indent)
    return "\n".join(lines) + "\n"
