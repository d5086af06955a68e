"""Termpose text parser.

Converts source text into a :class:`~termpose.core.term.Term` tree.

Format Overview
---------------

Example::

    products
    	hammer cost:5 description"
    		premium hammer. great for smashing
    	"bee's knee" cost:9.50 description"
    		supposedly really good thing

Rules:

- A line holds whitespace-separated items. One item is the line's node;
  several items form an untagged list node.
- Items are atoms (``hammer``, ``"bee's knee"``), tagged items (``cost:5``,
  ``tag:(a b)`` which splices the list into the tag's children) and
  parenthesised lists (``(a b)``).
- Lines indented deeper than a line form a block attached to that line's last
  item: a bare atom becomes the block's tag, and ``tag:`` receives the block
  as its children. Each block line is one child.
- An item ending its line with a quote (``description"``, ``tag:"`` or a lone
  ``"``) opens a raw string block made of the deeper-indented lines that
  follow.

Nesting is tracked with explicit stacks, so the parser never recurses.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from termpose.core.errors import (
    BadIndentation,
    NestingTooDeep,
    UnexpectedToken,
    UnterminatedQuote,
)
from termpose.core.term import Term

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 256

# Characters that end a bare word
RESERVED = ':"()'

ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "t": "\t", "r": "\r"}

INDENT_CHARS = " \t"


def is_word_char(ch: str) -> bool:
    return ch not in RESERVED and not ch.isspace()


@dataclass
class _TagPrefix:
    """A ``tag:`` read on the current line, waiting for the item it labels."""

    tag: str
    line: int
    column: int


@dataclass
class _ListFrame:
    """An open ``(`` on the current line."""

    prefix: List[_TagPrefix]
    line: int
    column: int
    items: List[Term] = field(default_factory=list)


@dataclass
class _Line:
    """Items of one source line, before any block below it is known."""

    number: int
    width: int
    items: List[Term]
    tag_opener: Optional[List[_TagPrefix]] = None
    string_opener: Optional[List[_TagPrefix]] = None

    @property
    def can_open_block(self) -> bool:
        if self.tag_opener is not None:
            return True
        return bool(self.items) and self.items[-1].is_atom


@dataclass
class _Block:
    """Children collected for an indentation block (or for the document)."""

    width: Optional[int]
    owner: Optional[_Line]
    children: List[Term] = field(default_factory=list)


def _wrap(prefix: List[_TagPrefix], term: Term) -> Term:
    for tag in reversed(prefix):
        term = Term(tag=tag.tag, children=(term,), line=tag.line, column=tag.column)
    return term


def _wrap_spliced(prefix: List[_TagPrefix], children: List[Term]) -> Term:
    """Innermost tag takes ``children`` directly; outer tags wrap it."""
    inner = prefix[-1]
    term = Term(tag=inner.tag, children=tuple(children), line=inner.line, column=inner.column)
    return _wrap(prefix[:-1], term)


class _LineReader:
    """Tokenizes the content of a single line into items."""

    def __init__(self, text: str, number: int, offset: int, depth: int, max_depth: int) -> None:
        self.text = text
        self.number = number
        self.offset = offset
        self.depth = depth
        self.max_depth = max_depth
        self.pos = 0
        self.frames: List[_ListFrame] = []
        self.items: List[Term] = []
        self.prefix: List[_TagPrefix] = []

    def column(self, pos: Optional[int] = None) -> int:
        return self.offset + (self.pos if pos is None else pos) + 1

    def rest_is_blank(self, pos: int) -> bool:
        return not self.text[pos:].strip()

    def check_depth(self) -> None:
        if self.depth + len(self.frames) + len(self.prefix) > self.max_depth:
            raise NestingTooDeep(
                f"nesting exceeds the maximum depth of {self.max_depth}",
                self.number,
                self.column(),
            )

    def emit(self, term: Term) -> None:
        term = _wrap(self.prefix, term)
        self.prefix = []
        if self.frames:
            self.frames[-1].items.append(term)
        else:
            self.items.append(term)

    def read(self, line_width: int) -> _Line:
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch.isspace():
                if self.prefix:
                    if not self.frames and self.rest_is_blank(self.pos):
                        break
                    raise UnexpectedToken("expected a value after ':'", self.number, self.column())
                self.pos += 1
            elif ch == "(":
                self.frames.append(_ListFrame(self.prefix, self.number, self.column()))
                self.prefix = []
                self.check_depth()
                self.pos += 1
            elif ch == ")":
                self.close_list()
            elif ch == ":":
                raise UnexpectedToken("':' must follow a tag", self.number, self.column())
            elif ch == '"' and self.rest_is_blank(self.pos + 1):
                return self.open_string_block(line_width, None)
            else:
                start = self.pos
                value = self.read_quoted() if ch == '"' else self.read_word()
                done = self.after_atom(value, start)
                if done is not None:
                    return self.open_string_block(line_width, done)

        if self.frames:
            frame = self.frames[-1]
            raise UnexpectedToken("unclosed '('", frame.line, frame.column)
        line = _Line(self.number, line_width, self.items)
        if self.prefix:
            line.tag_opener = self.prefix
        return line

    def read_word(self) -> str:
        start = self.pos
        while self.pos < len(self.text) and is_word_char(self.text[self.pos]):
            self.pos += 1
        return self.text[start:self.pos]

    def read_quoted(self) -> str:
        start = self.pos
        self.pos += 1
        chars = []
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            if ch == '"':
                self.pos += 1
                return "".join(chars)
            if ch == "\\":
                if self.pos + 1 >= len(self.text):
                    break
                escaped = self.text[self.pos + 1]
                if escaped not in ESCAPES:
                    raise UnexpectedToken(f"unknown escape '\\{escaped}'", self.number, self.column())
                chars.append(ESCAPES[escaped])
                self.pos += 2
            else:
                chars.append(ch)
                self.pos += 1
        raise UnterminatedQuote("quoted string is not closed on its line", self.number, self.column(start))

    def after_atom(self, value: str, start: int) -> Optional[List[_TagPrefix]]:
        """Handle what follows an atom; returns a prefix when a string block opens."""
        text = self.text
        nxt = text[self.pos] if self.pos < len(text) else ""
        if nxt == ":":
            self.prefix.append(_TagPrefix(value, self.number, self.column(start)))
            self.check_depth()
            self.pos += 1
            return None
        if nxt == '"' and self.rest_is_blank(self.pos + 1):
            return self.prefix + [_TagPrefix(value, self.number, self.column(start))]
        if nxt and not nxt.isspace() and nxt != ")":
            raise UnexpectedToken(f"unexpected '{nxt}' after '{value}'", self.number, self.column())
        self.emit(Term.atom(value, self.number, self.column(start)))
        return None

    def close_list(self) -> None:
        if self.prefix:
            raise UnexpectedToken("expected a value after ':'", self.number, self.column())
        if not self.frames:
            raise UnexpectedToken("unmatched ')'", self.number, self.column())
        frame = self.frames.pop()
        self.pos += 1
        nxt = self.text[self.pos] if self.pos < len(self.text) else ""
        if nxt and not nxt.isspace() and nxt != ")":
            raise UnexpectedToken(f"unexpected '{nxt}' after ')'", self.number, self.column())
        if frame.prefix:
            term = _wrap_spliced(frame.prefix, frame.items)
        else:
            term = Term(children=tuple(frame.items), line=frame.line, column=frame.column)
        self.prefix = []
        if self.frames:
            self.frames[-1].items.append(term)
        else:
            self.items.append(term)

    def open_string_block(self, line_width: int, prefix: Optional[List[_TagPrefix]]) -> _Line:
        if self.frames:
            raise UnexpectedToken("a string block cannot open inside parentheses", self.number, self.column())
        line = _Line(self.number, line_width, self.items)
        line.string_opener = prefix if prefix is not None else list(self.prefix)
        return line


class _Parser:
    def __init__(self, text: str, max_depth: int) -> None:
        self.lines = [raw[:-1] if raw.endswith("\r") else raw for raw in text.split("\n")]
        self.max_depth = max_depth
        self.indent_char: Optional[str] = None

    def measure(self, indent: str, number: int) -> int:
        if not indent:
            return 0
        if " " in indent and "\t" in indent:
            raise BadIndentation("indentation mixes tabs and spaces", number, 1)
        if self.indent_char is None:
            self.indent_char = indent[0]
        elif indent[0] != self.indent_char:
            raise BadIndentation("inconsistent use of tabs and spaces for indentation", number, 1)
        return len(indent)

    def parse(self) -> Term:
        root = _Block(width=None, owner=None)
        stack: List[_Block] = [root]
        pending: Optional[_Line] = None
        index = 0
        count = len(self.lines)

        while index < count:
            raw = self.lines[index]
            number = index + 1
            index += 1
            content = raw.lstrip(INDENT_CHARS)
            if not content.strip():
                continue
            indent = raw[: len(raw) - len(content)]
            width = self.measure(indent, number)

            if root.width is None:
                root.width = width
            elif pending is not None and width > pending.width:
                if not pending.can_open_block:
                    raise BadIndentation("unexpected indentation", number, 1)
                if len(stack) >= self.max_depth:
                    raise NestingTooDeep(f"nesting exceeds the maximum depth of {self.max_depth}", number, 1)
                stack.append(_Block(width=width, owner=pending))
                pending = None
            else:
                if pending is not None:
                    stack[-1].children.append(self.finish_line(pending, None))
                    pending = None
                while len(stack) > 1 and width < stack[-1].width:
                    block = stack.pop()
                    stack[-1].children.append(self.finish_line(block.owner, block.children))
                if width != stack[-1].width:
                    raise BadIndentation("unindent does not match any outer indentation level", number, 1)

            reader = _LineReader(content.rstrip(), number, len(indent), len(stack), self.max_depth)
            line = reader.read(width)
            if line.string_opener is not None:
                value, index = self.read_string_block(index, width)
                stack[-1].children.append(self.finish_string_line(line, value))
            else:
                pending = line

        if pending is not None:
            stack[-1].children.append(self.finish_line(pending, None))
        while len(stack) > 1:
            block = stack.pop()
            stack[-1].children.append(self.finish_line(block.owner, block.children))

        children = root.children
        logger.debug(f"Parsed {count} lines into {len(children)} top-level node(s)")
        if len(children) == 1:
            return children[0]
        return Term(children=tuple(children))

    def read_string_block(self, index: int, opener_width: int) -> Tuple[str, int]:
        """Collect the raw lines of a string block starting at ``index``.

        Returns:
            Tuple of (block text, index of the first line after the block)
        """
        collected: List[str] = []
        end = index
        base: Optional[str] = None
        probe = index
        while probe < len(self.lines):
            raw = self.lines[probe]
            if not raw.strip():
                probe += 1
                continue
            content = raw.lstrip(INDENT_CHARS)
            indent = raw[: len(raw) - len(content)]
            if len(indent) <= opener_width:
                break
            number = probe + 1
            if base is None:
                self.measure(indent, number)
                base = indent
            elif not raw.startswith(base):
                raise BadIndentation("string block line is indented less than the block's first line", number, 1)
            if collected:
                # blank lines inside the block
                collected.extend("" for _ in range(end, probe))
            collected.append(raw[len(base):])
            probe += 1
            end = probe
        return "\n".join(collected), end

    def finish_string_line(self, line: _Line, value: str) -> Term:
        prefix = line.string_opener or []
        leaf = Term.atom(value, line.number, None)
        items = list(line.items)
        items.append(_wrap(prefix, leaf))
        return self.line_node(line, items)

    def finish_line(self, line: _Line, block: Optional[List[Term]]) -> Term:
        items = list(line.items)
        if line.tag_opener is not None:
            items.append(_wrap_spliced(line.tag_opener, block or []))
        elif block is not None:
            head = items.pop()
            items.append(Term(tag=head.value, children=tuple(block), line=head.line, column=head.column))
        return self.line_node(line, items)

    @staticmethod
    def line_node(line: _Line, items: List[Term]) -> Term:
        if len(items) == 1:
            return items[0]
        return Term(children=tuple(items), line=line.number, column=line.width + 1)


def parse(text: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Term:
    """Parse termpose text into a Term tree.

    Args:
        text: Source text (newline-delimited; ``\\r\\n`` line endings accepted)
        max_depth: Maximum nesting of blocks, parentheses and tag chains

    Returns:
        The document's single top-level node, an untagged list of the
        top-level nodes when there are several, or an empty term for a blank
        document

    Raises:
        UnterminatedQuote: A quoted string is not closed on its line
        BadIndentation: Mixed tabs/spaces, a stray indent or a bad dedent
        UnexpectedToken: Any other malformed input
        NestingTooDeep: Nesting exceeds ``max_depth``

    Example:
        >>> parse("cost:5")
        Term(tag='cost', value=None, children=(Term(tag=None, value='5', children=()),))
    """
    return _Parser(text, max_depth).parse()
