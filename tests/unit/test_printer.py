"""Tests for the canonical printer."""

import pytest

from termpose.core.parser import parse
from termpose.core.printer import atom_text, inline, is_block_safe, pretty_print
from termpose.core.term import Term
from termpose.examples import PRODUCTS_TEXT

A = Term.atom


class TestAtomText:
    """Tests for atom rendering."""

    def test_bare_word(self):
        """Test plain words print bare."""
        assert atom_text("hammer") == "hammer"
        assert atom_text("9.50") == "9.50"

    def test_reserved_characters_are_quoted(self):
        """Test spaces and reserved characters force quoting."""
        assert atom_text("bee's knee") == '"bee\'s knee"'
        assert atom_text("a:b") == '"a:b"'
        assert atom_text("(x)") == '"(x)"'
        assert atom_text("") == '""'

    def test_escapes(self):
        """Test quotes, backslashes and control characters are escaped."""
        assert atom_text('say "hi"\n') == '"say \\"hi\\"\\n"'
        assert atom_text("a\\b c") == '"a\\\\b c"'
        assert atom_text("tab\there") == '"tab\\there"'


class TestBlockSafety:
    """Tests for choosing the string block form."""

    def test_single_line_is_a_block(self):
        """Test single-line text is allowed in a block."""
        assert is_block_safe("premium hammer. great for smashing")

    def test_multi_line_is_a_block(self):
        """Test multi-line text is allowed in a block."""
        assert is_block_safe("one\ntwo")
        assert is_block_safe("one\n\n  indented")

    def test_unsafe_values(self):
        """Test values the block form cannot reproduce verbatim."""
        assert not is_block_safe("\nleading newline")
        assert not is_block_safe("trailing newline\n")
        assert not is_block_safe("  leading space\nx")
        assert not is_block_safe("a\n   \nb")
        assert not is_block_safe("a\r\nb")
        assert not is_block_safe("")


class TestInline:
    """Tests for single-line rendering."""

    def test_inline_forms(self):
        """Test each shape's parenthesised form."""
        assert inline(A("x")) == "x"
        assert inline(Term()) == "()"
        assert inline(Term.list(A("a"), A("b"))) == "(a b)"
        assert inline(Term.tagged("cost", A("5"))) == "cost:5"
        assert inline(Term.tagged("p", A("1"), A("2"))) == "p:(1 2)"
        assert inline(Term.tagged("e")) == "e:()"
        assert inline(Term.tagged("t", Term.list(A("a")))) == "t:((a))"
        assert inline(Term.tagged("a", Term.tagged("b", A("c")))) == "a:b:c"


class TestPrettyPrint:
    """Tests for canonical document output."""

    def test_products_canonical_form(self):
        """Test the products document prints back to its own text."""
        assert pretty_print(parse(PRODUCTS_TEXT)) == PRODUCTS_TEXT

    def test_tagged_block(self):
        """Test a tagged node with several children prints as a block."""
        term = Term.tagged("items", A("a"), Term.list(A("b"), A("c")))
        assert pretty_print(term) == "items\n\ta\n\tb c\n"

    def test_space_indent(self):
        """Test custom indentation text."""
        term = Term.tagged("items", A("a"), Term.tagged("n", A("1\n2")))
        assert pretty_print(term, indent="  ") == 'items\n  a\n  n"\n    1\n    2\n'

    def test_top_level_list_one_child_per_line(self):
        """Test an untagged root prints each child on its own line."""
        assert pretty_print(parse("a b:c")) == "a\nb:c\n"

    def test_untagged_multiline_value(self):
        """Test an untagged multi-line value uses a lone quote block."""
        assert pretty_print(A("x\ny")) == '"\n\tx\n\ty\n'

    def test_multiline_value_not_last_is_escaped(self):
        """Test multi-line values that cannot end a line are quoted inline."""
        term = Term.list(A("a\nb"), A("c"))
        assert pretty_print(Term.tagged("t", term)) == 't\n\t"a\\nb" c\n'

    def test_empty_forms(self):
        """Test empty terms and empty tags."""
        assert pretty_print(Term()) == "()\n"
        assert pretty_print(Term.tagged("e")) == "e:\n"

    def test_tagged_leaf_with_value_prints_as_shorthand(self):
        """Test a tag carrying its own value prints like tag:value."""
        assert pretty_print(Term(tag="cost", value="5")) == "cost:5\n"

    def test_deterministic(self):
        """Test identical trees print identically."""
        assert pretty_print(parse(PRODUCTS_TEXT)) == pretty_print(parse(PRODUCTS_TEXT))

    def test_invalid_indent_rejected(self):
        """Test empty or mixed indentation text is rejected."""
        with pytest.raises(ValueError):
            pretty_print(A("x"), indent=" \t")
        with pytest.raises(ValueError):
            pretty_print(A("x"), indent="")

    def test_str_uses_printer(self):
        """Test str(term) renders canonical text."""
        assert str(Term.tagged("cost", A("5"))) == "cost:5\n"


ROUND_TRIP_DOCUMENTS = [
    PRODUCTS_TEXT,
    "a",
    "a b c",
    "",
    "()",
    "(())",
    "((a) () (b c))",
    "x:()",
    "x:(())",
    "t:((a b))",
    "a:b:c d:(1 2 3)",
    'q:"with space" "tab\\there"',
    "root\n  a\n    b\n  c\nnext",
    "point:\n\tx:1\n\ty:2",
    'code"\n\tdef f():\n\t    return 1\n\n\tf()',
    '"\n  one\n  two',
    'x "\n  one\n  two',
    '"tag with space"\n\tchild',
    'outer\n\tinner a:b c\n\t\tdeep (1 2) e:',
    'k"\n\ta\nk:v k2:"\n\tline\n\tline2',
    '"a b""\n\tblock under quoted tag',
    'empty"\nafter',
    'u"\n\t\ttabbed line\nnext',
]


class TestRoundTrip:
    """parse(pretty_print(t)) == t for parser-produced terms."""

    @pytest.mark.parametrize("text", ROUND_TRIP_DOCUMENTS)
    def test_print_then_parse(self, text):
        """Test printed text parses back to the same term."""
        term = parse(text)
        assert parse(pretty_print(term)) == term

    @pytest.mark.parametrize("text", ROUND_TRIP_DOCUMENTS)
    def test_print_is_idempotent(self, text):
        """Test canonical output is a fixed point of parse-then-print."""
        once = pretty_print(parse(text))
        assert pretty_print(parse(once)) == once

    @pytest.mark.parametrize("indent", ["\t", "  ", "    "])
    def test_round_trip_with_indent(self, indent):
        """Test round trips hold for tab and space indentation."""
        term = parse(PRODUCTS_TEXT)
        assert parse(pretty_print(term, indent=indent)) == term


def nested_term(levels):
    """Build ``a`` blocks nested ``levels`` deep, each holding the next and a ``y``."""
    term = A("leaf")
    for _ in range(levels):
        term = Term.tagged("a", term, A("y"))
    return term


class TestDeepTrees:
    """Printing trees deeper than the interpreter's recursion limit."""

    def test_deep_tagged_blocks_round_trip(self):
        """Test a tree 3000 levels deep prints and parses back unchanged."""
        term = nested_term(3000)
        text = pretty_print(term)
        assert text.startswith("a\n\ta\n\t\ta\n")
        assert parse(text, max_depth=5000) == term

    def test_deep_parsed_document_round_trip(self):
        """Test a deeply indented document accepted by the parser also prints."""
        text = "".join("\t" * i + "a\n" for i in range(3000))
        term = parse(text, max_depth=5000)
        assert term.depth() == 3000
        assert parse(pretty_print(term), max_depth=5000) == term

    def test_deep_inline_lists(self):
        """Test the parenthesised form of a deeply nested list."""
        term = A("x")
        for _ in range(3000):
            term = Term.list(term)
        assert inline(term) == "(" * 3000 + "x" + ")" * 3000
