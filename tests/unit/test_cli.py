"""Tests for the termpose command-line interface."""

import io
import json

import pytest

from termpose.cli.main import main
from termpose.core.parser import parse
from termpose.examples import PRODUCTS_TEXT


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run each test away from any termpose.json in the working directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PARSER_MAX_DEPTH", raising=False)
    monkeypatch.delenv("PRINTER_INDENT", raising=False)


def write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestFormatCommand:
    """Tests for `termpose format`."""

    def test_prints_canonical_form(self, tmp_path, capsys):
        """Test format prints the canonical form with tab indentation."""
        path = write(tmp_path, "doc.term", "point:(x:1 y:2)")
        assert main(["format", path]) == 0
        assert capsys.readouterr().out == "point\n\tx:1\n\ty:2\n"

    def test_indent_option(self, tmp_path, capsys):
        """Test --indent with a number indents with that many spaces."""
        path = write(tmp_path, "doc.term", "point:(x:1 y:2)")
        assert main(["format", path, "--indent", "2"]) == 0
        assert capsys.readouterr().out == "point\n  x:1\n  y:2\n"

    def test_indent_from_config(self, tmp_path, capsys):
        """Test termpose.json in the working directory sets the indent."""
        write(tmp_path, "termpose.json", json.dumps({"printer": {"indent": 4}}))
        path = write(tmp_path, "doc.term", "point:(x:1 y:2)")
        assert main(["format", path]) == 0
        assert capsys.readouterr().out == "point\n    x:1\n    y:2\n"

    def test_check_canonical(self, tmp_path):
        """Test --check passes for canonical input."""
        path = write(tmp_path, "products.term", PRODUCTS_TEXT)
        assert main(["format", path, "--check"]) == 0

    def test_check_not_canonical(self, tmp_path, capsys):
        """Test --check fails and names the file when output would change."""
        path = write(tmp_path, "doc.term", "point:(x:1 y:2)")
        assert main(["format", path, "--check"]) == 1
        assert "would reformat" in capsys.readouterr().err

    def test_syntax_error(self, tmp_path, capsys):
        """Test syntax errors are reported on stderr with exit status 1."""
        path = write(tmp_path, "bad.term", 'a "unclosed')
        assert main(["format", path]) == 1
        err = capsys.readouterr().err
        assert "UnterminatedQuote" in err
        assert "line 1" in err

    def test_missing_file(self, tmp_path, capsys):
        """Test an unreadable input file is reported as an error."""
        assert main(["format", str(tmp_path / "missing.term")]) == 1
        assert capsys.readouterr().err.startswith("Error:")

    def test_max_depth_from_config(self, tmp_path, capsys):
        """Test parser.max_depth from termpose.json bounds nesting."""
        write(tmp_path, "termpose.json", json.dumps({"parser": {"max_depth": 3}}))
        path = write(tmp_path, "deep.term", "((((a))))")
        assert main(["format", path]) == 1
        assert "NestingTooDeep" in capsys.readouterr().err

    def test_stdin(self, monkeypatch, capsys):
        """Test - reads standard input."""
        monkeypatch.setattr("sys.stdin", io.StringIO("a b"))
        assert main(["format", "-"]) == 0
        assert capsys.readouterr().out == "a\nb\n"

    def test_deep_document_with_raised_max_depth(self, tmp_path, monkeypatch, capsys):
        """Test a document deeper than the recursion limit formats once PARSER_MAX_DEPTH allows it."""
        monkeypatch.setenv("PARSER_MAX_DEPTH", "5000")
        text = "".join("\t" * i + "a\n" for i in range(2000))
        path = write(tmp_path, "deep.term", text)
        assert main(["format", path]) == 0
        assert parse(capsys.readouterr().out, max_depth=5000) == parse(text, max_depth=5000)


class TestConvertCommand:
    """Tests for `termpose convert`."""

    def test_to_json(self, tmp_path, capsys):
        """Test converting a document to JSON."""
        path = write(tmp_path, "doc.term", "cost:5")
        assert main(["convert", path, "--to", "json"]) == 0
        assert json.loads(capsys.readouterr().out) == {"cost": "5"}

    def test_to_yaml(self, tmp_path, capsys):
        """Test converting a document to YAML."""
        path = write(tmp_path, "doc.term", "cost:5")
        assert main(["convert", path, "--to", "yaml"]) == 0
        assert capsys.readouterr().out.startswith("cost:")

    def test_from_json(self, tmp_path, capsys):
        """Test converting JSON into a termpose document."""
        path = write(tmp_path, "doc.json", '{"point": [1, 2]}')
        assert main(["convert", path, "--from", "json"]) == 0
        assert parse(capsys.readouterr().out) == parse("point:(1 2)")

    def test_from_yaml(self, tmp_path, capsys):
        """Test converting YAML into a termpose document."""
        path = write(tmp_path, "doc.yaml", "point:\n- 1\n- 2\n")
        assert main(["convert", path, "--from", "yaml"]) == 0
        assert parse(capsys.readouterr().out) == parse("point:(1 2)")

    def test_bad_input(self, tmp_path, capsys):
        """Test malformed JSON is reported as an error."""
        path = write(tmp_path, "doc.json", "{not json")
        assert main(["convert", path, "--from", "json"]) == 1
        assert capsys.readouterr().err.startswith("Error:")

    def test_direction_required(self, tmp_path):
        """Test one of --to / --from must be given."""
        path = write(tmp_path, "doc.term", "a")
        with pytest.raises(SystemExit):
            main(["convert", path])


class TestDemoCommand:
    """Tests for `termpose demo`."""

    def test_demo(self, capsys):
        """Test the demo command prints the decoded products."""
        assert main(["demo"]) == 0
        out = capsys.readouterr().out
        assert "Decoded 3 products" in out
        assert "bee's knee: 9.50" in out


class TestNoCommand:
    """Tests for running without a subcommand."""

    def test_help_without_command(self, capsys):
        """Test running without a command prints usage and fails."""
        assert main([]) == 1
        assert "usage:" in capsys.readouterr().out
