"""termpose CLI - Command-line interface for termpose documents.

This module provides the main CLI entrypoint, allowing users to reformat
documents into canonical form, convert them to and from YAML/JSON, and run
the products demo.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from termpose.convert import from_json, from_yaml, to_json, to_yaml
from termpose.core.config import DEFAULT_CONFIG_PATH, load_format_config, resolve_indent
from termpose.core.errors import TermposeError
from termpose.core.parser import parse
from termpose.core.printer import pretty_print

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entrypoint for termpose."""
    parser = argparse.ArgumentParser(
        prog="termpose",
        description="termpose - indentation-based tree notation tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print a document in canonical form
  termpose format catalogue.term

  # Fail if a document is not already canonical
  termpose format catalogue.term --check

  # Indent with four spaces instead of tabs
  termpose format catalogue.term --indent 4

  # Convert to YAML, or from JSON
  termpose convert catalogue.term --to yaml
  termpose convert catalogue.json --from json

  # Run the products demo
  termpose demo

Note:
  Defaults are read from termpose.json when present, e.g.
  {"parser": {"max_depth": 256}, "printer": {"indent": "tab"}}.
  Use - as FILE to read standard input.
"""
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Format command
    format_parser = subparsers.add_parser(
        "format",
        help="Print a document in canonical form"
    )
    format_parser.add_argument(
        "input",
        help="Path to input document (- for stdin)"
    )
    format_parser.add_argument(
        "--indent",
        help="Indentation: 'tab' or a number of spaces (default: from termpose.json or tab)"
    )
    format_parser.add_argument(
        "--check",
        action="store_true",
        help="Exit with status 1 if the input is not already in canonical form"
    )
    format_parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help="Path to config file (default: termpose.json)"
    )
    format_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    # Convert command
    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert between termpose and YAML/JSON"
    )
    convert_parser.add_argument(
        "input",
        help="Path to input document (- for stdin)"
    )
    direction = convert_parser.add_mutually_exclusive_group(required=True)
    direction.add_argument(
        "--to",
        choices=["yaml", "json"],
        help="Convert a termpose document to this format"
    )
    direction.add_argument(
        "--from",
        dest="source_format",
        choices=["yaml", "json"],
        help="Convert a document in this format to termpose"
    )
    convert_parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help="Path to config file (default: termpose.json)"
    )
    convert_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    # Demo command
    demo_parser = subparsers.add_parser(
        "demo",
        help="Run the products demo"
    )
    demo_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    args = parser.parse_args(argv)

    # Setup logging
    if hasattr(args, 'verbose') and args.verbose:
        logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
    else:
        logging.basicConfig(level=logging.WARNING, format='%(levelname)s: %(message)s')

    # Handle commands
    if args.command == "format":
        return cmd_format(args)
    elif args.command == "convert":
        return cmd_convert(args)
    elif args.command == "demo":
        return cmd_demo(args)
    else:
        parser.print_help()
        return 1


def _read_input(name: str) -> str:
    if name == "-":
        return sys.stdin.read()
    return Path(name).read_text(encoding="utf-8")


def cmd_format(args):
    """Handle format command."""
    try:
        config = load_format_config(args.config)
        indent = resolve_indent(args.indent) if args.indent else config.indent
        text = _read_input(args.input)
        output = pretty_print(parse(text, max_depth=config.max_depth), indent=indent)
    except (TermposeError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.info("Format failed", exc_info=True)
        return 1

    if args.check:
        if output != text:
            print(f"would reformat {args.input}", file=sys.stderr)
            return 1
        logger.info(f"{args.input} is already canonical")
        return 0

    sys.stdout.write(output)
    return 0


def cmd_convert(args):
    """Handle convert command."""
    try:
        config = load_format_config(args.config)
        text = _read_input(args.input)
        if args.to == "yaml":
            output = to_yaml(parse(text, max_depth=config.max_depth))
        elif args.to == "json":
            output = to_json(parse(text, max_depth=config.max_depth))
        elif args.source_format == "yaml":
            output = pretty_print(from_yaml(text), indent=config.indent)
        else:
            output = pretty_print(from_json(text), indent=config.indent)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.info("Convert failed", exc_info=True)
        return 1

    sys.stdout.write(output)
    return 0


def cmd_demo(args):
    """Handle demo command."""
    try:
        from termpose.demo import demo_products

        demo_products(verbose=True)
        return 0
    except TermposeError as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.exception("Demo failed")
        return 1


if __name__ == "__main__":
    sys.exit(main())
