"""
Infix CLI Entrypoint.

This module provides the command-line interface for parsing infix expressions
and printing the resulting tree. It also launches the interactive REPL.

Features:
    - Read the expression from a `.infix`/`.txt` file or an inline string.
    - Tokenize and parse with the default arithmetic table or a JSON table
      given with `-p` or the INFIX_PRECEDENCE environment variable.
    - Print the tree as its repr or as indented JSON.
    - Optionally show the naive (unrotated) tree instead.
    - Launch an interactive REPL.

Example usage:
    infix expr.infix
    infix -s "a * (b + c) + d" --json
    infix -s "a mod b + c" -p table.json
    infix --repl --verbose

Functions:
    run_infix(source: str, is_string: bool = False, precedence: str | None = None,
              naive: bool = False, as_json: bool = False, pretty: bool = False) -> Tree:
        Runs the pipeline (load table → tokenize → parse → print) and returns the tree.

    main() -> None:
        Parses CLI arguments and invokes the appropriate action (REPL or parse).
"""

import argparse
import json
import logging
import os
import sys

from infix.infix_ast import Tree
from infix.infix_constants import PRECEDENCE_ENV
from infix.infix_errors import ParseError, TableError
from infix.infix_lexer import tokenize
from infix.infix_parser import Parser
from infix.infix_precedence import PrecedenceTable

SOURCE_SUFFIXES = (".infix", ".txt")


def load_table(path: str | None = None) -> PrecedenceTable:
    """
    Resolve the precedence table for a run.

    Args:
        path (str | None): JSON table file. When None, the file named by the
            INFIX_PRECEDENCE environment variable is used if set.

    Returns:
        PrecedenceTable: The loaded table, or the arithmetic default.

    Raises:
        TableError: If the file is missing or invalid.
    """
    path = path or os.getenv(PRECEDENCE_ENV)
    if not path:
        return PrecedenceTable.arithmetic()
    return PrecedenceTable.load_from_json(path)


def format_tree(tree: Tree, as_json: bool = False) -> str:
    if as_json:
        return json.dumps(tree.to_dict(), indent=2)
    return repr(tree)


def run_infix(
    source: str,
    is_string: bool = False,
    precedence: str | None = None,
    naive: bool = False,
    as_json: bool = False,
    pretty: bool = False,
) -> Tree:
    """
    Run the pipeline: load the table, tokenize, parse, and print the tree.

    Args:
        source (str): The expression text or path to a source file.
        is_string (bool): If True, treats `source` as the expression itself. Defaults to False.
        precedence (str | None): Optional path to a JSON precedence table.
        naive (bool): If True, prints the unrotated recursive-descent tree. Defaults to False.
        as_json (bool): If True, prints the tree as indented JSON. Defaults to False.
        pretty (bool): If True, prints banners around the output. Defaults to False.

    Returns:
        Tree: The parsed tree.

    Raises:
        ValueError: If `is_string` is False and the file suffix is not supported.
        TableError: If the precedence table cannot be loaded.
        ParseError: If the expression is malformed.
    """
    if not is_string and not source.endswith(SOURCE_SUFFIXES):
        raise ValueError(f"Only {', '.join(SOURCE_SUFFIXES)} files are supported.")
    # 1. Read source
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    # 2. Precedence table
    table = load_table(precedence)

    # 3. Lexing and parsing
    tokens = tokenize(source, table)
    tree = Parser(tokens, table, naive=naive).parse()

    # 4. Output result
    text = format_tree(tree, as_json)
    if pretty:
        banner = "=" * 20
        title = "Naive tree" if naive else "Tree"
        print(f"{banner}\n{title}\n{banner}\n{text}\n{banner}")
    else:
        print(text)
    return tree


def main() -> None:
    """
    Entry point for the infix CLI.

    Launches the REPL if no arguments are passed or `--repl` is specified.
    Otherwise parses the source and prints its tree. Parse and table errors
    are reported on stderr with exit status 1.

    Supported flags:
        - `-s`, `--string`: Interpret source as the expression text instead of a file path.
        - `-p`, `--precedence`: JSON file with the precedence table.
        - `--naive`: Print the tree of recursive descent without rotation.
        - `--json`: Print the tree as JSON.
        - `--pretty`: Print banners around the output.
        - `--repl`: Launch the interactive REPL.
        - `--verbose`: Log every rotation at DEBUG level.
    """
    if len(sys.argv) == 1:
        # No args passed: open REPL instead
        from infix.infix_repl import start_repl

        start_repl()
        return
    parser = argparse.ArgumentParser(prog="infix")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "-p",
        "--precedence",
        metavar="TABLE",
        help=f"JSON precedence table (default: ${PRECEDENCE_ENV} or arithmetic)",
    )
    parser.add_argument(
        "--naive", action="store_true", help="Show the tree before rotation"
    )
    parser.add_argument(
        "--json", dest="as_json", action="store_true", help="Print the tree as JSON"
    )
    parser.add_argument(
        "--pretty", action="store_true", help="Show output with banners"
    )
    parser.add_argument(
        "--repl",
        action="store_true",
        help="Launch interactive REPL instead of parsing a source",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log rotations at DEBUG level"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="[%(name)s] %(message)s")

    if args.repl or args.source is None:
        from infix.infix_repl import start_repl

        start_repl(precedence=args.precedence, verbose=args.verbose)
        return

    try:
        run_infix(
            source=args.source,
            is_string=args.string,
            precedence=args.precedence,
            naive=args.naive,
            as_json=args.as_json,
            pretty=args.pretty,
        )
    except (ParseError, TableError, ValueError, OSError) as e:
        print(f"[error] >>> {e}", file=sys.stderr)
        if isinstance(e, TableError):
            for problem in e.problems:
                print(f" - {problem}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
