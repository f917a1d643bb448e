"""
Monkey CLI Entrypoint.

This module provides the command-line interface for running Monkey source code.

Features:
    - Read source from `.mk` files or inline strings.
    - Lex, parse, and evaluate, printing the inspected result.
    - Dump the token stream or the AST (as JSON) instead of evaluating.
    - Launch an interactive REPL.

Example usage:
    monkey fib.mk
    monkey -s "let a = 5; a * a"
    monkey -s "1 + 2 * 3" --ast
    monkey --repl --verbose

Exit status:
    0 on success, 1 on syntax errors, 2 when evaluation exceeds its limits.

Configuration:
    MONKEY_MAX_DEPTH sets the default for `--max-depth`.
"""

import argparse
import json
import logging
import os
import sys

from monkey.monkey_error import MonkeyEvalError, MonkeyParseError
from monkey.monkey_evaluator import DEFAULT_MAX_DEPTH, evaluate
from monkey.monkey_lexer import CharacterStream, Lexer
from monkey.monkey_parser import Parser

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("MonkeyCLI")


def setup_logging(level: str = "WARNING") -> None:
    logging.basicConfig(level=getattr(logging, level.upper()), format=LOG_FORMAT)


def default_max_depth() -> int:
    value = os.getenv("MONKEY_MAX_DEPTH")
    if not value:
        return DEFAULT_MAX_DEPTH
    try:
        return int(value)
    except ValueError:
        logger.warning(
            "Ignoring invalid MONKEY_MAX_DEPTH=%r, using %d", value, DEFAULT_MAX_DEPTH
        )
        return DEFAULT_MAX_DEPTH


def run_monkey(
    source: str,
    is_string: bool = False,
    show_tokens: bool = False,
    show_ast: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> int:
    """
    Run the Monkey toolchain: lex, parse, and evaluate or dump.

    Args:
        source (str): Monkey source code or path to a `.mk` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        show_tokens (bool): Print the token stream and stop.
        show_ast (bool): Print the parsed program as JSON and stop.
        max_depth (int): Maximum nesting of function calls during evaluation.

    Returns:
        int: Process exit status.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.mk'.
    """
    if not is_string and not source.endswith(".mk"):
        raise ValueError("Only .mk files are supported.")
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    if show_tokens:
        for tok in Lexer(CharacterStream(source)):
            print(f"{tok.line}:{tok.col}\t{tok.type}\t{tok.literal}")
        return 0

    parser = Parser(Lexer(CharacterStream(source)))
    try:
        program = parser.parse_program()
    except MonkeyParseError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if parser.errors:
        for msg in parser.errors:
            print(f"error: {msg}", file=sys.stderr)
        return 1

    if show_ast:
        print(json.dumps(program.to_dict(), indent=2))
        return 0

    try:
        result = evaluate(program, max_depth=max_depth)
    except MonkeyEvalError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    logger.debug("Program evaluated to %r", result)
    print(result.inspect())
    return 0


def main() -> None:
    """
    Entry point for the Monkey CLI.

    - Launches the REPL if no arguments are passed or `--repl` is specified.
    - Otherwise runs the given file or string and exits with its status.
    """
    parser = argparse.ArgumentParser(prog="monkey")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Print the token stream and exit"
    )
    parser.add_argument(
        "--ast", action="store_true", help="Print the AST as JSON and exit"
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=default_max_depth(),
        help=f"Maximum function call depth (default: {DEFAULT_MAX_DEPTH})",
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument(
        "--repl", action="store_true", help="Launch the interactive REPL"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Verbose REPL mode (if --repl)"
    )

    args = parser.parse_args()
    setup_logging(args.log_level)

    if args.repl or args.source is None:
        from monkey.monkey_repl import start_repl

        start_repl(verbose=args.verbose, max_depth=args.max_depth)
        return

    sys.exit(
        run_monkey(
            source=args.source,
            is_string=args.string,
            show_tokens=args.tokens,
            show_ast=args.ast,
            max_depth=args.max_depth,
        )
    )


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
