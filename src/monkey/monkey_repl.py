"""
Interactive read-eval-print loop for the Monkey language.

Input spanning several lines is collected while `{` braces remain open. Every input is
evaluated in one persistent root environment, so `let` bindings carry over.

Commands:
    exit / quit     Leave the REPL.
    verbose-mode    Toggle printing of the parsed program before evaluation.
    tokens-mode     Toggle printing of the token stream.
"""

import io
import traceback

from monkey.monkey_ast import LetStatement
from monkey.monkey_error import MonkeyError
from monkey.monkey_evaluator import DEFAULT_MAX_DEPTH, evaluate
from monkey.monkey_lexer import CharacterStream, Lexer
from monkey.monkey_object import Environment
from monkey.monkey_parser import Parser


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def read_source() -> str | None:
    """Read one complete input, continuing while braces are unbalanced.

    Returns:
        The input, or None if the user asked to leave.
    """
    src_lines: list[str] = []
    brace_count = 0
    while True:
        prompt = ">>> " if not src_lines else "... "
        line = input(prompt)
        if line.strip() in ("exit", "quit") and not src_lines:
            return None
        src_lines.append(line)
        brace_count += line.count("{") - line.count("}")
        if brace_count <= 0:
            break
    return "\n".join(src_lines).strip()


def start_repl(verbose: bool = False, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
    print("Monkey REPL. Type 'exit' or 'quit' to leave.")
    env = Environment()
    show_tokens = False

    while True:
        try:
            src = read_source()
            if src is None:
                print("Exiting Monkey REPL.")
                return
            if not src or src.startswith("#"):
                continue
            if src.lower() == "verbose-mode":
                verbose = not verbose
                print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
                continue
            if src.lower() == "tokens-mode":
                show_tokens = not show_tokens
                print(f"[mode] >>> Token mode {'ON' if show_tokens else 'OFF'}")
                continue

            if show_tokens:
                for tok in Lexer(CharacterStream(src)):
                    print(f"[token] >>> {tok!r}")

            parser = Parser(Lexer(CharacterStream(src)))
            try:
                program = parser.parse_program()
            except MonkeyError as e:
                print(f"[error] >>> {e}")
                continue

            if parser.errors:
                for msg in parser.errors:
                    print(f"[parse error] >>> {msg}")
                continue

            if verbose:
                print(f"[ast] >>> {program}")

            try:
                result = evaluate(program, env, max_depth=max_depth)
            except MonkeyError as e:
                print(f"[error] >>> {e}")
                continue

            if program.statements and not isinstance(
                program.statements[-1], LetStatement
            ):
                print(result.inspect())

        except (KeyboardInterrupt, EOFError):
            print("\nExiting Monkey REPL.")
            break
        except Exception:
            print_traceback()


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
