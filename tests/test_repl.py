import builtins
import os
import subprocess
import sys
from collections.abc import Callable
from unittest.mock import patch

import pytest

from monkey.monkey_lexer import CharacterStream, Token
from monkey.monkey_repl import print_traceback, read_source, start_repl


def feed(*lines: str) -> Callable[[str], str]:
    inputs = iter(lines)

    def fake_input(_: str) -> str:
        return next(inputs)

    return fake_input


def run_repl(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    *lines: str,
    verbose: bool = False,
) -> str:
    monkeypatch.setattr(builtins, "input", feed(*lines, "quit"))
    start_repl(verbose=verbose)
    return capsys.readouterr().out


def test_repl_quit(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    out = run_repl(monkeypatch, capsys)
    assert "Monkey REPL" in out
    assert "Exiting Monkey REPL" in out


def test_repl_exit(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(builtins, "input", lambda _: "exit")
    start_repl()
    assert "Exiting Monkey REPL" in capsys.readouterr().out


def test_repl_evaluates_and_prints(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    out = run_repl(monkeypatch, capsys, "5 - 5 * 5")
    assert "-20" in out.splitlines()


def test_repl_bindings_persist(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    out = run_repl(monkeypatch, capsys, "let a = 5;", "let b = a;", "a * b")
    lines = out.splitlines()
    assert "25" in lines
    assert "null" not in lines


def test_repl_multiline_input(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    out = run_repl(
        monkeypatch,
        capsys,
        "let max = fn(a, b) {",
        "  if (a > b) { a } else { b }",
        "};",
        "max(3, 9)",
    )
    assert "9" in out.splitlines()


def test_repl_prints_function(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    out = run_repl(monkeypatch, capsys, "fn(x) { x + 2 }")
    assert "fn(x) { (x + 2) }" in out


def test_repl_parse_errors(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    out = run_repl(monkeypatch, capsys, "c + (a + b")
    assert "[parse error] >>> no ) after (a + b)" in out


def test_repl_stray_braces_and_continuation(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    out = run_repl(monkeypatch, capsys, "fn(x) { x }}}", "fn(x) { x", "}")
    assert "[parse error] >>> No prefixParse function for }" in out
    assert "fn(x) { x }" in out


def test_repl_unterminated_block_reports_error(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    with patch("monkey.monkey_repl.read_source", side_effect=["fn(x) { x", None]):
        start_repl()
    out = capsys.readouterr().out
    assert "[error] >>> Unexpected end of input inside block" in out


def test_repl_deep_nesting_reports_error(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    out = run_repl(monkeypatch, capsys, "-" * 3000 + "1", "1 + 1")
    assert "[error] >>> Maximum nesting depth exceeded" in out
    assert "2" in out.splitlines()


def test_repl_eval_limit_error(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(
        builtins, "input", feed("let f = fn(x) { f(x) }; f(1)", "1 + 1", "quit")
    )
    start_repl(max_depth=5)
    out = capsys.readouterr().out
    assert "[error] >>> Maximum call depth exceeded" in out
    assert "2" in out.splitlines()


def test_repl_verbose_mode_toggle(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    out = run_repl(monkeypatch, capsys, "verbose-mode", "1 + 2 * 3", "verbose-mode")
    assert "[mode] >>> Verbose mode ON" in out
    assert "[ast] >>> (1 + (2 * 3))" in out
    assert "[mode] >>> Verbose mode OFF" in out


def test_repl_starts_verbose(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    out = run_repl(monkeypatch, capsys, "-a", verbose=True)
    assert "[ast] >>> (-a)" in out


def test_repl_tokens_mode(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    out = run_repl(monkeypatch, capsys, "tokens-mode", "let x = 1;")
    assert "[mode] >>> Token mode ON" in out
    assert "[token] >>> Token(let, let)" in out
    assert "[token] >>> Token(int, 1)" in out


def test_repl_skips_empty_and_comment_input(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    out = run_repl(monkeypatch, capsys, "", "   ", "# just a comment")
    assert out.splitlines() == ["Monkey REPL. Type 'exit' or 'quit' to leave.", "Exiting Monkey REPL."]


def test_repl_keyboard_interrupt(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def raise_interrupt(_: str) -> str:
        raise KeyboardInterrupt

    monkeypatch.setattr(builtins, "input", raise_interrupt)
    start_repl()
    assert "Exiting Monkey REPL" in capsys.readouterr().out


def test_repl_eof(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def raise_eof(_: str) -> str:
        raise EOFError

    monkeypatch.setattr(builtins, "input", raise_eof)
    start_repl()
    assert "Exiting Monkey REPL" in capsys.readouterr().out


def test_repl_unexpected_exception_prints_traceback(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    class ExplodingLexer:
        def __init__(self, stream: CharacterStream) -> None:
            pass

        def next_token(self) -> Token:
            raise RuntimeError("boom")

    monkeypatch.setattr("monkey.monkey_repl.Lexer", ExplodingLexer)
    out = run_repl(monkeypatch, capsys, "1 + 1")
    assert "[error] >>>" in out
    assert "RuntimeError: boom" in out
    assert "Exiting Monkey REPL" in out


def test_read_source_collects_open_braces(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(builtins, "input", feed("if (true) {", "  1", "}"))
    assert read_source() == "if (true) {\n  1\n}"


def test_read_source_quit_only_at_start(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(builtins, "input", feed("fn() {", "quit", "}"))
    assert read_source() == "fn() {\nquit\n}"


def test_print_traceback_outputs_error() -> None:
    with patch("builtins.print") as mock_print:
        try:
            raise ValueError("intentional test error")
        except ValueError:
            print_traceback()

    printed = "\n".join(
        "".join(str(arg) for arg in call.args) for call in mock_print.call_args_list
    ).lower()
    assert "[error] >>>" in printed
    assert "valueerror" in printed
    assert "intentional test error" in printed


def test_repl_as_script_runs() -> None:
    env = os.environ.copy()
    env["PYTHONPATH"] = "src"
    result = subprocess.run(
        [sys.executable, "-m", "monkey.monkey_repl"],
        input="1 + 2\nquit\n",
        capture_output=True,
        text=True,
        env=env,
        timeout=30,
    )
    assert result.returncode == 0
    assert "3" in result.stdout
