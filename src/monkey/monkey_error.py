"""
Exception classes for the Monkey language toolchain.

Ordinary syntax errors are not raised: the parser records them as strings in its
`errors` list and keeps going. Likewise, type mismatches and other invalid operations
during evaluation fold into the NULL value. The exceptions here cover the remaining
conditions that cannot be expressed as data.

Classes:
    - MonkeyError: Base class, carries an optional source position.
    - MonkeyParseError: End of input reached while a block is still open.
    - MonkeyEvalError: A host-imposed evaluation limit was exceeded.
"""


class MonkeyError(Exception):
    """Base exception for Monkey errors.

    Attributes:
        message (str): Core error description.
        line (int | None): Source line, when known.
        col (int | None): Source column, when known.
    """

    def __init__(self, message: str, line: int | None = None, col: int | None = None):
        self.message = message
        self.line = line
        self.col = col
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.line is None:
            return self.message
        return f"{self.message} (line {self.line}, col {self.col})"


class MonkeyParseError(MonkeyError):
    """Fatal parse error: the token source ran out inside an unterminated block."""


class MonkeyEvalError(MonkeyError):
    """Evaluation exceeded a host limit such as the maximum call depth."""
