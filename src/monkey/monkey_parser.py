"""
Monkey Language Parser

Parses a stream of Monkey tokens into an abstract syntax tree (`Program`).

The parser is a Pratt (precedence-climbing) parser. Each token kind that can start an
expression has a prefix parse function, and each token kind that can continue one has
an infix parse function. `parse_expression(precedence)` keeps folding infix operators
into the left operand while the next operator binds tighter than `precedence`. This
gives left associativity for chains of equal precedence.

Supported Constructs
--------------------
- Statements:
    * `let <ident> = <expr>;`
    * `return <expr>;`
    * expression statements, with an optional trailing `;`
- Expressions:
    * identifiers, integers, `true` / `false`
    * prefix `!` and `-`
    * infix `+ - * / < > == !=`
    * grouping `( <expr> )`
    * `if (<cond>) { ... } else { ... }`
    * `fn(<params>) { ... }`
    * calls `<expr>(<args>)`

Parser Behavior
---------------
- Syntax errors are recorded as strings in `Parser.errors` and parsing continues from
  the end of the malformed statement, so one pass can report several errors.
- Recovery tracks brace depth, so a malformed statement never swallows the `}` that
  closes its own block, and never stops at a `;` or `}` belonging to a nested block.
- Running out of tokens inside an open `{ ... }` block raises `MonkeyParseError`. So does
  input nested deeper than the Python interpreter can recurse.

Precedence (low to high)
------------------------
LOWEST < EQUALS (==, !=) < LESSGREATER (<, >) < SUM (+, -) < PRODUCT (*, /)
< PREFIX (!x, -x) < CALL (f(x))

Entry Points
------------
- `Parser(source).parse_program()`: Parse from any object with `next_token()`.
- `parse(source)`: Lex and parse a string, returning `(program, errors)`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import IntEnum
from typing import Protocol

from monkey.monkey_ast import (
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
)
from monkey.monkey_constants import (
    ASSIGN,
    ASTERISK,
    BANG,
    COMMA,
    ELSE,
    EOF,
    EQ,
    FALSE,
    FUNCTION,
    GT,
    IDENT,
    IF,
    ILLEGAL,
    INT,
    LBRACE,
    LET,
    LPAREN,
    LT,
    MINUS,
    NOT_EQ,
    PLUS,
    RBRACE,
    RETURN,
    RPAREN,
    SEMICOLON,
    SLASH,
    TRUE,
)
from monkey.monkey_error import MonkeyParseError
from monkey.monkey_lexer import CharacterStream, Lexer, Token


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2
    LESSGREATER = 3
    SUM = 4
    PRODUCT = 5
    PREFIX = 6
    CALL = 7


precedences: dict[str, Precedence] = {
    EQ: Precedence.EQUALS,
    NOT_EQ: Precedence.EQUALS,
    LT: Precedence.LESSGREATER,
    GT: Precedence.LESSGREATER,
    PLUS: Precedence.SUM,
    MINUS: Precedence.SUM,
    SLASH: Precedence.PRODUCT,
    ASTERISK: Precedence.PRODUCT,
    LPAREN: Precedence.CALL,
}

PrefixParseFn = Callable[[], Expression | None]
InfixParseFn = Callable[[Expression], Expression | None]


class TokenSource(Protocol):
    """Anything the parser can pull tokens from, such as a `Lexer`."""

    def next_token(self) -> Token: ...  # pragma: no cover


class Parser:
    """
    Monkey Parser Class

    Pulls tokens from a token source, two at a time (`current_token` and `peek_token`),
    and builds a `Program`.

    Attributes
    ----------
    source : TokenSource
        Where tokens come from.
    current_token : Token
        The token under examination.
    peek_token : Token
        The token after `current_token`.
    errors : list[str]
        Syntax errors recorded so far, in source order.
    brace_depth : int
        Number of `{` minus number of `}` seen as `current_token` so far.
    prefix_parse_fns : dict[str, PrefixParseFn]
        Token kind -> function starting an expression at that token.
    infix_parse_fns : dict[str, InfixParseFn]
        Token kind -> function continuing an expression at that token.

    Raises
    ------
    MonkeyParseError
        When the token source ends inside an unterminated block, or the input nests
        deeper than Python can recurse.
    """

    def __init__(self, source: TokenSource) -> None:
        self.source = source
        self.errors: list[str] = []
        self.brace_depth = 0
        self._logger = logging.getLogger("MonkeyParser")

        self.current_token: Token = Token(ILLEGAL, "")
        self.peek_token: Token = Token(ILLEGAL, "")

        self.prefix_parse_fns: dict[str, PrefixParseFn] = {
            IDENT: self.parse_identifier,
            INT: self.parse_integer_literal,
            TRUE: self.parse_boolean,
            FALSE: self.parse_boolean,
            BANG: self.parse_prefix_expression,
            MINUS: self.parse_prefix_expression,
            LPAREN: self.parse_grouped_expression,
            IF: self.parse_if_expression,
            FUNCTION: self.parse_function_literal,
        }

        self.infix_parse_fns: dict[str, InfixParseFn] = {
            op: self.parse_infix_expression
            for op in (PLUS, MINUS, SLASH, ASTERISK, EQ, NOT_EQ, LT, GT)
        }
        self.infix_parse_fns[LPAREN] = self.parse_call_expression

        # Read two tokens so current_token and peek_token are both set
        self.advance()
        self.advance()

    def advance(self) -> Token:
        self.current_token = self.peek_token
        if self.current_token.type == LBRACE:
            self.brace_depth += 1
        elif self.current_token.type == RBRACE:
            self.brace_depth -= 1
        self.peek_token = self.source.next_token()
        return self.current_token

    def current_token_is(self, type_: str) -> bool:
        return self.current_token.type == type_

    def peek_token_is(self, type_: str) -> bool:
        return self.peek_token.type == type_

    def expect_peek(self, type_: str) -> bool:
        """Advance if the next token has kind `type_`; otherwise record an error."""
        if self.peek_token_is(type_):
            self.advance()
            return True
        self.peek_error(type_)
        return False

    def peek_precedence(self) -> Precedence:
        return precedences.get(self.peek_token.type, Precedence.LOWEST)

    def current_precedence(self) -> Precedence:
        return precedences.get(self.current_token.type, Precedence.LOWEST)

    def add_error(self, message: str) -> None:
        self._logger.debug(
            "Parse error at line %d, col %d: %s",
            self.current_token.line,
            self.current_token.col,
            message,
        )
        self.errors.append(message)

    def peek_error(self, type_: str) -> None:
        self.add_error(
            f"expect {type_}, get {self.peek_token.literal} instead. "
            f"current token is {self.current_token.literal}"
        )

    def no_prefix_parse_fn_error(self, type_: str) -> None:
        self.add_error(f"No prefixParse function for {type_}")

    def synchronize(self, depth: int) -> None:
        """Skip the rest of a malformed statement that started at brace depth `depth`.

        Stops on a `;`, or just before a `}` or the end of input, all at the statement's
        own depth, so the caller's usual `advance()` lands on the start of the next
        statement or the block end. Also stops when `current_token` is already the `}`
        closing the enclosing block, which the caller must not step past.
        """
        while not self.current_token_is(EOF):
            if self.current_token_is(RBRACE) and self.brace_depth < depth:
                return
            if self.brace_depth == depth and (
                self.current_token_is(SEMICOLON)
                or self.peek_token_is(RBRACE)
                or self.peek_token_is(EOF)
            ):
                return
            self.advance()

    def parse_program(self) -> Program:
        """Parse every statement up to the end of input.

        Raises:
            MonkeyParseError: If a block is unterminated, or the input nests deeper
                than the Python interpreter can recurse.
        """
        statements: list[Statement] = []
        try:
            while not self.current_token_is(EOF):
                depth = self.brace_depth
                stmt = self.parse_statement()
                if stmt is not None:
                    statements.append(stmt)
                else:
                    self.synchronize(depth)
                self.advance()
        except RecursionError as e:
            raise MonkeyParseError(
                "Maximum nesting depth exceeded",
                line=self.current_token.line,
                col=self.current_token.col,
            ) from e
        return Program(tuple(statements))

    def parse_statement(self) -> Statement | None:
        """Parse one statement starting at `current_token`.

        On success `current_token` is the statement's last token (its `;` if present).
        """
        if self.current_token_is(LET):
            return self.parse_let_statement()
        if self.current_token_is(RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> LetStatement | None:
        token = self.current_token

        if not self.expect_peek(IDENT):
            return None
        name = Identifier(self.current_token, self.current_token.literal)

        if not self.expect_peek(ASSIGN):
            return None

        self.advance()
        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        if self.peek_token_is(SEMICOLON):
            self.advance()

        return LetStatement(token, name, value)

    def parse_return_statement(self) -> ReturnStatement | None:
        token = self.current_token
        self.advance()

        return_value = self.parse_expression(Precedence.LOWEST)
        if return_value is None:
            return None

        if self.peek_token_is(SEMICOLON):
            self.advance()

        return ReturnStatement(token, return_value)

    def parse_expression_statement(self) -> ExpressionStatement | None:
        token = self.current_token
        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None

        if self.peek_token_is(SEMICOLON):
            self.advance()

        return ExpressionStatement(token, expression)

    def parse_block_statement(self) -> BlockStatement:
        """Parse statements from `{` up to the matching `}`.

        Raises:
            MonkeyParseError: If the input ends before the block is closed.
        """
        token = self.current_token
        depth = self.brace_depth
        statements: list[Statement] = []
        self.advance()

        while not self.current_token_is(RBRACE):
            if self.current_token_is(EOF):
                raise MonkeyParseError(
                    "Unexpected end of input inside block, missing '}'",
                    line=token.line,
                    col=token.col,
                )
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            else:
                self.synchronize(depth)
                if self.current_token_is(RBRACE) and self.brace_depth < depth:
                    break
            self.advance()

        return BlockStatement(token, tuple(statements))

    def parse_expression(self, precedence: Precedence) -> Expression | None:
        prefix = self.prefix_parse_fns.get(self.current_token.type)
        if prefix is None:
            self.no_prefix_parse_fn_error(self.current_token.type)
            return None

        left = prefix()
        if left is None:
            return None

        while not self.peek_token_is(SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_parse_fns[self.peek_token.type]
            self.advance()
            left = infix(left)
            if left is None:
                return None

        return left

    def parse_identifier(self) -> Expression:
        return Identifier(self.current_token, self.current_token.literal)

    def parse_integer_literal(self) -> Expression | None:
        try:
            value = int(self.current_token.literal)
        except ValueError:
            self.add_error(f"{self.current_token.literal} is not a valid integer")
            return None
        return IntegerLiteral(self.current_token, value)

    def parse_boolean(self) -> Expression:
        return BooleanLiteral(self.current_token, self.current_token_is(TRUE))

    def parse_prefix_expression(self) -> Expression | None:
        token = self.current_token
        self.advance()

        right = self.parse_expression(Precedence.PREFIX)
        if right is None:
            return None

        return PrefixExpression(token, token.literal, right)

    def parse_infix_expression(self, left: Expression) -> Expression | None:
        token = self.current_token
        precedence = self.current_precedence()
        self.advance()

        right = self.parse_expression(precedence)
        if right is None:
            return None

        return InfixExpression(token, left, token.literal, right)

    def parse_grouped_expression(self) -> Expression | None:
        self.advance()

        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None

        if not self.peek_token_is(RPAREN):
            self.add_error(f"no ) after {expression}")
            return None
        self.advance()

        return expression

    def parse_if_expression(self) -> Expression | None:
        """Parse `if (<cond>) { ... }` with an optional `else { ... }`."""
        token = self.current_token

        if not self.expect_peek(LPAREN):
            return None

        condition = self.parse_grouped_expression()
        if condition is None:
            return None

        if not self.expect_peek(LBRACE):
            return None
        consequence = self.parse_block_statement()

        alternative = None
        if self.peek_token_is(ELSE):
            self.advance()
            if not self.expect_peek(LBRACE):
                return None
            alternative = self.parse_block_statement()

        return IfExpression(token, condition, consequence, alternative)

    def parse_function_literal(self) -> Expression | None:
        token = self.current_token

        if not self.expect_peek(LPAREN):
            return None

        parameters = self.parse_function_parameters()
        if parameters is None:
            return None

        if not self.expect_peek(LBRACE):
            return None
        body = self.parse_block_statement()

        return FunctionLiteral(token, tuple(parameters), body)

    def parse_function_parameters(self) -> list[Identifier] | None:
        identifiers: list[Identifier] = []

        if self.peek_token_is(RPAREN):
            self.advance()
            return identifiers

        if not self.expect_peek(IDENT):
            return None
        identifiers.append(Identifier(self.current_token, self.current_token.literal))

        while self.peek_token_is(COMMA):
            self.advance()
            if not self.expect_peek(IDENT):
                return None
            identifiers.append(
                Identifier(self.current_token, self.current_token.literal)
            )

        if not self.expect_peek(RPAREN):
            return None

        return identifiers

    def parse_call_expression(self, function: Expression) -> Expression | None:
        token = self.current_token
        arguments = self.parse_call_arguments()
        if arguments is None:
            return None
        return CallExpression(token, function, tuple(arguments))

    def parse_call_arguments(self) -> list[Expression] | None:
        args: list[Expression] = []

        if self.peek_token_is(RPAREN):
            self.advance()
            return args

        self.advance()
        arg = self.parse_expression(Precedence.LOWEST)
        if arg is None:
            return None
        args.append(arg)

        while self.peek_token_is(COMMA):
            self.advance()
            self.advance()
            arg = self.parse_expression(Precedence.LOWEST)
            if arg is None:
                return None
            args.append(arg)

        if not self.expect_peek(RPAREN):
            return None

        return args


def parse(source: str) -> tuple[Program, list[str]]:
    """Lex and parse `source`, returning the program and any syntax errors."""
    parser = Parser(Lexer(CharacterStream(source)))
    program = parser.parse_program()
    return program, parser.errors


__all__ = ["Parser", "Precedence", "TokenSource", "parse", "precedences"]
