"""
Defines the abstract syntax tree (AST) node types for the Monkey programming language.

Every node is a frozen dataclass built exactly once by the parser and only read
afterwards. Child sequences are tuples, and no node refers back to its parent.

Node families:
    Statement:
        LetStatement, ReturnStatement, ExpressionStatement, BlockStatement
    Expression:
        Identifier, IntegerLiteral, BooleanLiteral, PrefixExpression, InfixExpression,
        IfExpression, FunctionLiteral, CallExpression
    Root:
        Program

Each node provides:
    token: The token the node was built from, used for diagnostics.
    kind (str): A short tag ("let", "infix", "call", ...) the evaluator dispatches on.
    token_literal(): The literal of the originating token.
    __str__(): A debug print. Expressions render fully parenthesized, so
        `a + b * c` prints as `(a + (b * c))`.
    to_dict(): A plain dictionary form, suitable for JSON output.

Example:
    >>> program, errors = parse("-a * b")
    >>> str(program)
    '((-a) * b)'
"""

from dataclasses import dataclass
from typing import Any, ClassVar, TypedDict

from monkey.monkey_lexer import Token


class ASTDict(TypedDict, total=False):
    """
    Serialized form of an AST node.

    Fields:
        kind (str): The node kind (e.g. "let", "infix", "call").
        literal (str): Literal of the originating token.
        line (int): Line number of the originating token.
        col (int): Column number of the originating token.

    Remaining keys depend on the node kind and mirror its dataclass fields.
    """

    kind: str
    literal: str
    line: int
    col: int


@dataclass(frozen=True)
class Node:
    token: Token

    kind: ClassVar[str] = "node"

    def token_literal(self) -> str:
        return self.token.literal

    def _fields(self) -> dict[str, Any]:
        return {}

    def to_dict(self) -> ASTDict:
        d: dict[str, Any] = {
            "kind": self.kind,
            "literal": self.token.literal,
            "line": self.token.line,
            "col": self.token.col,
        }
        for key, val in self._fields().items():
            if isinstance(val, Node):
                val = val.to_dict()
            elif isinstance(val, tuple):
                val = [v.to_dict() for v in val]
            d[key] = val
        return d  # type: ignore[return-value]


@dataclass(frozen=True)
class Statement(Node):
    pass


@dataclass(frozen=True)
class Expression(Node):
    pass


# Expressions


@dataclass(frozen=True)
class Identifier(Expression):
    value: str

    kind: ClassVar[str] = "identifier"

    def __str__(self) -> str:
        return self.value

    def _fields(self) -> dict[str, Any]:
        return {"value": self.value}


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    value: int

    kind: ClassVar[str] = "integer"

    def __str__(self) -> str:
        return self.token.literal

    def _fields(self) -> dict[str, Any]:
        return {"value": self.value}


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    value: bool

    kind: ClassVar[str] = "boolean"

    def __str__(self) -> str:
        return self.token.literal

    def _fields(self) -> dict[str, Any]:
        return {"value": self.value}


@dataclass(frozen=True)
class PrefixExpression(Expression):
    """Unary `!` or `-` applied to a single operand."""

    operator: str
    right: Expression

    kind: ClassVar[str] = "prefix"

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"

    def _fields(self) -> dict[str, Any]:
        return {"operator": self.operator, "right": self.right}


@dataclass(frozen=True)
class InfixExpression(Expression):
    """Binary operator application. Chains of equal precedence nest to the left."""

    left: Expression
    operator: str
    right: Expression

    kind: ClassVar[str] = "infix"

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"

    def _fields(self) -> dict[str, Any]:
        return {"left": self.left, "operator": self.operator, "right": self.right}


@dataclass(frozen=True)
class BlockStatement(Statement):
    statements: tuple[Statement, ...]

    kind: ClassVar[str] = "block"

    def __str__(self) -> str:
        if not self.statements:
            return "{ }"
        return "{ " + " ".join(str(s) for s in self.statements) + " }"

    def _fields(self) -> dict[str, Any]:
        return {"statements": self.statements}


@dataclass(frozen=True)
class IfExpression(Expression):
    condition: Expression
    consequence: BlockStatement
    alternative: BlockStatement | None = None

    kind: ClassVar[str] = "if"

    def __str__(self) -> str:
        out = f"if {self.condition} {self.consequence}"
        if self.alternative is not None:
            out += f" else {self.alternative}"
        return out

    def _fields(self) -> dict[str, Any]:
        return {
            "condition": self.condition,
            "consequence": self.consequence,
            "alternative": self.alternative,
        }


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    parameters: tuple[Identifier, ...]
    body: BlockStatement

    kind: ClassVar[str] = "function"

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {self.body}"

    def _fields(self) -> dict[str, Any]:
        return {"parameters": self.parameters, "body": self.body}


@dataclass(frozen=True)
class CallExpression(Expression):
    function: Expression
    arguments: tuple[Expression, ...]

    kind: ClassVar[str] = "call"

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.function}({args})"

    def _fields(self) -> dict[str, Any]:
        return {"function": self.function, "arguments": self.arguments}


# Statements


@dataclass(frozen=True)
class LetStatement(Statement):
    name: Identifier
    value: Expression

    kind: ClassVar[str] = "let"

    def __str__(self) -> str:
        return f"{self.token_literal()} {self.name} = {self.value};"

    def _fields(self) -> dict[str, Any]:
        return {"name": self.name, "value": self.value}


@dataclass(frozen=True)
class ReturnStatement(Statement):
    return_value: Expression

    kind: ClassVar[str] = "return"

    def __str__(self) -> str:
        return f"{self.token_literal()} {self.return_value};"

    def _fields(self) -> dict[str, Any]:
        return {"return_value": self.return_value}


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    expression: Expression

    kind: ClassVar[str] = "expression_statement"

    def __str__(self) -> str:
        return str(self.expression)

    def _fields(self) -> dict[str, Any]:
        return {"expression": self.expression}


@dataclass(frozen=True)
class Program:
    """Root of a parsed program: the ordered top-level statements."""

    statements: tuple[Statement, ...]

    kind: ClassVar[str] = "program"

    def token_literal(self) -> str:
        return self.statements[0].token_literal() if self.statements else ""

    def __str__(self) -> str:
        return "\n".join(str(s) for s in self.statements)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "statements": [s.to_dict() for s in self.statements],
        }


__all__ = [
    "ASTDict",
    "BlockStatement",
    "BooleanLiteral",
    "CallExpression",
    "Expression",
    "ExpressionStatement",
    "FunctionLiteral",
    "Identifier",
    "IfExpression",
    "InfixExpression",
    "IntegerLiteral",
    "LetStatement",
    "Node",
    "PrefixExpression",
    "Program",
    "ReturnStatement",
    "Statement",
]
