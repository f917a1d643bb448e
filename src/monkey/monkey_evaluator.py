"""
Tree-walking evaluator for the Monkey programming language.

The `Evaluator` walks a parsed `Program` against a chain of `Environment` scopes and
produces a `MonkeyObject`. Nodes are dispatched on their `kind` tag to an
`_eval_<kind>` method.

Semantics:
    - Only the TRUE singleton is truthy. `!x` is FALSE only when `x` is TRUE, and an
      `if` takes its consequence only when the condition is TRUE.
    - Arithmetic and ordering need two integers; equality compares integers by value and
      booleans by identity. Any other combination evaluates to NULL, as do unbound
      identifiers, calls of non-functions and division by zero.
    - Division truncates toward zero.
    - `return` produces a `ReturnValue` that blocks pass upward untouched. Only the program
      root and a function call unwrap it.
    - A call binds arguments (evaluated in the caller's scope) in a fresh scope whose outer
      scope is the one captured by the function, which makes closures lexical.

Limits:
    Function calls nest at most `max_depth` deep. Going deeper, or hitting Python's own
    recursion limit, raises `MonkeyEvalError`.

Example:
    >>> program, errors = parse("let add = fn(a, b) { a + b }; add(2, 3)")
    >>> evaluate(program).inspect()
    '5'
"""

import logging
from collections.abc import Callable

from monkey.monkey_ast import (
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    Node,
    PrefixExpression,
    Program,
    ReturnStatement,
)
from monkey.monkey_error import MonkeyEvalError
from monkey.monkey_object import (
    FALSE,
    NULL,
    TRUE,
    Environment,
    MonkeyBoolean,
    MonkeyFunction,
    MonkeyInteger,
    MonkeyObject,
    ReturnValue,
    native_bool_to_boolean,
)
from monkey.monkey_parser import parse

# One Monkey call costs about 15 Python frames, so 50 calls stay well inside the
# interpreter's default recursion limit of 1000.
DEFAULT_MAX_DEPTH = 50


def _truncating_div(left: int, right: int) -> int:
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


INTEGER_OPERATORS: dict[str, Callable[[int, int], MonkeyObject]] = {
    "+": lambda a, b: MonkeyInteger(a + b),
    "-": lambda a, b: MonkeyInteger(a - b),
    "*": lambda a, b: MonkeyInteger(a * b),
    "/": lambda a, b: MonkeyInteger(_truncating_div(a, b)) if b != 0 else NULL,
    "<": lambda a, b: native_bool_to_boolean(a < b),
    ">": lambda a, b: native_bool_to_boolean(a > b),
    "==": lambda a, b: native_bool_to_boolean(a == b),
    "!=": lambda a, b: native_bool_to_boolean(a != b),
}


class Evaluator:
    """
    Evaluates Monkey AST nodes.

    Attributes:
        max_depth (int): Maximum nesting of function calls.
        depth (int): Current nesting of function calls.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        if max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {max_depth}")
        self.max_depth = max_depth
        self.depth = 0
        self._logger = logging.getLogger("MonkeyEvaluator")

    def evaluate(self, node: Node | Program, env: Environment) -> MonkeyObject:
        """Evaluate `node` in `env`.

        Raises:
            TypeError: If the node kind has no evaluation method.
            MonkeyEvalError: If the call depth limit is exceeded.
        """
        method = getattr(self, f"_eval_{node.kind}", None)
        if method is None:
            raise TypeError(f"No evaluation method for node kind '{node.kind}'")
        result: MonkeyObject = method(node, env)
        return result

    def _eval_program(self, node: Program, env: Environment) -> MonkeyObject:
        result: MonkeyObject = NULL
        for stmt in node.statements:
            result = self.evaluate(stmt, env)
            if isinstance(result, ReturnValue):
                return result.value
        return result

    def _eval_block(self, node: BlockStatement, env: Environment) -> MonkeyObject:
        result: MonkeyObject = NULL
        for stmt in node.statements:
            result = self.evaluate(stmt, env)
            if isinstance(result, ReturnValue):
                return result
        return result

    def _eval_expression_statement(
        self, node: ExpressionStatement, env: Environment
    ) -> MonkeyObject:
        return self.evaluate(node.expression, env)

    def _eval_let(self, node: LetStatement, env: Environment) -> MonkeyObject:
        value = self.evaluate(node.value, env)
        env.set(node.name.value, value)
        return NULL

    def _eval_return(self, node: ReturnStatement, env: Environment) -> MonkeyObject:
        return ReturnValue(self.evaluate(node.return_value, env))

    def _eval_integer(self, node: IntegerLiteral, env: Environment) -> MonkeyObject:
        return MonkeyInteger(node.value)

    def _eval_boolean(self, node: BooleanLiteral, env: Environment) -> MonkeyObject:
        return native_bool_to_boolean(node.value)

    def _eval_prefix(self, node: PrefixExpression, env: Environment) -> MonkeyObject:
        right = self.evaluate(node.right, env)
        if node.operator == "!":
            return FALSE if right is TRUE else TRUE
        if node.operator == "-":
            if isinstance(right, MonkeyInteger):
                return MonkeyInteger(-right.value)
            return NULL
        return NULL  # pragma: no cover

    def _eval_infix(self, node: InfixExpression, env: Environment) -> MonkeyObject:
        left = self.evaluate(node.left, env)
        right = self.evaluate(node.right, env)

        if isinstance(left, MonkeyInteger) and isinstance(right, MonkeyInteger):
            op = INTEGER_OPERATORS.get(node.operator)
            return op(left.value, right.value) if op else NULL

        if isinstance(left, MonkeyBoolean) and isinstance(right, MonkeyBoolean):
            # TRUE and FALSE are canonical, so identity is equality
            if node.operator == "==":
                return native_bool_to_boolean(left is right)
            if node.operator == "!=":
                return native_bool_to_boolean(left is not right)

        return NULL

    def _eval_if(self, node: IfExpression, env: Environment) -> MonkeyObject:
        condition = self.evaluate(node.condition, env)
        if condition is TRUE:
            return self.evaluate(node.consequence, env)
        if node.alternative is not None:
            return self.evaluate(node.alternative, env)
        return NULL

    def _eval_identifier(self, node: Identifier, env: Environment) -> MonkeyObject:
        value = env.get(node.value)
        if value is None:
            self._logger.debug("Unbound identifier '%s' evaluates to null", node.value)
            return NULL
        return value

    def _eval_function(self, node: FunctionLiteral, env: Environment) -> MonkeyObject:
        return MonkeyFunction.from_literal(node, env)

    def _eval_call(self, node: CallExpression, env: Environment) -> MonkeyObject:
        function = self.evaluate(node.function, env)
        if not isinstance(function, MonkeyFunction):
            self._logger.debug("Call of non-function %r evaluates to null", function)
            return NULL

        args = [self.evaluate(arg, env) for arg in node.arguments]
        return self.apply_function(function, args, node)

    def apply_function(
        self, function: MonkeyFunction, args: list[MonkeyObject], node: Node
    ) -> MonkeyObject:
        """Run `function` with `args` bound positionally in a scope enclosing its closure."""
        if self.depth >= self.max_depth:
            self._logger.warning("Call depth limit %d exceeded", self.max_depth)
            raise MonkeyEvalError(
                f"Maximum call depth exceeded (max depth: {self.max_depth})",
                line=node.token.line,
                col=node.token.col,
            )

        inner = Environment.enclosed(function.env)
        for param, arg in zip(function.parameters, args):
            inner.set(param.value, arg)

        self.depth += 1
        try:
            result = self.evaluate(function.body, inner)
        finally:
            self.depth -= 1

        if isinstance(result, ReturnValue):
            return result.value
        return result


def evaluate(
    program: Program,
    env: Environment | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> MonkeyObject:
    """Evaluate a whole program, in `env` or a fresh root environment.

    Raises:
        MonkeyEvalError: If evaluation nests too deeply.
    """
    if env is None:
        env = Environment()
    try:
        return Evaluator(max_depth=max_depth).evaluate(program, env)
    except RecursionError as e:
        raise MonkeyEvalError("Maximum recursion depth exceeded") from e


def run(
    source: str,
    env: Environment | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[MonkeyObject | None, list[str]]:
    """Parse and evaluate `source`.

    Returns:
        The result and an empty error list, or None and the syntax errors if parsing
        failed (in which case nothing is evaluated).

    Raises:
        MonkeyParseError: If a block is left unterminated or the input nests too deeply.
        MonkeyEvalError: If evaluation nests too deeply.
    """
    program, errors = parse(source)
    if errors:
        return None, errors
    return evaluate(program, env, max_depth=max_depth), []


__all__ = ["DEFAULT_MAX_DEPTH", "Evaluator", "evaluate", "run"]
