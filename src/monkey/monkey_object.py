"""
Runtime values and environments for the Monkey evaluator.

Classes:
    MonkeyObject: Base class for every runtime value.
    MonkeyInteger: Arbitrary-precision integer.
    MonkeyBoolean: Boolean; only the TRUE and FALSE singletons exist.
    MonkeyNull: The null value; only the NULL singleton exists. It also stands for the
        result of any invalid operation.
    ReturnValue: Internal wrapper marking a `return` that is still unwinding.
    MonkeyFunction: A closure pairing a function literal with its defining environment.
    Environment: A scope of name bindings chained to an optional outer scope.

TRUE, FALSE and NULL are canonical, so the evaluator compares them by identity.
"""

from monkey.monkey_ast import BlockStatement, FunctionLiteral, Identifier

INTEGER_OBJ = "INTEGER"
BOOLEAN_OBJ = "BOOLEAN"
NULL_OBJ = "NULL"
RETURN_VALUE_OBJ = "RETURN_VALUE"
FUNCTION_OBJ = "FUNCTION"


class MonkeyObject:
    type: str = ""

    def inspect(self) -> str:
        raise NotImplementedError()  # pragma: no cover

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.inspect()})"


class MonkeyInteger(MonkeyObject):
    type = INTEGER_OBJ

    def __init__(self, value: int) -> None:
        self.value = value

    def inspect(self) -> str:
        return str(self.value)


class MonkeyBoolean(MonkeyObject):
    type = BOOLEAN_OBJ

    def __init__(self, value: bool) -> None:
        self.value = value

    def inspect(self) -> str:
        return "true" if self.value else "false"


class MonkeyNull(MonkeyObject):
    type = NULL_OBJ

    def inspect(self) -> str:
        return "null"


class ReturnValue(MonkeyObject):
    """Carries a returned value up through enclosing blocks.

    Only the program root and a function call boundary unwrap it.
    """

    type = RETURN_VALUE_OBJ

    def __init__(self, value: MonkeyObject) -> None:
        self.value = value

    def inspect(self) -> str:
        return self.value.inspect()


class Environment:
    """
    Lexical scope mapping names to runtime values.

    Lookups that miss in this scope continue in `outer`. Bindings are only ever added to
    the innermost scope, so a function call can never overwrite a caller's variables.

    Attributes:
        store (dict[str, MonkeyObject]): Bindings local to this scope.
        outer (Environment | None): Enclosing scope, or None for a program root.
    """

    def __init__(self, outer: "Environment | None" = None) -> None:
        self.store: dict[str, MonkeyObject] = {}
        self.outer = outer

    @classmethod
    def enclosed(cls, outer: "Environment") -> "Environment":
        return cls(outer)

    def get(self, name: str) -> MonkeyObject | None:
        env: Environment | None = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name: str, value: MonkeyObject) -> MonkeyObject:
        self.store[name] = value
        return value

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __repr__(self) -> str:
        return f"Environment({sorted(self.store)}, outer={self.outer is not None})"


class MonkeyFunction(MonkeyObject):
    """A closure: parameters and body of a function literal plus its defining scope.

    The environment is held by reference, so bindings added to it after the
    function was created (including the function's own name) are visible to the body.
    """

    type = FUNCTION_OBJ

    def __init__(
        self,
        parameters: tuple[Identifier, ...],
        body: BlockStatement,
        env: Environment,
    ) -> None:
        self.parameters = parameters
        self.body = body
        self.env = env

    @classmethod
    def from_literal(cls, literal: FunctionLiteral, env: Environment) -> "MonkeyFunction":
        return cls(literal.parameters, literal.body, env)

    def inspect(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {self.body}"


TRUE = MonkeyBoolean(True)
FALSE = MonkeyBoolean(False)
NULL = MonkeyNull()


def native_bool_to_boolean(value: bool) -> MonkeyBoolean:
    return TRUE if value else FALSE


__all__ = [
    "BOOLEAN_OBJ",
    "FALSE",
    "FUNCTION_OBJ",
    "INTEGER_OBJ",
    "NULL",
    "NULL_OBJ",
    "RETURN_VALUE_OBJ",
    "TRUE",
    "Environment",
    "MonkeyBoolean",
    "MonkeyFunction",
    "MonkeyInteger",
    "MonkeyNull",
    "MonkeyObject",
    "ReturnValue",
    "native_bool_to_boolean",
]
