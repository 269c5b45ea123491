"""Tree-walking evaluation of typedlc programs.

Function values are closures: when a function expression is evaluated, every free variable of its body (other than its
parameter) is looked up right away, and the results are stored in the value alongside a copy of the body. Applying the
function binds those captured values, then the parameter, and evaluates the body. Variables that are not bound yet
when the function is created cannot be captured, so

    let f = (x: int -> x + y) in let y = 1 in f < 5

fails as soon as f is created.
"""

from abc import ABC
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Dict

from typedlc.core.ast import (
    Add, And, BoolLiteral, Eq, Expr, Function, IntLiteral, LApp, Let, Paren, RApp, Var, free_variables
)
from typedlc.core.scope import Scope
from typedlc.lang.error import EvalError, LangException

I32_MIN = -2 ** 31
I32_MAX = 2 ** 31 - 1


class Value(ABC):
    """Runtime value."""


@dataclass(frozen=True)
class IntValue(Value):
    value: int

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class BoolValue(Value):
    value: bool

    def __str__(self):
        return "true" if self.value else "false"


@dataclass(frozen=True)
class FunctionValue(Value):
    """Closure. captured maps every free variable of body, except param, to its value when the function was created."""
    param: str
    body: Expr
    captured: Dict[str, Value] = field(default_factory=dict, hash=False)

    def __str__(self):
        return f"<function {self.param} -> {self.body}>"


def add(left, right):
    if isinstance(left, IntValue) and isinstance(right, IntValue):
        total = left.value + right.value
        if not I32_MIN <= total <= I32_MAX:
            raise EvalError("integer overflow: {} + {}", (left, right))
        return IntValue(total)
    raise EvalError("'+' expects two ints, got {} and {}", (left, right))


def eq(left, right):
    if isinstance(left, IntValue) and isinstance(right, IntValue):
        return BoolValue(left.value == right.value)
    elif isinstance(left, BoolValue) and isinstance(right, BoolValue):
        return BoolValue(left.value == right.value)
    raise EvalError("'=' expects two ints or two bools, got {} and {}", (left, right))


def and_(left, right):
    if isinstance(left, BoolValue) and isinstance(right, BoolValue):
        return BoolValue(left.value and right.value)
    raise EvalError("'and' expects two bools, got {} and {}", (left, right))


PRIMITIVES = {Add: add, Eq: eq, And: and_}


class Evaluator:
    """Walks a syntax tree with a scope of name: Value bindings. Raises EvalError on the first failure. If given, trace
    is called with (kind, text) for every let binding and function application.
    """

    def __init__(self, trace=None):
        self.scope = Scope()
        self.trace = trace

    def _step(self, kind, text):
        if self.trace is not None:
            self.trace(kind, text)

    def eval(self, ast):
        """Returns the Value of ast in the current scope."""
        if isinstance(ast, Paren):
            return self.eval(ast.expr)

        elif isinstance(ast, Var):
            value = self.scope.get(ast.name)
            if value is None:
                raise EvalError("unbound variable '{}'", ast.name, span=ast.span)
            return value

        elif isinstance(ast, IntLiteral):
            return IntValue(ast.value)

        elif isinstance(ast, BoolLiteral):
            return BoolValue(ast.value)

        elif isinstance(ast, (Add, Eq, And)):
            left, right = self.eval(ast.left), self.eval(ast.right)
            try:
                return PRIMITIVES[type(ast)](left, right)
            except EvalError as error:
                error.span = ast.span
                raise

        elif isinstance(ast, Let):
            value = self.eval(ast.right)
            self._step("let", f"{ast.name} = {value}")
            with self.scope.bind(ast.name, value):
                return self.eval(ast.body)

        elif isinstance(ast, Function):
            return self.make_function(ast)

        elif isinstance(ast, (LApp, RApp)):
            func, arg = self.eval(ast.func), self.eval(ast.arg)
            if not isinstance(func, FunctionValue):
                raise EvalError("'{}' is {}, which is not a function", (ast.func, func), span=ast.func.span)
            self._step("app", f"{func} < {arg}")
            return self.apply(func, arg)

        raise LangException("'{}' is not an expression", type(ast).__name__, internal=True)

    def make_function(self, ast):
        """Creates closure from Function node, capturing free variables of its body from the current scope."""
        captured = {}
        for name in sorted(free_variables(ast.ret) - {ast.input}):
            value = self.scope.get(name)
            if value is None:
                raise EvalError("'{}' is not bound when the function is created", name, span=ast.span)
            captured[name] = value
        return FunctionValue(ast.input, deepcopy(ast.ret), captured)

    def apply(self, func, arg):
        """Evaluates func's body with its captured values and its parameter bound (the parameter last)."""
        with self.scope.bind_many(func.captured.items()), self.scope.bind(func.param, arg):
            return self.eval(func.body)
