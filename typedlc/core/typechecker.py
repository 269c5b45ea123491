"""Static type checking for typedlc. The checker is advisory: nothing stops an unchecked or ill-typed program from being
evaluated, in which case the evaluator raises its own errors.

Typing rules:
- literals have their own type, a Var has the type it was bound to
- `+` takes ints, `and` takes bools, `=` takes two ints or two bools
- let binds its name to the type of its right hand side while checking its body
- a function `x: T -> e` has type `T -> U` where U is the type of e with x: T
- an application needs a function type `T -> U` and an argument whose type is a subset of T, and has type U
"""

from abc import ABC
from dataclasses import dataclass

from typedlc.core.ast import (
    Add, And, BoolLiteral, BoolTypeExpr, Eq, Function, FunctionTypeExpr, IntLiteral, IntTypeExpr, LApp, Let, Paren,
    ParenTypeExpr, RApp, Var
)
from typedlc.core.scope import Scope
from typedlc.lang.error import LangException, TypeCheckError


class Type(ABC):
    """Runtime type, compared structurally."""


@dataclass(frozen=True)
class IntType(Type):

    def __str__(self):
        return "int"


@dataclass(frozen=True)
class BoolType(Type):

    def __str__(self):
        return "bool"


@dataclass(frozen=True)
class FunctionType(Type):
    input: Type
    output: Type

    def __str__(self):
        if isinstance(self.input, FunctionType):
            return f"({self.input}) -> {self.output}"
        return f"{self.input} -> {self.output}"


INT = IntType()
BOOL = BoolType()


def subset(t1, t2):
    """Whether a value of type t1 may be used where t2 is expected."""
    if t1 == t2:
        return True

    # variance for function types (contravariant input, covariant output) is not decided yet, so only identical types
    # are compatible for now
    return False


class TypeChecker:
    """Walks a syntax tree with a scope of name: Type bindings. Raises TypeCheckError on the first failure."""

    def __init__(self):
        self.scope = Scope()

    def eval_type(self, type_ast):
        """Translates a type annotation into a Type."""
        if isinstance(type_ast, ParenTypeExpr):
            return self.eval_type(type_ast.inner)
        elif isinstance(type_ast, IntTypeExpr):
            return INT
        elif isinstance(type_ast, BoolTypeExpr):
            return BOOL
        elif isinstance(type_ast, FunctionTypeExpr):
            return FunctionType(self.eval_type(type_ast.input), self.eval_type(type_ast.output))
        raise LangException("'{}' is not a type annotation", type(type_ast).__name__, internal=True)

    def typecheck(self, ast):
        """Returns the Type of ast in the current scope."""
        if isinstance(ast, Paren):
            return self.typecheck(ast.expr)

        elif isinstance(ast, Var):
            var_type = self.scope.get(ast.name)
            if var_type is None:
                raise TypeCheckError("unbound variable '{}'", ast.name, span=ast.span)
            return var_type

        elif isinstance(ast, IntLiteral):
            return INT

        elif isinstance(ast, BoolLiteral):
            return BOOL

        elif isinstance(ast, (Add, Eq, And)):
            left, right = self.typecheck(ast.left), self.typecheck(ast.right)
            if isinstance(ast, Add) and left == right == INT:
                return INT
            elif isinstance(ast, Eq) and left == right and left in (INT, BOOL):
                return BOOL
            elif isinstance(ast, And) and left == right == BOOL:
                return BOOL
            raise TypeCheckError("operands of '{}' have types {} and {}", (ast, left, right), span=ast.span)

        elif isinstance(ast, Let):
            var_type = self.typecheck(ast.right)
            with self.scope.bind(ast.name, var_type):
                return self.typecheck(ast.body)

        elif isinstance(ast, Function):
            input_type = self.eval_type(ast.input_type)
            with self.scope.bind(ast.input, input_type):
                ret_type = self.typecheck(ast.ret)
            return FunctionType(input_type, ret_type)

        elif isinstance(ast, (LApp, RApp)):
            func, arg = self.typecheck(ast.func), self.typecheck(ast.arg)
            if not isinstance(func, FunctionType):
                raise TypeCheckError("'{}' has type {}, which is not a function", (ast.func, func), span=ast.func.span)
            if not subset(arg, func.input):
                msg = "'{}' expects {}, got {}"
                raise TypeCheckError(msg, (ast.func, func.input, arg), span=ast.arg.span)
            return func.output

        raise LangException("'{}' is not an expression", type(ast).__name__, internal=True)
