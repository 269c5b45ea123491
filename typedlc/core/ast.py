"""Abstract syntax trees for typedlc expressions and type annotations.

Formally, typedlc can be defined as

```
<expr> ::= "let" <name> "=" <expr> "in" <expr>   ; "let": <name> is only visible in the second <expr>
         | <name> ":" <type> "->" <expr>         ; "function": <name> is only visible in the body
         | <expr> "<" <expr>                     ; "left application": function on the left
         | <expr> ">" <expr>                     ; "right application": function on the right
         | <expr> "and" <expr> | <expr> "=" <expr> | <expr> "+" <expr>
         | "(" <expr> ")" | <name> | <int> | "true" | "false"

<type> ::= "int" | "bool" | <type> "->" <type> | "(" <type> ")"
```

Nodes are frozen dataclasses and never change once parsed. Every node carries a span (the Range of source text it was
parsed from), which is only used for diagnostics: two nodes are equal if their structure is equal, wherever they came
from.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import FrozenSet, Iterator, Optional, Tuple

from typedlc.lang.error import LangException


@dataclass(frozen=True)
class Range:
    """Half-open interval of character offsets into the program source."""
    start: int
    end: int


def _span():
    return field(default=None, compare=False, repr=False)


class Node(ABC):
    """Superclass that represents any node in a typedlc syntax tree."""
    shown = ()  # non-node attributes to include in display

    @property
    @abstractmethod
    def nodes(self) -> Tuple["Node", ...]:
        """Immediate child nodes, in source order."""

    def display(self, indents=0):
        """Recursively displays tree with readable format.

        Format:
        <Node>(<attr>=<value>, nodes=[
            <Node>(<attr>=<value>, nodes=[
                ...
                <Node>(<attr>=<value>)  # <-- if nodes is empty
            ])
        ])
        """
        attrs = ", ".join(f"{name}={getattr(self, name)!r}" for name in self.shown)
        result = f"{'    ' * indents}{type(self).__name__}({attrs}"
        if self.nodes:
            result += ", nodes=[" if attrs else "nodes=["
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"

    def __str__(self):
        return unparse(self)


class TypeExpr(Node):
    """Type annotation, as written in source. Evaluated into a runtime Type by the type checker."""


@dataclass(frozen=True)
class IntTypeExpr(TypeExpr):
    span: Optional[Range] = _span()

    @property
    def nodes(self):
        return ()


@dataclass(frozen=True)
class BoolTypeExpr(TypeExpr):
    span: Optional[Range] = _span()

    @property
    def nodes(self):
        return ()


@dataclass(frozen=True)
class FunctionTypeExpr(TypeExpr):
    input: TypeExpr
    output: TypeExpr
    span: Optional[Range] = _span()

    @property
    def nodes(self):
        return self.input, self.output


@dataclass(frozen=True)
class ParenTypeExpr(TypeExpr):
    inner: TypeExpr
    span: Optional[Range] = _span()

    @property
    def nodes(self):
        return (self.inner,)


class Expr(Node):
    """Expression: the closed set of node types below."""


@dataclass(frozen=True)
class Paren(Expr):
    expr: Expr
    span: Optional[Range] = _span()

    @property
    def nodes(self):
        return (self.expr,)


@dataclass(frozen=True)
class Var(Expr):
    name: str
    span: Optional[Range] = _span()
    shown = ("name",)

    @property
    def nodes(self):
        return ()


@dataclass(frozen=True)
class IntLiteral(Expr):
    value: int
    span: Optional[Range] = _span()
    shown = ("value",)

    @property
    def nodes(self):
        return ()


@dataclass(frozen=True)
class BoolLiteral(Expr):
    value: bool
    span: Optional[Range] = _span()
    shown = ("value",)

    @property
    def nodes(self):
        return ()


@dataclass(frozen=True)
class Add(Expr):
    left: Expr
    right: Expr
    span: Optional[Range] = _span()

    @property
    def nodes(self):
        return self.left, self.right


@dataclass(frozen=True)
class Eq(Expr):
    left: Expr
    right: Expr
    span: Optional[Range] = _span()

    @property
    def nodes(self):
        return self.left, self.right


@dataclass(frozen=True)
class And(Expr):
    left: Expr
    right: Expr
    span: Optional[Range] = _span()

    @property
    def nodes(self):
        return self.left, self.right


@dataclass(frozen=True)
class Let(Expr):
    """Binds name to right within body. name is not visible in right (no recursion)."""
    name: str
    right: Expr
    body: Expr
    span: Optional[Range] = _span()
    shown = ("name",)

    @property
    def nodes(self):
        return self.right, self.body


@dataclass(frozen=True)
class Function(Expr):
    """Single-parameter function. input is only visible in ret."""
    input: str
    input_type: TypeExpr
    ret: Expr
    span: Optional[Range] = _span()
    shown = ("input",)

    @property
    def nodes(self):
        return (self.ret,)

    def display(self, indents=0):
        result = super().display(indents)
        head = f"{type(self).__name__}(input={self.input!r}"
        return result.replace(head, f"{head}, input_type='{self.input_type}'", 1)


@dataclass(frozen=True)
class LApp(Expr):
    """Application written `func < arg`."""
    func: Expr
    arg: Expr
    span: Optional[Range] = _span()

    @property
    def nodes(self):
        return self.func, self.arg


@dataclass(frozen=True)
class RApp(Expr):
    """Application written `arg > func`."""
    arg: Expr
    func: Expr
    span: Optional[Range] = _span()

    @property
    def nodes(self):
        return self.arg, self.func


EXPRS = (Paren, Var, IntLiteral, BoolLiteral, Add, Eq, And, Let, Function, LApp, RApp)


def direct_children(node: Expr) -> Tuple[Expr, ...]:
    """Immediate child expressions of node. Let's children are right and body; a Function's only child is its body."""
    if not isinstance(node, EXPRS):
        raise LangException("'{}' is not an expression", type(node).__name__, internal=True)
    return node.nodes


def all_children(node: Expr) -> Iterator[Expr]:
    """Lazy pre-order walk: node itself, then the full subtree of each child from left to right."""
    yield node
    for child in direct_children(node):
        yield from all_children(child)


def free_variables(node: Expr) -> FrozenSet[str]:
    """Names referenced in node that are not bound within node."""
    if isinstance(node, Var):
        return frozenset((node.name,))
    elif isinstance(node, Let):
        # name is bound in body only, so it stays free in right
        return (free_variables(node.body) - {node.name}) | free_variables(node.right)
    elif isinstance(node, Function):
        return free_variables(node.ret) - {node.input}

    result = frozenset()
    for child in direct_children(node):
        result |= free_variables(child)
    return result


# precedence levels of binary operators, loosest first
LEVELS = {LApp: 1, RApp: 1, And: 2, Eq: 3, Add: 4}
SYMBOLS = {LApp: "<", RApp: ">", And: "and", Eq: "=", Add: "+"}


def unparse(node, level=0):
    """Converts node back to typedlc source. Parentheses are only added where precedence requires them; Paren nodes
    are kept as written.
    """
    if isinstance(node, IntTypeExpr):
        return "int"
    elif isinstance(node, BoolTypeExpr):
        return "bool"
    elif isinstance(node, ParenTypeExpr):
        return f"({unparse(node.inner)})"
    elif isinstance(node, FunctionTypeExpr):
        left = unparse(node.input)
        if isinstance(node.input, FunctionTypeExpr):
            left = f"({left})"
        return f"{left} -> {unparse(node.output)}"

    elif isinstance(node, Paren):
        return f"({unparse(node.expr)})"
    elif isinstance(node, Var):
        return node.name
    elif isinstance(node, IntLiteral):
        return str(node.value)
    elif isinstance(node, BoolLiteral):
        return "true" if node.value else "false"

    elif isinstance(node, (Let, Function)):
        if isinstance(node, Let):
            text = f"let {node.name} = {unparse(node.right)} in {unparse(node.body)}"
        else:
            input_type = unparse(node.input_type)
            if isinstance(node.input_type, FunctionTypeExpr):
                input_type = f"({input_type})"
            text = f"{node.input}: {input_type} -> {unparse(node.ret)}"
        return f"({text})" if level > 0 else text

    elif isinstance(node, tuple(LEVELS)):
        own = LEVELS[type(node)]
        left, right = node.nodes
        text = f"{unparse(left, own)} {SYMBOLS[type(node)]} {unparse(right, own + 1)}"
        return f"({text})" if level > own else text

    raise LangException("cannot unparse '{}'", type(node).__name__, internal=True)
