"""Tokenizer and parser for typedlc source text. See typedlc/core/ast.py for the grammar.

Binary operators are left-associative. From loosest to tightest binding:

```
1. f < x, x > f   ; application (same level, so `3 > f < 2` applies f to 3, then the result to 2)
2. and
3. =
4. +
```

`let` and function expressions extend as far right as possible and must be parenthesized to be used as operands.
Integer literals are 32-bit and may be prefixed by any number of signs (`--3` is 3), with no space in between.
"""

import re
from collections import namedtuple

from typedlc.core.ast import (
    Add, And, BoolLiteral, BoolTypeExpr, Eq, Function, FunctionTypeExpr, IntLiteral, IntTypeExpr, LApp, Let, Paren,
    ParenTypeExpr, RApp, Range, Var
)
from typedlc.core.evaluator import I32_MAX, I32_MIN
from typedlc.lang.error import ParseError

KEYWORDS = ["in", "let", "int", "bool", "and", "true", "false"]

TOKENS = re.compile(r"""
    (?P<space>\s+)
  | (?P<arrow>->)
  | (?P<number>[0-9]+)
  | (?P<ident>[A-Za-z_?!][A-Za-z0-9_?!]*)
  | (?P<symbol>[():=+\-<>])
""", re.VERBOSE)

OPERATORS = {
    1: {">": RApp, "<": LApp},
    2: {"and": And},
    3: {"=": Eq},
    4: {"+": Add},
}

Token = namedtuple("Token", ["kind", "text", "start", "end"])


def tokenize(source):
    """Returns list of Tokens in source, ending with an EOF token. Keywords and symbols are their own kind."""
    tokens = []
    pos = 0
    while pos < len(source):
        match = TOKENS.match(source, pos)
        if match is None:
            raise ParseError("unexpected character '{}'", source[pos], span=Range(pos, pos + 1))

        kind, text = match.lastgroup, match.group()
        if kind == "ident" and text in KEYWORDS:
            kind = text
        elif kind in ("arrow", "symbol"):
            kind = text

        if kind != "space":
            tokens.append(Token(kind, text, match.start(), match.end()))
        pos = match.end()

    tokens.append(Token("eof", "", len(source), len(source)))
    return tokens


class Parser:
    """Recursive descent parser over the tokens of a single program."""

    def __init__(self, source):
        self.source = source
        self.tokens = tokenize(source)
        self.pos = 0

    def peek(self, ahead=0):
        return self.tokens[min(self.pos + ahead, len(self.tokens) - 1)]

    def advance(self):
        token = self.peek()
        self.pos += 1
        return token

    def expect(self, kind, what=None):
        token = self.peek()
        if token.kind != kind:
            self.unexpected(token, what or f"'{kind}'")
        return self.advance()

    @staticmethod
    def unexpected(token, expected):
        if token.kind == "eof":
            raise ParseError("expected {}, got end of input", expected, span=Range(token.start, token.end))
        raise ParseError("expected {}, got '{}'", (expected, token.text), span=Range(token.start, token.end))

    def program(self):
        expr = self.expr()
        self.expect("eof", "end of input")
        return expr

    def expr(self):
        if self.peek().kind == "let":
            return self.let_declaration()
        elif self.peek().kind == "ident" and self.peek(1).kind == ":":
            return self.function()
        return self.arith(1)

    def let_declaration(self):
        start = self.advance().start
        name = self.expect("ident", "identifier")
        self.expect("=")
        right = self.expr()
        self.expect("in")
        body = self.expr()
        return Let(name.text, right, body, span=Range(start, body.span.end))

    def function(self):
        name = self.advance()
        self.expect(":")
        input_type = self.type_atom()
        self.expect("->")
        ret = self.expr()
        return Function(name.text, input_type, ret, span=Range(name.start, ret.span.end))

    def arith(self, level):
        if level not in OPERATORS:
            return self.atom()

        left = self.arith(level + 1)
        while self.peek().kind in OPERATORS[level]:
            node = OPERATORS[level][self.advance().kind]
            right = self.arith(level + 1)
            left = node(left, right, span=Range(left.span.start, right.span.end))
        return left

    def atom(self):
        token = self.peek()

        if token.kind in ("-", "+", "number"):
            return self.int_literal()

        elif token.kind in ("true", "false"):
            self.advance()
            return BoolLiteral(token.kind == "true", span=Range(token.start, token.end))

        elif token.kind == "(":
            self.advance()
            expr = self.expr()
            close = self.expect(")")
            return Paren(expr, span=Range(token.start, close.end))

        elif token.kind == "ident":
            self.advance()
            return Var(token.text, span=Range(token.start, token.end))

        self.unexpected(token, "expression")

    def int_literal(self):
        start = self.peek().start
        sign = 1
        while self.peek().kind in ("-", "+"):
            token, following = self.advance(), self.peek()
            if following.start != token.end or following.kind not in ("-", "+", "number"):
                raise ParseError("stray sign '{}'", token.text, span=Range(token.start, token.end))
            if token.kind == "-":
                sign = -sign

        digits = self.expect("number", "number")
        value = sign * int(digits.text)
        span = Range(start, digits.end)
        if not I32_MIN <= value <= I32_MAX:
            raise ParseError("'{}' does not fit in 32 bits", self.source[start:digits.end], span=span)
        return IntLiteral(value, span=span)

    def type_atom(self):
        token = self.peek()
        if token.kind == "int":
            self.advance()
            return IntTypeExpr(span=Range(token.start, token.end))
        elif token.kind == "bool":
            self.advance()
            return BoolTypeExpr(span=Range(token.start, token.end))
        elif token.kind == "(":
            self.advance()
            inner = self.type_expr()
            close = self.expect(")")
            return ParenTypeExpr(inner, span=Range(token.start, close.end))
        self.unexpected(token, "type")

    def type_expr(self):
        left = self.type_atom()
        if self.peek().kind != "->":
            return left
        self.advance()
        right = self.type_expr()
        return FunctionTypeExpr(left, right, span=Range(left.span.start, right.span.end))


def parse(source):
    """Parses a whole program, raising ParseError if source is not valid typedlc grammar."""
    return Parser(source).program()
