"""typedlc: a small typed lambda calculus with ints, bools, let bindings and closures.

Basic program flow:
    1. Parser: produces a syntax tree from source text
        - For the grammar, see typedlc/core/ast.py and typedlc/lang/parser.py
    2. Type checking: walks the syntax tree to find its type
        - Advisory: will fail on an ill-typed program, but nothing forces it to be run before evaluation
    3. Evaluation: walks the syntax tree to find its value
"""

from typedlc.core.evaluator import Evaluator
from typedlc.core.typechecker import TypeChecker
from typedlc.lang.parser import parse


def typecheck(tree):
    """Returns Type of tree, raising TypeCheckError if it is ill-typed."""
    return TypeChecker().typecheck(tree)


def evaluate(tree):
    """Returns Value of tree, raising EvalError if evaluation fails."""
    return Evaluator().eval(tree)


__all__ = ["parse", "typecheck", "evaluate"]
