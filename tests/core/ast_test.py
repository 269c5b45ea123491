import unittest

from typedlc.core.ast import (
    Add, And, BoolLiteral, Eq, Function, IntLiteral, IntTypeExpr, LApp, Let, Paren, RApp, Range, Var, all_children,
    direct_children, free_variables
)
from typedlc.lang.parser import parse


class DirectChildrenTestCase(unittest.TestCase):

    def test_direct_children(self):
        one, two, x = IntLiteral(1), IntLiteral(2), Var("x")
        cases = {
            one: (),
            BoolLiteral(True): (),
            x: (),
            Paren(one): (one,),
            Function("x", IntTypeExpr(), x): (x,),
            Add(one, two): (one, two),
            Eq(one, two): (one, two),
            And(one, two): (one, two),
            Let("x", one, x): (one, x),
            LApp(x, one): (x, one),
            RApp(one, x): (one, x),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, direct_children(case), case)


class AllChildrenTestCase(unittest.TestCase):

    def test_pre_order(self):
        tree = parse("let x = 1 + 2 in x = 3")
        expected = [
            tree,
            Add(IntLiteral(1), IntLiteral(2)),
            IntLiteral(1),
            IntLiteral(2),
            Eq(Var("x"), IntLiteral(3)),
            Var("x"),
            IntLiteral(3),
        ]
        self.assertEqual(expected, list(all_children(tree)))

    def test_restartable(self):
        tree = parse("(x: int -> (y: int -> x + y)) < 3 < 4")
        self.assertEqual(list(all_children(tree)), list(all_children(tree)))
        self.assertEqual(11, len(list(all_children(tree))))


class FreeVariablesTestCase(unittest.TestCase):

    def test_free_variables(self):
        cases = {
            "1 + 2": set(),
            "x": {"x"},
            "x + y = z": {"x", "y", "z"},
            "let x = 1 in x + y": {"y"},
            "let x = x in x": {"x"},                # x is not bound in the right hand side
            "let x = y in let y = 1 in x + y": {"y"},
            "x: int -> x + y": {"y"},
            "x: int -> y: int -> x + y": set(),
            "(x: int -> x) < z": {"z"},
            "z > (x: int -> x)": {"z"},
            "(x)": {"x"},
        }
        for case, expected in cases.items():
            self.assertEqual(expected, free_variables(parse(case)), case)


class NodeTestCase(unittest.TestCase):

    def test_equality_ignores_span(self):
        self.assertEqual(IntLiteral(1), IntLiteral(1, span=Range(4, 5)))
        self.assertEqual(parse("let x = 1 in x"), parse("let   x =  1  in    x"))
        self.assertNotEqual(IntLiteral(1), IntLiteral(2))
        self.assertNotEqual(LApp(Var("f"), Var("x")), RApp(Var("f"), Var("x")))

    def test_unparse(self):
        cases = {
            Add(Add(IntLiteral(1), IntLiteral(2)), IntLiteral(3)): "1 + 2 + 3",
            Add(IntLiteral(1), Add(IntLiteral(2), IntLiteral(3))): "1 + (2 + 3)",
            Eq(Add(IntLiteral(1), IntLiteral(-2)), IntLiteral(3)): "1 + -2 = 3",
            Add(Let("x", IntLiteral(1), Var("x")), IntLiteral(1)): "(let x = 1 in x) + 1",
            LApp(Function("x", IntTypeExpr(), Var("x")), BoolLiteral(False)): "(x: int -> x) < false",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, str(case))

        should_pass = ["let x = 1 + 2 in x = 3", "(x: int -> x + 2) < 3", "f: (int -> int) -> f < 1", "3 > f < 2"]
        for case in should_pass:
            self.assertEqual(case, str(parse(case)))

    def test_display(self):
        self.assertEqual("Var(name='x')", Var("x").display())
        self.assertEqual(
            "Add(nodes=[\n    IntLiteral(value=1),\n    IntLiteral(value=2)\n])",
            Add(IntLiteral(1), IntLiteral(2)).display()
        )
        self.assertEqual(
            "Function(input='x', input_type='int', nodes=[\n    Var(name='x')\n])",
            Function("x", IntTypeExpr(), Var("x")).display()
        )


if __name__ == '__main__':
    unittest.main()
