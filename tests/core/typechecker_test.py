import unittest

from typedlc.core.ast import BoolTypeExpr, FunctionTypeExpr, IntTypeExpr, ParenTypeExpr, Var
from typedlc.core.typechecker import BOOL, INT, FunctionType, TypeChecker, subset
from typedlc.lang.error import TypeCheckError
from typedlc.lang.parser import parse


class TypeCheckerTestCase(unittest.TestCase):

    def test_typecheck(self):
        cases = {
            "1": INT,
            "true": BOOL,
            "1 + 2": INT,
            "1 = 2": BOOL,
            "true = false": BOOL,
            "true and false": BOOL,
            "(1 + 2)": INT,
            "let x = 1 + 2 in x = 3": BOOL,
            "let x = 1 in let x = true in x": BOOL,
            "x: int -> x + 2": FunctionType(INT, INT),
            "x: int -> y: bool -> y": FunctionType(INT, FunctionType(BOOL, BOOL)),
            "(x: int -> x + 2) < 3": INT,
            "3 > (x: int -> x + 2)": INT,
            "(x: int -> (y: int -> x + y)) < 3 < 4": INT,
            "let f = x: int -> y: int -> x + y + 2 in 3 > f < 2": INT,
            "f: (int -> int) -> f < 1": FunctionType(FunctionType(INT, INT), INT),
            "(f: (int -> bool) -> f < 1) < (x: int -> x = 1)": BOOL,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, TypeChecker().typecheck(parse(case)), case)

    def test_type_errors(self):
        should_fail = [
            "1 + true",
            "1 = true",
            "1 and true",
            "true + true",
            "x",
            "let x = 1 in y",
            "let x = x in x",
            "1 < 2",
            "true > (x: int -> x)",
            "(x: int -> x) < true",
            "(f: (int -> int) -> f < 1) < (x: int -> x = 1)",
            "x: int -> x and true",
        ]
        for case in should_fail:
            self.assertRaises(TypeCheckError, TypeChecker().typecheck, parse(case))

    def test_scope_restored(self):
        checker = TypeChecker()
        self.assertEqual(BOOL, checker.typecheck(parse("let x = 1 in x = 1")))
        self.assertRaises(TypeCheckError, checker.typecheck, Var("x"))

        self.assertRaises(TypeCheckError, checker.typecheck, parse("let x = 1 in (y: int -> y + true)"))
        self.assertEqual(0, len(checker.scope))

    def test_eval_type(self):
        cases = {
            IntTypeExpr(): INT,
            BoolTypeExpr(): BOOL,
            ParenTypeExpr(IntTypeExpr()): INT,
            FunctionTypeExpr(IntTypeExpr(), BoolTypeExpr()): FunctionType(INT, BOOL),
            FunctionTypeExpr(ParenTypeExpr(FunctionTypeExpr(IntTypeExpr(), IntTypeExpr())), IntTypeExpr()):
                FunctionType(FunctionType(INT, INT), INT),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, TypeChecker().eval_type(case), case)

    def test_str(self):
        cases = {
            INT: "int",
            BOOL: "bool",
            FunctionType(INT, FunctionType(INT, BOOL)): "int -> int -> bool",
            FunctionType(FunctionType(INT, INT), INT): "(int -> int) -> int",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, str(case))


class SubsetTestCase(unittest.TestCase):

    def test_equal_types(self):
        self.assertTrue(subset(INT, INT))
        self.assertTrue(subset(BOOL, BOOL))
        # structurally equal, but separately built
        self.assertTrue(subset(FunctionType(INT, FunctionType(BOOL, INT)), FunctionType(INT, FunctionType(BOOL, INT))))

    def test_distinct_types(self):
        should_fail = [
            (INT, BOOL),
            (BOOL, INT),
            (FunctionType(INT, INT), INT),
            (FunctionType(INT, INT), FunctionType(BOOL, INT)),
            (FunctionType(INT, INT), FunctionType(INT, BOOL)),
        ]
        for t1, t2 in should_fail:
            self.assertFalse(subset(t1, t2), (t1, t2))

    def test_application_accepts_equal_function_types(self):
        tree = parse("(f: (int -> int) -> f < 1) < (x: int -> x + 1)")
        self.assertEqual(INT, TypeChecker().typecheck(tree))


if __name__ == '__main__':
    unittest.main()
