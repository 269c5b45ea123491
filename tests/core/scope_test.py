import unittest

from typedlc.core.scope import Scope


class ScopeTestCase(unittest.TestCase):

    def test_bind(self):
        scope = Scope()
        self.assertIsNone(scope.get("x"))

        with scope.bind("x", 1):
            self.assertEqual(1, scope.get("x"))
            self.assertIn("x", scope)

        self.assertNotIn("x", scope)
        self.assertEqual(0, len(scope))

    def test_shadowing(self):
        scope = Scope()
        with scope.bind("x", 1):
            with scope.bind("x", 2):
                self.assertEqual(2, scope.get("x"))
            self.assertEqual(1, scope.get("x"))
        self.assertIsNone(scope.get("x"))

    def test_restored_on_error(self):
        scope = Scope()
        with scope.bind("x", 1):
            with self.assertRaises(ValueError):
                with scope.bind("x", 2), scope.bind("y", 3):
                    raise ValueError()
            self.assertEqual(1, scope.get("x"))
            self.assertNotIn("y", scope)
            self.assertEqual(1, len(scope))

    def test_bind_many(self):
        scope = Scope()
        with scope.bind("a", 0):
            with scope.bind_many([("a", 1), ("b", 2)]):
                self.assertEqual((1, 2), (scope.get("a"), scope.get("b")))

            with self.assertRaises(KeyError):
                with scope.bind_many({"c": 3}.items()):
                    raise KeyError("c")

            self.assertNotIn("c", scope)
            self.assertEqual(1, len(scope))
            self.assertEqual(0, scope.get("a"))


if __name__ == '__main__':
    unittest.main()
