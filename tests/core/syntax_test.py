import unittest

from pcalc.core.syntax import (Apply, BinaryOp, BinaryOperator, Boolean, Func, If, Integer, is_value, render,
                               UnaryOp, UnaryOperator, Variable)


class RenderTestCase(unittest.TestCase):

    def test_render(self):
        cases = [
            (Integer(42), "42"),
            (Integer(-7), "-7"),
            (Variable("x"), "x"),
            (Boolean(True), "T"),
            (Boolean(False), "F"),
            (BinaryOp(BinaryOperator.ADD, Integer(3), Integer(4)), "3 + 4"),
            (UnaryOp(UnaryOperator.NOT, Boolean(True)), "!T"),
            (Func("x", BinaryOp(BinaryOperator.MULTIPLY, Variable("x"), Integer(2))), "func x => x * 2"),
            (If(Boolean(True), Integer(42), Integer(0)), "if T then 42 else 0"),
            (Apply(Variable("f"), Integer(10)), "f (10)"),
        ]
        for case, expected in cases:
            self.assertEqual(expected, render(case), case)
            self.assertEqual(expected, str(case), case)

    def test_render_operators(self):
        symbols = {
            BinaryOperator.ADD: "+",
            BinaryOperator.SUBTRACT: "-",
            BinaryOperator.MULTIPLY: "*",
            BinaryOperator.DIVIDE: "/",
            BinaryOperator.LESS_THAN: "<",
            BinaryOperator.EQUALS: "=",
            BinaryOperator.AND: "&",
            BinaryOperator.OR: "|",
        }
        for op, symbol in symbols.items():
            self.assertEqual(f"a {symbol} b", render(BinaryOp(op, Variable("a"), Variable("b"))), op)

    def test_render_nested_is_ungrouped(self):
        left = BinaryOp(BinaryOperator.SUBTRACT, BinaryOp(BinaryOperator.SUBTRACT, Integer(1), Integer(2)), Integer(3))
        right = BinaryOp(BinaryOperator.SUBTRACT, Integer(1), BinaryOp(BinaryOperator.SUBTRACT, Integer(2), Integer(3)))
        self.assertEqual(render(left), render(right))
        self.assertNotEqual(left.source, right.source)


class SourceTestCase(unittest.TestCase):

    def test_source(self):
        cases = [
            (Integer(42), "42"),
            (Boolean(False), "F"),
            (BinaryOp(BinaryOperator.ADD, Integer(3), Integer(4)), "+(3, 4)"),
            (UnaryOp(UnaryOperator.NOT, Variable("b")), "!b"),
            (Func("x", BinaryOp(BinaryOperator.MULTIPLY, Variable("x"), Integer(2))), "func x => *(x, 2)"),
            (If(Boolean(True), Integer(42), Integer(0)), "if T then 42 else 0"),
            (Apply(Variable("f"), Integer(10)), "apply(f, 10)"),
        ]
        for case, expected in cases:
            self.assertEqual(expected, case.source, case)


class ExpressionTestCase(unittest.TestCase):

    def test_display_name(self):
        self.assertEqual("Add", BinaryOperator.ADD.display_name)
        self.assertEqual("LessThan", BinaryOperator.LESS_THAN.display_name)
        self.assertEqual("Not", UnaryOperator.NOT.display_name)

    def test_children(self):
        expr = If(Boolean(True), Integer(1), Integer(2))
        self.assertEqual([Boolean(True), Integer(1), Integer(2)], expr.children)
        self.assertEqual([Integer(1), Integer(2)], BinaryOp(BinaryOperator.ADD, Integer(1), Integer(2)).children)
        self.assertEqual([], Variable("x").children)

    def test_display(self):
        expr = BinaryOp(BinaryOperator.ADD, Integer(1), UnaryOp(UnaryOperator.NOT, Boolean(False)))
        expected = ("BinaryOp(expr='+(1, !F)', nodes=[\n"
                    "    Integer(expr='1'),\n"
                    "    UnaryOp(expr='!F', nodes=[\n"
                    "        Boolean(expr='F')\n"
                    "    ])\n"
                    "])")
        self.assertEqual(expected, expr.display())

    def test_equality(self):
        self.assertEqual(Integer(1), Integer(1))
        self.assertNotEqual(Integer(1), Boolean(True))
        self.assertNotEqual(Integer(0), Boolean(False))

    def test_is_value(self):
        should_pass = [Integer(1), Boolean(True), Variable("x"), Func("x", Variable("x"))]
        for case in should_pass:
            self.assertTrue(is_value(case), case)

        should_fail = [
            BinaryOp(BinaryOperator.ADD, Integer(1), Integer(2)),
            UnaryOp(UnaryOperator.NOT, Boolean(True)),
            If(Boolean(True), Integer(1), Integer(2)),
            Apply(Variable("f"), Integer(1)),
        ]
        for case in should_fail:
            self.assertFalse(is_value(case), case)


if __name__ == '__main__':
    unittest.main()
