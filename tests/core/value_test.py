import unittest

from patty.core.environment import Context
from patty.core.evaluator import evaluate
from patty.core.reader import read
from patty.core.sequence import CircularGenerator, DynamicGenerator
from patty.core.value import NIL, Int, List, NativeFunction, Nil, Sequence, String, Symbol, to_int64
from patty.lang.error import UnsupportedOperation


class RenderTestCase(unittest.TestCase):

    def test_render(self):
        cases = {
            "nil": NIL,
            "-3": Int(-3),
            "raw text": String("raw text"),
            "sym": Symbol("sym"),
            "()": List(),
            '(1 "a" b)': List([Int(1), String("a"), Symbol("b")]),
            '("x" ("y" 2) "z")': List([String("x"), List([String("y"), Int(2)]), String("z")]),
            '("say \\"hi\\"")': List([String('say "hi"')]),
            "<native-function +>": NativeFunction("+", None),
            "<sequence circular>": Sequence(CircularGenerator([Int(1)])),
            "<sequence dynamic>": Sequence(DynamicGenerator(Symbol("n"))),
        }
        for expected, value in cases.items():
            self.assertEqual(expected, value.render(), expected)
            self.assertEqual(expected, str(value), expected)

    def test_round_trip(self):
        context = Context()
        values = [
            Int(0), Int(-12), Int(9223372036854775807), List([Int(1), Int(2), Int(3)]),
            List([Int(1), String("two"), Int(3)]),
        ]
        for value in values:
            self.assertEqual(value, evaluate(context, read(value.render())), value)

        for value in [String("hello"), String("")]:
            self.assertEqual(value, evaluate(context, read(value.render(in_list=True))), value)


class ValueTestCase(unittest.TestCase):

    def test_coerce_bool(self):
        should_fail = [NIL, Int(0), String(""), List()]
        for case in should_fail:
            self.assertFalse(case.coerce_bool(), case)

        should_pass = [Int(-1), String("x"), List([NIL]), Symbol("s"), NativeFunction("f", None),
                       Sequence(CircularGenerator([]))]
        for case in should_pass:
            self.assertTrue(case.coerce_bool(), case)

    def test_equality(self):
        self.assertEqual(Int(1), Int(1))
        self.assertNotEqual(Int(1), String("1"))
        self.assertNotEqual(Symbol("a"), String("a"))
        self.assertEqual(NIL, Nil())
        self.assertIs(NIL, Nil())
        self.assertEqual(List([Int(1), List([Symbol("a")])]), List([Int(1), List([Symbol("a")])]))
        self.assertNotEqual(List([Int(1)]), List([Int(1), Int(2)]))

    def test_take(self):
        self.assertEqual(String("hel"), String("hello").take(None, 3))
        self.assertEqual(String("hi"), String("hi").take(None, 10))

        original = List([Int(1), Int(2), Int(3)])
        self.assertEqual(List([Int(1), Int(2)]), original.take(None, 2))
        self.assertEqual(original, original.take(None, 10))
        self.assertEqual(3, len(original))

        for case in [NIL, Int(3), Symbol("x")]:
            self.assertRaises(UnsupportedOperation, case.take, None, 1)

    def test_list_mutation(self):
        items = List([Int(1), Int(2), Int(3), Int(4)])
        items.truncate(3)
        self.assertEqual(List([Int(1), Int(2), Int(3)]), items)
        items.drop_front(2)
        self.assertEqual(List([Int(3)]), items)
        items.drop_front(5)
        self.assertEqual(List(), items)
        items.append(Int(9))
        self.assertEqual(List([Int(9)]), items)

    def test_to_int64(self):
        cases = {
            0: 0,
            2 ** 63 - 1: 2 ** 63 - 1,
            2 ** 63: -2 ** 63,
            -2 ** 63 - 1: 2 ** 63 - 1,
            2 ** 64 + 5: 5,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, to_int64(case), case)


if __name__ == '__main__':
    unittest.main()
