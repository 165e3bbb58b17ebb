import unittest

from patty.core.reader import Reader, read, tokenize
from patty.core.value import NIL, Int, List, String, Symbol
from patty.lang.error import MalformedInput


class ReaderTestCase(unittest.TestCase):

    def test_atoms(self):
        cases = {
            "42": Int(42),
            "-7": Int(-7),
            "  \n\t 3": Int(3),
            "-": Symbol("-"),
            "-x": Symbol("-x"),
            "zip-with": Symbol("zip-with"),
            "seq!": Symbol("seq!"),
            "<=": Symbol("<="),
            "++": Symbol("++"),
            "a1": Symbol("a1"),
            '"hello world"': String("hello world"),
            '""': String(""),
            '"a\\nb"': String("a\\nb"),  # escapes are kept raw
            '"say \\"hi\\""': String('say \\"hi\\"'),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, read(case), case)

    def test_lists(self):
        cases = {
            "()": List(),
            "(+ 1 2)": List([Symbol("+"), Int(1), Int(2)]),
            "(+ 1 (* 2 3))": List([Symbol("+"), Int(1), List([Symbol("*"), Int(2), Int(3)])]),
            '(print "x" -1)': List([Symbol("print"), String("x"), Int(-1)]),
            "(1 2": List([Int(1), Int(2)]),  # end of input closes the list
        }
        for case, expected in cases.items():
            self.assertEqual(expected, read(case), case)

    def test_comments(self):
        cases = {
            "# just a comment\n5": Int(5),
            "(1 # trailing comment\n 2)": List([Int(1), Int(2)]),
            "(1 # no newline": List([Int(1)]),
            "# a\n# b\n  x": Symbol("x"),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, read(case), case)

    def test_nothing_to_read(self):
        for case in ["", "   ", "# only a comment", ")"]:
            self.assertIs(NIL, read(case), case)

    def test_cursor(self):
        reader = Reader("1 (2 3) \"four\" five")
        self.assertEqual(Int(1), reader.read())
        self.assertEqual(List([Int(2), Int(3)]), reader.read())
        self.assertEqual(' "four" five', reader.rest())
        self.assertEqual(String("four"), reader.read())
        self.assertEqual(Symbol("five"), reader.read())
        self.assertIs(NIL, reader.read())
        self.assertTrue(reader.exhausted)

    def test_int_then_symbol(self):
        reader = Reader("-5abc")
        self.assertEqual(Int(-5), reader.read())
        self.assertEqual(Symbol("abc"), reader.read())

    def test_read_all(self):
        self.assertEqual([Int(1), Int(2), List([Int(3)])], Reader("1 ) 2 (3)").read_all())
        self.assertEqual([], Reader("  # nothing\n").read_all())

    def test_malformed(self):
        should_raise = ['"unterminated', "{", "(1 'a)", "99999999999999999999", "(print _x)"]
        for case in should_raise:
            self.assertRaises(MalformedInput, read, case)

    def test_tokens(self):
        expected = [
            ("paren", "("), ("symbol", "print"), ("string", '"hi"'), ("int", "-3"), ("paren", ")"),
        ]
        self.assertEqual(expected, tokenize('(print "hi" -3) # done'))


if __name__ == '__main__':
    unittest.main()
