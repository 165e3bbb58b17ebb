import io
import os
import tempfile
import unittest

from patty.core.value import NIL, Int
from patty.lang.error import ErrorHandler, PattyError, ResourceExhausted, UnresolvedSymbol
from patty.lang.session import Session


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.stream = io.StringIO()
        self.output = io.StringIO()
        self.error_handler = ErrorHandler(fatal=False, stream=self.stream)
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, source):
        path = os.path.join(self.tmp.name, "prog.patty")
        with open(path, "w") as file:
            file.write(source)
        return path

    def file_session(self, source, stdin=""):
        return Session(self.error_handler, self.write(source), cmd_line=False,
                       stdin=io.StringIO(stdin), stdout=self.output)

    def test_run_file(self):
        source = """# sums the first squares
(do
  (def square (fun (x) (* x x)))
  (print "squares: " (take 4 (seq (square n))))
  (fold + (take 4 (seq (square n)))))
"""
        sess = self.file_session(source)
        sess.run()
        self.assertEqual([Int(14)], sess.results)
        self.assertEqual("squares: (0 1 4 9)\n", self.output.getvalue())
        self.assertEqual("14", sess.pop())

    def test_reads_stdin(self):
        sess = self.file_session("(+ (read int) (read int))", stdin="20 22")
        sess.run()
        self.assertEqual("42", sess.pop())

    def test_only_first_form_runs(self):
        sess = self.file_session("(+ 1 2) (+ 3 4)")
        self.assertEqual(1, len(sess.expressions))
        self.assertIn("warning:", self.stream.getvalue())
        sess.run()
        self.assertEqual([Int(3)], sess.results)

    def test_empty_file(self):
        sess = self.file_session("# nothing here\n")
        sess.run()
        self.assertEqual([NIL], sess.results)

    def test_missing_file(self):
        path = os.path.join(self.tmp.name, "missing.patty")
        self.assertRaises(PattyError, Session, self.error_handler, path, False)

    def test_reserved_filename(self):
        self.assertRaises(PattyError, Session, self.error_handler, Session.SH_FILE, False)

    def test_command_line(self):
        sess = Session(self.error_handler, Session.SH_FILE, cmd_line=True, stdout=self.output)
        self.assertFalse(self.error_handler.fatal)
        sess.add("(def x 2) (* x 21)")
        sess.run()
        self.assertEqual("42", sess.pop())
        sess.add("(+ x 1)")
        sess.run()
        self.assertEqual("3", sess.pop())

    def test_failing_form_drops_the_rest_of_the_line(self):
        sess = Session(self.error_handler, Session.SH_FILE, cmd_line=True, stdout=self.output)
        sess.add('(print "before") (+ 1 undefined) (print "stale")')
        self.assertRaises(UnresolvedSymbol, sess.run)
        self.assertEqual([], sess.to_exec)
        self.assertEqual("before\n", self.output.getvalue())

        sess.add("(+ 1 1)")
        sess.run()
        self.assertEqual("before\n", self.output.getvalue())
        self.assertEqual([Int(2)], sess.results)
        self.assertEqual(0, sess.context.depth)

    def test_results_only_hold_the_current_line(self):
        sess = Session(self.error_handler, Session.SH_FILE, cmd_line=True, stdout=self.output)
        sess.add("1 2 3")
        sess.run()
        self.assertEqual([Int(1), Int(2), Int(3)], sess.results)
        sess.add("4")
        sess.run()
        self.assertEqual([Int(4)], sess.results)

    def test_deep_recursion(self):
        sess = self.file_session("(do (def f (fun (k) (f k))) (f 1))")
        self.assertRaises(ResourceExhausted, sess.run)
        self.assertEqual(0, sess.context.depth)

    def test_preprocess_line(self):
        cases = {
            "(do (def x 1)": True,
            "(+ 1 2)": False,
            '(print ")"': True,
            '(print "(")': False,
            "(+ 1 # (\n 2)": False,
            "  x  ": False,
            '"open': False,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, Session.preprocess_line(case)[1], case)
        self.assertEqual("x", Session.preprocess_line("  x  ")[0])

    def test_tokens(self):
        self.assertEqual([("paren", "("), ("symbol", "f"), ("int", "1"), ("paren", ")")], Session.tokens("(f 1)"))


if __name__ == '__main__':
    unittest.main()
