import contextlib
import io
import os
import tempfile
import unittest

from arithc.lang.error import DivisionByZero, ErrorHandler, ExpectedSemicolon, LexError, UnexpectedToken, UsageError
from arithc.lang.session import Session


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.handler = ErrorHandler(fatal=False, stream=io.StringIO())

    def tearDown(self):
        self.tmpdir.cleanup()

    def write(self, source, name="prog.ar"):
        path = os.path.join(self.tmpdir.name, name)
        with open(path, "w") as file:
            file.write(source)
        return path

    def session(self, source):
        return Session(self.handler, self.write(source))

    def test_run(self):
        cases = {"1+1;2*2;": [2, 4], "2+3*4;\n10-3-2;\n": [14, 5], "": [], "  \n": []}
        for case, expected in cases.items():
            stdout = io.StringIO()
            with contextlib.redirect_stdout(stdout):
                results = self.session(case).run()

            self.assertEqual(expected, results, case)
            self.assertEqual("".join(f"{value}\n" for value in expected), stdout.getvalue(), case)

    def test_run_quiet(self):
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            self.assertEqual([3], self.session("1+2;").run(echo=False))
        self.assertEqual("", stdout.getvalue())

    def test_fail_fast(self):
        sess = self.session("1;5/0;7;")
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            self.assertRaises(DivisionByZero, sess.run)

        self.assertEqual([1], sess.results)
        self.assertEqual("1\n", stdout.getvalue())

    def test_errors_before_running(self):
        cases = {"1;2+;": UnexpectedToken, "1;2+3": ExpectedSemicolon, "1;2 @ 3;": LexError}
        for case, error in cases.items():
            self.assertRaises(error, self.session, case)

    def test_missing_file(self):
        self.assertRaises(UsageError, Session, self.handler, os.path.join(self.tmpdir.name, "missing.ar"))
        self.assertRaises(UsageError, Session, self.handler, self.tmpdir.name)

    def test_registers_source(self):
        path = self.write("1;")
        Session(self.handler, path)
        self.assertEqual(path, self.handler.path)
        self.assertEqual("1;", self.handler.source)

    def test_source_argument(self):
        sess = Session(self.handler, "<string>", source="6/3;")
        self.assertEqual([2], sess.run(echo=False))

    def test_ast(self):
        expected = ("(2 + (3 * 4));\n"
                    "  Operator +\n"
                    "    Number: 2\n"
                    "    Operator *\n"
                    "      Number: 3\n"
                    "      Number: 4\n"
                    "7;\n"
                    "  Number: 7")
        self.assertEqual(expected, self.session("2+3*4;7;").ast())

    def test_emit(self):
        ir_text = self.session("1+1;2*2;").emit()
        for expected in ("statement.0", "statement.1", "main", "printf"):
            self.assertIn(expected, ir_text)

    def test_jit(self):
        source = "1+1;2*2;10-3-2;0-7/2;"
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            jitted = self.session(source).jit()
        self.assertEqual([2, 4, 5, -3], jitted)
        self.assertEqual(self.session(source).run(echo=False), jitted)
        self.assertEqual("2\n4\n5\n-3\n", stdout.getvalue())

    def test_jit_division_by_zero(self):
        sess = self.session("3;1/0;")
        with contextlib.redirect_stdout(io.StringIO()):
            self.assertRaises(DivisionByZero, sess.jit)
        self.assertEqual([3], sess.results)


if __name__ == '__main__':
    unittest.main()
