import io
import os
import sys
import tempfile
import unittest
from unittest import mock

from skoobert.lang.error import ErrorHandler, EvalError, SkoobertError
from skoobert.lang.session import Session
from skoobert.lang.shell import Shell
from skoobert.lang.values import NumberValue, StringValue
from skoobert.main import main

PROGRAM = """// prints 42, then the expansion of I
let S = x => y => z => x(z)(y(z));
let K = x => y => x;
let I = S(K)(K);
console.log(K(42)(1 / 0));
inspect.expanded(I);
"""


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.errors = io.StringIO()
        self.handler = ErrorHandler(fatal=False, file=self.errors)

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, name, source):
        path = os.path.join(self.tmp.name, name)
        with open(path, "w", encoding="utf-8") as file:
            file.write(source)
        return path

    def test_run_file(self):
        path = self.write("combinators.skb", PROGRAM)
        sink = mock.Mock()
        Session(self.handler, path, sink).run()

        self.assertEqual([mock.call(NumberValue(42.0)), mock.call(StringValue("S(K)(K)"))], sink.call_args_list)
        self.assertEqual(path, self.handler.path)

    def test_missing_file(self):
        path = os.path.join(self.tmp.name, "missing.skb")
        with self.assertRaises(SkoobertError) as context:
            Session(self.handler, path).run()
        self.assertIn("could not be opened", context.exception.msg)

    def test_reserved_filename(self):
        self.assertRaises(SkoobertError, Session(self.handler).load)

    def test_shared_environment(self):
        sink = mock.Mock()
        sess = Session(self.handler, on_output=sink)
        sess.add("let x = 20;")
        sess.add("let f = y => x + y;")
        sess.add("console.log(f(1));")
        sink.assert_called_once_with(NumberValue(21.0))

        with self.assertRaises(EvalError) as context:
            sess.add("let x = 2;")
        self.assertIn("already taken", context.exception.msg)
        self.assertEqual("let x = 2;", context.exception.source)


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.errors = io.StringIO()
        self.shell = Shell(Session(ErrorHandler(fatal=False, file=self.errors)), stdout=self.out)

    def test_statements(self):
        self.shell.onecmd("let x = 6;")
        self.shell.onecmd("console.log(x * 7);")
        self.shell.onecmd("console.log(\"a\" + x);")
        self.assertEqual("42\na6\n", self.out.getvalue())

    def test_continuation(self):
        self.shell.onecmd("let add = x =>")
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)
        self.shell.onecmd("  y => x + y;")
        self.assertEqual("> ", self.shell.prompt)
        self.shell.onecmd("console.log(add(1)(2));")
        self.assertEqual("3\n", self.out.getvalue())

    def test_errors_reported(self):
        self.shell.onecmd("console.log(1); console.log(1 / 0); console.log(3);")
        self.assertEqual("1\n", self.out.getvalue())
        self.assertIn("<in>:1:", self.errors.getvalue())
        self.assertIn("Division by zero", self.errors.getvalue())

        self.shell.onecmd("console.log(2);")
        self.assertEqual("1\n2\n", self.out.getvalue())

    def test_is_complete(self):
        cases = {
            "let x = 1;": True,
            "let x = 1": False,
            "": False,
            "console.log(": False,
            "let s = \"unterminated": True,
            "let x = 1; // done": True,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, Shell.is_complete(case), case)

    def test_commands(self):
        self.assertTrue(self.shell.onecmd("exit"))
        self.assertTrue(self.shell.onecmd("EOF"))
        self.assertFalse(self.shell.onecmd(""))

        self.shell.onecmd("help")
        self.assertIn("Welcome to the skoobert interpreter!", self.out.getvalue())


class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.recursion_limit = sys.getrecursionlimit()
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        sys.setrecursionlimit(self.recursion_limit)
        self.tmp.cleanup()

    def write(self, source):
        path = os.path.join(self.tmp.name, "main.skb")
        with open(path, "w", encoding="utf-8") as file:
            file.write(source)
        return path

    def test_run_file(self):
        path = self.write(PROGRAM)
        with mock.patch("sys.stdout", new_callable=io.StringIO) as stdout:
            main([path, "--recursion-limit", "5000"])
        self.assertEqual("42\nS(K)(K)\n", stdout.getvalue())
        self.assertEqual(5000, sys.getrecursionlimit())

    def test_error_exits(self):
        path = self.write("console.log(1);\nconsole.log(nope);")
        with mock.patch("sys.stdout", new_callable=io.StringIO) as stdout:
            with self.assertRaises(SystemExit) as context:
                main([path])
        self.assertEqual(1, context.exception.code)
        self.assertIn("1\n", stdout.getvalue())
        self.assertIn(f"{path}:2:13: ", stdout.getvalue())
        self.assertIn("Undefined variable: nope", stdout.getvalue())

    def test_no_file_starts_shell(self):
        with mock.patch("skoobert.lang.shell.start") as start:
            main([])
        start.assert_called_once()
        self.assertIsInstance(start.call_args[0][0], ErrorHandler)


if __name__ == '__main__':
    unittest.main()
