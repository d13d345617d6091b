import io
import os
import re
import tempfile
import unittest
from contextlib import redirect_stdout

from minilang.lang.error import DivisionByZero, ErrorHandler, GenericException, ParseError, UndefinedVariable
from minilang.lang.session import Session
from minilang.lang.shell import Shell
from minilang.main import main


def plain(text):
    """Strips termcolor escape codes."""
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


def write_script(test_case, text):
    """Writes text to a temporary .ml file that is removed after test_case."""
    handle, path = tempfile.mkstemp(suffix=".ml")
    with os.fdopen(handle, "w") as file:
        file.write(text)
    test_case.addCleanup(os.remove, path)
    return path


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.output = io.StringIO()
        self.sess = Session(ErrorHandler(), Session.SH_FILE, cmd_line=True, output=self.output)

    def test_assignment_persists(self):
        self.assertEqual(5, self.sess.execute("x=5"))
        self.assertEqual(6, self.sess.execute("x+1"))

    def test_errors_keep_environment(self):
        self.sess.execute("x = 5")
        self.assertRaises(DivisionByZero, self.sess.execute, "x = x / 0")
        self.assertRaises(ParseError, self.sess.execute, "x = (")
        self.assertRaises(UndefinedVariable, self.sess.execute, "y + 1")
        self.assertEqual(5, self.sess.execute("x"))

    def test_statements_before_syntax_error_are_kept(self):
        self.assertRaises(ParseError, self.sess.execute, "a = 1; b = ; c = 3")
        self.assertEqual(1, self.sess.env.get("a"))
        self.assertNotIn("c", self.sess.env)

    def test_loop(self):
        self.sess.execute("x=0; for (i=0; i<5; i=i+1) x=x+i;")
        self.assertEqual(10, self.sess.env.get("x"))

    def test_empty(self):
        self.assertIsNone(self.sess.execute(""))
        with redirect_stdout(io.StringIO()):
            self.assertIsNone(self.sess.execute(" @ "))  # warning only, no statements

    def test_echo(self):
        self.sess.execute("x = 4; x; print x + 0.5; x * 2; if (1) 3")
        self.assertEqual(["4", "4.5", "8"], self.output.getvalue().splitlines())

    def test_parse_only(self):
        sess = Session(ErrorHandler(), Session.SH_FILE, cmd_line=True, output=self.output, parse_only=True)
        sess.execute("x = 1 + 2")
        self.assertIn("BinaryOp('+')", self.output.getvalue())
        self.assertNotIn("x", sess.env)

    def test_preprocess_line(self):
        cases = {
            ("x = 1 # set x", ""): ("x = 1", False),
            ("   ", ""): ("", False),
            ("for (i = 0; i < 3; i = i + 1) {", ""): ("for (i = 0; i < 3; i = i + 1) {", True),
            ("print i }", "for (i = 0; i < 3; i = i + 1) {"): ("for (i = 0; i < 3; i = i + 1) { print i }", False),
            ("(1 +", ""): ("(1 +", True),
            ("", "(1 +"): ("(1 +", True),
        }
        for (line, buffered), result in cases.items():
            self.assertEqual(result, Session.preprocess_line(line, buffered), line)

    def test_run_reports_lex_warning(self):
        with redirect_stdout(io.StringIO()) as out:
            self.sess.add("1 $ 2")
            self.sess.run()
        self.assertIn("warning: unrecognized character '$' skipped", plain(out.getvalue()))
        self.assertEqual(["1", "2"], self.output.getvalue().splitlines())

    def test_reserved_filename(self):
        self.assertEqual(ErrorHandler.SH_FILE, Session.SH_FILE)
        with self.assertRaises(GenericException) as context:
            Session(ErrorHandler(), Session.SH_FILE, False)
        self.assertIn(Session.SH_FILE, plain(context.exception.msg))

    def test_missing_file(self):
        self.assertRaises(GenericException, Session, ErrorHandler(), "/nonexistent/script.ml", False)


class FileSessionTestCase(unittest.TestCase):

    def test_run_file(self):
        path = write_script(self, "# sum of the first five numbers\n"
                                  "total = 0\n"
                                  "for (i = 1; i < 6; i = i + 1) {\n"
                                  "    total = total + i;\n"
                                  "}\n"
                                  "print total\n"
                                  "total\n")
        output = io.StringIO()
        sess = Session(ErrorHandler(), path, cmd_line=False, output=output)
        self.assertEqual({2: "total = 0", 5: "for (i = 1; i < 6; i = i + 1) { total = total + i; }",
                          6: "print total", 7: "total"}, sess.to_exec)

        sess.run()
        self.assertEqual("15\n", output.getvalue())  # no echo outside of command-line mode
        self.assertEqual({}, sess.to_exec)

    def test_error_is_fatal(self):
        path = write_script(self, "x = 1\nprint x / 0\nprint 2\n")
        with redirect_stdout(io.StringIO()) as out:
            with self.assertRaises(SystemExit) as context:
                with ErrorHandler() as error_handler:
                    Session(error_handler, path, cmd_line=False).run()

        self.assertEqual(1, context.exception.code)
        self.assertIn(f"File '{path}', line 2:", plain(out.getvalue()))
        self.assertIn("Error: division by zero", plain(out.getvalue()))
        self.assertNotIn("2", plain(out.getvalue()).splitlines())


class ErrorHandlerTestCase(unittest.TestCase):

    def throw_in(self, error, fatal=False):
        with redirect_stdout(io.StringIO()) as out:
            with ErrorHandler(fatal=fatal):
                raise error
        return plain(out.getvalue())

    def test_generic_exception(self):
        self.assertEqual("Error: division by zero\n", self.throw_in(DivisionByZero()))
        self.assertEqual("Error: undefined variable 'y'\n", self.throw_in(UndefinedVariable("y")))

    def test_diagnosis(self):
        error = ParseError("expected '{}' but got '{}'", (")", "*"), source="(1 * * 2)", start=5, end=6)
        self.assertEqual("Error: expected ')' but got '*'\n"
                         "  (1 * * 2)\n"
                         "       ^\n", self.throw_in(error))

    def test_keyboard_interrupt(self):
        self.assertEqual("Error: keyboard interrupt\n", self.throw_in(KeyboardInterrupt()))

    def test_recursion(self):
        self.assertEqual("Error: maximum nesting depth exceeded\n", self.throw_in(RecursionError()))

    def test_internal_error_propagates(self):
        with redirect_stdout(io.StringIO()) as out:
            with self.assertRaises(ValueError):
                with ErrorHandler(fatal=False):
                    raise ValueError("boom")
        self.assertIn("[internal] Error: unknown error: 'ValueError: boom'", plain(out.getvalue()))

    def test_fatal(self):
        with self.assertRaises(SystemExit):
            self.throw_in(DivisionByZero(), fatal=True)

    def test_warn(self):
        handler = ErrorHandler()
        handler.register_file("script.ml")
        handler.register_line("script.ml", "1 $ 2", 3)

        with redirect_stdout(io.StringIO()) as out:
            handler.warn(GenericException("unrecognized character '{}' skipped", "$", source="1 $ 2", start=2, end=3))
        self.assertEqual("script.ml:3:3: warning: unrecognized character '$' skipped\n"
                         "  1 $ 2\n"
                         "    ^\n", plain(out.getvalue()))


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.output = io.StringIO()
        self.shell = Shell(Session(ErrorHandler(), Session.SH_FILE, cmd_line=True, output=self.output))

    def lines(self):
        return self.output.getvalue().splitlines()

    def test_statements(self):
        self.shell.onecmd("x = 2")
        self.shell.onecmd("x * 3")
        self.shell.onecmd("if (x > 1) print 7 else print 8")
        self.assertEqual(["6", "7"], self.lines())

    def test_errors_do_not_stop_shell(self):
        with redirect_stdout(io.StringIO()) as out:
            self.shell.onecmd("x = 1")
            self.shell.onecmd("q + 1")
            self.shell.onecmd("x + 1")
        self.assertEqual("Error: undefined variable 'q'\n", plain(out.getvalue()))
        self.assertEqual(["2"], self.lines())

    def test_continuation(self):
        self.shell.onecmd("for (i = 0; i < 3; i = i + 1) {")
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)

        self.shell.onecmd("    print i;")
        self.shell.onecmd("}")
        self.assertEqual(Shell._tmp_prompt, self.shell.prompt)
        self.assertEqual(["0", "1", "2"], self.lines())

    def test_vars(self):
        self.shell.onecmd("b = 2.5; a = 1")
        self.shell.onecmd("vars")
        self.assertEqual(["a = 1", "b = 2.5"], self.lines())

    def test_exit(self):
        self.assertTrue(self.shell.onecmd("exit"))
        self.assertTrue(self.shell.onecmd("EOF"))
        self.assertFalse(self.shell.onecmd(""))


class MainTestCase(unittest.TestCase):

    def test_file(self):
        path = write_script(self, "for (i = 0; i < 3; i = i + 1) print i * i\n")
        with redirect_stdout(io.StringIO()) as out:
            main([path])
        self.assertEqual("0\n1\n4\n", plain(out.getvalue()))

    def test_parse(self):
        path = write_script(self, "print 1 + 2\n")
        with redirect_stdout(io.StringIO()) as out:
            main(["--parse", path])
        self.assertEqual("Print[\n    BinaryOp('+')[\n        NumberLiteral(1.0),\n        NumberLiteral(2.0)\n    ]\n]\n",
                         plain(out.getvalue()))

    def test_failing_file(self):
        path = write_script(self, "print 1 / 0\n")
        with redirect_stdout(io.StringIO()):
            with self.assertRaises(SystemExit) as context:
                main([path])
        self.assertEqual(1, context.exception.code)


if __name__ == '__main__':
    unittest.main()
