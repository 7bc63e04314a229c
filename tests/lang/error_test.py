import io
import unittest
from contextlib import redirect_stdout

from pcalc.lang.error import (ErrorHandler, EvalError, ExpectedToken, GenericException, LexError, ParseError,
                              TypeMismatch, UnexpectedCharacter, UnexpectedEndOfInput)


class GenericExceptionTestCase(unittest.TestCase):

    def test_template(self):
        error = GenericException("'{}' is not '{}'", ("a", 1))
        self.assertEqual("'a' is not '1'", error.msg)
        self.assertEqual("'a' is not '1'", str(error))
        self.assertIn("a", error.colored_msg)

        self.assertEqual("no exprs", GenericException("no exprs").msg)
        self.assertEqual("'x'", GenericException("'{}'", "x").msg)

    def test_span(self):
        error = GenericException("bad", source="abcdef", start=2)
        self.assertEqual((2, 6), (error.start, error.end))

        error = UnexpectedCharacter("_", "x_y", 1)
        self.assertEqual(("x_y", 1, 2), (error.source, error.start, error.end))

    def test_phases(self):
        self.assertTrue(issubclass(UnexpectedCharacter, LexError))
        self.assertTrue(issubclass(ExpectedToken, ParseError))
        self.assertTrue(issubclass(TypeMismatch, EvalError))
        self.assertEqual("parsing", LexError.phase)
        self.assertEqual("parsing", ParseError.phase)
        self.assertEqual("evaluating", EvalError.phase)

    def test_python_version_note(self):
        import pcalc.lang.error
        import pcalc.main
        self.assertIn(">=3.7", pcalc.lang.error.__doc__)
        self.assertIn(">=3.7", pcalc.main.__doc__)


class ErrorHandlerTestCase(unittest.TestCase):

    def test_non_fatal(self):
        handler = ErrorHandler(fatal=False)
        with redirect_stdout(io.StringIO()) as out:
            with handler:
                raise UnexpectedCharacter("A", "+(1, A)", 5)

        self.assertEqual(1, len(handler.errors))
        self.assertIn("error: ", out.getvalue())
        self.assertIn("unexpected character", out.getvalue())
        self.assertIn("^", out.getvalue())

    def test_fatal(self):
        with redirect_stdout(io.StringIO()):
            with self.assertRaises(SystemExit) as context:
                with ErrorHandler():
                    raise UnexpectedEndOfInput("+(1,")
        self.assertEqual(1, context.exception.code)

    def test_internal(self):
        handler = ErrorHandler(fatal=False)
        with redirect_stdout(io.StringIO()) as out:
            with self.assertRaises(ValueError):
                with handler:
                    raise ValueError("boom")

        self.assertTrue(handler.errors[-1].internal)
        self.assertIn("[internal] ", out.getvalue())
        self.assertIn("unknown error", out.getvalue())

    def test_keyboard_interrupt(self):
        handler = ErrorHandler(fatal=False)
        with redirect_stdout(io.StringIO()):
            with handler:
                raise KeyboardInterrupt()
        self.assertEqual("keyboard interrupt", handler.errors[-1].msg)

    def test_location(self):
        handler = ErrorHandler(fatal=False)
        handler.register_file("calc.pc")
        handler.register_line("calc.pc", "+(1, A)", 3)

        with redirect_stdout(io.StringIO()) as out:
            handler.throw(UnexpectedCharacter("A", "+(1, A)", 5))

        self.assertIn("calc.pc:3:6: ", out.getvalue())
        self.assertEqual({"calc.pc": (None, None)}, handler.traceback)

    def test_diagnose(self):
        lines = ErrorHandler.diagnose(UnexpectedCharacter("_", "x_y", 1)).splitlines()
        self.assertEqual(2, len(lines))
        self.assertTrue(lines[0].startswith("  x"))
        self.assertTrue(lines[1].startswith("   "))
        self.assertIn("^", lines[1])

    def test_warn(self):
        handler = ErrorHandler(fatal=False)
        with redirect_stdout(io.StringIO()) as out:
            handler.warn("trailing input '{}' was ignored", "2", source="1 2", start=2)
        self.assertIn("warning: ", out.getvalue())
        self.assertIn("was ignored", out.getvalue())
        self.assertEqual([], handler.errors)

    def test_register_step(self):
        quiet = ErrorHandler(fatal=False)
        with redirect_stdout(io.StringIO()) as out:
            quiet.register_step("+", "+(1, 2) -> 3")
        self.assertEqual("", out.getvalue())
        self.assertEqual([], quiet.steps)

        verbose = ErrorHandler(fatal=False, verbose=True)
        with redirect_stdout(io.StringIO()) as out:
            verbose.register_step("+", "+(1, 2) -> 3")
        self.assertIn("+(1, 2) -> 3", out.getvalue())
        self.assertEqual([("+", "+(1, 2) -> 3")], verbose.steps)


if __name__ == '__main__':
    unittest.main()
