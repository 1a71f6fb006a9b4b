import io
import unittest
from contextlib import redirect_stdout

from caxlang.lang.error import (BinaryOperatorOnNonNumber, CompilationTooDeep, CompileError, ErrorHandler,
                                EvaluationError, EvaluationTooDeep, ExecutionError, GenericException, InvalidInteger,
                                LexingError, LiteralIsExpr, NonAsciiCharacter, OperandOutOfRange, ParseError,
                                RegisterExhausted, UnknownOpcode)
from caxlang.lang.values import NIL, Number


class GenericExceptionTestCase(unittest.TestCase):

    def test_message(self):
        error = GenericException("'{}' is not {}", ("abc", "valid"), source="1 + abc", start=4)
        self.assertEqual("'abc' is not valid", error.raw_msg)
        self.assertEqual("'abc' is not valid", str(error))
        self.assertEqual((4, 7), (error.start, error.end))

    def test_locate(self):
        error = BinaryOperatorOnNonNumber("+", Number(1.0), NIL)
        self.assertIs(error, error.locate("1 + nil"))
        self.assertEqual("1 + nil", error.source)
        self.assertEqual((0, 7), (error.start, error.end))

        error = BinaryOperatorOnNonNumber("+", Number(1.0), NIL).at(2, 3)
        error.locate("1 + nil")
        self.assertEqual((2, 3), (error.start, error.end))

        error = GenericException("msg", source="first")
        error.locate("second")
        self.assertEqual("first", error.source)

    def test_hierarchy(self):
        cases = {
            InvalidInteger("overflow"): LexingError,
            NonAsciiCharacter("λ"): LexingError,
            ParseError("expected expression"): GenericException,
            LiteralIsExpr(): EvaluationError,
            RegisterExhausted(8): CompileError,
            EvaluationTooDeep(): EvaluationError,
            CompilationTooDeep(): CompileError,
            UnknownOpcode(0xFF): ExecutionError,
            OperandOutOfRange(9): ExecutionError,
        }
        for case, expected in cases.items():
            self.assertIsInstance(case, expected)
            self.assertIsInstance(case, GenericException)

    def test_execution_messages(self):
        self.assertEqual("unknown opcode 0xff", UnknownOpcode(0xFF).raw_msg)
        self.assertEqual("unknown opcode 0xff at chunk 3", UnknownOpcode(0xFF, 3).raw_msg)
        self.assertEqual("operand 9 out of range at chunk 0", OperandOutOfRange(9, 0).raw_msg)


class ErrorHandlerTestCase(unittest.TestCase):

    def run_handler(self, error, fatal=False):
        out = io.StringIO()
        with redirect_stdout(out):
            with ErrorHandler(fatal=fatal) as error_handler:
                error_handler.register_file("test.cax")
                error_handler.register_line("test.cax", "1 + λ", 3)
                raise error
        return out.getvalue()

    def test_throw(self):
        out = self.run_handler(NonAsciiCharacter("1 + λ", 4))
        self.assertIn("test.cax:3: ", out)
        self.assertIn("error: ", out)
        self.assertIn("unexpected character", out)
        self.assertIn("'λ'", out)
        self.assertIn("1 + λ", out)
        self.assertIn("    ^", out)

    def test_fatal(self):
        with self.assertRaises(SystemExit) as ctx:
            self.run_handler(ParseError("expected expression", source="+", position=0), fatal=True)
        self.assertEqual(1, ctx.exception.code)

    def test_internal(self):
        out = self.run_handler(LiteralIsExpr())
        self.assertIn("[internal] ", out)

    def test_recursion(self):
        out = self.run_handler(RecursionError())
        self.assertIn("nested too deeply", out)

    def test_unknown_error_is_not_suppressed(self):
        with self.assertRaises(ZeroDivisionError):
            self.run_handler(ZeroDivisionError("boom"))

    def test_register_step(self):
        out = io.StringIO()
        with redirect_stdout(out):
            ErrorHandler().register_step("vm", "silent")
            ErrorHandler(verbose=True).register_step("vm", "shown")
        self.assertNotIn("silent", out.getvalue())
        self.assertIn("shown", out.getvalue())


if __name__ == '__main__':
    unittest.main()
