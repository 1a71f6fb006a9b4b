"""Error handling for the cax language. Every stage of the pipeline raises a subclass of GenericException: if another
type of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Taxonomy, by stage:
    - lexing: InvalidInteger, NonAsciiCharacter
    - parsing: ParseError
    - evaluation: LiteralIsExpr, InvalidUnaryOperator, UnaryOperatorOnNonNumber, InvalidBinaryOperator,
      BinaryOperatorOnNonNumber, EvaluationTooDeep
    - compilation: RegisterExhausted, ConstantsExhausted, CompilationTooDeep
    - execution: UnknownOpcode, OperandOutOfRange
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error message so that it can be used to throw a cax error. exprs are formatted into msg;
    source, start and end locate the offending snippet for diagnosis.
    """

    def __init__(self, msg, exprs=None, source="", start=0, end=-1, diagnosis=True, internal=False):
        """Parses args for GenericException."""
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        self.raw_msg = msg.format(*exprs)
        self.msg = msg.format(*(colored(str(expr), attrs=["bold"]) for expr in exprs))  # color expr snippets

        self.source = source
        self.start = start
        self.end = end if end != -1 else len(self.source)  # needed for error display
        self.diagnosis = diagnosis
        self.internal = internal
        self._spanned = end != -1

        super().__init__(self.raw_msg)

    def locate(self, source):
        """Attaches source to an error raised by a stage that only sees the AST. Returns self."""
        if not self.source:
            self.source = source
            if not self._spanned:
                self.end = len(source)
        return self

    def at(self, start, end):
        """Points this error at source[start:end]. Returns self."""
        self.start, self.end = start, end
        self._spanned = True
        return self


class LexingError(GenericException):
    """Raised while converting source text into tokens."""


class InvalidInteger(LexingError):

    def __init__(self, reason, source="", start=0, end=-1):
        self.reason = reason
        super().__init__("invalid number literal: {}", reason, source, start, end)


class NonAsciiCharacter(LexingError):
    """Fallback for any character that starts no token, including malformed string literals."""

    def __init__(self, source="", start=0, end=-1, msg="unexpected character {}"):
        self.char = source[start:start + 1]
        super().__init__(msg, repr(self.char), source, start, end if end != -1 else start + 1)


class ParseError(GenericException):
    """Raised on any token that cannot continue the grammar. token is None at end of input."""

    def __init__(self, msg, token=None, position=0, source=""):
        self.token = token
        self.position = position

        found = "end of input" if token is None else repr(token.lexeme)
        end = position + 1 if token is None else token.end
        super().__init__("{} (found {})", (msg, found), source, position, end)


class EvaluationError(GenericException):
    """Raised by both evaluators on semantically invalid, syntactically valid expressions."""


class LiteralIsExpr(EvaluationError):

    def __init__(self):
        super().__init__("literal holds an expression", internal=True)


class InvalidUnaryOperator(EvaluationError):

    def __init__(self, operator, value, start=0, end=-1):
        self.operator = operator
        self.value = value
        super().__init__("unary operator {} not valid on {}", (operator, repr(value)), start=start, end=end)


class UnaryOperatorOnNonNumber(EvaluationError):

    def __init__(self, operator, value=None, start=0, end=-1):
        self.operator = operator
        self.value = value
        super().__init__("unary operator {} not supported on non-number {}", (operator, repr(value)), start=start,
                         end=end)


class InvalidBinaryOperator(EvaluationError):

    def __init__(self, operator, left, right, start=0, end=-1):
        self.operator = operator
        self.left = left
        self.right = right
        msg = "binary operator {} not valid between {} and {}"
        super().__init__(msg, (operator, repr(left), repr(right)), start=start, end=end)


class BinaryOperatorOnNonNumber(EvaluationError):

    def __init__(self, operator, left, right, start=0, end=-1):
        self.operator = operator
        self.left = left
        self.right = right
        msg = "binary operator {} not valid between non-numbers {} and {}"
        super().__init__(msg, (operator, repr(left), repr(right)), start=start, end=end)


class EvaluationTooDeep(EvaluationError):

    def __init__(self):
        super().__init__("expression nested too deeply")


class CompileError(GenericException):
    """Raised while lowering an AST into bytecode."""


class RegisterExhausted(CompileError):

    def __init__(self, registers, start=0, end=-1):
        self.registers = registers
        super().__init__("expression needs more than {} live registers", str(registers), start=start, end=end)


class ConstantsExhausted(CompileError):

    def __init__(self, limit):
        self.limit = limit
        super().__init__("expression needs more than {} constants", str(limit), diagnosis=False)


class CompilationTooDeep(CompileError):

    def __init__(self):
        super().__init__("expression nested too deeply")


class ExecutionError(GenericException):
    """Raised by the VM on malformed bytecode."""


class UnknownOpcode(ExecutionError):

    def __init__(self, byte, index=None):
        self.byte = byte
        self.index = index
        msg = "unknown opcode {}" if index is None else "unknown opcode {} at chunk {}"
        super().__init__(msg, (hex(byte), str(index)), diagnosis=False)


class OperandOutOfRange(ExecutionError):

    def __init__(self, operand, index=None):
        self.operand = operand
        self.index = index
        msg = "operand {} out of range" if index is None else "operand {} out of range at chunk {}"
        super().__init__(msg, (str(operand), str(index)), diagnosis=False)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom cax errors."""
    ERROR = "red"
    STEP = "cyan"

    def __init__(self, fatal=True, verbose=False):
        self.fatal = fatal
        self.verbose = verbose
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    def register_step(self, label, text):
        """Prints a single trace step. Does nothing unless verbose."""
        if self.verbose:
            print(colored(f"[{label}] ", ErrorHandler.STEP, attrs=["bold"]) + text)

    @staticmethod
    def diagnose(error):
        """Returns offending part of error.source highlighted and bolded."""
        diagnosis = "  " + error.source[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.source[error.start:end], ErrorHandler.ERROR, attrs=["bold"])
        diagnosis += error.source[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), ErrorHandler.ERROR, attrs=["bold"])

        return diagnosis

    def _location(self):
        """Returns 'file:line_num: ' of the most recently registered line, or '' if there is none."""
        for file, (line, line_num) in reversed(list(self.traceback.items())):
            if line is not None:
                return f"{file}:{line_num}: "
        return ""

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException, and self.traceback must be a
        dict of file: (line, line_num) representing origination of error.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg
        else:
            error_msg = colored(self._location(), attrs=["bold"])

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.source and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)
        self.traceback = {path: (None, None) for path in self.traceback}  # if error occurred, reset traceback

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("expression nested too deeply"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
