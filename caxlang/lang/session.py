"""Session control for the cax language. Reads source line by line, then evaluates each line with either backend, in
command line mode or file interpretation mode.
"""

from caxlang.grammar.parser import Parser
from caxlang.lang.error import GenericException
from caxlang.lang.interpreter import Interpreter
from caxlang.lang.lexical import tokenize
from caxlang.vm.compiler import Compiler
from caxlang.vm.machine import VM


class Session:
    """Governs a cax session. Every non-empty line is an independent top-level expression."""
    SH_FILE = "<in>"  # command-line interpreter filename
    BACKENDS = ("interpreter", "vm")
    COMMENT = "//"

    def __init__(self, error_handler, path, cmd_line, backend="interpreter"):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.backend = None
        self.set_backend(backend)

        self.to_exec = {}  # dict of line num: (source, ast) to evaluate
        self.results = []

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            exprs = []
            add_to_prev = False

            try:
                with open(path, "r") as file:
                    for line_num, line in enumerate(file):
                        __, add_to_prev = self.preprocess_line(line, line_num + 1, add_to_prev, exprs)
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            for expr in exprs:
                self.add(*expr)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    def set_backend(self, backend):
        if backend not in Session.BACKENDS:
            raise GenericException("unknown backend '{}'", backend, diagnosis=False)
        self.backend = backend

    @staticmethod
    def scan(line):
        """Returns line without its comment, plus how many parentheses are left open. Ignores string contents."""
        depth = 0
        in_string = False
        escaped = False

        for idx, char in enumerate(line):
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
            elif char == '"':
                in_string = True
            elif line.startswith(Session.COMMENT, idx):
                return line[:idx], depth
            elif char == "(":
                depth += 1
            elif char == ")":
                depth -= 1

        return line, depth

    @staticmethod
    def preprocess_line(line, line_num, add_to_prev, exprs=None):
        """Preprocesses a line from a file or command-line. In command-line mode, exprs can be ignored (used to keep
        track of file's exprs), but add_to_prev will indicate whether a line continuation is necessary. Returns
        updated value of line and add_to_prev. Must be called before calling run.
        """
        line, __ = Session.scan(line)  # get rid of comments
        line = line.rstrip()

        if exprs is not None:
            if add_to_prev and exprs:
                prev, prev_num = exprs.pop()
                line = f"{prev} {line.strip()}" if line.strip() else prev
                exprs.append((line, prev_num))
            elif line and not line.isspace():
                exprs.append((line, line_num))

        __, depth = Session.scan(line)
        return line, depth > 0

    def add(self, expr, line_num):
        """Lexes and parses expr into the current session. Evaluation is delayed until run is called."""
        self.error_handler.register_line(self.path, expr, line_num)  # in case error is raised

        ast = Parser(tokenize(expr), expr).parse()
        self.to_exec[line_num] = (expr, ast)

        self.error_handler.remove_line(self.path)  # error was not raised

    def run(self):
        """Evaluates this session's pending expressions with the current backend, appending to self.results. Will
        raise any errors that are encountered.
        """
        for line_num, (source, ast) in list(self.to_exec.items()):
            self.error_handler.register_line(self.path, source, line_num)

            try:
                self.results.extend(self.evaluate(ast))
            except GenericException as error:
                raise error.locate(source)
            finally:
                del self.to_exec[line_num]

            self.error_handler.remove_line(self.path)

    def evaluate(self, ast):
        """Evaluates ast with the current backend and returns a RuntimeVal per top-level expression."""
        if self.backend == "interpreter":
            return Interpreter(ast).run()

        results = []
        for program in Compiler(ast).compile():
            results.append(VM.from_program(program).run(step=self._step))
        return results

    def disassemble(self):
        """Compiles this session's pending expressions without running them. Returns (line num, lines) pairs."""
        disassembled = []
        for line_num, (source, ast) in list(self.to_exec.items()):
            self.error_handler.register_line(self.path, source, line_num)

            try:
                lines = [line for program in Compiler(ast).compile() for line in program.disassemble()]
            except GenericException as error:
                raise error.locate(source)
            finally:
                del self.to_exec[line_num]

            disassembled.append((line_num, lines))
            self.error_handler.remove_line(self.path)

        return disassembled

    def _step(self, index, chunk, registers):
        """Traces one executed chunk through the error handler."""
        dst = chunk.bytes[1]
        self.error_handler.register_step("vm", f"{index:04} {chunk}  ; R{dst} = {registers[dst]!r}")

    def pop(self):
        """Pops the most recent result."""
        return self.results.pop()
