"""Compiler from cax ASTs to register machine bytecode. For the bytecode format, see caxlang/vm/chunk.py.

Literal payloads do not fit in an operand byte, so every literal goes into a per-program constant table and is copied
into a register by LoadConst. Registers are allocated by recursive code generation:

    1. each subexpression gets the lowest free register for its result
    2. a binary node writes its result over its left operand's register and releases its right operand's register
    3. when all 8 registers hold live values, compilation fails with RegisterExhausted (there is no spill area)

Left-nested chains like `1 + 2 + 3 + ...` never need more than 2 registers, while right-nested ones like
`1 + (2 + (3 + ...))` need one register per pending left operand.
"""

from caxlang.grammar.expr import Binary, Grouping, LiteralExpr, Unary
from caxlang.lang.error import (CompilationTooDeep, ConstantsExhausted, InvalidBinaryOperator, InvalidUnaryOperator,
                                RegisterExhausted)
from caxlang.lang.interpreter import Interpreter
from caxlang.lang.lexical import TokenKind
from caxlang.vm.chunk import MAX_CONSTANTS, Chunk, OpCode, Program, Register


class Compiler:
    """Lowers each top-level expression of an AST into a Program."""
    UNARY = {
        TokenKind.MINUS: OpCode.Neg,
        TokenKind.BANG: OpCode.Not,
    }
    BINARY = {
        TokenKind.PLUS: OpCode.Add,
        TokenKind.MINUS: OpCode.Sub,
        TokenKind.MULT: OpCode.Mult,
        TokenKind.DIV: OpCode.Div,
        TokenKind.LESS: OpCode.Less,
        TokenKind.GREATER: OpCode.Greater,
        TokenKind.LEQUAL: OpCode.LEqual,
        TokenKind.GEQUAL: OpCode.GEqual,
        TokenKind.DEQUAL: OpCode.Equal,
        TokenKind.NEQUAL: OpCode.NEqual,
    }

    def __init__(self, ast):
        self.ast = ast

        self.program = None
        self.live = [False] * len(Register)  # live[n] is whether Rn holds a value that is still needed
        self.high_water = 0

    def compile(self):
        """Returns one Program per top-level expression."""
        return [self.compile_expr(expr) for expr in self.ast]

    def compile_expr(self, expr):
        """Compiles a single top-level expression. Its value ends up in R0."""
        self.program = Program()
        self.live = [False] * len(Register)
        self.high_water = 0

        try:
            result = self.generate(expr)
        except RecursionError:
            raise CompilationTooDeep() from None
        self.release(result)

        return self.program

    def generate(self, expr):
        """Emits chunks evaluating expr and returns the Register holding its value."""
        if isinstance(expr, LiteralExpr):
            register = self.allocate()
            self.emit(OpCode.LoadConst, register, self.constant(Interpreter.literal(expr.literal)))
            return register

        elif isinstance(expr, Grouping):
            return self.generate(expr.expr)

        elif isinstance(expr, Unary):
            opcode = Compiler.UNARY.get(expr.op.kind)
            if opcode is None:
                raise InvalidUnaryOperator(str(expr.op), None, expr.op.start, expr.op.end)

            register = self.generate(expr.right)
            self.emit(opcode, register, register)
            return register

        elif isinstance(expr, Binary):
            opcode = Compiler.BINARY.get(expr.op.kind)
            if opcode is None:
                raise InvalidBinaryOperator(str(expr.op), None, None, expr.op.start, expr.op.end)

            left = self.generate(expr.left)
            right = self.generate(expr.right)

            self.emit(opcode, left, right)
            self.release(right)
            return left

        raise TypeError(f"cannot compile {type(expr).__name__}")

    def allocate(self):
        """Marks the lowest free register as live and returns it."""
        for register in Register:
            if not self.live[register]:
                self.live[register] = True
                self.high_water = max(self.high_water, sum(self.live))
                return register
        raise RegisterExhausted(len(Register))

    def release(self, register):
        self.live[register] = False

    def constant(self, value):
        """Returns the constant table index of value, adding it to the table if needed."""
        constants = self.program.constants
        for idx, existing in enumerate(constants):
            if type(existing) is type(value) and existing == value:
                return idx

        if len(constants) >= MAX_CONSTANTS:
            raise ConstantsExhausted(MAX_CONSTANTS)

        constants.append(value)
        return len(constants) - 1

    def emit(self, opcode, dst, src):
        self.program.chunks.append(Chunk.new(opcode, dst, src))


def compile_ast(ast):
    """Returns one Program per top-level expression in ast."""
    return Compiler(ast).compile()
