"""The register machine that runs compiled cax bytecode: a strictly sequential fetch-decode-execute loop over a list of
Chunks and a bank of 8 registers.
"""

from caxlang.lang import values
from caxlang.lang.error import OperandOutOfRange, UnknownOpcode
from caxlang.vm.chunk import REGISTERS, UNARY_OPCODES, OpCode, Register


class VM:
    """The VM that performs actions based on given bytecode chunks. Registers are private to one VM."""
    OPERATIONS = {
        OpCode.Neg: ("-", values.negate),
        OpCode.Not: ("!", values.logical_not),
        OpCode.Add: ("+", values.add),
        OpCode.Sub: ("-", values.subtract),
        OpCode.Mult: ("*", values.multiply),
        OpCode.Div: ("/", values.divide),
        OpCode.Less: ("<", values.less),
        OpCode.Greater: (">", values.greater),
        OpCode.LEqual: ("<=", values.less_equal),
        OpCode.GEqual: (">=", values.greater_equal),
        OpCode.Equal: ("==", values.equal),
        OpCode.NEqual: ("!=", values.not_equal),
    }

    def __init__(self, chunks, constants=()):
        self.chunks = list(chunks)
        self.constants = list(constants)
        self.registers = [values.NIL] * REGISTERS

    @classmethod
    def from_program(cls, program):
        return cls(program.chunks, program.constants)

    def reset(self):
        """Sets every register back to nil."""
        self.registers = [values.NIL] * REGISTERS

    def disassemble(self):
        """Returns every chunk as a line of text. Does not depend on (or change) the register file."""
        return [chunk.disassemble() for chunk in self.chunks]

    def run(self, step=None):
        """Executes every chunk in order and returns the value left in R0. If given, step(index, chunk, registers) is
        called after each chunk, with a copy of the register file.
        """
        for index, chunk in enumerate(self.chunks):
            self.execute(index, chunk)
            if step is not None:
                step(index, chunk, list(self.registers))
        return self.registers[Register.R0]

    def decode(self, index, chunk):
        """Returns (OpCode, dst, src) of chunk. src is a constant index for LoadConst and a Register otherwise."""
        opcode, dst, src = chunk.bytes

        try:
            opcode = OpCode(opcode)
        except ValueError:
            raise UnknownOpcode(opcode, index) from None

        if dst >= REGISTERS:
            raise OperandOutOfRange(dst, index)

        if opcode is OpCode.LoadConst:
            if src >= len(self.constants):
                raise OperandOutOfRange(src, index)
            return opcode, Register(dst), src

        elif src >= REGISTERS:
            raise OperandOutOfRange(src, index)

        return opcode, Register(dst), Register(src)

    def execute(self, index, chunk):
        """Runs a single chunk against the register file."""
        opcode, dst, src = self.decode(index, chunk)

        if opcode is OpCode.LoadConst:
            self.registers[dst] = self.constants[src]
            return

        symbol, operation = VM.OPERATIONS[opcode]
        if opcode in UNARY_OPCODES:
            self.registers[dst] = operation(symbol, self.registers[src])
        else:
            self.registers[dst] = operation(symbol, self.registers[dst], self.registers[src])
