"""Bytecode format for the cax register machine.

Every instruction (Chunk) is exactly 3 bytes: one opcode byte and two operand bytes.

```
<opcode> <dst> <src>    ; dst is both the destination and the left operand, the result overwrites dst
                        ; unary opcodes name the same register twice:     Neg R1 R1
                        ; LoadConst's src is an index into the constant table: LoadConst R0 #3
```

There are exactly 8 registers (R0-R7) and no jumps, so chunks always run in order.
"""

from dataclasses import dataclass, field
from enum import IntEnum

from caxlang.lang.error import ExecutionError, OperandOutOfRange, UnknownOpcode


class OpCode(IntEnum):
    """An operation code for the VM. Names double as disassembly mnemonics."""
    LoadConst = 0
    Add = 1
    Sub = 2
    Mult = 3
    Div = 4
    Neg = 5
    Not = 6
    Less = 7
    Greater = 8
    LEqual = 9
    GEqual = 10
    Equal = 11
    NEqual = 12


UNARY_OPCODES = (OpCode.Neg, OpCode.Not)


class Register(IntEnum):
    R0 = 0
    R1 = 1
    R2 = 2
    R3 = 3
    R4 = 4
    R5 = 5
    R6 = 6
    R7 = 7


REGISTERS = len(Register)
MAX_CONSTANTS = 256  # a constant index has to fit in one operand byte


@dataclass(frozen=True)
class Chunk:
    """A chunk that the VM can read."""
    bytes: bytes

    def __post_init__(self):
        if len(self.bytes) != 3:
            raise ValueError(f"chunk must be 3 bytes long, got {len(self.bytes)}")

    @classmethod
    def new(cls, opcode, dst, src):
        """Assembles a chunk from an opcode and two operands."""
        return cls(bytes([int(opcode), int(dst), int(src)]))

    @property
    def opcode(self):
        """Decoded OpCode. Raises UnknownOpcode if the opcode byte is not a known OpCode."""
        try:
            return OpCode(self.bytes[0])
        except ValueError:
            raise UnknownOpcode(self.bytes[0]) from None

    def operand(self, idx):
        """Raw operand byte. Operand index 0 is one byte after the opcode."""
        return self.bytes[idx + 1]

    def register(self, idx):
        """Decoded Register of operand idx. Raises OperandOutOfRange if it does not name a register."""
        byte = self.operand(idx)
        if byte >= REGISTERS:
            raise OperandOutOfRange(byte)
        return Register(byte)

    def disassemble(self):
        """Returns a representation of this chunk as plain text, e.g. 'Add R1 R2'."""
        opcode = self.opcode
        dst = self.register(0).name

        if opcode is OpCode.LoadConst:
            src = f"#{self.operand(1)}"
        else:
            src = self.register(1).name

        return f"{opcode.name} {dst} {src}"

    def __repr__(self):
        try:
            return f"Chunk({self.disassemble()})"
        except ExecutionError:
            return f"Chunk({self.bytes.hex(' ')})"

    def __str__(self):
        return self.disassemble()


@dataclass
class Program:
    """Compiled form of one top-level expression. After running chunks, the result is in R0."""
    chunks: list = field(default_factory=list)
    constants: list = field(default_factory=list)

    def disassemble(self):
        return [chunk.disassemble() for chunk in self.chunks]
