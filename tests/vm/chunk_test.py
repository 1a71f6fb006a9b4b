import unittest

from caxlang.lang.error import OperandOutOfRange, UnknownOpcode
from caxlang.vm.chunk import Chunk, OpCode, Program, Register


class ChunkTestCase(unittest.TestCase):

    def test_assemble(self):
        chunk = Chunk.new(OpCode.Add, 1, 2)
        self.assertEqual(b"\x01\x01\x02", chunk.bytes)
        self.assertEqual(Chunk(bytes([1, 1, 2])), chunk)
        self.assertEqual(Chunk.new(OpCode.Add, Register.R1, Register.R2), chunk)

    def test_must_be_three_bytes(self):
        should_raise = [b"", b"\x01\x02", b"\x01\x02\x03\x04"]
        for case in should_raise:
            self.assertRaises(ValueError, Chunk, case)

    def test_disassemble(self):
        cases = {
            Chunk.new(OpCode.Add, 1, 2): "Add R1 R2",
            Chunk.new(OpCode.Sub, 0, 7): "Sub R0 R7",
            Chunk.new(OpCode.Mult, 3, 4): "Mult R3 R4",
            Chunk.new(OpCode.Div, 4, 3): "Div R4 R3",
            Chunk.new(OpCode.Neg, 1, 1): "Neg R1 R1",
            Chunk.new(OpCode.Not, 2, 2): "Not R2 R2",
            Chunk.new(OpCode.Less, 0, 1): "Less R0 R1",
            Chunk.new(OpCode.Greater, 0, 1): "Greater R0 R1",
            Chunk.new(OpCode.LEqual, 0, 1): "LEqual R0 R1",
            Chunk.new(OpCode.GEqual, 0, 1): "GEqual R0 R1",
            Chunk.new(OpCode.Equal, 0, 1): "Equal R0 R1",
            Chunk.new(OpCode.NEqual, 0, 1): "NEqual R0 R1",
            Chunk.new(OpCode.LoadConst, 0, 200): "LoadConst R0 #200",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, case.disassemble(), expected)

    def test_display_and_debug(self):
        chunk = Chunk.new(OpCode.Add, 1, 2)
        self.assertEqual("Add R1 R2", str(chunk))
        self.assertEqual("Chunk(Add R1 R2)", repr(chunk))
        self.assertEqual("Chunk(ff 00 00)", repr(Chunk(bytes([0xFF, 0, 0]))))

    def test_disassemble_invalid(self):
        self.assertRaises(UnknownOpcode, Chunk(bytes([0xFF, 0, 0])).disassemble)

        should_raise = [Chunk.new(OpCode.Add, 8, 0), Chunk.new(OpCode.Add, 0, 8), Chunk.new(OpCode.LoadConst, 9, 0)]
        for case in should_raise:
            with self.assertRaises(OperandOutOfRange) as ctx:
                case.disassemble()
            self.assertGreaterEqual(ctx.exception.operand, 8)

    def test_program_disassemble(self):
        program = Program([Chunk.new(OpCode.LoadConst, 0, 0), Chunk.new(OpCode.Neg, 0, 0)], [])
        self.assertEqual(["LoadConst R0 #0", "Neg R0 R0"], program.disassemble())


if __name__ == '__main__':
    unittest.main()
