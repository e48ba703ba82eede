"""Tests for instruction decoding."""

import pytest
from chipcore import Op, decode, decode_bytes, InvalidInstruction, InvalidAlignment


DECODE_TABLE = [
    (0x00E0, Op.CLS, {}),
    (0x00EE, Op.RET, {}),
    (0x0200, Op.SYS, {"nnn": 0x200}),
    (0x0FFF, Op.SYS, {"nnn": 0xFFF}),
    (0x1ABC, Op.JP, {"nnn": 0xABC}),
    (0x2ABC, Op.CALL, {"nnn": 0xABC}),
    (0x3A42, Op.SE_BYTE, {"x": 0xA, "nn": 0x42}),
    (0x4A42, Op.SNE_BYTE, {"x": 0xA, "nn": 0x42}),
    (0x5AB0, Op.SE_REG, {"x": 0xA, "y": 0xB}),
    (0x6A42, Op.LD_BYTE, {"x": 0xA, "nn": 0x42}),
    (0x7A42, Op.ADD_BYTE, {"x": 0xA, "nn": 0x42}),
    (0x8AB0, Op.LD_REG, {"x": 0xA, "y": 0xB}),
    (0x8AB1, Op.OR, {"x": 0xA, "y": 0xB}),
    (0x8AB2, Op.AND, {"x": 0xA, "y": 0xB}),
    (0x8AB3, Op.XOR, {"x": 0xA, "y": 0xB}),
    (0x8AB4, Op.ADD_REG, {"x": 0xA, "y": 0xB}),
    (0x8AB5, Op.SUB, {"x": 0xA, "y": 0xB}),
    (0x8AB6, Op.SHR, {"x": 0xA, "y": 0xB}),
    (0x8AB7, Op.SUBN, {"x": 0xA, "y": 0xB}),
    (0x8ABE, Op.SHL, {"x": 0xA, "y": 0xB}),
    (0x9AB0, Op.SNE_REG, {"x": 0xA, "y": 0xB}),
    (0xAABC, Op.LD_I, {"nnn": 0xABC}),
    (0xBABC, Op.JP_V0, {"nnn": 0xABC}),
    (0xCA42, Op.RND, {"x": 0xA, "nn": 0x42}),
    (0xDAB5, Op.DRW, {"x": 0xA, "y": 0xB, "n": 0x5}),
    (0xEA9E, Op.SKP, {"x": 0xA}),
    (0xEAA1, Op.SKNP, {"x": 0xA}),
    (0xFA07, Op.LD_VX_DT, {"x": 0xA}),
    (0xFA0A, Op.LD_VX_K, {"x": 0xA}),
    (0xFA15, Op.LD_DT_VX, {"x": 0xA}),
    (0xFA18, Op.LD_ST_VX, {"x": 0xA}),
    (0xFA1E, Op.ADD_I, {"x": 0xA}),
    (0xFA29, Op.LD_F, {"x": 0xA}),
    (0xFA33, Op.LD_B, {"x": 0xA}),
    (0xFA55, Op.STORE_REGS, {"x": 0xA}),
    (0xFA65, Op.LOAD_REGS, {"x": 0xA}),
]


class TestDecodeTable:
    """Every documented opcode decodes to its variant and operands."""

    @pytest.mark.parametrize("opcode,op,operands", DECODE_TABLE)
    def test_decode_variant(self, opcode, op, operands):
        instruction = decode(opcode)

        assert instruction.op is op
        assert instruction.raw == opcode
        for name in ("x", "y", "n", "nn", "nnn"):
            assert getattr(instruction, name) == operands.get(name), f"operand {name} of {opcode:04X}"

    def test_every_variant_covered(self):
        """The table exercises all variants."""
        assert {op for _, op, _ in DECODE_TABLE} == set(Op)

    def test_decode_bytes_big_endian(self):
        instruction = decode_bytes(bytes([0x12, 0x34]))
        assert instruction.op is Op.JP
        assert instruction.nnn == 0x234

    def test_decode_bytes_ignores_trailing(self):
        assert decode_bytes(bytes([0x00, 0xE0, 0xFF])).op is Op.CLS

    def test_decode_is_pure(self):
        assert decode(0x8AB4) == decode(0x8AB4)


class TestInvalidInstructions:
    """Unlisted sub-dispatch values are rejected."""

    @pytest.mark.parametrize("opcode", [0x0000, 0x0001, 0x00E1, 0x00EF, 0x01FF])
    def test_system_below_program_region(self, opcode):
        with pytest.raises(InvalidInstruction) as excinfo:
            decode(opcode)
        assert excinfo.value.opcode == opcode

    @pytest.mark.parametrize("nibble", range(1, 16))
    def test_register_pair_low_nibble(self, nibble):
        for top in (0x5000, 0x9000):
            with pytest.raises(InvalidInstruction):
                decode(top | 0x0120 | nibble)

    @pytest.mark.parametrize("nibble", [0x8, 0x9, 0xA, 0xB, 0xC, 0xD, 0xF])
    def test_alu_undefined_operations(self, nibble):
        with pytest.raises(InvalidInstruction):
            decode(0x8120 | nibble)

    def test_key_sub_dispatch(self):
        for low in range(256):
            if low in (0x9E, 0xA1):
                continue
            with pytest.raises(InvalidInstruction):
                decode(0xE100 | low)

    def test_misc_sub_dispatch(self):
        valid = {0x07, 0x0A, 0x15, 0x18, 0x1E, 0x29, 0x33, 0x55, 0x65}
        for low in range(256):
            if low in valid:
                continue
            with pytest.raises(InvalidInstruction):
                decode(0xF100 | low)

    def test_unconditional_families_never_fail(self):
        for top in (0x1, 0x2, 0x3, 0x4, 0x6, 0x7, 0xA, 0xB, 0xC, 0xD):
            for low in (0x000, 0x123, 0xFFF):
                decode((top << 12) | low)

    def test_error_message(self):
        with pytest.raises(InvalidInstruction, match="0x5121"):
            decode(0x5121)

    def test_short_slice(self):
        with pytest.raises(InvalidAlignment):
            decode_bytes(bytes([0x12]))


class TestMnemonics:
    """Instructions render as assembly."""

    @pytest.mark.parametrize("opcode,text", [
        (0x00E0, "CLS"),
        (0x00EE, "RET"),
        (0x0300, "SYS 300"),
        (0x1228, "JP 228"),
        (0x2ABC, "CALL ABC"),
        (0x3A04, "SE VA, 04"),
        (0x5AB0, "SE VA, VB"),
        (0x612A, "LD V1, 2A"),
        (0x8126, "SHR V1 {,V2}"),
        (0x812E, "SHL V1 {,V2}"),
        (0x8127, "SUBN V1, V2"),
        (0xA22A, "LD I, 22A"),
        (0xB300, "JP V0, 300"),
        (0xC1FF, "RND V1, FF"),
        (0xD015, "DRW V0, V1, 5"),
        (0xE39E, "SKP V3"),
        (0xE3A1, "SKNP V3"),
        (0xF307, "LD V3, DT"),
        (0xF30A, "LD V3, K"),
        (0xF315, "LD DT, V3"),
        (0xF318, "LD ST, V3"),
        (0xF31E, "ADD I, V3"),
        (0xF329, "LD F, V3"),
        (0xF333, "LD B, V3"),
        (0xF355, "LD [I], V3"),
        (0xF365, "LD V3, [I]"),
    ])
    def test_format(self, opcode, text):
        assert str(decode(opcode)) == text
