"""CHIP-8 instruction decoding."""

from enum import Enum
from typing import Optional, Sequence

from chex import dataclass

from chipcore.errors import InvalidAlignment, InvalidInstruction


class Op(Enum):
    """Instruction variants, valued by their conventional opcode pattern."""
    SYS = "0NNN"
    CLS = "00E0"
    RET = "00EE"
    JP = "1NNN"
    CALL = "2NNN"
    SE_BYTE = "3XNN"
    SNE_BYTE = "4XNN"
    SE_REG = "5XY0"
    LD_BYTE = "6XNN"
    ADD_BYTE = "7XNN"
    LD_REG = "8XY0"
    OR = "8XY1"
    AND = "8XY2"
    XOR = "8XY3"
    ADD_REG = "8XY4"
    SUB = "8XY5"
    SHR = "8XY6"
    SUBN = "8XY7"
    SHL = "8XYE"
    SNE_REG = "9XY0"
    LD_I = "ANNN"
    JP_V0 = "BNNN"
    RND = "CXNN"
    DRW = "DXYN"
    SKP = "EX9E"
    SKNP = "EXA1"
    LD_VX_DT = "FX07"
    LD_VX_K = "FX0A"
    LD_DT_VX = "FX15"
    LD_ST_VX = "FX18"
    ADD_I = "FX1E"
    LD_F = "FX29"
    LD_B = "FX33"
    STORE_REGS = "FX55"
    LOAD_REGS = "FX65"


MNEMONICS = {
    Op.SYS: "SYS {nnn:03X}",
    Op.CLS: "CLS",
    Op.RET: "RET",
    Op.JP: "JP {nnn:03X}",
    Op.CALL: "CALL {nnn:03X}",
    Op.SE_BYTE: "SE V{x:X}, {nn:02X}",
    Op.SNE_BYTE: "SNE V{x:X}, {nn:02X}",
    Op.SE_REG: "SE V{x:X}, V{y:X}",
    Op.LD_BYTE: "LD V{x:X}, {nn:02X}",
    Op.ADD_BYTE: "ADD V{x:X}, {nn:02X}",
    Op.LD_REG: "LD V{x:X}, V{y:X}",
    Op.OR: "OR V{x:X}, V{y:X}",
    Op.AND: "AND V{x:X}, V{y:X}",
    Op.XOR: "XOR V{x:X}, V{y:X}",
    Op.ADD_REG: "ADD V{x:X}, V{y:X}",
    Op.SUB: "SUB V{x:X}, V{y:X}",
    Op.SHR: "SHR V{x:X} {{,V{y:X}}}",
    Op.SUBN: "SUBN V{x:X}, V{y:X}",
    Op.SHL: "SHL V{x:X} {{,V{y:X}}}",
    Op.SNE_REG: "SNE V{x:X}, V{y:X}",
    Op.LD_I: "LD I, {nnn:03X}",
    Op.JP_V0: "JP V0, {nnn:03X}",
    Op.RND: "RND V{x:X}, {nn:02X}",
    Op.DRW: "DRW V{x:X}, V{y:X}, {n:X}",
    Op.SKP: "SKP V{x:X}",
    Op.SKNP: "SKNP V{x:X}",
    Op.LD_VX_DT: "LD V{x:X}, DT",
    Op.LD_VX_K: "LD V{x:X}, K",
    Op.LD_DT_VX: "LD DT, V{x:X}",
    Op.LD_ST_VX: "LD ST, V{x:X}",
    Op.ADD_I: "ADD I, V{x:X}",
    Op.LD_F: "LD F, V{x:X}",
    Op.LD_B: "LD B, V{x:X}",
    Op.STORE_REGS: "LD [I], V{x:X}",
    Op.LOAD_REGS: "LD V{x:X}, [I]",
}


@dataclass(frozen=True)
class Instruction:
    """Decoded CHIP-8 instruction.

    Only the operands used by ``op`` are set, the others stay ``None``.
    """
    raw: int
    op: Op
    x: Optional[int] = None    # VX register (or upper bound for FX55/FX65)
    y: Optional[int] = None    # VY register
    n: Optional[int] = None    # 4-bit immediate
    nn: Optional[int] = None   # 8-bit immediate
    nnn: Optional[int] = None  # 12-bit address

    def __str__(self) -> str:
        return format_instruction(self)


def format_instruction(instruction: Instruction) -> str:
    """Render an instruction as its assembly mnemonic."""
    return MNEMONICS[instruction.op].format(
        x=instruction.x, y=instruction.y, n=instruction.n,
        nn=instruction.nn, nnn=instruction.nnn,
    )


def _x(opcode: int) -> int:
    return (opcode & 0x0F00) >> 8


def _y(opcode: int) -> int:
    return (opcode & 0x00F0) >> 4


def _address(op: Op, opcode: int) -> Instruction:
    return Instruction(raw=opcode, op=op, nnn=opcode & 0x0FFF)


def _register_byte(op: Op, opcode: int) -> Instruction:
    return Instruction(raw=opcode, op=op, x=_x(opcode), nn=opcode & 0x00FF)


def _register_register(op: Op, opcode: int) -> Instruction:
    return Instruction(raw=opcode, op=op, x=_x(opcode), y=_y(opcode))


def _register(op: Op, opcode: int) -> Instruction:
    return Instruction(raw=opcode, op=op, x=_x(opcode))


def _decode_system(opcode: int) -> Instruction:
    if opcode == 0x00E0:
        return Instruction(raw=opcode, op=Op.CLS)
    if opcode == 0x00EE:
        return Instruction(raw=opcode, op=Op.RET)
    if 0x0200 <= opcode <= 0x0FFF:
        return _address(Op.SYS, opcode)
    raise InvalidInstruction(opcode)


def _decode_register_pair(op: Op):
    def decode_pair(opcode: int) -> Instruction:
        if opcode & 0x000F != 0:
            raise InvalidInstruction(opcode)
        return _register_register(op, opcode)
    return decode_pair


ALU_OPS = {
    0x0: Op.LD_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

KEY_OPS = {
    0x9E: Op.SKP,
    0xA1: Op.SKNP,
}

MISC_OPS = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I,
    0x29: Op.LD_F,
    0x33: Op.LD_B,
    0x55: Op.STORE_REGS,
    0x65: Op.LOAD_REGS,
}


def _decode_alu(opcode: int) -> Instruction:
    op = ALU_OPS.get(opcode & 0x000F)
    if op is None:
        raise InvalidInstruction(opcode)
    return _register_register(op, opcode)


def _decode_key(opcode: int) -> Instruction:
    op = KEY_OPS.get(opcode & 0x00FF)
    if op is None:
        raise InvalidInstruction(opcode)
    return _register(op, opcode)


def _decode_misc(opcode: int) -> Instruction:
    op = MISC_OPS.get(opcode & 0x00FF)
    if op is None:
        raise InvalidInstruction(opcode)
    return _register(op, opcode)


def _decode_draw(opcode: int) -> Instruction:
    return Instruction(raw=opcode, op=Op.DRW, x=_x(opcode), y=_y(opcode), n=opcode & 0x000F)


_DECODERS = [
    _decode_system,
    lambda opcode: _address(Op.JP, opcode),
    lambda opcode: _address(Op.CALL, opcode),
    lambda opcode: _register_byte(Op.SE_BYTE, opcode),
    lambda opcode: _register_byte(Op.SNE_BYTE, opcode),
    _decode_register_pair(Op.SE_REG),
    lambda opcode: _register_byte(Op.LD_BYTE, opcode),
    lambda opcode: _register_byte(Op.ADD_BYTE, opcode),
    _decode_alu,
    _decode_register_pair(Op.SNE_REG),
    lambda opcode: _address(Op.LD_I, opcode),
    lambda opcode: _address(Op.JP_V0, opcode),
    lambda opcode: _register_byte(Op.RND, opcode),
    _decode_draw,
    _decode_key,
    _decode_misc,
]


def decode(opcode: int) -> Instruction:
    """Decode a 16-bit opcode into a typed instruction.

    Raises:
        InvalidInstruction: if the opcode matches no instruction.
    """
    opcode = int(opcode) & 0xFFFF
    return _DECODERS[(opcode & 0xF000) >> 12](opcode)


def decode_bytes(chunk: Sequence[int]) -> Instruction:
    """Decode the first two bytes of ``chunk`` as a big-endian opcode."""
    if len(chunk) < 2:
        raise InvalidAlignment()
    return decode((int(chunk[0]) << 8) | int(chunk[1]))
