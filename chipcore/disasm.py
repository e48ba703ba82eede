"""CHIP-8 disassembler.

Usage:
    chipcore-disasm ROM_FILE
"""

import argparse
import sys
from typing import Iterator, Optional, Tuple

from chipcore.constants import PROGRAM_START
from chipcore.decode import Instruction, decode_bytes
from chipcore.errors import Chip8Error, InvalidInstruction


def disassemble(data: bytes, start: int = PROGRAM_START) -> Iterator[Tuple[int, Optional[int], object]]:
    """Walk ``data`` two bytes at a time.

    Yields ``(address, opcode, result)`` where ``result`` is the decoded
    :class:`Instruction` or the :class:`Chip8Error` that decoding raised.
    ``opcode`` is ``None`` for a trailing odd byte.
    """
    for offset in range(0, len(data), 2):
        chunk = data[offset:offset + 2]
        address = start + offset
        opcode = (chunk[0] << 8) | chunk[1] if len(chunk) == 2 else None
        try:
            yield address, opcode, decode_bytes(chunk)
        except Chip8Error as e:
            yield address, opcode, e


def format_line(address: int, result) -> str:
    if isinstance(result, Instruction):
        return f"0x{address:04X}  {result}"
    if isinstance(result, InvalidInstruction):
        return f"0x{address:04X}               ; 0x{result.opcode:04X} (invalid)"
    return f"0x{address:04X}  {str(result):<10}"


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="chipcore-disasm",
        description="Disassemble a CHIP-8 ROM into assembly mnemonics",
    )
    parser.add_argument("rom", help="Path to a CHIP-8 ROM (*.ch8)")
    parser.add_argument(
        "--start", type=lambda v: int(v, 0), default=PROGRAM_START,
        help="Load address of the first byte (default: 0x200)",
    )
    args = parser.parse_args(argv)

    try:
        with open(args.rom, "rb") as f:
            data = f.read()
    except OSError as e:
        print(f"Failed loading ROM: {e}", file=sys.stderr)
        return 1

    for address, _, result in disassemble(data, args.start):
        print(format_line(address, result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
