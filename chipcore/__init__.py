"""CHIP-8 emulator package."""

from chipcore.state import EmulatorState, StackState, create_state
from chipcore.emulator import execute, fetch, step, load_rom, load_program, format_state, null_io
from chipcore.decode import Instruction, Op, decode, decode_bytes, format_instruction
from chipcore.errors import (
    Chip8Error, InvalidInstruction, InvalidAlignment, StackOverflow,
    UnsupportedInstruction, RomTooLarge, MemoryOverrun,
)
from chipcore.peripherals import (
    Keys, FallingEdges, Pos, Graphics, Keypad, Timer, Random,
    NullGraphics, NullKeypad, NullRandom, DownTimer, JaxRandom, Framebuffer, KeypadState,
)
from chipcore.machine import Chip8
from chipcore.constants import *

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "load_rom",
    "load_program",
    "format_state",
    "null_io",
    "Instruction",
    "Op",
    "decode",
    "decode_bytes",
    "format_instruction",
    "Chip8Error",
    "InvalidInstruction",
    "InvalidAlignment",
    "StackOverflow",
    "UnsupportedInstruction",
    "RomTooLarge",
    "MemoryOverrun",
    "Keys",
    "FallingEdges",
    "Pos",
    "Graphics",
    "Keypad",
    "Timer",
    "Random",
    "NullGraphics",
    "NullKeypad",
    "NullRandom",
    "DownTimer",
    "JaxRandom",
    "Framebuffer",
    "KeypadState",
    "Chip8",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
