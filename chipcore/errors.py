"""CHIP-8 execution errors."""


class Chip8Error(Exception):
    """Base class for errors raised while decoding or executing a program."""


class InvalidInstruction(Chip8Error):
    """Opcode does not decode to any CHIP-8 instruction."""

    def __init__(self, opcode: int):
        self.opcode = opcode
        super().__init__(f"Invalid instruction: 0x{opcode:04X}")


class InvalidAlignment(Chip8Error):
    """Fewer than two bytes were available to fetch an instruction."""

    def __init__(self, address: int = None):
        self.address = address
        if address is None:
            super().__init__("Invalid alignment")
        else:
            super().__init__(f"Invalid alignment at 0x{address:04X}")


class StackOverflow(Chip8Error):
    """Call stack exhausted on push or empty on pop."""

    def __init__(self, pointer: int):
        self.pointer = pointer
        super().__init__(f"Stack overflow (stack pointer {pointer})")


class UnsupportedInstruction(Chip8Error):
    """Instruction decodes but has no meaning on this interpreter (SYS addr)."""

    def __init__(self, instruction):
        self.instruction = instruction
        super().__init__(f"Unsupported instruction: {instruction}")


class RomTooLarge(Chip8Error):
    """Program does not fit in memory above the program start address."""

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(f"ROM of {size} bytes does not fit in {capacity} bytes of program memory")


class MemoryOverrun(Chip8Error):
    """Access through I runs past the end of memory."""

    def __init__(self, address: int, count: int):
        self.address = address
        self.count = count
        super().__init__(f"Memory overrun: {count} bytes at 0x{address:04X}")
