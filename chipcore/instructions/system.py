"""CHIP-8 system instructions (0x0xxx)."""

from chipcore.decode import Instruction
from chipcore.errors import UnsupportedInstruction
from chipcore.flow import ADVANCE, PcUpdate, StepIO, ret
from chipcore.stack import pop
from chipcore.state import EmulatorState


def execute_clear_screen(state: EmulatorState, instruction: Instruction, io: StepIO) -> tuple[EmulatorState, PcUpdate]:
    """00E0 - Clear display."""
    io.graphics.clear()
    io.graphics.refresh()
    return state, ADVANCE


def execute_return(state: EmulatorState, instruction: Instruction, io: StepIO) -> tuple[EmulatorState, PcUpdate]:
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack)
    return state.replace(stack=stack), ret(address)


def execute_machine_routine(state: EmulatorState, instruction: Instruction, io: StepIO) -> tuple[EmulatorState, PcUpdate]:
    """0NNN - Call machine code routine, which no interpreter can run."""
    raise UnsupportedInstruction(instruction)
