"""CHIP-8 register load and index operations."""

from chipcore.decode import Instruction
from chipcore.flow import ADVANCE, PcUpdate, StepIO
from chipcore.state import EmulatorState, register, set_register, set_index


def execute_set(state: EmulatorState, instruction: Instruction, io: StepIO) -> tuple[EmulatorState, PcUpdate]:
    """6XNN - Set VX = NN."""
    return set_register(state, instruction.x, instruction.nn), ADVANCE


def execute_add(state: EmulatorState, instruction: Instruction, io: StepIO) -> tuple[EmulatorState, PcUpdate]:
    """7XNN - Add NN to VX, carry is discarded."""
    return set_register(state, instruction.x, register(state, instruction.x) + instruction.nn), ADVANCE


def execute_set_index(state: EmulatorState, instruction: Instruction, io: StepIO) -> tuple[EmulatorState, PcUpdate]:
    """ANNN - Set I = NNN."""
    return set_index(state, instruction.nnn), ADVANCE


def execute_random(state: EmulatorState, instruction: Instruction, io: StepIO) -> tuple[EmulatorState, PcUpdate]:
    """CXNN - Set VX = random & NN."""
    return set_register(state, instruction.x, io.random.random() & instruction.nn), ADVANCE
