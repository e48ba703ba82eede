"""CHIP-8 display operations."""

from chipcore.constants import FLAG_REGISTER
from chipcore.decode import Instruction
from chipcore.flow import ADVANCE, PcUpdate, StepIO
from chipcore.peripherals import Pos
from chipcore.state import EmulatorState, memory_range, register, set_register


def execute_display(state: EmulatorState, instruction: Instruction, io: StepIO) -> tuple[EmulatorState, PcUpdate]:
    """DXYN - Draw the N-byte sprite at I to (VX, VY), VF = collision."""
    start, end = memory_range(state, instruction.n)
    sprite = state.memory[start:end]
    pos = Pos(x=register(state, instruction.x), y=register(state, instruction.y))

    collided = io.graphics.toggle_sprite(pos, sprite)
    io.graphics.refresh()
    return set_register(state, FLAG_REGISTER, int(collided)), ADVANCE
