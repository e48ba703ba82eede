"""CHIP-8 control flow instructions."""

from chipcore.decode import Instruction, Op
from chipcore.flow import ADVANCE, PcUpdate, StepIO, jump, skip
from chipcore.stack import push
from chipcore.state import EmulatorState, register


def execute_jump(state: EmulatorState, instruction: Instruction, io: StepIO) -> tuple[EmulatorState, PcUpdate]:
    """1NNN - Jump to address NNN."""
    return state, jump(instruction.nnn)


def execute_call(state: EmulatorState, instruction: Instruction, io: StepIO) -> tuple[EmulatorState, PcUpdate]:
    """2NNN - Call subroutine at NNN."""
    state = state.replace(stack=push(state.stack, int(state.pc)))
    return state, jump(instruction.nnn)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: Instruction, io: StepIO) -> tuple[EmulatorState, PcUpdate]:
        if condition_fn(state, instruction, io):
            return state, skip()
        return state, ADVANCE
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst, io: register(state, inst.x) == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst, io: register(state, inst.x) != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst, io: register(state, inst.x) == register(state, inst.y)
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst, io: register(state, inst.x) != register(state, inst.y)
)

# EX9E/EXA1 - Skip if key VX is pressed / not pressed.
execute_skip_if_key = make_skip_instruction(
    lambda state, inst, io: io.keys.pressed(register(state, inst.x)) ^ (inst.op is Op.SKNP)
)


def execute_jump_with_offset(state: EmulatorState, instruction: Instruction, io: StepIO) -> tuple[EmulatorState, PcUpdate]:
    """BNNN - Jump to address NNN + V0."""
    return state, jump(instruction.nnn + register(state, 0))
