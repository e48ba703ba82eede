"""Program counter updates applied after each instruction."""

from enum import Enum
from typing import Optional

from chex import dataclass

from chipcore.peripherals import FallingEdges, Graphics, Keys, Random, Timer


class PcAction(Enum):
    HOLD = "hold"
    ADVANCE = "advance"
    SKIP = "skip"
    JUMP = "jump"
    RETURN = "return"


@dataclass(frozen=True)
class PcUpdate:
    """How the program counter moves once an instruction's effects are applied."""
    action: PcAction
    address: Optional[int] = None
    count: int = 1


HOLD = PcUpdate(action=PcAction.HOLD)
ADVANCE = PcUpdate(action=PcAction.ADVANCE)


def skip(count: int = 1) -> PcUpdate:
    """Skip the next ``count`` instructions."""
    return PcUpdate(action=PcAction.SKIP, count=count)


def jump(address: int) -> PcUpdate:
    return PcUpdate(action=PcAction.JUMP, address=address)


def ret(address: int) -> PcUpdate:
    """Return to the instruction following the call at ``address``."""
    return PcUpdate(action=PcAction.RETURN, address=address)


def apply_pc_update(pc: int, update: PcUpdate) -> int:
    """Compute the next program counter."""
    if update.action is PcAction.HOLD:
        new_pc = pc
    elif update.action is PcAction.ADVANCE:
        new_pc = pc + 2
    elif update.action is PcAction.SKIP:
        new_pc = pc + 2 * (update.count + 1)
    elif update.action is PcAction.JUMP:
        new_pc = update.address
    else:
        new_pc = update.address + 2
    return new_pc & 0xFFFF


@dataclass(frozen=True)
class StepIO:
    """Peripherals and input snapshot handed to a single step."""
    keys: Keys
    edges: FallingEdges
    graphics: Graphics
    delay_timer: Timer
    sound_timer: Timer
    random: Random
