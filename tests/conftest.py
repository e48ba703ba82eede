"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chipcore import create_state, null_io, Framebuffer, DownTimer, NullRandom


class RecordingGraphics(Framebuffer):
    """Framebuffer that counts calls made by the core."""

    def __init__(self):
        super().__init__()
        self.clears = 0
        self.refreshes = 0
        self.sprites = []

    def clear(self):
        self.clears += 1
        super().clear()

    def toggle_sprite(self, pos, sprite):
        self.sprites.append((pos, [int(b) for b in sprite]))
        return super().toggle_sprite(pos, sprite)

    def refresh(self):
        self.refreshes += 1
        super().refresh()


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def graphics():
    return RecordingGraphics()


@pytest.fixture
def io(graphics):
    """Peripherals backed by a real framebuffer and timers."""
    return null_io(
        graphics=graphics,
        delay_timer=DownTimer("delay"),
        sound_timer=DownTimer("sound"),
        random=NullRandom(0xFF),
    )


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def set_registers(state, **values):
    """Helper to set registers by name, e.g. ``V1=0x10``."""
    for name, value in values.items():
        state = state.replace(V=state.V.at[int(name[1:], 16)].set(value))
    return state
