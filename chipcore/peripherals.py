"""Peripheral interfaces consumed by the execution core.

The core only talks to a graphics sink, two timers, a random byte source and
a keypad snapshot. Each interface comes with a ``Null*`` stand-in so the core
can run headless, plus the concrete implementations used by the frontends.
"""

import threading
from abc import ABC, abstractmethod
from typing import Sequence

import jax
import jax.numpy as jnp
from chex import dataclass

from chipcore.constants import NUM_KEYS, SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH
from chipcore.logging import get_logger

logger = get_logger("peripherals")


@dataclass(frozen=True)
class Keys:
    """Snapshot of the keypad, bit n set iff key n is held."""
    mask: int = 0

    def pressed(self, index: int) -> bool:
        """Key indices past 0xF are never pressed."""
        if index > 0xF:
            return False
        return bool(self.mask & (1 << index))

    def falling_edges(self, after: "Keys") -> "FallingEdges":
        """Keys held in this snapshot and released in ``after``."""
        return FallingEdges(mask=self.mask & ~after.mask & 0xFFFF)


@dataclass
class FallingEdges:
    """Keys released since the last sample, consumed one bit at a time."""
    mask: int = 0

    def pop_next_idx(self):
        """Remove and return the lowest released key index, or None."""
        if self.mask == 0:
            return None
        for index in range(NUM_KEYS):
            bit = 1 << index
            if self.mask & bit:
                self.mask ^= bit
                return index
        return None

    def push_edges(self, edges: "FallingEdges") -> None:
        self.mask |= edges.mask


@dataclass(frozen=True)
class Pos:
    """Sprite origin; wrapping to the screen is the sink's job."""
    x: int
    y: int


class Graphics(ABC):
    """Monochrome 64x32 framebuffer sink."""
    WIDTH = SCREEN_WIDTH
    HEIGHT = SCREEN_HEIGHT

    @abstractmethod
    def clear(self) -> None:
        ...

    @abstractmethod
    def toggle_sprite(self, pos: Pos, sprite: Sequence[int]) -> bool:
        """XOR ``sprite`` onto the screen at ``pos`` and report any collision."""

    @abstractmethod
    def refresh(self) -> None:
        ...


class Keypad(ABC):

    @abstractmethod
    def pressed_keys(self) -> Keys:
        ...

    @abstractmethod
    def last_released_key(self) -> FallingEdges:
        """Falling edges since the previous call."""


class Timer(ABC):

    @abstractmethod
    def tick(self) -> bool:
        """Decrement by one, returning True when the counter wrapped."""

    @abstractmethod
    def get(self) -> int:
        ...

    @abstractmethod
    def set(self, value: int) -> None:
        ...


class Random(ABC):

    @abstractmethod
    def random(self) -> int:
        """Uniformly distributed byte."""


class NullGraphics(Graphics):

    def clear(self) -> None:
        pass

    def toggle_sprite(self, pos: Pos, sprite: Sequence[int]) -> bool:
        return False

    def refresh(self) -> None:
        pass


class NullKeypad(Keypad):

    def pressed_keys(self) -> Keys:
        return Keys(mask=0)

    def last_released_key(self) -> FallingEdges:
        return FallingEdges(mask=0)


class NullRandom(Random):
    """Always returns the same byte."""

    def __init__(self, value: int = 0):
        self.value = value & 0xFF

    def random(self) -> int:
        return self.value


class DownTimer(Timer):
    """8-bit countdown timer that wraps below zero."""

    def __init__(self, name: str = "timer", value: int = 0):
        self.name = name
        self.value = value & 0xFF

    def tick(self) -> bool:
        overflow = self.value == 0
        self.value = (self.value - 1) & 0xFF
        if overflow:
            logger.debug(f"{self.name} timer overflowed")
        return overflow

    def get(self) -> int:
        return self.value

    def set(self, value: int) -> None:
        self.value = int(value) & 0xFF

    def __repr__(self) -> str:
        return f"DownTimer(name={self.name!r}, value={self.value})"


class JaxRandom(Random):
    """Random bytes drawn from a split ``jax.random`` key."""

    def __init__(self, rng: jax.random.PRNGKey = None, seed: int = 0):
        self.rng = jax.random.PRNGKey(seed) if rng is None else rng

    def random(self) -> int:
        self.rng, subkey = jax.random.split(self.rng)
        return int(jax.random.randint(subkey, shape=(), minval=0, maxval=256, dtype=jnp.int32))


# Pre-computed coordinate grids for sprite drawing
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def sprite_mask(pos: Pos, sprite: Sequence[int]) -> jnp.ndarray:
    """Boolean (64, 32) mask of the lit sprite pixels, wrapped around the screen."""
    rows = jnp.zeros(16, dtype=jnp.uint8)
    if len(sprite):
        rows = rows.at[:len(sprite)].set(jnp.asarray(sprite, dtype=jnp.uint8))

    col_offset = (xx - pos.x) % SCREEN_WIDTH
    row_offset = (yy - pos.y) % SCREEN_HEIGHT
    in_sprite = (col_offset < SPRITE_WIDTH) & (row_offset < len(sprite))

    sprite_bytes = rows[jnp.minimum(row_offset, 15)]
    bits = (sprite_bytes >> (7 - jnp.minimum(col_offset, 7))) & 1
    return (bits == 1) & in_sprite


class Framebuffer(Graphics):
    """Lock-guarded display buffer shared between the core and a renderer."""

    def __init__(self):
        self._lock = threading.Lock()
        self._display = jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_)
        self._dirty = False

    def clear(self) -> None:
        with self._lock:
            self._display = jnp.zeros_like(self._display)

    def toggle_sprite(self, pos: Pos, sprite: Sequence[int]) -> bool:
        mask = sprite_mask(pos, sprite)
        with self._lock:
            collided = bool(jnp.any(self._display & mask))
            self._display = self._display ^ mask
        return collided

    def refresh(self) -> None:
        with self._lock:
            self._dirty = True

    def snapshot(self) -> jnp.ndarray:
        """Current display as a (64, 32) boolean array."""
        with self._lock:
            return self._display

    def take_dirty(self) -> bool:
        """Return and reset the refresh flag."""
        with self._lock:
            dirty, self._dirty = self._dirty, False
        return dirty


class KeypadState(Keypad):
    """Lock-guarded keypad fed by an input loop and sampled by the core.

    The input side calls :meth:`press`/:meth:`release` or :meth:`sample`;
    releases accumulate as falling edges until the core consumes them.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._current = Keys(mask=0)
        self._edges = FallingEdges(mask=0)

    def sample(self, keys: Keys) -> None:
        """Replace the held keys with a fresh snapshot."""
        with self._lock:
            self._edges.push_edges(self._current.falling_edges(keys))
            self._current = keys

    def press(self, index: int) -> None:
        with self._lock:
            self._current = Keys(mask=self._current.mask | (1 << index))

    def release(self, index: int) -> None:
        with self._lock:
            after = Keys(mask=self._current.mask & ~(1 << index))
            self._edges.push_edges(self._current.falling_edges(after))
            self._current = after

    def pressed_keys(self) -> Keys:
        with self._lock:
            return self._current

    def last_released_key(self) -> FallingEdges:
        with self._lock:
            edges, self._edges = self._edges, FallingEdges(mask=0)
        return edges
