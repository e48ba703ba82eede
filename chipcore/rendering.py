"""CHIP-8 rendering utilities for visualization."""

from typing import Tuple

import jax.numpy as jnp
import numpy as np
from PIL import Image


Color = Tuple[int, int, int]

# (lit, unlit) pixel colours
COLOR_SCHEMES = {
    "classic": ((0, 255, 0), (0, 0, 0)),
    "amber": ((255, 176, 0), (0, 0, 0)),
    "white": ((255, 255, 255), (0, 0, 0)),
    "blue": ((0, 255, 255), (0, 0, 64)),
    "retro": ((255, 255, 0), (64, 0, 64)),
}


def chip8_display_to_rgb(
    display: jnp.ndarray,
    scale: int = 8,
    on_color: Color = COLOR_SCHEMES["classic"][0],
    off_color: Color = COLOR_SCHEMES["classic"][1],
) -> np.ndarray:
    """Turn a ``Framebuffer`` snapshot into an image array.

    The (64, 32) column-major display becomes a row-major
    ``(32 * scale, 64 * scale, 3)`` uint8 array, each pixel repeated
    ``scale`` times in both directions.
    """
    lit = np.asarray(display, dtype=np.bool_).T
    frame = np.where(lit[..., None], np.array(on_color, np.uint8), np.array(off_color, np.uint8))
    if scale > 1:
        frame = frame.repeat(scale, axis=0).repeat(scale, axis=1)
    return frame


def create_color_scheme(scheme: str = "classic") -> Tuple[Color, Color]:
    """Look up the ``(on_color, off_color)`` pair named by the ``color_scheme`` setting."""
    try:
        return COLOR_SCHEMES[scheme]
    except KeyError:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(COLOR_SCHEMES)}"
        ) from None


def save_screenshot(display: jnp.ndarray, filename: str, scale: int = 8, color_scheme: str = "classic") -> None:
    """Write the display to an image file (format taken from the extension)."""
    on_color, off_color = create_color_scheme(color_scheme)
    Image.fromarray(chip8_display_to_rgb(display, scale, on_color, off_color)).save(filename)


def display_to_text(display: jnp.ndarray, on: str = "#", off: str = ".") -> str:
    """Render the display as rows of characters, top row first."""
    pixels = np.array(display, dtype=np.bool_).T
    return "\n".join("".join(on if lit else off for lit in row) for row in pixels)
