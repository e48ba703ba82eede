"""Run a ROM without a window, for smoke tests and scripting."""

from tqdm import tqdm

from chipcore.errors import Chip8Error
from chipcore.logging import get_logger
from chipcore.machine import Chip8
from chipcore.peripherals import Framebuffer, JaxRandom
from chipcore.rendering import display_to_text

logger = get_logger("headless")


def run_headless(
    rom_filename: str,
    steps: int,
    core_freq: int = 700,
    seed: int = 0,
    progress: bool = True,
) -> Chip8:
    """Execute ``steps`` ticks as fast as possible and return the machine.

    A core error ends the run early; it is logged, not raised.
    """
    framebuffer = Framebuffer()
    chip8 = Chip8(core_freq=core_freq, graphics=framebuffer, random=JaxRandom(seed=seed))
    chip8.load_rom(rom_filename)

    with tqdm(total=steps, desc=f"Running {rom_filename}", unit="step", disable=not progress) as bar:
        for _ in range(steps):
            try:
                chip8.tick()
            except Chip8Error as e:
                logger.error(f"CHIP-8 stopped: {e} ({chip8})")
                break
            bar.update(1)

    logger.info(str(chip8))
    logger.info("Display:\n" + display_to_text(framebuffer.snapshot()))
    return chip8
