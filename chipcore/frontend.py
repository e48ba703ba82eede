"""Pygame window frontend for the CHIP-8 driver."""

import time

import pygame

from chipcore.constants import SCREEN_WIDTH, SCREEN_HEIGHT, TIMER_FREQUENCY
from chipcore.errors import Chip8Error
from chipcore.logging import get_logger
from chipcore.machine import Chip8
from chipcore.peripherals import Framebuffer, JaxRandom, KeypadState
from chipcore.rendering import chip8_display_to_rgb, create_color_scheme, save_screenshot

logger = get_logger("frontend")

# COSMAC VIP hex keypad laid over the left side of a QWERTY keyboard
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}


def run_window(
    rom_filename: str,
    core_freq: int = 700,
    fps: int = TIMER_FREQUENCY,
    scale: int = 10,
    color_scheme: str = "classic",
    seed: int = 0,
) -> None:
    """Run a ROM in a window until it is closed, ESC is pressed or the core fails.

    Every frame samples the keyboard once and runs ``core_freq / fps`` ticks.
    """
    framebuffer = Framebuffer()
    keypad = KeypadState()
    chip8 = Chip8(
        core_freq=core_freq, keypad=keypad, graphics=framebuffer,
        random=JaxRandom(seed=seed),
    )
    chip8.load_rom(rom_filename)

    on_color, off_color = create_color_scheme(color_scheme)
    ticks_per_frame = max(1, core_freq // fps)

    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale))
    pygame.display.set_caption("CHIP-8")
    clock = pygame.time.Clock()

    logger.info(f"Running {rom_filename} at {core_freq} Hz, {ticks_per_frame} ticks per frame")
    logger.debug("Controls: ESC=Quit, F12=Screenshot")

    running = True
    try:
        while running:
            clock.tick(fps)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_F12:
                        filename = f"chip8_{time.strftime('%Y%m%d_%H%M%S')}.png"
                        save_screenshot(framebuffer.snapshot(), filename, color_scheme=color_scheme)
                        logger.info(f"Screenshot saved: {filename}")
                    elif event.key in KEY_MAP:
                        keypad.press(KEY_MAP[event.key])
                elif event.type == pygame.KEYUP and event.key in KEY_MAP:
                    keypad.release(KEY_MAP[event.key])

            try:
                for _ in range(ticks_per_frame):
                    chip8.tick()
            except Chip8Error as e:
                logger.error(f"CHIP-8 stopped: {e} ({chip8})")
                running = False

            if framebuffer.take_dirty():
                frame = chip8_display_to_rgb(framebuffer.snapshot(), scale, on_color, off_color)
                # surfarray is indexed (x, y)
                pygame.surfarray.blit_array(screen, frame.transpose(1, 0, 2))
                pygame.display.flip()
    finally:
        pygame.quit()

    logger.info(f"Exiting after {chip8.steps} steps")
