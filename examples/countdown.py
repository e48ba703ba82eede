"""Run a tiny hand-assembled program and print the screen."""

from chipcore import Chip8, Framebuffer, NullRandom
from chipcore.rendering import display_to_text

# Draws the digits of a countdown from 9 at the top-left corner, one per
# delay timer expiry.
PROGRAM = bytes([
    0x60, 0x09,  # 200: LD V0, 09
    0x00, 0xE0,  # 202: CLS
    0xF0, 0x29,  # 204: LD F, V0
    0x61, 0x00,  # 206: LD V1, 00
    0xD1, 0x15,  # 208: DRW V1, V1, 5
    0x62, 0x3C,  # 20A: LD V2, 3C
    0xF2, 0x15,  # 20C: LD DT, V2
    0xF2, 0x07,  # 20E: LD V2, DT
    0x32, 0x00,  # 210: SE V2, 00
    0x12, 0x0E,  # 212: JP 20E
    0x30, 0x00,  # 214: SE V0, 00
    0x12, 0x1A,  # 216: JP 21A
    0x12, 0x18,  # 218: JP 218
    0x70, 0xFF,  # 21A: ADD V0, FF
    0x12, 0x02,  # 21C: JP 202
])


if __name__ == "__main__":
    framebuffer = Framebuffer()
    chip8 = Chip8(core_freq=600, graphics=framebuffer, random=NullRandom())
    chip8.load_program(PROGRAM)

    for _ in range(3000):
        chip8.tick()
        if framebuffer.take_dirty():
            print(display_to_text(framebuffer.snapshot()).splitlines()[0][:8], chip8)
