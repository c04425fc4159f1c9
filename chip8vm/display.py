"""64x32 monochrome framebuffer, only ever XOR-ed by sprites or cleared."""

import numpy as np

from .constants import WIDTH, HEIGHT


class Display:

    def __init__(self, width=WIDTH, height=HEIGHT):
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width), dtype=np.uint8)

    def clear(self):
        self.pixels[:] = 0

    def xor_pixel(self, x, y):
        """Flip one pixel, coordinates wrap around the edges.

        Returns True when a lit pixel was turned off (collision).
        """
        x %= self.width
        y %= self.height
        was_set = self.pixels[y, x] == 1
        self.pixels[y, x] ^= 1
        return bool(was_set)

    def draw_sprite(self, x, y, rows):
        # sprite rows are 8 pixels wide, most significant bit is leftmost
        collision = False
        for row, sprite in enumerate(rows):
            if sprite == 0:
                continue
            for bit in range(8):
                if sprite & (0x80 >> bit):
                    if self.xor_pixel(x + bit, y + row):
                        collision = True
        return collision

    def snapshot(self):
        return self.pixels.copy()

    def to_text(self, on="#", off="."):
        return "\n".join("".join(on if p else off for p in row) for row in self.pixels)
