import numpy as np

from .constants import NUM_KEYS


class Keypad:
    """16-key hex keypad, written by the input driver and read by instructions."""

    def __init__(self):
        self.keys = np.zeros(NUM_KEYS, dtype=np.uint8)

    def reset(self):
        self.keys[:] = 0

    release_all = reset

    def set_key_pressed(self, index, pressed):
        if not 0 <= index < NUM_KEYS:
            raise ValueError(f"Key index out of range: {index}")
        self.keys[index] = 1 if pressed else 0

    def is_pressed(self, index):
        return bool(self.keys[index & 0xF])

    def first_pressed(self):
        pressed = np.flatnonzero(self.keys)
        if pressed.size == 0:
            return None
        return int(pressed[0])
