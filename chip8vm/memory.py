"""
The 4K address space.

[0x000, 0x050) holds the built-in hex font and is read-only, the rest of the
interpreter area up to 0x200 starts zeroed, and programs are copied in at 0x200.
"""

import logging

from .constants import (MEMORY_SIZE, PROGRAM_START, MAX_PROGRAM_SIZE,
                        ADDRESS_MASK, FONTSET, FONT_START)
from .errors import RomTooLarge, FetchOutOfBounds

logger = logging.getLogger(__name__)

FONT_END = FONT_START + len(FONTSET)


class AddressSpace:

    def __init__(self):
        self.data = bytearray(MEMORY_SIZE)
        self.reset()

    def __len__(self):
        return len(self.data)

    def __getitem__(self, item):
        return self.data[item]

    def reset(self):
        self.data[:] = bytes(MEMORY_SIZE)
        self.data[FONT_START:FONT_START + len(FONTSET)] = bytes(FONTSET)

    @staticmethod
    def check_program(program):
        if len(program) > MAX_PROGRAM_SIZE:
            raise RomTooLarge(len(program), MAX_PROGRAM_SIZE)

    def load_program(self, program):
        # check first, so a failed load never leaves half a ROM behind
        self.check_program(program)
        self.data[PROGRAM_START:PROGRAM_START + len(program)] = bytes(program)
        logger.info("Loaded %d byte program at 0x%03X", len(program), PROGRAM_START)

    def fetch(self, pc):
        if pc < 0 or pc + 1 >= MEMORY_SIZE:
            raise FetchOutOfBounds(pc)
        return (self.data[pc] << 8) | self.data[pc + 1]

    def read(self, addr):
        return self.data[addr & ADDRESS_MASK]

    def write(self, addr, value):
        addr &= ADDRESS_MASK
        if FONT_START <= addr < FONT_END:
            logger.debug("Ignored write of 0x%02X to font address 0x%03X", value, addr)
            return
        self.data[addr] = value & 0xFF
