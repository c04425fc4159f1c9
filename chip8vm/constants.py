# CHIP-8 machine constants.
# Memory - 4096 bytes: the interpreter area (fonts), then the loaded ROM from 0x200.
# Display - 64x32 monochrome pixels, either on or off (0 || 1).
# Timers - delay and sound, both count down at 60Hz.

MEMORY_SIZE = 4096
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START  # 3896 bytes
ADDRESS_MASK = 0xFFF

NUM_REGISTERS = 16
FLAG_REGISTER = 0xF
STACK_SIZE = 16
NUM_KEYS = 16

WIDTH, HEIGHT = 64, 32

# default speeds (instruction rate is a driver choice, timers are fixed)
CPU_HZ = 600
TIMER_HZ = 60
SCALE = 10

# set fonts (binary pixel patterns)
FONT_START = 0x000
GLYPH_SIZE = 5
FONTSET = [
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
] #notice 80 bytes
