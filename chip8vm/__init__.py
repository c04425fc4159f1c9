"""CHIP-8 virtual machine."""

from .cpu import Chip8, EngineState, StepEffect
from .decoder import Op, Instruction, decode, disassemble
from .display import Display
from .errors import (Chip8Error, LoadError, RomTooLarge, EngineFault,
                     StackOverflow, StackUnderflow, FetchOutOfBounds)
from .keypad import Keypad
from .memory import AddressSpace
from .timers import Timers

__version__ = "0.1.0"
