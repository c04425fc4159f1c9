"""Exceptions raised by the CHIP-8 engine.

Load errors leave the engine untouched. Engine faults are fatal: the engine
moves to the FAULTED state and keeps raising the same fault until it is reset.
Unknown opcodes are not errors, they are reported in the StepEffect.
"""


class Chip8Error(Exception):
    pass


class LoadError(Chip8Error):
    pass


class RomTooLarge(LoadError):
    def __init__(self, size, limit):
        super().__init__(f"ROM too large: {size} bytes (max {limit})")
        self.size = size
        self.limit = limit


class EngineFault(Chip8Error):
    def __init__(self, message, pc, opcode=None):
        super().__init__(message)
        self.pc = pc
        self.opcode = opcode


class StackOverflow(EngineFault):
    def __init__(self, pc, opcode=None):
        super().__init__(f"Stack overflow on CALL at 0x{pc:03X}", pc, opcode)


class StackUnderflow(EngineFault):
    def __init__(self, pc, opcode=None):
        super().__init__(f"Stack underflow on RET at 0x{pc:03X}", pc, opcode)


class FetchOutOfBounds(EngineFault):
    def __init__(self, pc):
        super().__init__(f"PC out of bounds: 0x{pc:03X}", pc)
