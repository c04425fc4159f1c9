"""
CHIP-8 execution engine.

The engine owns all machine state (memory, registers, stack, display, timers
and keypad) and executes exactly one instruction per step() call. It never
sleeps or waits: the instruction rate and the 60Hz timer rate both belong to
whoever drives it (see app.Chip8Window and cli.run_headless).
"""

import logging
import random
from enum import Enum
from pathlib import Path
from typing import NamedTuple, Optional

import numpy as np

from .constants import (PROGRAM_START, NUM_REGISTERS, FLAG_REGISTER, STACK_SIZE,
                        ADDRESS_MASK, GLYPH_SIZE, FONT_START)
from .decoder import Op, Instruction, decode, disassemble
from .display import Display
from .errors import EngineFault, StackOverflow, StackUnderflow
from .keypad import Keypad
from .memory import AddressSpace
from .timers import Timers

logger = logging.getLogger(__name__)


class EngineState(Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    RUNNING = "running"
    FAULTED = "faulted"


class StepEffect(NamedTuple):
    """What one step() did, as far as the outside world cares."""
    display_changed: bool
    unknown_opcode: Optional[int] = None
    waiting: bool = False
    instruction: Optional[Instruction] = None


class Chip8:

    def __init__(self, rng=None, index_overflow_flag=True):
        """
        :param rng: random.Random used by RND, seeded from the OS if omitted.
        :param index_overflow_flag: when True (the common interpreter
            behaviour) ADD I, Vx sets VF to 1 if I + Vx runs past 0xFFF.
        """
        self.rng = rng if rng is not None else random.Random()
        self.index_overflow_flag = index_overflow_flag

        self.state = EngineState.UNINITIALIZED
        self.fault = None

        # ---- machine state ----
        self.memory = AddressSpace()
        self.display = Display()
        self.timers = Timers()
        self.keypad = Keypad()
        self.V = [0] * NUM_REGISTERS
        self.I = 0
        self.pc = PROGRAM_START
        self.stack = np.zeros(STACK_SIZE, dtype=np.uint16)
        self.sp = 0
        self.should_draw = False
        self.waiting_for_key = False

        self.setup_funcmap()
        self.reset()

    # ---- opcode function map ----
    def setup_funcmap(self):
        self.funcmap = {
            Op.CLS: self.op_CLS,              # 00E0 - Clear the screen
            Op.RET: self.op_RET,              # 00EE - Return from a subroutine
            Op.JP: self.op_JP,                # 1nnn - Jump to address nnn
            Op.CALL: self.op_CALL,            # 2nnn - Call subroutine at nnn
            Op.SE_Vx_kk: self.op_SE_Vx_kk,    # 3xkk - Skip if Vx == kk
            Op.SNE_Vx_kk: self.op_SNE_Vx_kk,  # 4xkk - Skip if Vx != kk
            Op.SE_Vx_Vy: self.op_SE_Vx_Vy,    # 5xy0 - Skip if Vx == Vy
            Op.LD_Vx_kk: self.op_LD_Vx_kk,    # 6xkk - Vx = kk
            Op.ADD_Vx_kk: self.op_ADD_Vx_kk,  # 7xkk - Vx += kk, no carry
            Op.LD_Vx_Vy: self.op_LD_Vx_Vy,    # 8xy0 - Vx = Vy
            Op.OR: self.op_OR,                # 8xy1 - Vx |= Vy
            Op.AND: self.op_AND,              # 8xy2 - Vx &= Vy
            Op.XOR: self.op_XOR,              # 8xy3 - Vx ^= Vy
            Op.ADD: self.op_ADD,              # 8xy4 - Vx += Vy, VF = carry
            Op.SUB: self.op_SUB,              # 8xy5 - Vx -= Vy, VF = NOT borrow
            Op.SHR: self.op_SHR,              # 8xy6 - Vx >>= 1, VF = old bit 0
            Op.SUBN: self.op_SUBN,            # 8xy7 - Vx = Vy - Vx, VF = NOT borrow
            Op.SHL: self.op_SHL,              # 8xyE - Vx <<= 1, VF = old bit 7
            Op.SNE_Vx_Vy: self.op_SNE_Vx_Vy,  # 9xy0 - Skip if Vx != Vy
            Op.LD_I: self.op_LD_I,            # Annn - I = nnn
            Op.JP_V0: self.op_JP_V0,          # Bnnn - Jump to nnn + V0
            Op.RND: self.op_RND,              # Cxkk - Vx = random byte & kk
            Op.DRW: self.op_DRW,              # Dxyn - Draw n-row sprite at (Vx, Vy)
            Op.SKP: self.op_SKP,              # Ex9E - Skip if key Vx is down
            Op.SKNP: self.op_SKNP,            # ExA1 - Skip if key Vx is up
            Op.LD_Vx_DT: self.op_LD_Vx_DT,    # Fx07 - Vx = delay timer
            Op.WAITKEY: self.op_WAITKEY,      # Fx0A - Wait for a key, Vx = key
            Op.LD_DT_Vx: self.op_LD_DT_Vx,    # Fx15 - delay timer = Vx
            Op.LD_ST_Vx: self.op_LD_ST_Vx,    # Fx18 - sound timer = Vx
            Op.ADD_I_Vx: self.op_ADD_I_Vx,    # Fx1E - I += Vx
            Op.FONT: self.op_FONT,            # Fx29 - I = glyph address of Vx
            Op.BCD: self.op_BCD,              # Fx33 - Store BCD of Vx at I
            Op.STORE: self.op_STORE,          # Fx55 - Store V0..Vx at I
            Op.LOAD: self.op_LOAD,            # Fx65 - Load V0..Vx from I
        }

    # ---- reset / load ----
    def reset(self):
        self.memory.reset()
        self.display.clear()
        self.timers.reset()
        self.keypad.reset()
        self.V = [0] * NUM_REGISTERS
        self.I = 0
        self.pc = PROGRAM_START
        self.stack[:] = 0
        self.sp = 0
        self.should_draw = False
        self.waiting_for_key = False
        self.fault = None
        self.state = EngineState.READY

    def load(self, program):
        """Reset the machine and copy ``program`` in at 0x200.

        Raises RomTooLarge without touching any state if it does not fit.
        """
        AddressSpace.check_program(program)
        self.reset()
        self.memory.load_program(program)

    def load_file(self, path):
        path = Path(path)
        logger.info("Loading ROM: %s", path)
        self.load(path.read_bytes())

    # ---- outside drivers ----
    def tick_delay(self):
        self.timers.tick_delay()

    def tick_sound(self):
        self.timers.tick_sound()

    def tick_timers(self):
        self.timers.tick()

    def set_key_pressed(self, index, pressed):
        self.keypad.set_key_pressed(index, pressed)

    def display_snapshot(self):
        return self.display.snapshot()

    # ---- cycle ----
    def step(self) -> StepEffect:
        """Fetch, decode and execute one instruction."""
        if self.state is EngineState.FAULTED:
            # drop the previous traceback so it does not grow on every call
            raise self.fault.with_traceback(None)

        try:
            opcode = self.memory.fetch(self.pc)
            instruction = decode(opcode)
            self.waiting_for_key = False
            if instruction.op is Op.UNKNOWN:
                logger.warning("Unknown opcode: %04X at 0x%03X", opcode, self.pc)
                self.pc += 2
                self.state = EngineState.RUNNING
                return StepEffect(False, unknown_opcode=opcode, instruction=instruction)

            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("%03X: %04X  %s", self.pc, opcode, disassemble(instruction))

            handler = self.funcmap[instruction.op]
            next_pc = handler(instruction)
            drew = instruction.op in (Op.CLS, Op.DRW)
            self.pc = self.pc + 2 if next_pc is None else next_pc
        except EngineFault as fault:
            logger.error("Emulation error: %s", fault)
            self.fault = fault
            self.state = EngineState.FAULTED
            raise

        self.state = EngineState.RUNNING
        return StepEffect(drew, waiting=self.waiting_for_key, instruction=instruction)

    def run(self, max_steps, steps_per_tick=None):
        """Execute up to ``max_steps`` instructions.

        With ``steps_per_tick`` both timers are ticked once every that many
        steps, which is how a headless driver keeps them at roughly 60Hz.
        Returns the number of steps that changed the display.
        """
        frames = 0
        for count in range(1, max_steps + 1):
            if self.step().display_changed:
                frames += 1
            if steps_per_tick and count % steps_per_tick == 0:
                self.tick_timers()
        return frames

    # ---- opcode handlers ----
    # A handler returns the next pc when it moves it itself, None for pc + 2.

    def op_CLS(self, ins):
        self.display.clear()
        self.should_draw = True

    def op_RET(self, ins):
        if self.sp == 0:
            raise StackUnderflow(self.pc, ins.opcode)
        self.sp -= 1
        # resume at the instruction after the CALL
        return int(self.stack[self.sp]) + 2

    def op_JP(self, ins):
        return ins.nnn

    def op_CALL(self, ins):
        if self.sp >= STACK_SIZE:
            raise StackOverflow(self.pc, ins.opcode)
        self.stack[self.sp] = self.pc
        self.sp += 1
        return ins.nnn

    def op_SE_Vx_kk(self, ins):
        if self.V[ins.x] == ins.nn:
            return self.pc + 4

    def op_SNE_Vx_kk(self, ins):
        if self.V[ins.x] != ins.nn:
            return self.pc + 4

    def op_SE_Vx_Vy(self, ins):
        if self.V[ins.x] == self.V[ins.y]:
            return self.pc + 4

    def op_LD_Vx_kk(self, ins):
        self.V[ins.x] = ins.nn

    def op_ADD_Vx_kk(self, ins):
        self.V[ins.x] = (self.V[ins.x] + ins.nn) & 0xFF

    def op_LD_Vx_Vy(self, ins):
        self.V[ins.x] = self.V[ins.y]

    def op_OR(self, ins):
        self.V[ins.x] |= self.V[ins.y]

    def op_AND(self, ins):
        self.V[ins.x] &= self.V[ins.y]

    def op_XOR(self, ins):
        self.V[ins.x] ^= self.V[ins.y]

    # For the flag-setting ALU ops the result is computed from the operands
    # before VF is written, so x == 0xF or y == 0xF still end with the flag.
    def op_ADD(self, ins):
        total = self.V[ins.x] + self.V[ins.y]
        self.V[ins.x] = total & 0xFF
        self.V[FLAG_REGISTER] = 1 if total > 0xFF else 0

    def op_SUB(self, ins):
        vx, vy = self.V[ins.x], self.V[ins.y]
        self.V[ins.x] = (vx - vy) & 0xFF
        self.V[FLAG_REGISTER] = 0 if vy > vx else 1

    def op_SHR(self, ins):
        vx = self.V[ins.x]
        self.V[ins.x] = vx >> 1
        self.V[FLAG_REGISTER] = vx & 1

    def op_SUBN(self, ins):
        vx, vy = self.V[ins.x], self.V[ins.y]
        self.V[ins.x] = (vy - vx) & 0xFF
        self.V[FLAG_REGISTER] = 0 if vx > vy else 1

    def op_SHL(self, ins):
        vx = self.V[ins.x]
        self.V[ins.x] = (vx << 1) & 0xFF
        self.V[FLAG_REGISTER] = (vx >> 7) & 1

    def op_SNE_Vx_Vy(self, ins):
        if self.V[ins.x] != self.V[ins.y]:
            return self.pc + 4

    def op_LD_I(self, ins):
        self.I = ins.nnn

    def op_JP_V0(self, ins):
        return ins.nnn + self.V[0]

    def op_RND(self, ins):
        self.V[ins.x] = self.rng.getrandbits(8) & ins.nn

    def op_DRW(self, ins):
        rows = [self.memory.read(self.I + row) for row in range(ins.n)]
        collision = self.display.draw_sprite(self.V[ins.x], self.V[ins.y], rows)
        self.V[FLAG_REGISTER] = 1 if collision else 0
        self.should_draw = True

    def op_SKP(self, ins):
        if self.keypad.is_pressed(self.V[ins.x]):
            return self.pc + 4

    def op_SKNP(self, ins):
        if not self.keypad.is_pressed(self.V[ins.x]):
            return self.pc + 4

    def op_LD_Vx_DT(self, ins):
        self.V[ins.x] = self.timers.delay

    def op_WAITKEY(self, ins):
        pressed = self.keypad.first_pressed()
        if pressed is None:
            # stall: this instruction runs again on the next step
            self.waiting_for_key = True
            return self.pc
        self.V[ins.x] = pressed

    def op_LD_DT_Vx(self, ins):
        self.timers.delay = self.V[ins.x]

    def op_LD_ST_Vx(self, ins):
        self.timers.sound = self.V[ins.x]

    def op_ADD_I_Vx(self, ins):
        total = self.I + self.V[ins.x]
        if self.index_overflow_flag:
            self.V[FLAG_REGISTER] = 1 if total > ADDRESS_MASK else 0
        self.I = total

    def op_FONT(self, ins):
        self.I = FONT_START + self.V[ins.x] * GLYPH_SIZE

    def op_BCD(self, ins):
        val = self.V[ins.x]
        self.memory.write(self.I, val // 100)
        self.memory.write(self.I + 1, (val // 10) % 10)
        self.memory.write(self.I + 2, val % 10)

    def op_STORE(self, ins):
        for i in range(ins.x + 1):
            self.memory.write(self.I + i, self.V[i])
        self.I += ins.x + 1

    def op_LOAD(self, ins):
        for i in range(ins.x + 1):
            self.V[i] = self.memory.read(self.I + i)
        self.I += ins.x + 1
