"""
Opcode decoding.

Every 16-bit code is matched against an ordered (mask, pattern) table, in the
style of Cowgod's technical reference
(http://devernay.free.fr/hacks/chip8/C8TECH10.HTM). Codes that match nothing
decode to Op.UNKNOWN; each family is decoded on its own, so related codes
never fall through into one another.
"""

from enum import Enum
from typing import NamedTuple


class Op(Enum):
    CLS = "CLS"                # 00E0
    RET = "RET"                # 00EE
    JP = "JP"                  # 1nnn
    CALL = "CALL"              # 2nnn
    SE_Vx_kk = "SE_Vx_kk"      # 3xkk
    SNE_Vx_kk = "SNE_Vx_kk"    # 4xkk
    SE_Vx_Vy = "SE_Vx_Vy"      # 5xy0
    LD_Vx_kk = "LD_Vx_kk"      # 6xkk
    ADD_Vx_kk = "ADD_Vx_kk"    # 7xkk
    LD_Vx_Vy = "LD_Vx_Vy"      # 8xy0
    OR = "OR"                  # 8xy1
    AND = "AND"                # 8xy2
    XOR = "XOR"                # 8xy3
    ADD = "ADD"                # 8xy4
    SUB = "SUB"                # 8xy5
    SHR = "SHR"                # 8xy6
    SUBN = "SUBN"              # 8xy7
    SHL = "SHL"                # 8xyE
    SNE_Vx_Vy = "SNE_Vx_Vy"    # 9xy0
    LD_I = "LD_I"              # Annn
    JP_V0 = "JP_V0"            # Bnnn
    RND = "RND"                # Cxkk
    DRW = "DRW"                # Dxyn
    SKP = "SKP"                # Ex9E
    SKNP = "SKNP"              # ExA1
    LD_Vx_DT = "LD_Vx_DT"      # Fx07
    WAITKEY = "WAITKEY"        # Fx0A
    LD_DT_Vx = "LD_DT_Vx"      # Fx15
    LD_ST_Vx = "LD_ST_Vx"      # Fx18
    ADD_I_Vx = "ADD_I_Vx"      # Fx1E
    FONT = "FONT"              # Fx29
    BCD = "BCD"                # Fx33
    STORE = "STORE"            # Fx55
    LOAD = "LOAD"              # Fx65
    UNKNOWN = "UNKNOWN"


# dispatch table: (mask, pattern, op)
OPCODES = [
    (0xFFFF, 0x00E0, Op.CLS),
    (0xFFFF, 0x00EE, Op.RET),

    (0xF000, 0x1000, Op.JP),
    (0xF000, 0x2000, Op.CALL),
    (0xF000, 0x3000, Op.SE_Vx_kk),
    (0xF000, 0x4000, Op.SNE_Vx_kk),
    (0xF00F, 0x5000, Op.SE_Vx_Vy),
    (0xF000, 0x6000, Op.LD_Vx_kk),
    (0xF000, 0x7000, Op.ADD_Vx_kk),

    (0xF00F, 0x8000, Op.LD_Vx_Vy),
    (0xF00F, 0x8001, Op.OR),
    (0xF00F, 0x8002, Op.AND),
    (0xF00F, 0x8003, Op.XOR),
    (0xF00F, 0x8004, Op.ADD),
    (0xF00F, 0x8005, Op.SUB),
    (0xF00F, 0x8006, Op.SHR),
    (0xF00F, 0x8007, Op.SUBN),
    (0xF00F, 0x800E, Op.SHL),

    (0xF00F, 0x9000, Op.SNE_Vx_Vy),
    (0xF000, 0xA000, Op.LD_I),
    (0xF000, 0xB000, Op.JP_V0),
    (0xF000, 0xC000, Op.RND),
    (0xF000, 0xD000, Op.DRW),

    (0xF0FF, 0xE09E, Op.SKP),
    (0xF0FF, 0xE0A1, Op.SKNP),

    (0xF0FF, 0xF007, Op.LD_Vx_DT),
    (0xF0FF, 0xF00A, Op.WAITKEY),
    (0xF0FF, 0xF015, Op.LD_DT_Vx),
    (0xF0FF, 0xF018, Op.LD_ST_Vx),
    (0xF0FF, 0xF01E, Op.ADD_I_Vx),
    (0xF0FF, 0xF029, Op.FONT),
    (0xF0FF, 0xF033, Op.BCD),
    (0xF0FF, 0xF055, Op.STORE),
    (0xF0FF, 0xF065, Op.LOAD),
]


class Instruction(NamedTuple):
    opcode: int
    op: Op
    x: int
    y: int
    n: int
    nn: int
    nnn: int


def decode(opcode: int) -> Instruction:
    op = Op.UNKNOWN
    for mask, pattern, candidate in OPCODES:
        if (opcode & mask) == pattern:
            op = candidate
            break
    return Instruction(
        opcode=opcode,
        op=op,
        x=(opcode >> 8) & 0xF,
        y=(opcode >> 4) & 0xF,
        n=opcode & 0xF,
        nn=opcode & 0xFF,
        nnn=opcode & 0x0FFF,
    )


# mnemonic templates, filled from the instruction fields
_MNEMONICS = {
    Op.CLS: "CLS",
    Op.RET: "RET",
    Op.JP: "JP 0x{nnn:03X}",
    Op.CALL: "CALL 0x{nnn:03X}",
    Op.SE_Vx_kk: "SE V{x:X}, 0x{nn:02X}",
    Op.SNE_Vx_kk: "SNE V{x:X}, 0x{nn:02X}",
    Op.SE_Vx_Vy: "SE V{x:X}, V{y:X}",
    Op.LD_Vx_kk: "LD V{x:X}, 0x{nn:02X}",
    Op.ADD_Vx_kk: "ADD V{x:X}, 0x{nn:02X}",
    Op.LD_Vx_Vy: "LD V{x:X}, V{y:X}",
    Op.OR: "OR V{x:X}, V{y:X}",
    Op.AND: "AND V{x:X}, V{y:X}",
    Op.XOR: "XOR V{x:X}, V{y:X}",
    Op.ADD: "ADD V{x:X}, V{y:X}",
    Op.SUB: "SUB V{x:X}, V{y:X}",
    Op.SHR: "SHR V{x:X}",
    Op.SUBN: "SUBN V{x:X}, V{y:X}",
    Op.SHL: "SHL V{x:X}",
    Op.SNE_Vx_Vy: "SNE V{x:X}, V{y:X}",
    Op.LD_I: "LD I, 0x{nnn:03X}",
    Op.JP_V0: "JP V0, 0x{nnn:03X}",
    Op.RND: "RND V{x:X}, 0x{nn:02X}",
    Op.DRW: "DRW V{x:X}, V{y:X}, {n}",
    Op.SKP: "SKP V{x:X}",
    Op.SKNP: "SKNP V{x:X}",
    Op.LD_Vx_DT: "LD V{x:X}, DT",
    Op.WAITKEY: "LD V{x:X}, K",
    Op.LD_DT_Vx: "LD DT, V{x:X}",
    Op.LD_ST_Vx: "LD ST, V{x:X}",
    Op.ADD_I_Vx: "ADD I, V{x:X}",
    Op.FONT: "LD F, V{x:X}",
    Op.BCD: "LD B, V{x:X}",
    Op.STORE: "LD [I], V{x:X}",
    Op.LOAD: "LD V{x:X}, [I]",
    Op.UNKNOWN: "DW 0x{opcode:04X}",
}


def disassemble(instruction: Instruction) -> str:
    return _MNEMONICS[instruction.op].format(**instruction._asdict())
