import pytest

from chip8vm import Op, decode, disassemble


@pytest.mark.parametrize("opcode, op", [
    (0x00E0, Op.CLS), (0x00EE, Op.RET), (0x1234, Op.JP), (0x2345, Op.CALL),
    (0x3A12, Op.SE_Vx_kk), (0x4A12, Op.SNE_Vx_kk), (0x5AB0, Op.SE_Vx_Vy),
    (0x6A12, Op.LD_Vx_kk), (0x7A12, Op.ADD_Vx_kk),
    (0x8AB0, Op.LD_Vx_Vy), (0x8AB1, Op.OR), (0x8AB2, Op.AND), (0x8AB3, Op.XOR),
    (0x8AB4, Op.ADD), (0x8AB5, Op.SUB), (0x8AB6, Op.SHR), (0x8AB7, Op.SUBN),
    (0x8ABE, Op.SHL), (0x9AB0, Op.SNE_Vx_Vy), (0xA123, Op.LD_I),
    (0xB123, Op.JP_V0), (0xCAFF, Op.RND), (0xDAB5, Op.DRW),
    (0xEA9E, Op.SKP), (0xEAA1, Op.SKNP),
    (0xFA07, Op.LD_Vx_DT), (0xFA0A, Op.WAITKEY), (0xFA15, Op.LD_DT_Vx),
    (0xFA18, Op.LD_ST_Vx), (0xFA1E, Op.ADD_I_Vx), (0xFA29, Op.FONT),
    (0xFA33, Op.BCD), (0xFA55, Op.STORE), (0xFA65, Op.LOAD),
])
def test_decode_families(opcode, op):
    assert decode(opcode).op is op


@pytest.mark.parametrize("opcode", [
    0x0000, 0x0123, 0x00E1, 0x5AB1, 0x9ABF, 0x8AB8, 0x8ABF, 0xEA00, 0xFA00, 0xFAFF,
])
def test_decode_unknown(opcode):
    assert decode(opcode).op is Op.UNKNOWN


def test_decode_fields():
    ins = decode(0xD12F)
    assert (ins.x, ins.y, ins.n, ins.nn, ins.nnn) == (0x1, 0x2, 0xF, 0x2F, 0x12F)
    assert ins.opcode == 0xD12F


@pytest.mark.parametrize("opcode, text", [
    (0x00E0, "CLS"),
    (0x6005, "LD V0, 0x05"),
    (0xA22A, "LD I, 0x22A"),
    (0xD125, "DRW V1, V2, 5"),
    (0xF355, "LD [I], V3"),
    (0xFB0A, "LD VB, K"),
    (0x0123, "DW 0x0123"),
])
def test_disassemble(opcode, text):
    assert disassemble(decode(opcode)) == text
