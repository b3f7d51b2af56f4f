"""Tests for instruction decoding."""

import pytest
from octet import Op, decode
from octet.decode import OPCODE_PATTERNS, classify
from octet.emulator import HANDLERS


@pytest.mark.parametrize("instruction, op", [
    (0x0000, Op.NOP),
    (0x00E0, Op.CLS),
    (0x00EE, Op.RET),
    (0x1234, Op.JP),
    (0x2ABC, Op.CALL),
    (0x3A42, Op.SE_IMM),
    (0x4A42, Op.SNE_IMM),
    (0x5AB0, Op.SE_REG),
    (0x6A42, Op.LD_IMM),
    (0x7A42, Op.ADD_IMM),
    (0x8AB0, Op.LD_REG),
    (0x8AB1, Op.OR),
    (0x8AB2, Op.AND),
    (0x8AB3, Op.XOR),
    (0x8AB4, Op.ADD_REG),
    (0x8AB5, Op.SUB),
    (0x8AB6, Op.SHR),
    (0x8AB7, Op.SUBN),
    (0x8ABE, Op.SHL),
    (0x9AB0, Op.SNE_REG),
    (0xA123, Op.LD_I),
    (0xB123, Op.JP_V0),
    (0xCA0F, Op.RND),
    (0xDAB5, Op.DRW),
    (0xEA9E, Op.SKP),
    (0xEAA1, Op.SKNP),
    (0xFA07, Op.LD_VX_DT),
    (0xFA0A, Op.LD_KEY),
    (0xFA15, Op.LD_DT),
    (0xFA18, Op.LD_ST),
    (0xFA1E, Op.ADD_I),
    (0xFA29, Op.LD_F),
    (0xFA33, Op.BCD),
    (0xFA55, Op.STORE),
    (0xFA65, Op.LOAD),
    (0x0123, Op.UNKNOWN),
    (0x5AB1, Op.UNKNOWN),
    (0x8AB8, Op.UNKNOWN),
    (0x9AB1, Op.UNKNOWN),
    (0xEA00, Op.UNKNOWN),
    (0xFA99, Op.UNKNOWN),
])
def test_decode_kind(instruction, op):
    assert decode(instruction).kind == op
    assert classify(instruction) == op


def test_decode_fields():
    decoded = decode(0xD7A5)
    assert decoded.opcode == 0xD
    assert decoded.x == 0x7
    assert decoded.y == 0xA
    assert decoded.n == 0x5
    assert decoded.nn == 0xA5
    assert decoded.nnn == 0x7A5
    assert decoded.raw == 0xD7A5


def test_every_variant_has_a_handler():
    assert set(HANDLERS) == set(Op)


def test_patterns_do_not_overlap():
    """No word can match two patterns, so pattern order does not matter."""
    for i, (mask_a, pattern_a, _) in enumerate(OPCODE_PATTERNS):
        for mask_b, pattern_b, _ in OPCODE_PATTERNS[i + 1:]:
            common = mask_a & mask_b
            assert (pattern_a & common) != (pattern_b & common)
