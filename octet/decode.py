"""CHIP-8 instruction decoding."""

import enum

import jax.numpy as jnp
from chex import dataclass


class Op(enum.IntEnum):
    """Closed set of instruction variants produced by ``decode``."""
    NOP = 0
    CLS = enum.auto()
    RET = enum.auto()
    JP = enum.auto()
    CALL = enum.auto()
    SE_IMM = enum.auto()
    SNE_IMM = enum.auto()
    SE_REG = enum.auto()
    LD_IMM = enum.auto()
    ADD_IMM = enum.auto()
    LD_REG = enum.auto()
    OR = enum.auto()
    AND = enum.auto()
    XOR = enum.auto()
    ADD_REG = enum.auto()
    SUB = enum.auto()
    SHR = enum.auto()
    SUBN = enum.auto()
    SHL = enum.auto()
    SNE_REG = enum.auto()
    LD_I = enum.auto()
    JP_V0 = enum.auto()
    RND = enum.auto()
    DRW = enum.auto()
    SKP = enum.auto()
    SKNP = enum.auto()
    LD_VX_DT = enum.auto()
    LD_KEY = enum.auto()
    LD_DT = enum.auto()
    LD_ST = enum.auto()
    ADD_I = enum.auto()
    LD_F = enum.auto()
    BCD = enum.auto()
    STORE = enum.auto()
    LOAD = enum.auto()
    UNKNOWN = enum.auto()


# (mask, pattern, variant); a word matches when word & mask == pattern
OPCODE_PATTERNS = (
    (0xFFFF, 0x0000, Op.NOP),
    (0xFFFF, 0x00E0, Op.CLS),
    (0xFFFF, 0x00EE, Op.RET),
    (0xF000, 0x1000, Op.JP),
    (0xF000, 0x2000, Op.CALL),
    (0xF000, 0x3000, Op.SE_IMM),
    (0xF000, 0x4000, Op.SNE_IMM),
    (0xF00F, 0x5000, Op.SE_REG),
    (0xF000, 0x6000, Op.LD_IMM),
    (0xF000, 0x7000, Op.ADD_IMM),
    (0xF00F, 0x8000, Op.LD_REG),
    (0xF00F, 0x8001, Op.OR),
    (0xF00F, 0x8002, Op.AND),
    (0xF00F, 0x8003, Op.XOR),
    (0xF00F, 0x8004, Op.ADD_REG),
    (0xF00F, 0x8005, Op.SUB),
    (0xF00F, 0x8006, Op.SHR),
    (0xF00F, 0x8007, Op.SUBN),
    (0xF00F, 0x800E, Op.SHL),
    (0xF00F, 0x9000, Op.SNE_REG),
    (0xF000, 0xA000, Op.LD_I),
    (0xF000, 0xB000, Op.JP_V0),
    (0xF000, 0xC000, Op.RND),
    (0xF000, 0xD000, Op.DRW),
    (0xF0FF, 0xE09E, Op.SKP),
    (0xF0FF, 0xE0A1, Op.SKNP),
    (0xF0FF, 0xF007, Op.LD_VX_DT),
    (0xF0FF, 0xF00A, Op.LD_KEY),
    (0xF0FF, 0xF015, Op.LD_DT),
    (0xF0FF, 0xF018, Op.LD_ST),
    (0xF0FF, 0xF01E, Op.ADD_I),
    (0xF0FF, 0xF029, Op.LD_F),
    (0xF0FF, 0xF033, Op.BCD),
    (0xF0FF, 0xF055, Op.STORE),
    (0xF0FF, 0xF065, Op.LOAD),
)


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    kind: int    # Op variant
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def decode_kind(word: jnp.ndarray) -> jnp.ndarray:
    """Classify a 16-bit word into its ``Op`` variant."""
    return jnp.select(
        [(word & mask) == pattern for mask, pattern, _ in OPCODE_PATTERNS],
        [int(op) for _, _, op in OPCODE_PATTERNS],
        default=int(Op.UNKNOWN),
    ).astype(jnp.int32)


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    word = jnp.astype(instruction, jnp.uint16)
    return DecodedInstruction(
        raw=word,
        kind=decode_kind(word),
        opcode=(word & 0xF000) >> 12,
        x=(word & 0x0F00) >> 8,
        y=(word & 0x00F0) >> 4,
        n=word & 0x000F,
        nn=word & 0x00FF,
        nnn=word & 0x0FFF
    )


def classify(instruction: int) -> Op:
    """Host-side lookup of the variant of a concrete instruction word."""
    for mask, pattern, op in OPCODE_PATTERNS:
        if instruction & mask == pattern:
            return op
    return Op.UNKNOWN
