"""CHIP-8 instruction decoding."""

import jax.numpy as jnp
from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    return DecodedInstruction(
        raw=instruction,
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )


# Valid low nibbles of 8XYN: 0-7 and E
_ALU_OPERATIONS = jnp.array([1, 1, 1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 1, 0], dtype=jnp.bool_)
_MISC_OPERATIONS = jnp.array([0x07, 0x0A, 0x15, 0x18, 0x1E, 0x29, 0x33, 0x55, 0x65])


def is_known(instruction: DecodedInstruction) -> jnp.ndarray:
    """Whether the instruction is one of the defined CHIP-8 variants."""
    raw = jnp.asarray(instruction.raw)
    by_family = jnp.array([
        (raw == 0x00E0) | (raw == 0x00EE),   # 0
        True, True, True, True,              # 1-4
        instruction.n == 0,                  # 5XY0
        True, True,                          # 6-7
        _ALU_OPERATIONS[instruction.n],      # 8XYN
        instruction.n == 0,                  # 9XY0
        True, True, True, True,              # A-D
        (instruction.nn == 0x9E) | (instruction.nn == 0xA1),
        jnp.any(_MISC_OPERATIONS == instruction.nn),
    ], dtype=jnp.bool_)
    return by_family[instruction.opcode]
