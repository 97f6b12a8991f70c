"""CHIP-8 ALU operations (8xxx).

Every operation maps the register file to a new register file. Operations
that produce a flag write VF after VX, so the flag wins when X is F.
"""

import jax
import jax.lax
import jax.numpy as jnp
from chipax.constants import FLAG_REGISTER
from chipax.state import EmulatorState
from chipax.decode import DecodedInstruction


def _with_flag(V: jnp.ndarray, x, result, flag) -> jnp.ndarray:
    V = V.at[x].set(jnp.astype(result, jnp.uint8))
    return V.at[FLAG_REGISTER].set(jnp.astype(flag, jnp.uint8))


def alu_set(V, x, y):
    """8XY0 - Set: VX = VY."""
    return V.at[x].set(V[y])


def alu_or(V, x, y):
    """8XY1 - Binary OR: VX |= VY."""
    return V.at[x].set(V[x] | V[y])


def alu_and(V, x, y):
    """8XY2 - Binary AND: VX &= VY."""
    return V.at[x].set(V[x] & V[y])


def alu_xor(V, x, y):
    """8XY3 - Logical XOR: VX ^= VY."""
    return V.at[x].set(V[x] ^ V[y])


def alu_add(V, x, y):
    """8XY4 - Add: VX += VY, set carry flag."""
    total = jnp.astype(V[x], jnp.uint16) + jnp.astype(V[y], jnp.uint16)
    return _with_flag(V, x, total & 0xFF, total > 0xFF)


def alu_sub_xy(V, x, y):
    """8XY5 - Subtract: VX -= VY, VF = no borrow."""
    vx, vy = V[x], V[y]
    return _with_flag(V, x, vx - vy, vx >= vy)


def alu_sub_yx(V, x, y):
    """8XY7 - Subtract: VX = VY - VX, VF = no borrow."""
    vx, vy = V[x], V[y]
    return _with_flag(V, x, vy - vx, vy >= vx)


def alu_shift_right(V, x, source):
    """8XY6 - Shift right: VX = source >> 1, VF = shifted-out bit."""
    value = V[source]
    return _with_flag(V, x, value >> 1, value & 1)


def alu_shift_left(V, x, source):
    """8XYE - Shift left: VX = source << 1, VF = shifted-out bit."""
    value = jnp.astype(V[source], jnp.uint16)
    return _with_flag(V, x, (value << 1) & 0xFF, value >> 7)


def alu_undefined(V, x, y):
    """Undefined ALU operation."""
    return V


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    quirks = state.quirks

    def _logic(op):
        def logic(V, x, y):
            V = op(V, x, y)
            if quirks.logic_resets_vf:
                V = V.at[FLAG_REGISTER].set(0)
            return V
        return logic

    def _shift(op):
        def shift(V, x, y):
            return op(V, x, y if quirks.shift_uses_vy else x)
        return shift

    new_V = jax.lax.switch(
        instruction.n,
        [
            alu_set,
            _logic(alu_or),
            _logic(alu_and),
            _logic(alu_xor),
            alu_add,
            alu_sub_xy,
            _shift(alu_shift_right),
            alu_sub_yx,
            alu_undefined, alu_undefined, alu_undefined, alu_undefined,
            alu_undefined, alu_undefined,
            _shift(alu_shift_left),
            alu_undefined,
        ],
        state.V, instruction.x, instruction.y
    )
    return state.replace(V=new_V)
