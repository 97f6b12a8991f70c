"""CHIP-8 control flow instructions."""

import jax
import jax.lax
import jax.numpy as jnp
from chipax.constants import ADDRESS_MASK
from chipax.state import EmulatorState
from chipax.decode import DecodedInstruction
from chipax.errors import FAULT_STACK_OVERFLOW
from chipax.stack import push
from chipax.instructions.system import halt_with_fault


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    stack, ok = push(state.stack, state.pc)
    return jax.lax.cond(
        ok,
        lambda s: execute_jump(s.replace(stack=stack), instruction),
        lambda s: halt_with_fault(s, FAULT_STACK_OVERFLOW),
        state
    )


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        condition = condition_fn(state, instruction)
        return jax.lax.cond(
            condition,
            lambda s: s.replace(pc=jnp.astype(s.pc + 2, jnp.uint16)),
            lambda s: s,
            state
        )
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: (inst.n == 0) & (state.V[inst.x] == state.V[inst.y])
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: (inst.n == 0) & (state.V[inst.x] != state.V[inst.y])
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0."""
    jump_address = (instruction.nnn + jnp.astype(state.V[0], jnp.uint16)) & ADDRESS_MASK
    return state.replace(pc=jnp.astype(jump_address, jnp.uint16))


def _key_condition(state: EmulatorState, instruction: DecodedInstruction):
    key_pressed = state.keypad[state.V[instruction.x] & 0xF]
    # EX9E skips on pressed, EXA1 on released, anything else never skips
    return jnp.where(
        instruction.nn == 0x9E,
        key_pressed,
        (instruction.nn == 0xA1) & ~key_pressed,
    )


execute_skip_if_key = make_skip_instruction(_key_condition)
