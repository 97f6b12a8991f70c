"""CHIP-8 system instructions (0x0xxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chipax.state import EmulatorState
from chipax.decode import DecodedInstruction
from chipax.errors import FAULT_STACK_UNDERFLOW
from chipax.stack import pop


def no_op(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """No operation."""
    return state


def halt_with_fault(state: EmulatorState, code: int) -> EmulatorState:
    """Record a fatal fault and rewind PC to the instruction that caused it."""
    return state.replace(
        fault=jnp.astype(code, jnp.uint8),
        pc=jnp.astype(state.pc - 2, jnp.uint16),
    )


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address, ok = pop(state.stack)
    return jax.lax.cond(
        ok,
        lambda s: s.replace(stack=stack, pc=address),
        lambda s: halt_with_fault(s, FAULT_STACK_UNDERFLOW),
        state
    )


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch system instructions; 0NNN machine routines are not supported."""
    return jax.lax.cond(
        0x00E0 == instruction.raw,
        execute_clear_screen,
        lambda state, instruction: jax.lax.cond(
            0x00EE == instruction.raw,
            execute_return,
            no_op,
            state, instruction
        ),
        state, instruction
    )
