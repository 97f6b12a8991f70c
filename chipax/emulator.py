"""Main CHIP-8 emulator execution engine."""

from functools import partial

import jax
import jax.lax
import jax.numpy as jnp
from chipax.state import EmulatorState, reset_state
from chipax.decode import decode, is_known
from chipax.constants import ADDRESS_MASK, INSTRUCTION_FREQUENCY, MEMORY_SIZE, PROGRAM_START, TIMER_FREQUENCY
from chipax.timers import tick_timers
from chipax.logging import report_unknown_opcodes, scan_with_progress
from chipax.instructions.system import execute_system_instruction
from chipax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chipax.instructions.alu import execute_alu_operation
from chipax.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipax.instructions.display import execute_display
from chipax.instructions.misc import execute_misc_instruction

INSTRUCTIONS_PER_FRAME = INSTRUCTION_FREQUENCY // TIMER_FREQUENCY


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction (PC is expected to point past it)."""
    decoded_instruction = decode(instruction)
    known = is_known(decoded_instruction)

    if state.quirks.report_unknown_opcodes:
        jax.lax.cond(
            known,
            lambda: None,
            lambda: jax.debug.callback(report_unknown_opcodes, known, decoded_instruction.raw, state.pc),
        )

    state = state.replace(
        decode_failures=state.decode_failures + jnp.astype(~known, jnp.uint32)
    )

    return jax.lax.switch(
        decoded_instruction.opcode,
        [
            execute_system_instruction,
            execute_jump,
            execute_call,
            execute_skip_if_equal_immediate,
            execute_skip_if_not_equal_immediate,
            execute_skip_if_equal_register,
            execute_set,
            execute_add,
            execute_alu_operation,
            execute_skip_if_not_equal_register,
            execute_set_index,
            execute_jump_with_offset,
            execute_random,
            execute_display,
            execute_skip_if_key,
            execute_misc_instruction,
        ],
        state, decoded_instruction
    )


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory."""
    instruction = _pack_u16(
        state.memory[state.pc & ADDRESS_MASK],
        state.memory[(state.pc + 1) & ADDRESS_MASK],
    )
    return state.replace(pc=jnp.astype(state.pc + 2, jnp.uint16)), instruction


def _cycle(state: EmulatorState) -> EmulatorState:
    state, instruction = fetch(state)
    return execute(state, instruction)


def _poll_keypad(state: EmulatorState) -> EmulatorState:
    """Resolve a pending FX0A once any key is down."""
    def key_pressed_action(state):
        pressed_key = jnp.astype(jnp.argmax(state.keypad), jnp.uint8)
        return state.replace(
            V=state.V.at[state.key_register].set(pressed_key),
            awaiting_key=jnp.zeros((), dtype=jnp.bool_),
        )

    return jax.lax.cond(jnp.any(state.keypad), key_pressed_action, lambda s: s, state)


def step(state: EmulatorState) -> EmulatorState:
    """Run one machine cycle.

    A faulted machine is left untouched and a machine waiting on FX0A only
    polls the keypad; otherwise one instruction is fetched and executed.
    """
    return jax.lax.cond(
        state.fault != 0,
        lambda s: s,
        lambda s: jax.lax.cond(s.awaiting_key, _poll_keypad, _cycle, s),
        state
    )


def run_instruction(state, _):
    state = step(state)
    return state, None


@partial(jax.jit, static_argnums=1)
def run(state: EmulatorState, n: int) -> EmulatorState:
    """Run n machine cycles without touching the timers."""
    state, _ = jax.lax.scan(run_instruction, state, length=n)
    return state


def run_frame(state: EmulatorState, instructions_per_frame: int = INSTRUCTIONS_PER_FRAME):
    """Run one 60 Hz frame: a batch of cycles followed by a timer tick.

    Returns:
        Tuple of (state, sound_stopped) as produced by tick_timers
    """
    state, _ = jax.lax.scan(run_instruction, state, length=instructions_per_frame)
    return tick_timers(state)


@partial(jax.jit, static_argnums=(1, 2, 3))
def run_frames(
    state: EmulatorState,
    num_frames: int,
    instructions_per_frame: int = INSTRUCTIONS_PER_FRAME,
    show_progress: bool = False,
):
    """Run several frames and collect the display after each one.

    Args:
        state: Initial emulator state
        num_frames: Number of 60 Hz frames to emulate
        instructions_per_frame: Machine cycles per frame
        show_progress: Display a tqdm progress bar (not supported under vmap)

    Returns:
        Tuple of:
            - state: Final emulator state
            - displays: (num_frames, 64, 32) boolean array of frames
            - sound_stopped: (num_frames,) sound timer expiry signal per frame
    """
    def frame(state, _):
        state, sound_stopped = run_frame(state, instructions_per_frame)
        return state, (state.display, sound_stopped)

    if show_progress:
        frame = scan_with_progress(num_frames)(frame)

    state, (displays, sound_stopped) = jax.lax.scan(frame, state, jnp.arange(num_frames))
    return state, displays, sound_stopped


def load_bytes(state: EmulatorState, offset: int, data: bytes) -> EmulatorState:
    """Write raw bytes into memory starting at offset."""
    if not 0 <= offset <= MEMORY_SIZE:
        raise ValueError(f"Offset 0x{offset:X} is outside the {MEMORY_SIZE}-byte memory")
    if offset + len(data) > MEMORY_SIZE:
        raise ValueError(
            f"{len(data)} bytes at 0x{offset:X} do not fit in {MEMORY_SIZE} bytes of memory"
        )
    if len(data) == 0:
        return state
    data_array = jnp.array(list(data), dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[offset:offset + len(data)].set(data_array))


def load_rom(state: EmulatorState, filename: str, offset: int = PROGRAM_START) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_bytes(state, offset, rom_data)


def reset(state: EmulatorState) -> EmulatorState:
    """Restart the loaded program from 0x200 with cleared registers, timers and screen."""
    return reset_state(state)
