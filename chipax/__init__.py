"""CHIP-8 emulator package."""

from chipax.config import Quirks, MODERN, COSMAC_VIP
from chipax.state import EmulatorState, StackState, create_state
from chipax.emulator import (
    execute, fetch, step, run, run_frame, run_frames, load_bytes, load_rom, reset,
)
from chipax.decode import DecodedInstruction, decode, is_known
from chipax.timers import tick_timers, sound_active
from chipax.keypad import set_key, set_keypad, release_all
from chipax.errors import (
    Chip8Error, StackOverflowError, StackUnderflowError, check_fault,
    FAULT_NONE, FAULT_STACK_OVERFLOW, FAULT_STACK_UNDERFLOW,
)
from chipax.constants import *
from chipax.rendering import display_to_rgb, create_color_scheme, batch_render, save_frame

__all__ = [
    "Quirks",
    "MODERN",
    "COSMAC_VIP",
    "EmulatorState",
    "StackState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "run",
    "run_frame",
    "run_frames",
    "load_bytes",
    "load_rom",
    "reset",
    "DecodedInstruction",
    "decode",
    "is_known",
    "tick_timers",
    "sound_active",
    "set_key",
    "set_keypad",
    "release_all",
    "Chip8Error",
    "StackOverflowError",
    "StackUnderflowError",
    "check_fault",
    "FAULT_NONE",
    "FAULT_STACK_OVERFLOW",
    "FAULT_STACK_UNDERFLOW",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "display_to_rgb",
    "create_color_scheme",
    "batch_render",
    "save_frame",
]
