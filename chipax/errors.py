"""Fatal machine faults and their host-side exceptions."""

import numpy as np

FAULT_NONE = 0
FAULT_STACK_OVERFLOW = 1
FAULT_STACK_UNDERFLOW = 2


class Chip8Error(Exception):
    """Base class for fatal CHIP-8 machine conditions."""

    def __init__(self, message: str, pc: int):
        super().__init__(f"{message} at PC=0x{pc:03X}")
        self.pc = pc


class StackOverflowError(Chip8Error):
    """2NNN executed with all 16 stack slots in use."""


class StackUnderflowError(Chip8Error):
    """00EE executed with an empty stack."""


_FAULT_ERRORS = {
    FAULT_STACK_OVERFLOW: (StackOverflowError, "Stack overflow"),
    FAULT_STACK_UNDERFLOW: (StackUnderflowError, "Stack underflow"),
}


def check_fault(state) -> None:
    """Raise the exception matching the state's fault code, if any.

    Works on a single state or on a vmapped batch of states, in which case the
    first faulted machine is reported.

    Args:
        state: EmulatorState, possibly batched

    Raises:
        StackOverflowError: the machine exceeded 16 nested calls
        StackUnderflowError: the machine returned with an empty stack
    """
    faults = np.atleast_1d(np.asarray(state.fault))
    pcs = np.atleast_1d(np.asarray(state.pc))
    faulted = np.flatnonzero(faults)
    if faulted.size == 0:
        return

    index = faulted[0]
    error_cls, message = _FAULT_ERRORS[int(faults[index])]
    raise error_cls(message, int(pcs[index]))
