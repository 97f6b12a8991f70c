"""Compatibility profiles for the behaviours historical interpreters disagree on."""

import dataclasses


@dataclasses.dataclass(frozen=True)
class Quirks:
    """Static compatibility profile stored on the emulator state.

    Attributes:
        shift_uses_vy: 8XY6/8XYE shift VY into VX (COSMAC VIP) instead of shifting VX in place
        logic_resets_vf: 8XY1/8XY2/8XY3 clear VF after the operation
        load_store_increments_i: FX55/FX65 leave I pointing past the last register
        index_overflow_flag: FX1E sets VF when I leaves the 12-bit address space
        report_unknown_opcodes: log every skipped unrecognized opcode
    """
    shift_uses_vy: bool = False
    logic_resets_vf: bool = False
    load_store_increments_i: bool = False
    index_overflow_flag: bool = False
    report_unknown_opcodes: bool = True


MODERN = Quirks()

COSMAC_VIP = Quirks(
    shift_uses_vy=True,
    logic_resets_vf=True,
    load_store_increments_i=True,
)
