"""Tests for miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
import pytest
from chipax import execute, create_state, set_key, Quirks, FONT_START


class TestTimers:
    """Test timer-related instructions."""

    def test_misc_timer_instructions(self, fresh_state):
        """Test timer set and get operations."""
        state = execute(fresh_state, 0x6030)  # V0 = 48
        state = execute(state, 0xF015)  # Set delay timer to V0
        assert state.delay_timer == 48

        state = execute(state, 0x6120)  # V1 = 32
        state = execute(state, 0xF118)  # Set sound timer to V1
        assert state.sound_timer == 32

        state = execute(state, 0xF207)  # V2 = delay timer
        assert state.V[2] == 48


class TestBCD:
    """Test BCD conversion."""

    def test_misc_bcd_conversion(self, fresh_state):
        """Test BCD conversion with 156."""
        state = execute(fresh_state, 0x609C)  # V0 = 156
        state = execute(state, 0xA300)  # I = 0x300
        state = execute(state, 0xF033)

        assert state.memory[0x300] == 1  # Hundreds
        assert state.memory[0x301] == 5  # Tens
        assert state.memory[0x302] == 6  # Ones

    @pytest.mark.parametrize("value, digits", [(0, (0, 0, 0)), (7, (0, 0, 7)), (42, (0, 4, 2)), (255, (2, 5, 5))])
    def test_bcd_edge_cases(self, fresh_state, value, digits):
        """Test BCD with single, double and maximum values."""
        state = execute(fresh_state, 0x6000 | value)
        state = execute(state, 0xA400)
        state = execute(state, 0xF033)

        assert tuple(int(d) for d in state.memory[0x400:0x403]) == digits

    def test_bcd_wraps_memory(self, fresh_state):
        """FX33 at I = 0xFFE writes the ones digit to address 0."""
        state = execute(fresh_state, 0x60FF)
        state = execute(state, 0xAFFE)
        state = execute(state, 0xF033)

        assert state.memory[0xFFE] == 2
        assert state.memory[0xFFF] == 5
        assert state.memory[0x000] == 5

    def test_bcd_does_not_move_index(self, fresh_state):
        state = execute(fresh_state, 0xA400)
        state = execute(state, 0xF033)
        assert state.I == 0x400


class TestFont:
    """Test font character addressing."""

    def test_misc_font_character(self, fresh_state):
        """Test font character addressing."""
        state = execute(fresh_state, 0x600A)  # V0 = 0xA
        state = execute(state, 0xF029)

        assert state.I == 0x50 + (0xA * 5)

    def test_font_all_characters(self, fresh_state):
        """Test font addressing for all hex digits."""
        state = fresh_state

        for digit in range(16):
            state = execute(state, 0x6000 | digit)
            state = execute(state, 0xF029)
            assert state.I == FONT_START + (digit * 5), f"Font address wrong for digit {digit:X}"

    def test_font_uses_low_nibble(self, fresh_state):
        """FX29 - Only the low nibble of VX selects the glyph."""
        state = execute(fresh_state, 0x603B)
        state = execute(state, 0xF029)
        assert state.I == FONT_START + 0xB * 5

    def test_font_data_loaded(self, fresh_state):
        """Glyph F is stored in the reserved low region."""
        glyph = [int(b) for b in fresh_state.memory[FONT_START + 75:FONT_START + 80]]
        assert glyph == [0xF0, 0x80, 0xF0, 0x80, 0x80]


class TestIndexAddition:
    """Test FX1E."""

    def test_add_to_index(self, fresh_state):
        """Test FX1E - Add VX to I register."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0xA300)  # I = 0x300
        state = execute(state, 0xF01E)  # I += V0

        assert state.I == 0x310
        assert state.V[15] == 0

    def test_add_to_index_past_twelve_bits(self, fresh_state):
        """FX1E - I is not masked to 12 bits and VF is untouched by default."""
        state = execute(fresh_state, 0x60FF)  # V0 = 0xFF
        state = execute(state, 0x6F07)  # VF = 7
        state = execute(state, 0xAF80)  # I = 0xF80
        state = execute(state, 0xF01E)

        assert state.I == 0x107F
        assert state.V[15] == 7

    def test_add_to_index_wraps_sixteen_bits(self, fresh_state):
        """FX1E - I wraps modulo 65536."""
        state = fresh_state.replace(I=jnp.astype(0xFFFF, jnp.uint16))
        state = execute(state, 0x6002)
        state = execute(state, 0xF01E)

        assert state.I == 0x0001

    def test_add_to_index_overflow_flag(self):
        """FX1E - With the overflow quirk, VF reports leaving the address space."""
        state = create_state(quirks=Quirks(index_overflow_flag=True))
        state = execute(state, 0x60FF)
        state = execute(state, 0xAF80)
        state = execute(state, 0xF01E)

        assert state.I == 0x107F
        assert state.V[15] == 1

        state = execute(state, 0xA100)
        state = execute(state, 0xF01E)
        assert state.V[15] == 0


class TestMemoryOperations:
    """Test store/load register operations."""

    def test_store_load_modern_mode(self, modern_state):
        """Test store/load with modern quirks (I doesn't change)."""
        state = execute(modern_state, 0x6001)  # V0 = 1
        state = execute(state, 0x6102)  # V1 = 2
        state = execute(state, 0x6203)  # V2 = 3
        state = execute(state, 0x6399)  # V3 = 0x99, outside the range
        state = execute(state, 0xA300)  # I = 0x300

        state = execute(state, 0xF255)  # Store V0-V2
        assert state.I == 0x300
        assert [int(b) for b in state.memory[0x300:0x304]] == [1, 2, 3, 0]

        state = execute(state, 0x6000)
        state = execute(state, 0x6100)
        state = execute(state, 0x6200)

        state = execute(state, 0xF265)  # Load V0-V2
        assert [int(v) for v in state.V[:4]] == [1, 2, 3, 0x99]
        assert state.I == 0x300

    def test_store_load_legacy_mode(self, legacy_state):
        """Test store/load with COSMAC VIP quirks (I increments)."""
        state = execute(legacy_state, 0x6001)  # V0 = 1
        state = execute(state, 0x6102)  # V1 = 2
        state = execute(state, 0xA400)  # I = 0x400

        state = execute(state, 0xF155)  # Store V0-V1
        assert state.I == 0x400 + 2

        state = execute(state, 0xA400)
        state = execute(state, 0x6000)
        state = execute(state, 0x6100)

        state = execute(state, 0xF165)  # Load V0-V1
        assert state.V[0] == 1
        assert state.V[1] == 2
        assert state.I == 0x400 + 2

    def test_store_all_registers(self, fresh_state):
        """FX55 with X = F stores all sixteen registers."""
        state = fresh_state.replace(V=jnp.arange(16, dtype=jnp.uint8) + 1)
        state = execute(state, 0xA500)
        state = execute(state, 0xFF55)

        assert [int(b) for b in state.memory[0x500:0x510]] == list(range(1, 17))

    def test_store_wraps_memory(self, fresh_state):
        """FX55 near the end of memory continues at address 0."""
        state = fresh_state.replace(V=fresh_state.V.at[0].set(0xAA).at[1].set(0xBB))
        state = execute(state, 0xAFFF)
        state = execute(state, 0xF155)

        assert state.memory[0xFFF] == 0xAA
        assert state.memory[0x000] == 0xBB


class TestWaitForKey:
    """Test FX0A."""

    def test_wait_for_key_blocking(self, fresh_state):
        """With no key down the machine enters the awaiting-key state."""
        initial_pc = fresh_state.pc

        state = execute(fresh_state, 0xF30A)

        assert state.awaiting_key
        assert state.key_register == 3
        assert state.pc == initial_pc

    def test_wait_for_key_with_key_held(self, fresh_state):
        """A key already down is taken immediately."""
        state = set_key(fresh_state, 7)
        initial_pc = state.pc

        state = execute(state, 0xF00A)

        assert state.V[0] == 7
        assert not state.awaiting_key
        assert state.pc == initial_pc

    def test_wait_for_key_picks_lowest_key(self, fresh_state):
        state = set_key(set_key(fresh_state, 0xC), 0x4)
        state = execute(state, 0xF50A)
        assert state.V[5] == 4


def test_unknown_misc_instruction(fresh_state):
    """FXNN with an undefined low byte changes nothing but the failure counter."""
    state = execute(fresh_state, 0xF0FF)

    assert state.decode_failures == 1
    assert jnp.array_equal(state.V, fresh_state.V)
    assert state.I == fresh_state.I
