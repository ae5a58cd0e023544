"""Tests for control flow instructions."""

import pytest
from chix8 import execute, step, create_state, EmulatorConfig, ErrorCode, press_key
from conftest import load_words


class TestJump:
    """Test jump instructions."""

    def test_execute_jump(self, fresh_state):
        """1NNN - Jump to address."""
        state = execute(fresh_state, 0x1001)
        assert state.pc == 1

    def test_jump_is_not_incremented(self, fresh_state):
        """1NNN - After a full step PC is exactly the target."""
        state = load_words(fresh_state, 0x1300)
        state = step(state)
        assert state.pc == 0x300


class TestSkipInstructions:
    """Test all skip instruction variants."""

    def test_skip_if_equal_immediate_true(self, fresh_state):
        """3XNN - Should skip when VX == NN."""
        state = fresh_state.replace(V=fresh_state.V.at[5].set(0x42))
        initial_pc = state.pc

        state = execute(state, 0x3542)  # Skip if V5 == 0x42
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_immediate_false(self, fresh_state):
        """3XNN - Should not skip when VX != NN."""
        state = fresh_state.replace(V=fresh_state.V.at[5].set(0x41))
        initial_pc = state.pc

        state = execute(state, 0x3542)  # Skip if V5 == 0x42
        assert state.pc == initial_pc

    def test_skip_if_not_equal_immediate_true(self, fresh_state):
        """4XNN - Should skip when VX != NN."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x10))
        initial_pc = state.pc

        state = execute(state, 0x4320)  # Skip if V3 != 0x20
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_immediate_false(self, fresh_state):
        """4XNN - Should not skip when VX == NN."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x20))
        initial_pc = state.pc

        state = execute(state, 0x4320)  # Skip if V3 != 0x20
        assert state.pc == initial_pc

    def test_skip_if_equal_register_true(self, fresh_state):
        """5XY0 - Should skip when VX == VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0x55))
        state = state.replace(V=state.V.at[2].set(0x55))
        initial_pc = state.pc

        state = execute(state, 0x5120)  # Skip if V1 == V2
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_register_false(self, fresh_state):
        """5XY0 - Should not skip when VX != VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0x55))
        state = state.replace(V=state.V.at[2].set(0x44))
        initial_pc = state.pc

        state = execute(state, 0x5120)  # Skip if V1 == V2
        assert state.pc == initial_pc

    def test_skip_if_not_equal_register_true(self, fresh_state):
        """9XY0 - Should skip when VX != VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[7].set(0xAA))
        state = state.replace(V=state.V.at[8].set(0xBB))
        initial_pc = state.pc

        state = execute(state, 0x9780)  # Skip if V7 != V8
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_register_false(self, fresh_state):
        """9XY0 - Should not skip when VX == VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[7].set(0xCC))
        state = state.replace(V=state.V.at[8].set(0xCC))
        initial_pc = state.pc

        state = execute(state, 0x9780)  # Skip if V7 != V8
        assert state.pc == initial_pc

    @pytest.mark.parametrize("instruction", [0x5121, 0x512F, 0x9781, 0x978E])
    def test_register_skips_need_zero_low_nibble(self, fresh_state, instruction):
        """5XYN/9XYN with N != 0 are invalid opcodes."""
        state = execute(fresh_state, instruction)
        assert int(state.error) == ErrorCode.INVALID_OPCODE
        assert state.error_opcode == instruction

    def test_skip_with_zero_values(self, fresh_state):
        """Test skip instructions with zero values."""
        state = fresh_state
        initial_pc = state.pc

        state = execute(state, 0x3000)  # Skip if V0 == 0
        assert state.pc == initial_pc + 2

    def test_skip_boundary_values(self, fresh_state):
        """Test skip instructions with boundary values."""
        state = fresh_state.replace(V=fresh_state.V.at[0].set(0xFF))
        initial_pc = state.pc

        state = execute(state, 0x30FF)  # Skip if V0 == 255
        assert state.pc == initial_pc + 2

    @pytest.mark.parametrize("instruction,taken", [
        (0x3000, True),   # V0 == 0
        (0x3001, False),
        (0x4001, True),   # V0 != 1
        (0x4000, False),
        (0x5010, True),   # V0 == V1
        (0x9010, False),  # V0 != V1
    ])
    def test_full_step_advances_four_when_taken(self, fresh_state, instruction, taken):
        """A step advances PC by 4 when the skip is taken, 2 otherwise."""
        state = load_words(fresh_state, instruction)
        state = step(state)
        assert state.pc == 0x200 + (4 if taken else 2)


class TestJumpWithOffset:
    """Test BNNN."""

    def test_jump_with_offset(self, fresh_state):
        """BNNN - Jump with V0 offset."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0x6230)  # V2 = 0x30, ignored
        state = execute(state, 0xB250)  # Jump to 0x250 + V0
        assert state.pc == 0x260

    def test_jump_with_offset_wraps(self, fresh_state):
        """BNNN - Targets past 0xFFF wrap to the 12-bit range."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0xBFF8)
        assert state.pc == 0x008

    def test_jump_with_offset_strict(self, strict_state):
        """BNNN - Strict addressing reports the out-of-range target."""
        state = execute(strict_state, 0x6010)
        state = execute(state, 0xBFF8)
        assert int(state.error) == ErrorCode.ADDRESS_OUT_OF_RANGE
        assert state.pc == strict_state.pc


class TestKeySkips:
    """Test EX9E/EXA1."""

    def test_skip_if_key_pressed(self, fresh_state):
        """EX9E - Skip if key pressed."""
        state = execute(fresh_state, 0x6005)  # V0 = 5
        state = press_key(state, 5)
        initial_pc = state.pc

        state = execute(state, 0xE09E)
        assert state.pc == initial_pc + 2

    def test_no_skip_if_other_key_pressed(self, fresh_state):
        """EX9E - Other keys do not count."""
        state = execute(fresh_state, 0x6005)
        state = press_key(state, 6)
        initial_pc = state.pc

        state = execute(state, 0xE09E)
        assert state.pc == initial_pc

    def test_skip_if_key_not_pressed(self, fresh_state):
        """EXA1 - Skip if key not pressed."""
        state = execute(fresh_state, 0x6005)  # V0 = 5
        initial_pc = state.pc

        state = execute(state, 0xE0A1)
        assert state.pc == initial_pc + 2

    def test_no_skip_if_key_pressed(self, fresh_state):
        """EXA1 - Held key means no skip."""
        state = execute(fresh_state, 0x600F)
        state = press_key(state, 0xF)
        initial_pc = state.pc

        state = execute(state, 0xE0A1)
        assert state.pc == initial_pc

    def test_invalid_key_instruction(self, fresh_state):
        """EX?? other than 9E/A1 is invalid."""
        state = execute(fresh_state, 0xE09F)
        assert int(state.error) == ErrorCode.INVALID_OPCODE
