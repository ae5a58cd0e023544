"""Tests for display operations (DXYN)."""

import jax.numpy as jnp
import pytest
from chix8 import execute, Chip8Error, AddressError, SCREEN_WIDTH, SCREEN_HEIGHT
from conftest import setup_sprite_in_memory


def draw(state, x, y, sprite, address=0x300):
    """Place ``sprite`` at ``address`` and draw it at (x, y) using V0/V1."""
    state = setup_sprite_in_memory(state, address, sprite)
    state = execute(state, 0x6000 | x)
    state = execute(state, 0x6100 | y)
    state = execute(state, 0xA000 | address)
    return execute(state, 0xD010 | len(sprite))


class TestBasicSprites:
    """Test basic sprite drawing."""

    def test_basic_sprite_draw(self, fresh_state):
        """Test basic sprite drawing without collision."""
        # Simple 2x2 box sprite
        state = draw(fresh_state, 10, 5, [0xC0, 0xC0])

        assert state.display[5, 10]  # Top-left
        assert state.display[5, 11]  # Top-right
        assert state.display[6, 10]  # Bottom-left
        assert state.display[6, 11]  # Bottom-right
        assert not state.display[5, 12]  # Outside sprite
        assert jnp.sum(state.display) == 4

        assert state.V[15] == 0
        assert state.draw_flag

    def test_collision_detection(self, fresh_state):
        """Test collision flag when sprite overlaps existing pixels."""
        state = draw(fresh_state, 20, 10, [0x80], address=0x400)
        assert state.display[10, 20]
        assert state.V[15] == 0

        state = execute(state, 0xD011)  # Draw again
        assert not state.display[10, 20]  # Pixel erased by XOR
        assert state.V[15] == 1

    def test_xor_behavior(self, fresh_state):
        """Drawing the same sprite twice restores the screen."""
        state = draw(fresh_state, 8, 15, [0xF0, 0x90, 0xF0])
        drawn = state.display
        assert jnp.sum(drawn) == 10

        state = execute(state, 0xD013)

        assert jnp.sum(state.display) == 0
        assert state.V[15] == 1

    def test_clear_then_draw_full_row_twice(self, fresh_state):
        """A solid row lights columns 0-7 of row 0, a redraw clears them."""
        state = execute(fresh_state, 0x00E0)
        state = draw(state, 0, 0, [0xFF])

        assert state.display[0, 0:8].all()
        assert jnp.sum(state.display) == 8
        assert state.V[15] == 0

        state = execute(state, 0xD011)
        assert jnp.sum(state.display) == 0
        assert state.V[15] == 1

    def test_partial_overlap_sets_flag(self, fresh_state):
        """One shared pixel is enough for a collision."""
        state = draw(fresh_state, 0, 0, [0x80])
        state = draw(state, 0, 0, [0xC0], address=0x310)

        assert not state.display[0, 0]
        assert state.display[0, 1]
        assert state.V[15] == 1

    def test_collision_flag_cleared_by_clean_draw(self, fresh_state):
        """A later draw without overlap resets VF to 0."""
        state = fresh_state.replace(V=fresh_state.V.at[15].set(1))
        state = draw(state, 30, 20, [0xFF])
        assert state.V[15] == 0

    def test_zero_height_draws_nothing(self, fresh_state):
        """DXY0 leaves the screen and VF clear."""
        state = execute(fresh_state, 0xA300)
        state = execute(state, 0xD010)

        assert jnp.sum(state.display) == 0
        assert state.V[15] == 0

    def test_font_glyph(self, fresh_state):
        """The font glyph for 0 draws as a hollow box."""
        state = execute(fresh_state, 0xF029)  # I = glyph for V0 = 0
        state = execute(state, 0xD015)

        expected = jnp.array([
            [1, 1, 1, 1],
            [1, 0, 0, 1],
            [1, 0, 0, 1],
            [1, 0, 0, 1],
            [1, 1, 1, 1],
        ], dtype=jnp.bool_)
        assert jnp.array_equal(state.display[0:5, 0:4], expected)
        assert jnp.sum(state.display) == jnp.sum(expected)


class TestEdges:
    """Test wrapping of the origin and clipping at the edges."""

    def test_clipped_at_right_edge(self, fresh_state):
        """Pixels past x = 63 are dropped, not wrapped."""
        state = draw(fresh_state, 60, 0, [0xFF])

        for x in range(60, 64):
            assert state.display[0, x]
        for x in range(0, 4):
            assert not state.display[0, x]
        assert jnp.sum(state.display) == 4

    def test_clipped_at_bottom_edge(self, fresh_state):
        """Rows past y = 31 are dropped, not wrapped."""
        state = draw(fresh_state, 0, 30, [0x80, 0x80, 0x80, 0x80])

        assert state.display[30, 0]
        assert state.display[31, 0]
        assert not state.display[0, 0]
        assert not state.display[1, 0]
        assert jnp.sum(state.display) == 2

    def test_origin_wraps(self, fresh_state):
        """Coordinates past the screen wrap before drawing."""
        state = draw(fresh_state, 64 + 3, 32 + 2, [0x80])

        assert state.display[2, 3]
        assert jnp.sum(state.display) == 1

    def test_origin_wraps_large_values(self, fresh_state):
        """255 wraps to (63, 31): only the corner pixel is visible."""
        state = draw(fresh_state, 0xFF, 0xFF, [0xFF, 0xFF])

        assert state.display[31, 63]
        assert jnp.sum(state.display) == 1

    @pytest.mark.parametrize("x,y", [(0, 0), (17, 9), (56, 27), (60, 30), (63, 31)])
    def test_full_sprite_pixel_count(self, fresh_state, x, y):
        """A solid sprite lights exactly the pixels that fit on screen."""
        height = 5
        state = draw(fresh_state, x, y, [0xFF] * height)

        visible = min(8, SCREEN_WIDTH - x) * min(height, SCREEN_HEIGHT - y)
        assert jnp.sum(state.display) == visible


class TestSpriteMemory:
    """Test where sprite data is read from."""

    def test_sprite_read_wraps_memory(self, fresh_state):
        """Rows beyond 0xFFF are read from the start of memory."""
        state = setup_sprite_in_memory(fresh_state, 0xFFF, [0x80])
        state = state.replace(memory=state.memory.at[0x000].set(0x40))
        state = execute(state, 0xAFFF)
        state = execute(state, 0xD012)

        assert state.display[0, 0]
        assert state.display[1, 1]

    def test_strict_sprite_read_out_of_range(self, strict_state):
        """With strict addressing a read past memory faults and draws nothing."""
        state = execute(strict_state, 0xAFFF)
        state = execute(state, 0xD012)

        assert isinstance(Chip8Error.from_state(state), AddressError)
        assert jnp.sum(state.display) == 0
        assert not state.draw_flag

    def test_strict_sprite_read_in_range(self, strict_state):
        """The last byte of memory is still a valid sprite row."""
        state = setup_sprite_in_memory(strict_state, 0xFFF, [0x80])
        state = execute(state, 0xAFFF)
        state = execute(state, 0xD011)

        assert Chip8Error.from_state(state) is None
        assert state.display[0, 0]
