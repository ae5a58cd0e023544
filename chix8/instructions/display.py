"""CHIP-8 display operations."""

import jax.numpy as jnp
from chix8.state import EmulatorState
from chix8.decode import DecodedInstruction
from chix8.constants import SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH, FLAG_REGISTER
from chix8.instructions.memory import memory_indices, with_address_check

# Pre-computed coordinate grids for display operations, indexed [y, x]
yy, xx = jnp.meshgrid(jnp.arange(SCREEN_HEIGHT), jnp.arange(SCREEN_WIDTH), indexing='ij')


@with_address_check(lambda instruction: instruction.n)
def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N, VF = collision."""
    # Only the origin wraps; pixels past the right or bottom edge are clipped.
    sprite_x = jnp.astype(state.V[instruction.x] % SCREEN_WIDTH, jnp.int32)
    sprite_y = jnp.astype(state.V[instruction.y] % SCREEN_HEIGHT, jnp.int32)

    in_sprite = (
        (xx >= sprite_x) & (xx < sprite_x + SPRITE_WIDTH)
        & (yy >= sprite_y) & (yy < sprite_y + instruction.n)
    )

    row_offset = jnp.clip(yy - sprite_y, 0, 15)
    col_offset = jnp.clip(xx - sprite_x, 0, SPRITE_WIDTH - 1)
    sprite_bytes = state.memory[memory_indices(state.I, row_offset)]
    sprite = (((sprite_bytes >> (7 - col_offset)) & 1) == 1) & in_sprite

    collision = jnp.any(state.display & sprite)
    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8)),
        draw_flag=jnp.ones((), dtype=jnp.bool_),
    )
