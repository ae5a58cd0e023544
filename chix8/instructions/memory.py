"""CHIP-8 memory and register operations."""

from functools import wraps

import jax
import jax.lax
import jax.numpy as jnp
from chix8.state import EmulatorState, record_error
from chix8.decode import DecodedInstruction
from chix8.errors import ErrorCode
from chix8.constants import ADDRESS_MASK, MEMORY_SIZE


def memory_indices(base, offsets: jnp.ndarray) -> jnp.ndarray:
    """Addresses ``base + offsets`` wrapped to the 12-bit address space."""
    return (jnp.astype(base, jnp.int32) + offsets) & ADDRESS_MASK


def with_address_check(length_fn):
    """Guard an instruction that touches ``memory[I:I + length_fn(instruction)]``.

    With strict addressing an access past the end of memory records
    ``ADDRESS_OUT_OF_RANGE`` and leaves the state untouched; otherwise the
    access wraps and the instruction runs unchecked.
    """
    def decorator(execute_fn):
        @wraps(execute_fn)
        def checked(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
            if not state.config.strict_addressing:
                return execute_fn(state, instruction)

            end = jnp.astype(state.I, jnp.int32) + length_fn(instruction)
            return jax.lax.cond(
                end > MEMORY_SIZE,
                lambda s, i: record_error(s, ErrorCode.ADDRESS_OUT_OF_RANGE, i.raw),
                execute_fn,
                state, instruction
            )
        return checked
    return decorator


def execute_set(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """6XNN - Set VX = NN."""
    return state.replace(V=state.V.at[instruction.x].set(jnp.astype(instruction.nn, jnp.uint8)))


def execute_add(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """7XNN - Add NN to VX, wrapping at 8 bits. VF is untouched."""
    total = jnp.astype(state.V[instruction.x], jnp.int32) + instruction.nn
    return state.replace(V=state.V.at[instruction.x].set(jnp.astype(total & 0xFF, jnp.uint8)))


def execute_set_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """ANNN - Set I = NNN."""
    return state.replace(I=jnp.astype(instruction.nnn, jnp.uint16))


def execute_random(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """CXNN - Set VX = random & NN."""
    key, random_value = state.config.random_source(state.rng)
    masked = jnp.astype(random_value, jnp.uint8) & jnp.astype(instruction.nn, jnp.uint8)
    return state.replace(V=state.V.at[instruction.x].set(masked), rng=key)
