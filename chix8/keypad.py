"""CHIP-8 keypad helpers.

The keypad is a 16-bit mask, bit ``k`` set while hex key ``k`` is held. The
host writes it between steps; the interpreter only reads it.
"""

import jax.numpy as jnp
from chix8.constants import NUM_KEYS
from chix8.state import EmulatorState


def _check_key(key: int) -> int:
    if not 0 <= key < NUM_KEYS:
        raise ValueError(f"Key must be in 0x0-0xF, got {key!r}")
    return key


def set_keypad(state: EmulatorState, mask: int) -> EmulatorState:
    """Replace the whole keypad mask."""
    if not 0 <= mask <= 0xFFFF:
        raise ValueError(f"Keypad mask must fit in 16 bits, got {mask!r}")
    return state.replace(keypad=jnp.asarray(mask, dtype=jnp.uint16))


def press_key(state: EmulatorState, key: int) -> EmulatorState:
    return set_keypad(state, int(state.keypad) | (1 << _check_key(key)))


def release_key(state: EmulatorState, key: int) -> EmulatorState:
    return set_keypad(state, int(state.keypad) & ~(1 << _check_key(key)) & 0xFFFF)


def is_key_pressed(state: EmulatorState, key: int) -> bool:
    return bool((int(state.keypad) >> _check_key(key)) & 1)


def key_bits(keypad: jnp.ndarray) -> jnp.ndarray:
    """Unpack the mask into a bool[16] array, index = key."""
    return ((jnp.astype(keypad, jnp.int32) >> jnp.arange(NUM_KEYS)) & 1) == 1


def first_pressed_key(keypad: jnp.ndarray) -> jnp.ndarray:
    """Lowest pressed key; only meaningful when ``keypad != 0``."""
    return jnp.astype(jnp.argmax(key_bits(keypad)), jnp.uint8)
