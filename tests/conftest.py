"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chix8 import create_state, load_program, EmulatorConfig, constant_random_source


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def strict_state():
    """Provide a fresh state that faults on out-of-range memory accesses."""
    return create_state(config=EmulatorConfig(strict_addressing=True))


@pytest.fixture
def fixed_random_state():
    """Provide a state whose random source always yields 0xAB."""
    return create_state(config=EmulatorConfig(random_source=constant_random_source(0xAB)))


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def program(*words):
    """Assemble instruction words into a big-endian program image."""
    return b"".join(word.to_bytes(2, "big") for word in words)


def load_words(state, *words):
    """Load instruction words at 0x200."""
    return load_program(state, program(*words))
