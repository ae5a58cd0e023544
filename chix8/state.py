"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chix8.config import EmulatorConfig
from chix8.constants import (
    ADDRESS_MASK, MEMORY_SIZE, NUM_REGISTERS, PROGRAM_START, FONT_DATA, FONT_SIZE,
    SCREEN_WIDTH, SCREEN_HEIGHT, STACK_SIZE,
)
from chix8.errors import ErrorCode


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls. ``pointer`` counts the stored entries."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.int32))


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    ``display`` is row-major: ``display[y, x]``.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_HEIGHT, SCREEN_WIDTH), dtype=jnp.bool_))
    draw_flag: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    stack: StackState = StackState()
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    waiting_for_key: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    key_register: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    key_latch: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    error: jnp.ndarray = field(default_factory=lambda: jnp.astype(int(ErrorCode.NONE), jnp.uint8))
    error_opcode: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    error_address: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    config: EmulatorConfig = field(pytree_node=False, default=EmulatorConfig())


def create_state(
    rng: jax.random.PRNGKey = jax.random.PRNGKey(0),
    config: EmulatorConfig = EmulatorConfig(),
) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    config = config.validate()
    state = EmulatorState(rng, config=config)
    font_start = config.font_start
    return state.replace(memory=state.memory.at[font_start:font_start + FONT_SIZE].set(FONT_DATA))


def record_error(state: EmulatorState, code: ErrorCode, opcode, address=None) -> EmulatorState:
    """Flag a fault. ``address`` defaults to the instruction that was just fetched."""
    if address is None:
        address = (state.pc - 2) & ADDRESS_MASK
    return state.replace(
        error=jnp.astype(int(code), jnp.uint8),
        error_opcode=jnp.astype(opcode, jnp.uint16),
        error_address=jnp.astype(address, jnp.uint16),
    )


def clear_error(state: EmulatorState) -> EmulatorState:
    """Clear a recorded fault so that ``step`` resumes."""
    return state.replace(
        error=jnp.astype(int(ErrorCode.NONE), jnp.uint8),
        error_opcode=jnp.zeros((), dtype=jnp.uint16),
        error_address=jnp.zeros((), dtype=jnp.uint16),
    )


def is_halted(state: EmulatorState) -> bool:
    return int(state.error) != ErrorCode.NONE


def needs_redraw(state: EmulatorState) -> bool:
    return bool(state.draw_flag)


def clear_draw_flag(state: EmulatorState) -> EmulatorState:
    """Acknowledge a redraw after the host has painted the framebuffer."""
    return state.replace(draw_flag=jnp.zeros((), dtype=jnp.bool_))


def framebuffer(state: EmulatorState) -> jnp.ndarray:
    """Current 32x64 boolean framebuffer."""
    return state.display
