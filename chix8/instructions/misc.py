"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chix8.state import EmulatorState
from chix8.decode import DecodedInstruction
from chix8.constants import FONT_GLYPH_SIZE, NUM_REGISTERS
from chix8.instructions.memory import memory_indices, with_address_check
from chix8.instructions.system import invalid_opcode


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register, wrapping at 16 bits. VF is untouched."""
    new_i = (jnp.astype(state.I, jnp.int32) + state.V[instruction.x]) & 0xFFFF
    return state.replace(I=jnp.astype(new_i, jnp.uint16))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    Only raises the waiting flag; ``step`` polls the keypad on later calls
    instead of fetching, so the host loop is never blocked. Keys already held
    here are latched and do not count until released and pressed again.
    """
    return state.replace(
        waiting_for_key=jnp.ones((), dtype=jnp.bool_),
        key_register=jnp.astype(instruction.x, jnp.uint8),
        key_latch=jnp.astype(state.keypad, jnp.uint16),
    )


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = state.config.font_start + jnp.astype(state.V[instruction.x], jnp.int32) * FONT_GLYPH_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


@with_address_check(lambda instruction: 3)
def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = memory_indices(state.I, jnp.arange(3))
    return state.replace(memory=state.memory.at[indices].set(digits))


@with_address_check(lambda instruction: instruction.x + 1)
def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    indices = memory_indices(state.I, jnp.arange(NUM_REGISTERS))
    new_values = jnp.where(register_mask, state.V, state.memory[indices])
    return state.replace(memory=state.memory.at[indices].set(new_values))


@with_address_check(lambda instruction: instruction.x + 1)
def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    indices = memory_indices(state.I, jnp.arange(NUM_REGISTERS))
    return state.replace(V=jnp.where(register_mask, state.memory[indices], state.V))


MISC_HANDLERS = {
    0x07: execute_get_delay_timer,
    0x0A: execute_wait_for_key,
    0x15: execute_set_delay_timer,
    0x18: execute_set_sound_timer,
    0x1E: execute_add_to_index,
    0x29: execute_font_character,
    0x33: execute_bcd_conversion,
    0x55: execute_store_registers,
    0x65: execute_load_registers,
}


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch misc instructions using arithmetic switch."""
    matches = [instruction.nn == code for code in MISC_HANDLERS]
    unknown = ~jnp.any(jnp.array(matches))
    switch_index = sum(match * index for index, match in enumerate(matches)) + unknown * len(matches)

    return jax.lax.switch(
        switch_index,
        list(MISC_HANDLERS.values()) + [invalid_opcode],
        state, instruction
    )
