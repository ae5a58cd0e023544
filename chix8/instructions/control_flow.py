"""CHIP-8 control flow instructions."""

import jax
import jax.lax
import jax.numpy as jnp
from chix8.state import EmulatorState, record_error
from chix8.decode import DecodedInstruction
from chix8.errors import ErrorCode
from chix8.constants import ADDRESS_MASK, INSTRUCTION_SIZE
from chix8.stack import push, is_full
from chix8.instructions.system import invalid_opcode


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN.

    Under strict addressing a call from 0xFFE faults, since its return address
    0x1000 cannot be stored in 12 bits.
    """
    def _call(state, instruction):
        state = state.replace(stack=push(state.stack, state.pc))
        return execute_jump(state, instruction)

    def _overflow(state, instruction):
        return record_error(state, ErrorCode.STACK_OVERFLOW, instruction.raw)

    def _bad_return_address(state, instruction):
        return record_error(state, ErrorCode.ADDRESS_OUT_OF_RANGE, instruction.raw)

    branch = jnp.where(is_full(state.stack), 0, 2)
    if state.config.strict_addressing:
        branch = jnp.where(state.pc > ADDRESS_MASK, 1, branch)
    return jax.lax.switch(branch, [_overflow, _bad_return_address, _call], state, instruction)


def skip_next(state: EmulatorState) -> EmulatorState:
    """Advance PC past the next instruction."""
    pc = state.pc + INSTRUCTION_SIZE
    if not state.config.strict_addressing:
        pc = pc & ADDRESS_MASK
    return state.replace(pc=jnp.astype(pc, jnp.uint16))


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        condition = condition_fn(state, instruction)
        return jax.lax.cond(
            condition,
            skip_next,
            lambda s: s,
            state
        )
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.nn
)

_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == state.V[inst.y]
)

_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != state.V[inst.y]
)


def _require_zero_nibble(execute_fn):
    """5XY0/9XY0 only exist with a zero low nibble."""
    def checked(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        return jax.lax.cond(
            instruction.n == 0,
            execute_fn,
            invalid_opcode,
            state, instruction
        )
    return checked


execute_skip_if_equal_register = _require_zero_nibble(_skip_if_equal_register)
execute_skip_if_not_equal_register = _require_zero_nibble(_skip_if_not_equal_register)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0."""
    jump_address = jnp.astype(instruction.nnn, jnp.uint16) + jnp.astype(state.V[0], jnp.uint16)
    if not state.config.strict_addressing:
        return state.replace(pc=jump_address & ADDRESS_MASK)

    return jax.lax.cond(
        jump_address > ADDRESS_MASK,
        lambda s, i: record_error(s, ErrorCode.ADDRESS_OUT_OF_RANGE, i.raw),
        lambda s, i: s.replace(pc=jump_address),
        state, instruction
    )


def execute_skip_if_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """EX9E/EXA1 - Skip if key pressed/not pressed."""
    def _skip_if_key(state, instruction):
        key_index = state.V[instruction.x] & 0xF
        key_pressed = ((state.keypad >> key_index) & 1) == 1
        is_not_instruction = (instruction.nn == 0xA1)
        condition = key_pressed ^ is_not_instruction

        return jax.lax.cond(
            condition,
            skip_next,
            lambda state: state,
            state
        )

    is_valid = (instruction.nn == 0x9E) | (instruction.nn == 0xA1)
    return jax.lax.cond(
        is_valid,
        _skip_if_key,
        invalid_opcode,
        state, instruction
    )
