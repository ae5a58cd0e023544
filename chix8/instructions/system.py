"""CHIP-8 system instructions (0x0xxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chix8.state import EmulatorState, record_error
from chix8.decode import DecodedInstruction
from chix8.errors import ErrorCode
from chix8.stack import pop, is_empty


def invalid_opcode(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Word matches no instruction."""
    return record_error(state, ErrorCode.INVALID_OPCODE, instruction.raw)


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(
        display=jnp.zeros_like(state.display),
        draw_flag=jnp.ones((), dtype=jnp.bool_),
    )


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    def _return(state, instruction):
        stack, address = pop(state.stack)
        return state.replace(stack=stack, pc=address)

    def _underflow(state, instruction):
        return record_error(state, ErrorCode.STACK_UNDERFLOW, instruction.raw)

    return jax.lax.cond(is_empty(state.stack), _underflow, _return, state, instruction)


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch system instructions. 0NNN machine calls are not supported."""
    return jax.lax.cond(
        0x00E0 == instruction.raw,
        execute_clear_screen,
        lambda state, instruction: jax.lax.cond(
            0x00EE == instruction.raw,
            execute_return,
            invalid_opcode,
            state, instruction
        ),
        state, instruction
    )
