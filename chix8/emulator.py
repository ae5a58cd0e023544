"""Main CHIP-8 emulator execution engine."""

from functools import partial
from typing import Iterable

import jax
import jax.lax
import jax.numpy as jnp
from chix8.state import EmulatorState, record_error, clear_error, is_halted
from chix8.decode import decode
from chix8.constants import ADDRESS_MASK, INSTRUCTION_SIZE, MAX_PROGRAM_SIZE, MEMORY_SIZE, PROGRAM_START
from chix8.errors import (
    AddressError, Chip8Error, ErrorCode, ExecutionError, ProgramTooLargeError,
)
from chix8.keypad import first_pressed_key
from chix8.logging import ConsoleLogger, logger as default_logger, scan_with_progress
from chix8.instructions.system import execute_system_instruction
from chix8.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chix8.instructions.alu import execute_alu_operation
from chix8.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chix8.instructions.display import execute_display
from chix8.instructions.misc import execute_misc_instruction


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction."""
    decoded_instruction = decode(instruction)

    return jax.lax.switch(
        decoded_instruction.opcode,
        [
            execute_system_instruction,
            execute_jump,
            execute_call,
            execute_skip_if_equal_immediate,
            execute_skip_if_not_equal_immediate,
            execute_skip_if_equal_register,
            execute_set,
            execute_add,
            execute_alu_operation,
            execute_skip_if_not_equal_register,
            execute_set_index,
            execute_jump_with_offset,
            execute_random,
            execute_display,
            execute_skip_if_key,
            execute_misc_instruction,
        ],
        state, decoded_instruction
    )


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory.

    Addresses wrap at 4 KiB; under strict addressing ``step`` faults before a
    fetch would read past the end of memory.
    """
    pc = jnp.astype(state.pc, jnp.int32)
    instruction = _pack_u16(
        state.memory[pc & ADDRESS_MASK],
        state.memory[(pc + 1) & ADDRESS_MASK],
    )
    next_pc = pc + INSTRUCTION_SIZE
    if not state.config.strict_addressing:
        next_pc = next_pc & ADDRESS_MASK
    return state.replace(pc=jnp.astype(next_pc, jnp.uint16)), instruction


def _fetch_and_execute(state: EmulatorState) -> EmulatorState:
    state, instruction = fetch(state)
    return execute(state, instruction)


def _fetch_fault(state: EmulatorState) -> EmulatorState:
    return record_error(state, ErrorCode.ADDRESS_OUT_OF_RANGE, 0, address=state.pc)


def _poll_keypad(state: EmulatorState) -> EmulatorState:
    """Finish a pending FX0A once a key goes down.

    Keys latched by FX0A only count after they are released, so a key held
    over from an earlier EX9E loop does not end the wait.
    """
    new_keys = state.keypad & ~state.key_latch

    def key_pressed_action(state):
        key = first_pressed_key(new_keys)
        return state.replace(
            V=state.V.at[state.key_register].set(key),
            waiting_for_key=jnp.zeros((), dtype=jnp.bool_),
            key_latch=jnp.zeros((), dtype=jnp.uint16),
        )

    def no_key_action(state):
        return state.replace(key_latch=state.key_latch & state.keypad)

    return jax.lax.cond(new_keys != 0, key_pressed_action, no_key_action, state)


def step(state: EmulatorState) -> EmulatorState:
    """Run one interpreter cycle.

    A faulted machine is left untouched, a machine waiting on FX0A polls the
    keypad, anything else fetches and executes exactly one instruction. Timers
    are not decremented here, see ``tick_timers``.
    """
    if state.config.strict_addressing:
        run = lambda s: jax.lax.cond(
            s.pc > MEMORY_SIZE - INSTRUCTION_SIZE, _fetch_fault, _fetch_and_execute, s
        )
    else:
        run = _fetch_and_execute

    branch = jnp.where(
        state.error != ErrorCode.NONE.value, 0, jnp.where(state.waiting_for_key, 1, 2)
    )
    return jax.lax.switch(branch, [lambda s: s, _poll_keypad, run], state)


_jit_step = jax.jit(step)


def _is_fetch_fault(state: EmulatorState, error: ExecutionError) -> bool:
    # Recorded by _fetch_fault: nothing was fetched, so PC still points at it.
    return isinstance(error, AddressError) and error.opcode == 0 and error.address == int(state.pc)


def checked_step(
    state: EmulatorState, logger: ConsoleLogger = default_logger
) -> tuple[EmulatorState, ExecutionError | None]:
    """Run one jitted step and apply the configured error policy.

    Returns the new state and the fault raised by this step, if any. With the
    "halt" policy the fault stays recorded and further steps do nothing; with
    "skip" it is logged, cleared, and execution resumes after the faulting
    word. A strict-mode fetch past the end of memory has no word to skip, so
    it halts under either policy.
    """
    if is_halted(state):
        return state, Chip8Error.from_state(state)

    state = _jit_step(state)
    error = Chip8Error.from_state(state)
    if error is None:
        return state, None

    if state.config.on_error == "skip" and not _is_fetch_fault(state, error):
        logger.warning(f"{error}; skipping")
        return clear_error(state), error

    logger.error(f"{error}; halting")
    return state, error


def raise_for_error(state: EmulatorState) -> None:
    """Raise the typed exception for a recorded fault, if any."""
    error = Chip8Error.from_state(state)
    if error is not None:
        raise error


def _run_step(state, _):
    return step(state), None


@partial(jax.jit, static_argnums=(1, 2))
def run_steps(state: EmulatorState, num_steps: int, progress: bool = False) -> EmulatorState:
    """Run ``num_steps`` interpreter cycles inside a single scan."""
    body = _run_step
    if progress:
        body = scan_with_progress(num_steps)(body)
    state, _ = jax.lax.scan(body, state, jnp.arange(num_steps))
    return state


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement the delay and sound timers once, stopping at zero.

    The host calls this at its own cadence, traditionally 60 Hz.
    """
    def _tick(timer):
        return jnp.astype(jnp.where(timer > 0, timer - 1, 0), jnp.uint8)

    return state.replace(
        delay_timer=_tick(state.delay_timer),
        sound_timer=_tick(state.sound_timer),
    )


@partial(jax.jit, static_argnums=1)
def run_frame(state: EmulatorState, steps_per_frame: int) -> EmulatorState:
    """Run one 60 Hz frame: ``steps_per_frame`` cycles, then one timer tick."""
    state, _ = jax.lax.scan(_run_step, state, length=steps_per_frame)
    return tick_timers(state)


def load_program(state: EmulatorState, program: bytes | Iterable[int]) -> EmulatorState:
    """Copy a raw program image into memory starting at 0x200."""
    program_data = bytes(program)
    if len(program_data) > MAX_PROGRAM_SIZE:
        raise ProgramTooLargeError(len(program_data), MAX_PROGRAM_SIZE)

    program_array = jnp.array(list(program_data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(program_data)].set(program_array)
    default_logger.debug(f"Loaded {len(program_data)} bytes at 0x{PROGRAM_START:03X}")
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)
