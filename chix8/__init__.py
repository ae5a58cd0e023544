"""CHIP-8 emulator package."""

from chix8.config import EmulatorConfig
from chix8.state import (
    EmulatorState, StackState, create_state, clear_error, is_halted,
    needs_redraw, clear_draw_flag, framebuffer,
)
from chix8.emulator import (
    execute, fetch, step, checked_step, raise_for_error, run_steps, run_frame,
    tick_timers, load_program, load_rom,
)
from chix8.decode import DecodedInstruction, decode, disassemble
from chix8.errors import (
    ErrorCode, Chip8Error, ExecutionError, InvalidOpcodeError, StackOverflowError,
    StackUnderflowError, AddressError, ProgramTooLargeError,
)
from chix8.keypad import press_key, release_key, set_keypad, is_key_pressed
from chix8.entropy import jax_random_byte, constant_random_source
from chix8.constants import *
from chix8.rendering import ColorScheme, chip8_display_to_rgb, create_color_scheme, display_to_text
from chix8.debug import format_state, format_memory

__all__ = [
    "EmulatorConfig",
    "EmulatorState",
    "StackState",
    "create_state",
    "clear_error",
    "is_halted",
    "needs_redraw",
    "clear_draw_flag",
    "framebuffer",
    "fetch",
    "execute",
    "step",
    "checked_step",
    "raise_for_error",
    "run_steps",
    "run_frame",
    "tick_timers",
    "load_program",
    "load_rom",
    "DecodedInstruction",
    "decode",
    "disassemble",
    "ErrorCode",
    "Chip8Error",
    "ExecutionError",
    "InvalidOpcodeError",
    "StackOverflowError",
    "StackUnderflowError",
    "AddressError",
    "ProgramTooLargeError",
    "press_key",
    "release_key",
    "set_keypad",
    "is_key_pressed",
    "jax_random_byte",
    "constant_random_source",
    "PROGRAM_START",
    "FONT_START",
    "FONT_DATA",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "MAX_PROGRAM_SIZE",
    "ColorScheme",
    "chip8_display_to_rgb",
    "create_color_scheme",
    "display_to_text",
    "format_state",
    "format_memory",
]
