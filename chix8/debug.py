"""Human-readable dumps of emulator state."""

import numpy as np

from chix8.constants import MEMORY_SIZE
from chix8.decode import disassemble
from chix8.errors import Chip8Error
from chix8.state import EmulatorState


def format_state(state: EmulatorState) -> str:
    """Summarise registers, timers, stack and the next instruction."""
    V = np.asarray(state.V)
    stack = np.asarray(state.stack.data)
    pointer = int(state.stack.pointer)
    pc = int(state.pc)
    memory = np.asarray(state.memory)
    next_word = (int(memory[pc % MEMORY_SIZE]) << 8) | int(memory[(pc + 1) % MEMORY_SIZE])

    lines = [
        "EmulatorState {",
        "    V: [ " + ", ".join(f"0x{int(v):02X}" for v in V) + " ]",
        f"    I: 0x{int(state.I):03X}",
        f"    DT: 0x{int(state.delay_timer):02X}",
        f"    ST: 0x{int(state.sound_timer):02X}",
        f"    Stack ({pointer}/{len(stack)}): [ "
        + ", ".join(f"0x{int(address):03X}" for address in stack[:pointer]) + " ]",
        f"    PC: 0x{pc:03X} ({disassemble(next_word)})",
        f"    Keypad: 0b{int(state.keypad):016b}",
    ]
    if bool(state.waiting_for_key):
        lines.append(f"    Waiting for key -> V{int(state.key_register):X}")
    error = Chip8Error.from_state(state)
    if error is not None:
        lines.append(f"    Error: {error}")
    lines.append("}")
    return "\n".join(lines)


def format_memory(memory, start: int = 0, end: int = MEMORY_SIZE, width: int = 16) -> str:
    """Hex dump of ``memory[start:end]``, ``width`` bytes per line."""
    data = np.asarray(memory)[start:end]
    lines = []
    for offset in range(0, len(data), width):
        row = data[offset:offset + width]
        lines.append(f"0x{start + offset:03X}: " + " ".join(f"{int(b):02X}" for b in row))
    return "\n".join(lines)
