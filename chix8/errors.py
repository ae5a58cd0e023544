"""CHIP-8 error codes and exceptions.

Faults raised inside traced code cannot be Python exceptions, so the
interpreter records an ``ErrorCode`` on the state together with the faulting
instruction word and its address. The host turns that record into one of the
exceptions below with ``Chip8Error.from_state``.
"""

from enum import IntEnum


class ErrorCode(IntEnum):
    """Fault codes stored in ``EmulatorState.error``."""
    NONE = 0
    INVALID_OPCODE = 1
    STACK_OVERFLOW = 2
    STACK_UNDERFLOW = 3
    ADDRESS_OUT_OF_RANGE = 4


class Chip8Error(Exception):
    """Base class for all emulator errors."""

    @staticmethod
    def from_state(state) -> "ExecutionError | None":
        """Build the exception matching the fault recorded on ``state``."""
        code = ErrorCode(int(state.error))
        if code == ErrorCode.NONE:
            return None
        error_class = _ERROR_CLASSES[code]
        return error_class(int(state.error_opcode), int(state.error_address))


class ProgramTooLargeError(Chip8Error, ValueError):
    """Program image does not fit between 0x200 and the end of memory."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Program is {size} bytes, at most {limit} bytes fit in memory")


class ExecutionError(Chip8Error):
    """Fault raised by an instruction."""
    code = ErrorCode.NONE
    description = "Execution error"

    def __init__(self, opcode: int, address: int):
        self.opcode = opcode
        self.address = address
        super().__init__(f"{self.description}: 0x{opcode:04X} at 0x{address:03X}")


class InvalidOpcodeError(ExecutionError):
    code = ErrorCode.INVALID_OPCODE
    description = "Invalid opcode"


class StackOverflowError(ExecutionError):
    code = ErrorCode.STACK_OVERFLOW
    description = "Stack overflow"


class StackUnderflowError(ExecutionError):
    code = ErrorCode.STACK_UNDERFLOW
    description = "Stack underflow"


class AddressError(ExecutionError):
    code = ErrorCode.ADDRESS_OUT_OF_RANGE
    description = "Address out of range"


_ERROR_CLASSES = {
    cls.code: cls
    for cls in (InvalidOpcodeError, StackOverflowError, StackUnderflowError, AddressError)
}
