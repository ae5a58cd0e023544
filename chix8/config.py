"""Emulator configuration."""

from typing import Callable

from flax.struct import dataclass, field

from chix8.constants import FONT_START, FONT_SIZE, PROGRAM_START
from chix8.entropy import jax_random_byte

ERROR_POLICIES = ("halt", "skip")


@dataclass(frozen=True)
class EmulatorConfig:
    """Static emulator settings, baked into traced code.

    Attributes:
        strict_addressing: Report ``ADDRESS_OUT_OF_RANGE`` instead of masking
            memory accesses to 12 bits
        on_error: Host policy for faults in ``checked_step``, "halt" or "skip"
        font_start: Address of the built-in font glyph set
        random_source: ``key -> (key, uint8)`` provider used by CXNN
    """
    strict_addressing: bool = field(pytree_node=False, default=False)
    on_error: str = field(pytree_node=False, default="halt")
    font_start: int = field(pytree_node=False, default=FONT_START)
    random_source: Callable = field(pytree_node=False, default=jax_random_byte)

    def validate(self) -> "EmulatorConfig":
        if self.on_error not in ERROR_POLICIES:
            raise ValueError(
                f"Unknown error policy '{self.on_error}'. Available: {list(ERROR_POLICIES)}"
            )
        if not 0 <= self.font_start <= PROGRAM_START - FONT_SIZE:
            raise ValueError(
                f"Font at 0x{self.font_start:03X} does not fit below 0x{PROGRAM_START:03X}"
            )
        if not callable(self.random_source):
            raise ValueError("random_source must be callable")
        return self
