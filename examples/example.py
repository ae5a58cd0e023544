import sys
import time

import jax

from chix8 import (
    create_state, load_program, load_rom, run_frame, raise_for_error,
    display_to_text, format_state,
)

# CLS; V0 = 0; I = glyph(V0); DRW V0, V0, 5; JP 0x208
DEMO_PROGRAM = bytes([0x00, 0xE0, 0x60, 0x00, 0xF0, 0x29, 0xD0, 0x05, 0x12, 0x08])
STEPS_PER_FRAME = 10

if __name__ == "__main__":
    state = create_state(jax.random.PRNGKey(0))
    if len(sys.argv) > 1:
        state = load_rom(state, sys.argv[1])
    else:
        state = load_program(state, DEMO_PROGRAM)

    # Measure compilation time
    start_compile = time.time()
    state = jax.block_until_ready(run_frame(state, STEPS_PER_FRAME))
    end_compile = time.time()

    print("Compilation time (s):", end_compile - start_compile)

    # Measure execution time of one second of emulated time
    start_exec = time.time()
    for _ in range(60):
        state = run_frame(state, STEPS_PER_FRAME)
    state = jax.block_until_ready(state)
    end_exec = time.time()

    print("Execution time (s):", end_exec - start_exec)

    print(display_to_text(state.display))
    print(format_state(state))
    raise_for_error(state)
