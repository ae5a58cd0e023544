import time
import timeit

import jax
import jax.numpy as jnp
import numpy as np

from chix8 import create_state, load_program, run_steps

# Fill the screen with random bytes drawn as sprites, forever:
#   I = 0x300; V0 = rand; V1 = rand & 0x1F; V2 = rand
#   LD [I], V2 (V0 lands at 0x300); DRW V0, V1, 1; JP 0x202
RANDOM_SPRITES = bytes([
    0xA3, 0x00,
    0xC0, 0xFF,
    0xC1, 0x1F,
    0xC2, 0xFF,
    0xF2, 0x55,
    0xD0, 0x11,
    0x12, 0x02,
])


def time_it_measure(bench, repeat=10, number=3) -> np.ndarray:
    times = timeit.repeat(bench, repeat=repeat, number=number)
    return np.array(times) / number


if __name__ == "__main__":
    template = load_program(create_state(), RANDOM_SPRITES)

    def rollout(rng):
        return run_steps(template.replace(rng=rng), 1000)

    rng = jax.random.PRNGKey(0)
    # Number of emulators run side by side
    rngs = jax.random.split(rng, 1000)

    start_compile = time.perf_counter()
    compiled = jax.block_until_ready(jax.jit(jax.vmap(rollout)).lower(rngs).compile())
    end_compile = time.perf_counter()

    print("Compilation time (s):", end_compile - start_compile)

    def bench():
        jax.block_until_ready(compiled(rngs))

    times = time_it_measure(bench)
    print("Execution times (s):", times)
    print("Mean time (s):", times.mean())
    print("Q1 (s):", np.quantile(times, 0.25))
    print("Q3 (s):", np.quantile(times, 0.75))

    final_states = compiled(rngs)
    print("Lit pixels, first 8 machines:", jnp.sum(final_states.display, axis=(1, 2))[:8])
