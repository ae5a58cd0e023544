"""Random byte sources for CXNN."""

import jax
import jax.numpy as jnp


def jax_random_byte(key: jax.random.PRNGKey) -> tuple[jax.random.PRNGKey, jnp.ndarray]:
    """Draw one uint8 from ``key`` and return the advanced key."""
    key, subkey = jax.random.split(key)
    value = jax.random.randint(subkey, shape=(), minval=0, maxval=256, dtype=jnp.int32)
    return key, jnp.astype(value, jnp.uint8)


def constant_random_source(value: int):
    """Source that always yields ``value``, for deterministic tests."""
    byte = value & 0xFF

    def random_byte(key):
        return key, jnp.asarray(byte, dtype=jnp.uint8)

    return random_byte
