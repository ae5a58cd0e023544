"""CHIP-8 ALU operations (8xxx).

Every operation maps ``(vx, vy, vf)`` to ``(result, vf)``. Logic operations
hand the incoming flag back unchanged; the dispatcher only writes VF for the
operations listed in ``FLAG_OPS``, and always after the result so that
``X = F`` ends up holding the flag.
"""

import jax
import jax.lax
import jax.numpy as jnp
from chix8.state import EmulatorState
from chix8.decode import DecodedInstruction
from chix8.constants import FLAG_REGISTER
from chix8.instructions.system import invalid_opcode


def _flag(condition) -> jnp.ndarray:
    return jnp.astype(condition, jnp.uint8)


def alu_set(vx, vy, vf):
    """8XY0 - Set: VX = VY."""
    return vy, vf


def alu_or(vx, vy, vf):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, vf


def alu_and(vx, vy, vf):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, vf


def alu_xor(vx, vy, vf):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, vf


def alu_add(vx, vy, vf):
    """8XY4 - Add: VX += VY, VF = carry."""
    result = jnp.astype(vx, jnp.int32) + vy
    return jnp.astype(result & 0xFF, jnp.uint8), _flag(result > 255)


def alu_sub_xy(vx, vy, vf):
    """8XY5 - Subtract: VX -= VY, VF = NOT borrow."""
    result = jnp.astype(vx, jnp.int32) - vy
    return jnp.astype(result & 0xFF, jnp.uint8), _flag(vx >= vy)


def alu_shift_right(vx, vy, vf):
    """8XY6 - Shift right: VX >>= 1, VF = bit shifted out."""
    return jnp.astype(vx >> 1, jnp.uint8), _flag(vx & 1)


def alu_sub_yx(vx, vy, vf):
    """8XY7 - Subtract: VX = VY - VX, VF = NOT borrow."""
    result = jnp.astype(vy, jnp.int32) - vx
    return jnp.astype(result & 0xFF, jnp.uint8), _flag(vy >= vx)


def alu_shift_left(vx, vy, vf):
    """8XYE - Shift left: VX <<= 1, VF = bit shifted out."""
    shifted_bit = (vx & 0x80) >> 7
    return jnp.astype((jnp.astype(vx, jnp.int32) << 1) & 0xFF, jnp.uint8), _flag(shifted_bit)


# Sub-opcode -> position in ALU_OPERATIONS, -1 for undefined
ALU_INDEX = jnp.array([0, 1, 2, 3, 4, 5, 6, 7, -1, -1, -1, -1, -1, -1, 8, -1], dtype=jnp.int32)
ALU_OPERATIONS = [
    alu_set, alu_or, alu_and, alu_xor, alu_add,
    alu_sub_xy, alu_shift_right, alu_sub_yx, alu_shift_left,
]
FLAG_OPS = jnp.array([0, 0, 0, 0, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 1, 0], dtype=jnp.bool_)


def _execute_alu(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    vx = state.V[instruction.x]
    vy = state.V[instruction.y]
    vf = state.V[FLAG_REGISTER]

    result, flag = jax.lax.switch(
        ALU_INDEX[instruction.n],
        ALU_OPERATIONS,
        vx, vy, vf
    )

    new_V = state.V.at[instruction.x].set(jnp.astype(result, jnp.uint8))
    new_vf = jnp.where(FLAG_OPS[instruction.n], jnp.astype(flag, jnp.uint8), new_V[FLAG_REGISTER])
    new_V = new_V.at[FLAG_REGISTER].set(new_vf)
    return state.replace(V=new_V)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    return jax.lax.cond(
        ALU_INDEX[instruction.n] >= 0,
        _execute_alu,
        invalid_opcode,
        state, instruction
    )
