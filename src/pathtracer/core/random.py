"""Deterministic xorshift32 random streams.

The renderer never uses an ambient generator. Random state is a plain
unsigned 32-bit value threaded through every sampling call, both on the
host (Random) and inside Taichi functions:

    state, xi = next_unit_float(state)

Each pixel gets its own stream derived from the render seed and the pixel
index (seed_pixel_stream), so a parallel render consumes exactly the same
numbers as a sequential one and repeated renders are bit-identical.

Example:
    >>> from pathtracer.core.random import Random
    >>> rng = Random(7)
    >>> 0.0 <= rng.next_unit_float() <= 1.0
    True
"""

import taichi as ti

from pathtracer.core.vector import UnitVector3

DEFAULT_SEED = 2547549

_MASK32 = 0xFFFFFFFF

# 24 high bits of the state become the float mantissa; exact in f32
_UNIT_SCALE = 1.0 / 16777215.0


def _check_seed(seed: int) -> int:
    seed = int(seed) & _MASK32
    if seed == 0:
        raise ValueError("xorshift32 seed must be non-zero (after masking to 32 bits)")
    return seed


def _xorshift32_host(x: int) -> int:
    x ^= (x << 13) & _MASK32
    x ^= x >> 17
    x ^= (x << 5) & _MASK32
    return x


def _hash_u32_host(x: int) -> int:
    x = ((x ^ 61) ^ (x >> 16)) & _MASK32
    x = (x * 9) & _MASK32
    x ^= x >> 4
    x = (x * 0x27D4EB2D) & _MASK32
    x ^= x >> 15
    return x


def pixel_seed(seed: int, pixel_index: int) -> int:
    """Host mirror of seed_pixel_stream: the starting state for one pixel."""
    seed = _check_seed(seed)
    state = _hash_u32_host(seed ^ _hash_u32_host((pixel_index + 1) & _MASK32))
    return state if state != 0 else DEFAULT_SEED


class Random:
    """Sequential xorshift32 generator for host-side sampling.

    Args:
        seed: Non-zero 32-bit seed. Defaults to DEFAULT_SEED.

    Raises:
        ValueError: If the seed is zero.
    """

    def __init__(self, seed: int = DEFAULT_SEED) -> None:
        self._state = _check_seed(seed)

    @classmethod
    def for_pixel(cls, seed: int, pixel_index: int) -> "Random":
        """Build the generator a render uses for one pixel."""
        return cls(pixel_seed(seed, pixel_index))

    @property
    def state(self) -> int:
        return self._state

    def next_u32(self) -> int:
        self._state = _xorshift32_host(self._state)
        return self._state

    def next_unit_float(self) -> float:
        """Uniform float in [0, 1]."""
        return (self.next_u32() >> 8) * _UNIT_SCALE

    def next_bilateral_float(self) -> float:
        """Uniform float in [-1, 1]."""
        return self.next_unit_float() * 2.0 - 1.0

    def random_unit_vector(self) -> UnitVector3:
        """Three bilateral floats renormalized to unit length.

        Not uniform over the sphere (biased toward the cube's corners).
        """
        return UnitVector3(
            self.next_bilateral_float(),
            self.next_bilateral_float(),
            self.next_bilateral_float(),
        )


# =============================================================================
# Device-side streams
# =============================================================================


@ti.func
def xorshift32(state: ti.u32) -> ti.u32:
    """Advance an xorshift32 state by one step."""
    x = state
    x ^= x << ti.u32(13)
    x ^= ti.bit_shr(x, 17)
    x ^= x << ti.u32(5)
    return x


@ti.func
def hash_u32(value: ti.u32) -> ti.u32:
    """Integer avalanche hash (Wang) used to decorrelate pixel seeds."""
    x = value
    x = (x ^ ti.u32(61)) ^ ti.bit_shr(x, 16)
    x = x * ti.u32(9)
    x = x ^ ti.bit_shr(x, 4)
    x = x * ti.u32(0x27D4EB2D)
    x = x ^ ti.bit_shr(x, 15)
    return x


@ti.func
def seed_pixel_stream(seed: ti.u32, pixel_index: ti.i32) -> ti.u32:
    """Derive the starting state of one pixel's stream.

    Never returns zero, which is a fixed point of xorshift.
    """
    state = hash_u32(seed ^ hash_u32(ti.cast(pixel_index, ti.u32) + ti.u32(1)))
    return ti.select(state == ti.u32(0), ti.u32(DEFAULT_SEED), state)


@ti.func
def next_unit_float(state: ti.u32):
    """Return (new_state, xi) with xi uniform in [0, 1]."""
    new_state = xorshift32(state)
    value = ti.cast(ti.bit_shr(new_state, 8), ti.f32) * _UNIT_SCALE
    return new_state, value


@ti.func
def next_bilateral_float(state: ti.u32):
    """Return (new_state, xi) with xi uniform in [-1, 1]."""
    new_state, value = next_unit_float(state)
    return new_state, value * 2.0 - 1.0
