"""Emissive material.

An emitter never scatters. Its color is the radiance that ends the path, so
the integrator multiplies it into the throughput and stops.
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_emission(color: vec3):
    """Return (scattered_direction, radiance, did_scatter) with did_scatter 0."""
    return vec3(0.0, 0.0, 0.0), color, 0
