"""Diffuse material scattering.

The continuation direction is the surface normal plus a random unit vector.
This approximates Lambertian scattering: the offset vector is a cube sample
projected onto the sphere (see core.ray.random_unit_vector), not a uniform
sphere sample, so the distribution is slightly biased toward the diagonals.

A diffuse surface always scatters; the attenuation is its color.

Example:
    >>> # Use within a Taichi kernel:
    >>> # state, direction, attenuation, did_scatter = scatter_diffuse(
    >>> #     color, normal, state
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import near_zero, random_unit_vector

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def diffuse_direction(normal: vec3, offset: vec3) -> vec3:
    """Combine the normal with a random offset into a unit scatter direction.

    If normal + offset is degenerate (all components below 1e-8), the normal
    itself is used instead of normalizing a near-zero vector.

    Args:
        normal: The surface normal (unit length).
        offset: A random unit vector.

    Returns:
        The unit scatter direction.
    """
    scatter_direction = normal + offset
    direction = normal
    if not near_zero(scatter_direction):
        direction = tm.normalize(scatter_direction)
    return direction


@ti.func
def scatter_diffuse(color: vec3, normal: vec3, state: ti.u32):
    """Scatter a ray off a diffuse surface.

    Args:
        color: The diffuse albedo.
        normal: The surface normal at the hit point (unit length).
        state: The caller's random stream state.

    Returns:
        A tuple of (state, scattered_direction, attenuation, did_scatter).
        did_scatter is always 1.
    """
    s, offset = random_unit_vector(state)
    direction = diffuse_direction(normal, offset)
    return s, direction, color, 1
