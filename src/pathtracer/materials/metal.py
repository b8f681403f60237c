"""Metal (specular reflective) material scattering.

The reflection formula is:
    R = I - 2(I . N)N

The reflected direction is perturbed by a random unit vector scaled by the
fuzz parameter. If the perturbed direction ends up below the surface the
path is absorbed.

Example:
    >>> # Use within a Taichi kernel:
    >>> # state, direction, attenuation, did_scatter = scatter_metal(
    >>> #     color, fuzz, incident_dir, normal, state
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import random_unit_vector, reflect

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def metal_direction(incident_direction: vec3, normal: vec3, fuzz: ti.f32, offset: vec3):
    """Perturb the mirror reflection and decide whether the ray survives.

    Args:
        incident_direction: The incoming ray direction (normalized).
        normal: The surface normal (normalized).
        fuzz: Perturbation scale in [0, 1]. 0 = perfect mirror.
        offset: A random unit vector.

    Returns:
        A tuple of (scattered_direction, did_scatter). When the perturbed
        direction points below the surface (negative dot with the normal),
        did_scatter is 0 and the direction is the zero vector.
    """
    perturbed = reflect(incident_direction, normal) + fuzz * offset

    did_scatter = 0
    scattered_direction = vec3(0.0, 0.0, 0.0)
    if tm.dot(perturbed, normal) >= 0.0:
        did_scatter = 1
        scattered_direction = tm.normalize(perturbed)

    return scattered_direction, did_scatter


@ti.func
def scatter_metal(
    color: vec3,
    fuzz: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    state: ti.u32,
):
    """Scatter a ray off a metal surface.

    Args:
        color: The reflective tint.
        fuzz: The roughness in [0, 1].
        incident_direction: The incoming ray direction (normalized).
        normal: The surface normal (normalized).
        state: The caller's random stream state.

    Returns:
        A tuple of (state, scattered_direction, attenuation, did_scatter).
        When did_scatter is 0 the path ends with the metal's color as its
        final factor.
    """
    s, offset = random_unit_vector(state)
    scattered_direction, did_scatter = metal_direction(
        incident_direction, normal, fuzz, offset
    )
    return s, scattered_direction, color, did_scatter
