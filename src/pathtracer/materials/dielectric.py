"""Dielectric (glass-like) material scattering.

Rays always transmit through the surface via Snell's law, with white
attenuation. There is no Fresnel reflectance mixing. The only reflection
happens when refraction is impossible (total internal reflection), so the
result never contains NaN.

The front-face test uses the outward normal stored in the hit record:
    incoming . normal < 0  ->  entering, normal as is, ratio 1/ior
    incoming . normal >= 0 ->  exiting, flipped normal, ratio ior

Example:
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_dielectric(
    >>> #     ior, incident_dir, normal
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import reflect, refract

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def cannot_refract(incident_direction: vec3, normal: vec3, refraction_ratio: ti.f32) -> ti.i32:
    """Return 1 when Snell's law has no solution (ratio * sin(theta) > 1)."""
    cos_theta = tm.min(tm.dot(-incident_direction, normal), 1.0)
    sin_theta = ti.sqrt(tm.max(0.0, 1.0 - cos_theta * cos_theta))
    return refraction_ratio * sin_theta > 1.0


@ti.func
def scatter_dielectric(
    ior: ti.f32,
    incident_direction: vec3,
    normal: vec3,
):
    """Refract a ray through a dielectric surface.

    Args:
        ior: The index of refraction of the material.
        incident_direction: The incoming ray direction (normalized).
        normal: The outward surface normal (normalized).

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where
        attenuation is white and did_scatter is always 1.
    """
    effective_normal = normal
    refraction_ratio = 1.0 / ior
    if tm.dot(incident_direction, normal) >= 0.0:
        # Exiting the medium
        effective_normal = -normal
        refraction_ratio = ior

    scattered_direction = vec3(0.0, 0.0, 0.0)
    if cannot_refract(incident_direction, effective_normal, refraction_ratio):
        scattered_direction = reflect(incident_direction, effective_normal)
    else:
        scattered_direction = refract(incident_direction, effective_normal, refraction_ratio)

    attenuation = vec3(1.0, 1.0, 1.0)
    return tm.normalize(scattered_direction), attenuation, 1
