"""Ray data structure and vector utilities for Taichi kernels.

This module provides the device-side Ray dataclass and the vector helpers
used by intersection, scattering and light transport. All functions are
@ti.func and run inside kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> # Inside a kernel:
    >>> # ray = make_ray(origin, direction)
    >>> # point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

from pathtracer.core.random import next_bilateral_float

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

NEAR_ZERO_EPSILON = 1e-8


@ti.dataclass
class Ray:
    """A ray with an origin point and a unit direction.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction of the ray (vec3, unit length when built
            through make_ray).
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point origin + t * direction."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray, normalizing the direction.

    Args:
        origin: The starting point of the ray.
        direction: Any non-zero direction vector.

    Returns:
        A new Ray whose direction has unit length.
    """
    return Ray(origin=origin, direction=tm.normalize(direction))


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    return tm.normalize(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    return tm.cross(a, b)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        incident - 2 (incident . normal) normal
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, eta_ratio: ti.f32) -> vec3:
    """Refract a unit direction through a surface (Snell's law).

    Splits the outgoing direction into parts perpendicular and parallel to
    the normal. There is no total internal reflection check here; callers
    that need one use the sin(theta) test before calling. The absolute value
    under the root keeps the result finite either way.

    Args:
        incident: The incoming direction (normalized).
        normal: The unit normal on the incoming side of the surface.
        eta_ratio: The ratio of refractive indices (n_incident / n_transmitted).

    Returns:
        The refracted direction (not normalized).
    """
    cos_theta = tm.min(tm.dot(-incident, normal), 1.0)
    r_out_perp = eta_ratio * (incident + cos_theta * normal)
    r_out_parallel = -ti.sqrt(ti.abs(1.0 - tm.dot(r_out_perp, r_out_perp))) * normal
    return r_out_perp + r_out_parallel


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Return 1 if all components are below 1e-8 in magnitude, else 0."""
    s = NEAR_ZERO_EPSILON
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s


# =============================================================================
# Random Directions
# =============================================================================


@ti.func
def random_unit_vector(state: ti.u32):
    """Sample three bilateral floats and renormalize them to unit length.

    This is a cube sample projected onto the sphere, so it is biased toward
    the cube's corners rather than uniform over the sphere.

    Args:
        state: The caller's random stream state.

    Returns:
        A tuple (new_state, direction).
    """
    s = state
    s, x = next_bilateral_float(s)
    s, y = next_bilateral_float(s)
    s, z = next_bilateral_float(s)
    p = vec3(x, y, z)
    direction = vec3(0.0, 0.0, 1.0)
    if tm.dot(p, p) > 0.0:
        direction = tm.normalize(p)
    return s, direction
