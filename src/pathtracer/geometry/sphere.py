"""Sphere primitive with ray-sphere intersection.

This module provides the host-side Sphere value used to describe scenes, the
device-side HitRecord shared by all primitives, and the hit_sphere test used
inside kernels.

The intersection solves |o + t d - c|^2 = r^2 in the reduced (half-b) form
and keeps the smallest root strictly inside (t_min, t_max). The roots come
from the numerically robust formula in Ray Tracing Gems, which avoids
catastrophic cancellation when b^2 is close to 4ac.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.geometry.sphere import Sphere, hit_sphere
    >>> from pathtracer.core.vector import Vector3
    >>> from pathtracer.materials.material import Material
    >>> ball = Sphere(Vector3(0, 0, -1), 0.5, Material.diffuse((0.5, 0.5, 0.5)))
    >>> # Use hit_sphere within a Taichi kernel
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from pathtracer.core.vector import Vector3
from pathtracer.materials.material import Material

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@dataclass(frozen=True)
class Sphere:
    """A sphere in a scene description.

    Attributes:
        center: The center point.
        radius: The radius (positive).
        material: The material the sphere owns.

    Raises:
        ValueError: If the radius is not positive.
    """

    center: Vector3
    radius: float
    material: Material

    def __post_init__(self) -> None:
        if not self.radius > 0.0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        t: The parameter value along the ray. Only valid if hit == 1.
        point: The world position of the intersection. Only valid if hit == 1.
        normal: The surface normal (unit length), oriented by the primitive's
            convention: outward for spheres, the precomputed face normal for
            triangles. It is not flipped to face the ray.
        material_id: Index into the material table. -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    material_id: ti.i32


@ti.func
def make_miss_record() -> HitRecord:
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material_id=-1,
    )


@ti.func
def _solve_quadratic_robust(h: ti.f32, a: ti.f32, c: ti.f32, sqrt_d: ti.f32):
    """Solve a*t^2 + 2*h*t + c = 0 in a numerically stable way.

    Args:
        h: Half of the linear coefficient.
        a: Quadratic coefficient.
        c: Constant term.
        sqrt_d: Square root of the discriminant (h^2 - a*c).

    Returns:
        Tuple of (t0, t1) where t0 <= t1.
    """
    # q = -(h + sign(h) * sqrt(discriminant))
    sign_h = ti.select(h < 0.0, -1.0, 1.0)
    q = -(h + sign_h * sqrt_d)

    t0 = 0.0
    t1 = 0.0

    if ti.abs(q) < 1e-10:
        # Tangent ray through the center plane; plain formula is fine here
        t0 = (-h - sqrt_d) / a
        t1 = (-h + sqrt_d) / a
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        temp = t0
        t0 = t1
        t1 = temp

    return t0, t1


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    center: vec3,
    radius: ti.f32,
    material_id: ti.i32,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-sphere intersection.

    With oc = origin - center:
        a = dot(d, d)
        h = dot(d, oc)          (half of the usual b)
        c = dot(oc, oc) - r^2
        discriminant = h^2 - a*c

    The near root is tried first, then the far root; the first one strictly
    inside (t_min, t_max) wins.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        center: The sphere center.
        radius: The sphere radius.
        material_id: The material id copied into the hit record.
        t_min: Lower bound (exclusive); a small epsilon suppresses shadow acne.
        t_max: Upper bound (exclusive); the closest hit found so far.

    Returns:
        A HitRecord. Check the hit field to determine if intersection occurred.
    """
    oc = ray_origin - center

    a = tm.dot(ray_direction, ray_direction)
    h = tm.dot(ray_direction, oc)
    c = tm.dot(oc, oc) - radius * radius

    discriminant = h * h - a * c

    # Taichi requires outer-scope declaration
    result = make_miss_record()

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t0, t1 = _solve_quadratic_robust(h, a, c, sqrt_d)

        t = t0
        valid = (t > t_min) and (t < t_max)

        if not valid:
            t = t1
            valid = (t > t_min) and (t < t_max)

        if valid:
            hit_point = ray_origin + t * ray_direction
            # Outward normal, never flipped
            outward_normal = (hit_point - center) / radius
            result = HitRecord(
                hit=1,
                t=t,
                point=hit_point,
                normal=tm.normalize(outward_normal),
                material_id=material_id,
            )

    return result
