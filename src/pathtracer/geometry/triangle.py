"""Triangle primitive with a two-stage ray-triangle test.

Stage 1 intersects the ray with the triangle's supporting plane, using the
non-normalized normal n = (v1 - v0) x (v2 - v0). Rays with |n . d| < 1e-8
are treated as parallel and rejected.

Stage 2 runs three same-side edge tests: for each edge, the cross product of
the edge with the vector from its start to the hit point must point along n.

Hits report the triangle's precomputed face normal.
"""

from dataclasses import dataclass, field

import taichi as ti
import taichi.math as tm

from pathtracer.core.vector import UnitVector3, Vector3
from pathtracer.geometry.sphere import HitRecord, make_miss_record

# Type alias for 3D vectors
vec3 = tm.vec3

PARALLEL_EPSILON = 1e-8


@dataclass(frozen=True)
class Triangle:
    """A triangle in a scene description.

    The face normal follows the right-hand rule over (v0, v1, v2) and is
    computed once at construction.

    Attributes:
        v0: First vertex.
        v1: Second vertex.
        v2: Third vertex.
        material_id: Index of the shared material in the world's table.
        normal: The unit face normal (derived, not an init argument).

    Raises:
        ValueError: If the vertices are collinear (zero area).
    """

    v0: Vector3
    v1: Vector3
    v2: Vector3
    material_id: int = 0
    normal: UnitVector3 = field(init=False)

    def __post_init__(self) -> None:
        n = (self.v1 - self.v0).cross(self.v2 - self.v0)
        if n.length_squared() == 0.0:
            raise ValueError(
                f"Degenerate triangle: vertices {self.v0}, {self.v1}, {self.v2} are collinear"
            )
        object.__setattr__(self, "normal", n.normalize())


@ti.func
def hit_triangle(
    ray_origin: vec3,
    ray_direction: vec3,
    v0: vec3,
    v1: vec3,
    v2: vec3,
    face_normal: vec3,
    material_id: ti.i32,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-triangle intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        v0: First vertex.
        v1: Second vertex.
        v2: Third vertex.
        face_normal: The precomputed unit face normal reported on a hit.
        material_id: The material id copied into the hit record.
        t_min: Lower bound (exclusive).
        t_max: Upper bound (exclusive).

    Returns:
        A HitRecord. Check the hit field to determine if intersection occurred.
    """
    result = make_miss_record()

    n = tm.cross(v1 - v0, v2 - v0)
    n_dot_d = tm.dot(n, ray_direction)

    if ti.abs(n_dot_d) >= PARALLEL_EPSILON:
        # Plane through v0: n . p = n . v0
        t = (tm.dot(n, v0) - tm.dot(n, ray_origin)) / n_dot_d

        if t > t_min and t < t_max:
            p = ray_origin + t * ray_direction

            inside_0 = tm.dot(n, tm.cross(v1 - v0, p - v0)) >= 0.0
            inside_1 = tm.dot(n, tm.cross(v2 - v1, p - v1)) >= 0.0
            inside_2 = tm.dot(n, tm.cross(v0 - v2, p - v2)) >= 0.0

            if inside_0 and inside_1 and inside_2:
                result = HitRecord(
                    hit=1,
                    t=t,
                    point=p,
                    normal=face_normal,
                    material_id=material_id,
                )

    return result
