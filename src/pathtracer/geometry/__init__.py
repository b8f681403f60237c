"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive, HitRecord and ray-sphere intersection
    triangle: Triangle primitive and ray-triangle intersection
    mesh: Triangle collection rendered as one group

Intersection routines are Taichi functions returning a HitRecord with the
closest hit in (t_min, t_max), or hit = 0.
"""

from .mesh import Mesh
from .sphere import HitRecord, Sphere, hit_sphere, make_miss_record
from .triangle import Triangle, hit_triangle

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_miss_record",
    "Triangle",
    "hit_triangle",
    "Mesh",
]
