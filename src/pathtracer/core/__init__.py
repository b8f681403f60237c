"""Core rendering module.

Components:
    vector: Host-side Vector3 and UnitVector3 value types
    random: Seeded xorshift32 streams, host and device flavours
    ray: Device ray structure and vector helpers
    options: Render options (samples, bounces, orientation, seed)
    integrator: Path tracing light transport and the render entry point

The integrator pulls in the camera, materials and scene modules, so it is
not imported here. Use ``from pathtracer.core.integrator import render``.
"""

from .options import Options
from .random import DEFAULT_SEED, Random, pixel_seed
from .ray import Ray, make_ray, random_unit_vector, ray_at, reflect, refract, vec3
from .vector import UnitVector3, Vector3

__all__ = [
    "Vector3",
    "UnitVector3",
    "Random",
    "DEFAULT_SEED",
    "pixel_seed",
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "reflect",
    "refract",
    "random_unit_vector",
    "Options",
]
