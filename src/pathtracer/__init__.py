"""Taichi-based CPU path tracer.

This package renders scenes made of spheres and triangle meshes with a
small, closed set of materials, using Monte Carlo path tracing:
- Iterative light transport with a bounded bounce count
- Diffuse, metal, dielectric and emissive materials
- Deterministic per-pixel random streams (bit-reproducible renders)
- A recursive-descent parser for a textual scene format

Subpackages:
    core: Vectors, rays, random streams, render options and the integrator
    geometry: Sphere, triangle and mesh primitives with intersection tests
    materials: Material values, the device material table and scatter rules
    scene: World container, device scene storage and the scene parser
    camera: Pinhole camera with axis-aligned and look-at construction
    image: Framebuffer and PPM/PNG export
"""

__version__ = "0.1.0"
