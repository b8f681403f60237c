"""Scene-level primitive intersection testing.

The scene is stored in Taichi fields: spheres, triangles, and mesh ranges
into the triangle arrays. Each primitive carries a material id into the
material table (materials.table).

intersect_world scans every sphere, then every mesh's triangles, narrowing
t_max as closer hits are found. There is no acceleration structure. Later
tests need a strictly smaller t, so at equal t the primitive tested first
wins.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.scene.intersection import load_world, world_hit
    >>> load_world(world)
    >>> world_hit(Vector3(0, 0, 0), Vector3(0, 0, -1))
    HitInfo(t=0.5, ...)
"""

import logging
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import make_ray
from pathtracer.core.vector import Vector3
from pathtracer.geometry.mesh import Mesh
from pathtracer.geometry.sphere import HitRecord, hit_sphere, make_miss_record
from pathtracer.geometry.triangle import Triangle, hit_triangle
from pathtracer.materials.table import add_material, clear_materials
from pathtracer.scene.world import World

logger = logging.getLogger(__name__)

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Smallest accepted hit distance for world queries (suppresses shadow acne)
T_MIN = 0.001

# Largest finite f32; stands in for an unbounded ray
T_MAX = 3.4e38

# =============================================================================
# Scene Storage Fields
# =============================================================================

MAX_SPHERES = 1024
MAX_TRIANGLES = 65536
MAX_MESHES = 256

sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

triangle_v0 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRIANGLES)
triangle_v1 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRIANGLES)
triangle_v2 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRIANGLES)
triangle_normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRIANGLES)
triangle_material_ids = ti.field(dtype=ti.i32, shape=MAX_TRIANGLES)
num_triangles = ti.field(dtype=ti.i32, shape=())

# Each mesh is a contiguous run [start, start + count) of triangles
mesh_starts = ti.field(dtype=ti.i32, shape=MAX_MESHES)
mesh_counts = ti.field(dtype=ti.i32, shape=MAX_MESHES)
num_meshes = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all primitives from the scene."""
    num_spheres[None] = 0
    num_triangles[None] = 0
    num_meshes[None] = 0


def add_sphere(center: Vector3, radius: float, material_id: int) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere.
        material_id: The material id to associate with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = center.to_tuple()
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def _add_triangle(triangle: Triangle) -> int:
    idx = num_triangles[None]
    if idx >= MAX_TRIANGLES:
        raise RuntimeError(f"Maximum number of triangles ({MAX_TRIANGLES}) exceeded")
    triangle_v0[idx] = triangle.v0.to_tuple()
    triangle_v1[idx] = triangle.v1.to_tuple()
    triangle_v2[idx] = triangle.v2.to_tuple()
    triangle_normals[idx] = triangle.normal.to_tuple()
    triangle_material_ids[idx] = triangle.material_id
    num_triangles[None] = idx + 1
    return idx


def add_mesh(mesh: Mesh) -> int:
    """Add a mesh's triangles to the scene as one contiguous range.

    Returns:
        The index of the added mesh.

    Raises:
        RuntimeError: If the mesh or triangle capacity is exceeded.
    """
    idx = num_meshes[None]
    if idx >= MAX_MESHES:
        raise RuntimeError(f"Maximum number of meshes ({MAX_MESHES}) exceeded")
    if num_triangles[None] + len(mesh) > MAX_TRIANGLES:
        raise RuntimeError(f"Maximum number of triangles ({MAX_TRIANGLES}) exceeded")

    start = num_triangles[None]
    for triangle in mesh:
        _add_triangle(triangle)
    mesh_starts[idx] = start
    mesh_counts[idx] = len(mesh)
    num_meshes[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    return int(num_spheres[None])


def get_triangle_count() -> int:
    return int(num_triangles[None])


def get_mesh_count() -> int:
    return int(num_meshes[None])


def load_world(world: World) -> None:
    """Replace the device scene and material table with a world's contents.

    Material ids on the device equal the ids in world.materials.

    Raises:
        RuntimeError: If any device capacity is exceeded.
    """
    clear_scene()
    clear_materials()

    for material in world.materials:
        add_material(material)
    for sphere, material_id in zip(world.spheres, world.sphere_material_ids):
        add_sphere(sphere.center, sphere.radius, material_id)
    for mesh in world.meshes:
        add_mesh(mesh)

    logger.debug("Loaded %r onto the device", world)


# =============================================================================
# Intersection (Taichi functions)
# =============================================================================


@ti.func
def hit_mesh(
    ray_origin: vec3,
    ray_direction: vec3,
    mesh_index: ti.i32,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test a ray against one mesh, keeping the closest triangle hit."""
    closest_t = t_max
    result = make_miss_record()

    start = mesh_starts[mesh_index]
    for i in range(start, start + mesh_counts[mesh_index]):
        rec = hit_triangle(
            ray_origin,
            ray_direction,
            triangle_v0[i],
            triangle_v1[i],
            triangle_v2[i],
            triangle_normals[i],
            triangle_material_ids[i],
            t_min,
            closest_t,
        )
        if rec.hit == 1:
            closest_t = rec.t
            result = rec

    return result


@ti.func
def intersect_world(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test a ray against all primitives in the scene.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        The closest HitRecord, or a miss record if nothing was hit.
    """
    closest_t = t_max
    result = make_miss_record()

    for i in range(num_spheres[None]):
        rec = hit_sphere(
            ray_origin,
            ray_direction,
            sphere_centers[i],
            sphere_radii[i],
            sphere_material_ids[i],
            t_min,
            closest_t,
        )
        if rec.hit == 1:
            closest_t = rec.t
            result = rec

    for m in range(num_meshes[None]):
        rec = hit_mesh(ray_origin, ray_direction, m, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = rec

    return result


# =============================================================================
# Host Query
# =============================================================================


@dataclass(frozen=True)
class HitInfo:
    """Host copy of a HitRecord.

    Attributes:
        t: The ray parameter of the hit.
        point: The world position.
        normal: The surface normal as reported by the primitive.
        material_id: Index into World.materials.
    """

    t: float
    point: Vector3
    normal: Vector3
    material_id: int


_query_hit = ti.field(dtype=ti.i32, shape=())
_query_t = ti.field(dtype=ti.f32, shape=())
_query_point = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_normal = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_material_id = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _run_query(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    t_min: ti.f32,
    t_max: ti.f32,
):
    ray = make_ray(vec3(ox, oy, oz), vec3(dx, dy, dz))
    rec = intersect_world(ray.origin, ray.direction, t_min, t_max)
    _query_hit[None] = rec.hit
    _query_t[None] = rec.t
    _query_point[None] = rec.point
    _query_normal[None] = rec.normal
    _query_material_id[None] = rec.material_id


def world_hit(
    origin: Vector3,
    direction: Vector3,
    t_min: float = T_MIN,
    t_max: float = T_MAX,
) -> HitInfo | None:
    """Intersect one ray with the loaded scene.

    The direction is normalized before the test, so t is a distance.

    Returns:
        The closest hit, or None if the ray escapes.
    """
    _run_query(
        origin.x, origin.y, origin.z,
        direction.x, direction.y, direction.z,
        t_min, t_max,
    )
    if _query_hit[None] == 0:
        return None
    point = _query_point[None]
    normal = _query_normal[None]
    return HitInfo(
        t=float(_query_t[None]),
        point=Vector3(float(point[0]), float(point[1]), float(point[2])),
        normal=Vector3(float(normal[0]), float(normal[1]), float(normal[2])),
        material_id=int(_query_material_id[None]),
    )
