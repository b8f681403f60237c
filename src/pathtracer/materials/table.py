"""Device-side material table.

Materials live in one owned table indexed by material id. Primitives store
the id, and hit records carry it, so nothing on the device holds a reference
to host objects.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.materials.material import Material
    >>> from pathtracer.materials.table import add_material, clear_materials
    >>> clear_materials()
    >>> add_material(Material.diffuse((0.8, 0.3, 0.3)))
    0
"""

import taichi as ti
import taichi.math as tm

from pathtracer.materials.material import Material

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Material Field Storage
# =============================================================================

MAX_MATERIALS = 1024

# material_types[i] stores the MaterialType value for material id i
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
# Albedo or radiance
material_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
# Fuzz for metals, index of refraction for dielectrics
material_params = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Reset the table. Existing entries are overwritten by later adds."""
    num_materials[None] = 0


def add_material(material: Material) -> int:
    """Append a material to the table.

    Args:
        material: The material value to store.

    Returns:
        The material id (table index).

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_types[idx] = int(material.kind)
    material_colors[idx] = material.color.to_tuple()
    material_params[idx] = material.param
    num_materials[None] = idx + 1
    return idx


def get_material_count() -> int:
    """Get the number of materials in the table."""
    return int(num_materials[None])


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the material type for a material id, or -1 if the id is invalid."""
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def get_material_color(material_id: ti.i32) -> vec3:
    return material_colors[material_id]


@ti.func
def get_material_param(material_id: ti.i32) -> ti.f32:
    return material_params[material_id]
