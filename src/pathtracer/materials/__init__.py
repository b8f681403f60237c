"""Materials module for surface scattering.

Components:
    material: Host-side Material values and the MaterialType tag
    table: Device material table indexed by material id
    diffuse: Rough matte scattering around the normal
    metal: Mirror reflection with optional fuzz
    dielectric: Refraction, with reflection on total internal reflection
    emission: Light sources that end the path with their color
"""

from .dielectric import scatter_dielectric
from .diffuse import scatter_diffuse
from .emission import scatter_emission
from .material import Material, MaterialType
from .metal import scatter_metal
from .table import MAX_MATERIALS, add_material, clear_materials, get_material_count

__all__ = [
    "Material",
    "MaterialType",
    "MAX_MATERIALS",
    "add_material",
    "clear_materials",
    "get_material_count",
    "scatter_diffuse",
    "scatter_metal",
    "scatter_dielectric",
    "scatter_emission",
]
