"""World container for a render.

The World owns everything a render reads: a material table (arena), the
spheres and the triangle meshes. Spheres own their material value; when a
sphere is added, its material is interned into the table so that equal
materials share one id. Triangles reference table entries by id.

The World is a host-side description. scene.intersection.load_world copies
it into device fields before rendering, after which intersection queries
only read those fields.

Example:
    >>> from pathtracer.core.vector import Vector3
    >>> from pathtracer.geometry.sphere import Sphere
    >>> from pathtracer.materials.material import Material
    >>> from pathtracer.scene.world import World
    >>> world = World()
    >>> world.add_sphere(Sphere(Vector3(0, 0, -1), 0.5, Material.diffuse((0.5, 0.5, 0.5))))
    0
"""

from __future__ import annotations

from collections.abc import Iterable

from pathtracer.geometry.mesh import Mesh
from pathtracer.geometry.sphere import Sphere
from pathtracer.materials.material import Material


class World:
    """Spheres, meshes and the material table they refer to.

    Args:
        materials: Materials to pre-register, in id order.
        spheres: Spheres to add.
        meshes: Meshes to add (their material ids must be valid).
    """

    def __init__(
        self,
        materials: Iterable[Material] = (),
        spheres: Iterable[Sphere] = (),
        meshes: Iterable[Mesh] = (),
    ) -> None:
        self._materials: list[Material] = []
        self._spheres: list[Sphere] = []
        self._sphere_material_ids: list[int] = []
        self._meshes: list[Mesh] = []

        for material in materials:
            self.add_material(material)
        for sphere in spheres:
            self.add_sphere(sphere)
        for mesh in meshes:
            self.add_mesh(mesh)

    def __repr__(self) -> str:
        return (
            f"World(materials={len(self._materials)}, spheres={len(self._spheres)}, "
            f"meshes={len(self._meshes)}, triangles={self.triangle_count})"
        )

    # -------------------------------------------------------------------------
    # Materials
    # -------------------------------------------------------------------------

    def add_material(self, material: Material) -> int:
        """Append a material to the table and return its id."""
        self._materials.append(material)
        return len(self._materials) - 1

    def intern_material(self, material: Material) -> int:
        """Return the id of an equal material, adding it if absent."""
        for material_id, existing in enumerate(self._materials):
            if existing == material:
                return material_id
        return self.add_material(material)

    def material(self, material_id: int) -> Material:
        """Look up a material by id.

        Raises:
            ValueError: If the id is not in the table.
        """
        if not 0 <= material_id < len(self._materials):
            raise ValueError(
                f"Invalid material_id {material_id}. "
                f"Valid range is 0 to {len(self._materials) - 1}."
            )
        return self._materials[material_id]

    @property
    def materials(self) -> tuple[Material, ...]:
        return tuple(self._materials)

    # -------------------------------------------------------------------------
    # Primitives
    # -------------------------------------------------------------------------

    def add_sphere(self, sphere: Sphere) -> int:
        """Add a sphere and return its index."""
        self._sphere_material_ids.append(self.intern_material(sphere.material))
        self._spheres.append(sphere)
        return len(self._spheres) - 1

    def add_mesh(self, mesh: Mesh) -> int:
        """Add a mesh and return its index.

        Raises:
            ValueError: If a triangle refers to a material id not in the table.
        """
        for material_id in sorted(mesh.material_ids()):
            self.material(material_id)
        self._meshes.append(mesh)
        return len(self._meshes) - 1

    @property
    def spheres(self) -> tuple[Sphere, ...]:
        return tuple(self._spheres)

    @property
    def sphere_material_ids(self) -> tuple[int, ...]:
        return tuple(self._sphere_material_ids)

    @property
    def meshes(self) -> tuple[Mesh, ...]:
        return tuple(self._meshes)

    @property
    def triangle_count(self) -> int:
        return sum(len(mesh) for mesh in self._meshes)
