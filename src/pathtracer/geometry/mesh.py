"""Triangle meshes.

A mesh is an ordered list of triangles without any spatial index; the
device walks its triangles linearly (see scene.intersection.hit_mesh).
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from pathtracer.geometry.triangle import Triangle


@dataclass(frozen=True)
class Mesh:
    """An ordered collection of triangles.

    Attributes:
        triangles: The triangles, in intersection order.
    """

    triangles: tuple[Triangle, ...] = ()

    @classmethod
    def from_triangles(cls, triangles: Iterable[Triangle]) -> "Mesh":
        return cls(tuple(triangles))

    def __len__(self) -> int:
        return len(self.triangles)

    def __iter__(self) -> Iterator[Triangle]:
        return iter(self.triangles)

    def material_ids(self) -> set[int]:
        return {triangle.material_id for triangle in self.triangles}
