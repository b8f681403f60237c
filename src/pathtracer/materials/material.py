"""Material values.

Materials form a closed set of variants, matched exhaustively by the
integrator. A Material is a value: two materials with the same variant and
parameters are interchangeable, which lets the world intern them into one
table entry.

Example:
    >>> from pathtracer.materials.material import Material, MaterialType
    >>> glass = Material.dielectric(1.5)
    >>> glass.kind is MaterialType.DIELECTRIC
    True
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from pathtracer.core.vector import Vector3

WHITE = Vector3(1.0, 1.0, 1.0)


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    The integer values are stored in the device material table and used for
    dispatch inside kernels.
    """

    DIFFUSE = 0
    METAL = 1
    DIELECTRIC = 2
    EMISSION = 3


def _as_color(color: Vector3 | tuple[float, float, float]) -> Vector3:
    if isinstance(color, Vector3):
        return Vector3(color.x, color.y, color.z)
    r, g, b = color
    return Vector3(float(r), float(g), float(b))


def _check_reflectance(color: Vector3) -> None:
    for i, component in enumerate(color):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Color component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )


@dataclass(frozen=True)
class Material:
    """A surface material.

    Build instances through the variant constructors (diffuse, metal,
    dielectric, emission) which validate their parameters.

    Attributes:
        kind: The material variant.
        color: Albedo for diffuse/metal, radiance for emission, white for
            dielectric.
        fuzz: Metal roughness in [0, 1]; 0 for other variants.
        ior: Dielectric index of refraction; 1 for other variants.
    """

    kind: MaterialType
    color: Vector3 = WHITE
    fuzz: float = 0.0
    ior: float = 1.0

    @classmethod
    def diffuse(cls, color: Vector3 | tuple[float, float, float]) -> Material:
        """Lambertian-like diffuse material.

        Raises:
            ValueError: If any color component is outside [0, 1].
        """
        albedo = _as_color(color)
        _check_reflectance(albedo)
        return cls(MaterialType.DIFFUSE, albedo)

    @classmethod
    def metal(cls, color: Vector3 | tuple[float, float, float], fuzz: float = 0.0) -> Material:
        """Reflective metal with optional fuzz.

        Raises:
            ValueError: If a color component or fuzz is outside [0, 1].
        """
        albedo = _as_color(color)
        _check_reflectance(albedo)
        if fuzz < 0.0 or fuzz > 1.0:
            raise ValueError(
                f"Fuzz = {fuzz} is outside [0, 1]. "
                "Fuzz must be between 0 (perfect mirror) and 1 (maximum fuzz)."
            )
        return cls(MaterialType.METAL, albedo, fuzz=float(fuzz))

    @classmethod
    def dielectric(cls, ior: float) -> Material:
        """Clear refractive material (glass, water).

        Raises:
            ValueError: If the index of refraction is less than 1.0.
        """
        if ior < 1.0:
            raise ValueError(
                f"Index of refraction = {ior} is less than 1.0. "
                "IOR must be >= 1.0 for physically meaningful materials."
            )
        return cls(MaterialType.DIELECTRIC, WHITE, ior=float(ior))

    @classmethod
    def emission(cls, color: Vector3 | tuple[float, float, float]) -> Material:
        """Light source. The color is radiance and may exceed 1.

        Raises:
            ValueError: If any color component is negative.
        """
        radiance = _as_color(color)
        for i, component in enumerate(radiance):
            if component < 0.0:
                raise ValueError(f"Emission component {i} = {component} is negative")
        return cls(MaterialType.EMISSION, radiance)

    @property
    def param(self) -> float:
        """The scalar parameter stored in the device table (fuzz or ior)."""
        if self.kind is MaterialType.METAL:
            return self.fuzz
        if self.kind is MaterialType.DIELECTRIC:
            return self.ior
        return 0.0
