"""Host-side 3D vectors for scene description.

Scene construction (parser, camera basis, triangle normals) happens in Python
scope before anything is uploaded to Taichi fields. These value types carry
the two vector forms used there:

- Vector3: a general (x, y, z) triple, closed under the usual arithmetic.
- UnitVector3: a triple whose constructor always normalizes its input. Any
  arithmetic that could break unit length (add, sub, scale) returns a plain
  Vector3, so a denormalized direction can never masquerade as a unit one.

Device code uses taichi.math.vec3 and the @ti.func helpers in core.ray.

Example:
    >>> from pathtracer.core.vector import Vector3, UnitVector3
    >>> n = UnitVector3(0.0, 3.0, 4.0)
    >>> n.length()
    1.0
    >>> type(n * 2.0).__name__
    'Vector3'
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass

NEAR_ZERO_EPSILON = 1e-8


@dataclass(frozen=True, eq=False)
class Vector3:
    """A general 3-component vector (point, offset or color).

    Attributes:
        x: First component.
        y: Second component.
        z: Third component.
    """

    x: float
    y: float
    z: float

    @classmethod
    def zero(cls) -> Vector3:
        return Vector3(0.0, 0.0, 0.0)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def __eq__(self, other: object) -> bool:
        # Component-wise; ignores the UnitVector3/Vector3 distinction
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.to_tuple() == other.to_tuple()

    def __hash__(self) -> int:
        return hash(self.to_tuple())

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, other: Vector3 | float) -> Vector3:
        # Component-wise for vectors, uniform scale for scalars
        if isinstance(other, Vector3):
            return Vector3(self.x * other.x, self.y * other.y, self.z * other.z)
        return Vector3(self.x * other, self.y * other, self.z * other)

    def __rmul__(self, scalar: float) -> Vector3:
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __truediv__(self, other: Vector3 | float) -> Vector3:
        if isinstance(other, Vector3):
            return Vector3(self.x / other.x, self.y / other.y, self.z / other.z)
        return Vector3(self.x / other, self.y / other, self.z / other)

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def dot(self, other: Vector3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length_squared(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.hypot(self.x, self.y, self.z)

    def normalize(self) -> UnitVector3:
        """Return the unit vector pointing the same way.

        Raises:
            ValueError: If the vector has zero length.
        """
        return UnitVector3(self.x, self.y, self.z)

    def near_zero(self) -> bool:
        """Check whether all three components are below 1e-8 in magnitude."""
        return (
            abs(self.x) < NEAR_ZERO_EPSILON
            and abs(self.y) < NEAR_ZERO_EPSILON
            and abs(self.z) < NEAR_ZERO_EPSILON
        )


@dataclass(frozen=True, eq=False)
class UnitVector3(Vector3):
    """A unit-length vector.

    The constructor normalizes whatever triple it is given, so the length
    invariant holds for the lifetime of the value. Negation keeps the
    invariant and returns a UnitVector3; every other arithmetic operator is
    inherited from Vector3 and returns a general Vector3.

    Raises:
        ValueError: If the input triple has zero (or non-finite) length.
    """

    def __post_init__(self) -> None:
        length = math.hypot(self.x, self.y, self.z)
        if length == 0.0 or not math.isfinite(length):
            raise ValueError(
                f"Cannot build a unit vector from ({self.x}, {self.y}, {self.z})"
            )
        # Frozen dataclass: assign through object.__setattr__
        object.__setattr__(self, "x", self.x / length)
        object.__setattr__(self, "y", self.y / length)
        object.__setattr__(self, "z", self.z / length)

    def __neg__(self) -> UnitVector3:
        return UnitVector3(-self.x, -self.y, -self.z)

    def normalize(self) -> UnitVector3:
        return self


def reflect(v: Vector3, n: UnitVector3) -> Vector3:
    """Mirror v about the unit normal n: v - 2 (v . n) n."""
    return v - n * (2.0 * v.dot(n))


def refract(uv: UnitVector3, n: UnitVector3, eta_ratio: float) -> Vector3:
    """Bend a unit direction through a surface using Snell's law.

    The result is the sum of the components perpendicular and parallel to
    the normal. No total internal reflection check is made; the parallel
    term uses the absolute value under the root so the result stays finite.

    Args:
        uv: Incoming unit direction.
        n: Unit normal on the incoming side of the surface.
        eta_ratio: Ratio of refractive indices (incident / transmitted).

    Returns:
        The refracted direction (not normalized).
    """
    cos_theta = min((-uv).dot(n), 1.0)
    r_out_perp = (uv + n * cos_theta) * eta_ratio
    r_out_parallel = n * -math.sqrt(abs(1.0 - r_out_perp.length_squared()))
    return r_out_perp + r_out_parallel
