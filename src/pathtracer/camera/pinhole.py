"""Pinhole camera model for perspective projection ray generation.

A camera is an origin plus a viewport: its lower-left corner and the
horizontal and vertical span vectors. cast_ray(s, t) shoots a ray from the
origin through lower_left + s * horizontal + t * vertical, with s and t in
[0, 1] (s = 0 left edge, t = 0 bottom edge).

Constructors:
- axis_aligned / at: viewport height 2 at focal length 1, looking down -z.
- with_vertical_fov: same orientation, viewport height 2 tan(fov / 2).
- look_at: builds the orthonormal basis (u, v, w) from the view parameters:
    w = normalize(origin - look_at)   (opposite view direction)
    u = normalize(up x w)             (right)
    v = w x u                         (up)

Fields of view are in degrees.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.camera.pinhole import Camera, setup_camera
    >>> from pathtracer.core.vector import Vector3
    >>> camera = Camera.look_at(
    ...     origin=Vector3(0.0, 0.0, 3.0),
    ...     look_at=Vector3(0.0, 0.0, 0.0),
    ...     up=Vector3(0.0, 1.0, 0.0),
    ...     vertical_fov=60.0,
    ...     aspect_ratio=16.0 / 9.0,
    ... )
    >>> setup_camera(camera)
"""

import math
from dataclasses import dataclass

import taichi as ti

from pathtracer.core.ray import Ray, make_ray
from pathtracer.core.vector import UnitVector3, Vector3

# =============================================================================
# Camera Data Structures
# =============================================================================

FOCAL_LENGTH = 1.0


@dataclass(frozen=True)
class CameraRay:
    """A host-side primary ray.

    Attributes:
        origin: The camera origin.
        direction: Unit direction through the viewport point.
    """

    origin: Vector3
    direction: UnitVector3

    def at(self, t: float) -> Vector3:
        return self.origin + self.direction * t


def _check_aspect_ratio(aspect_ratio: float) -> None:
    if not aspect_ratio > 0.0:
        raise ValueError(f"Aspect ratio must be positive, got {aspect_ratio}")


def _viewport_height(vertical_fov: float) -> float:
    if not 0.0 < vertical_fov < 180.0:
        raise ValueError(
            f"Vertical field of view must be in (0, 180) degrees, got {vertical_fov}"
        )
    return 2.0 * math.tan(math.radians(vertical_fov) / 2.0)


@dataclass(frozen=True)
class Camera:
    """A pinhole (perspective) camera.

    Immutable once built; use the classmethod constructors.

    Attributes:
        origin: Camera position in world space.
        lower_left_corner: Lower-left corner of the viewport.
        horizontal: Full width span of the viewport.
        vertical: Full height span of the viewport.
    """

    origin: Vector3
    lower_left_corner: Vector3
    horizontal: Vector3
    vertical: Vector3

    @classmethod
    def _axis_aligned_viewport(
        cls, origin: Vector3, viewport_height: float, aspect_ratio: float
    ) -> "Camera":
        viewport_width = aspect_ratio * viewport_height
        horizontal = Vector3(viewport_width, 0.0, 0.0)
        vertical = Vector3(0.0, viewport_height, 0.0)
        lower_left = origin - Vector3(
            viewport_width / 2.0, viewport_height / 2.0, FOCAL_LENGTH
        )
        return cls(origin, lower_left, horizontal, vertical)

    @classmethod
    def axis_aligned(cls, aspect_ratio: float) -> "Camera":
        """Camera at the world origin looking down -z."""
        return cls.at(Vector3.zero(), aspect_ratio)

    @classmethod
    def at(cls, origin: Vector3, aspect_ratio: float) -> "Camera":
        """Axis-aligned camera at origin, viewport height 2.

        Raises:
            ValueError: If the aspect ratio is not positive.
        """
        _check_aspect_ratio(aspect_ratio)
        return cls._axis_aligned_viewport(origin, 2.0, aspect_ratio)

    @classmethod
    def with_vertical_fov(
        cls, origin: Vector3, vertical_fov: float, aspect_ratio: float
    ) -> "Camera":
        """Axis-aligned camera with a vertical field of view in degrees.

        Raises:
            ValueError: If the fov is outside (0, 180) or the aspect ratio is
                not positive.
        """
        _check_aspect_ratio(aspect_ratio)
        return cls._axis_aligned_viewport(
            origin, _viewport_height(vertical_fov), aspect_ratio
        )

    @classmethod
    def look_at(
        cls,
        origin: Vector3,
        look_at: Vector3,
        up: Vector3,
        vertical_fov: float,
        aspect_ratio: float,
    ) -> "Camera":
        """Camera at origin looking toward look_at.

        Args:
            origin: Camera position.
            look_at: Point the camera looks at.
            up: Approximate up direction; must not be parallel to the view axis.
            vertical_fov: Vertical field of view in degrees.
            aspect_ratio: Width divided by height of the output image.

        Raises:
            ValueError: If origin equals look_at, up is parallel to the view
                axis, the fov is outside (0, 180) or the aspect ratio is not
                positive.
        """
        _check_aspect_ratio(aspect_ratio)
        viewport_height = _viewport_height(vertical_fov)
        viewport_width = viewport_height * aspect_ratio

        view = origin - look_at
        if view.near_zero():
            raise ValueError("Camera origin and look_at point must differ")
        w = view.normalize()

        side = up.cross(w)
        if side.near_zero():
            raise ValueError(f"Up vector {up} is parallel to the view direction")
        u = side.normalize()
        v = w.cross(u)

        horizontal = u * viewport_width
        vertical = v * viewport_height
        lower_left = origin - horizontal / 2.0 - vertical / 2.0 - w
        return cls(origin, lower_left, horizontal, vertical)

    @property
    def aspect_ratio(self) -> float:
        """Width over height of the viewport."""
        return self.horizontal.length() / self.vertical.length()

    def cast_ray(self, s: float, t: float) -> CameraRay:
        """Ray from the origin through viewport coordinates (s, t)."""
        target = self.lower_left_corner + self.horizontal * s + self.vertical * t
        return CameraRay(self.origin, (target - self.origin).normalize())


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())
_viewport_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())
_viewport_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())


def setup_camera(camera: Camera) -> None:
    """Upload a camera to the device so kernels can call get_ray."""
    _camera_origin[None] = camera.origin.to_tuple()
    _lower_left_corner[None] = camera.lower_left_corner.to_tuple()
    _viewport_horizontal[None] = camera.horizontal.to_tuple()
    _viewport_vertical[None] = camera.vertical.to_tuple()


@ti.func
def get_ray(s: ti.f32, t: ti.f32) -> Ray:
    """Generate the primary ray through viewport coordinates (s, t).

    Args:
        s: Horizontal coordinate, 0 = left edge, 1 = right edge.
        t: Vertical coordinate, 0 = bottom edge, 1 = top edge.

    Returns:
        A Ray from the camera origin with a normalized direction.
    """
    point_on_viewport = (
        _lower_left_corner[None] + s * _viewport_horizontal[None] + t * _viewport_vertical[None]
    )
    origin = _camera_origin[None]
    return make_ray(origin, point_on_viewport - origin)
