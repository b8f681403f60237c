"""Camera module for primary ray generation.

Viewport coordinates:
    s in [0, 1]: left to right across the image
    t in [0, 1]: bottom to top across the image
"""

from .pinhole import Camera, CameraRay, get_ray, setup_camera

__all__ = [
    "Camera",
    "CameraRay",
    "setup_camera",
    "get_ray",
]
