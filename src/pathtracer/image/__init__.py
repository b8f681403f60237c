"""Image module: framebuffer storage and file export."""

from .export import save_image, save_png, save_ppm, to_pil_image, write_ppm
from .framebuffer import Framebuffer

__all__ = [
    "Framebuffer",
    "write_ppm",
    "save_ppm",
    "save_png",
    "save_image",
    "to_pil_image",
]
