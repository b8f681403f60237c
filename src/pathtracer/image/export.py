"""Image export utilities for rendered framebuffers.

Supported formats:
    - PPM (plain-text P3), rows written bottom-to-top
    - PNG (8-bit RGB via Pillow)

The P3 writer emits the framebuffer's last row first. With the default
Options.positive_is_up=True the top scanline is row 0, so the file starts at
the bottom of the picture.

Example:
    >>> from pathtracer.image.export import save_ppm, save_png
    >>> save_ppm(framebuffer, "output.ppm")
    >>> save_png(framebuffer, "output.png")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from PIL import Image as PILImage

if TYPE_CHECKING:
    from pathtracer.image.framebuffer import Framebuffer

logger = logging.getLogger(__name__)


def write_ppm(framebuffer: Framebuffer, stream: TextIO) -> None:
    """Write a framebuffer as plain-text PPM (P3) to an open text stream.

    Format:
        P3
        <width> <height>
        255
        r g b      (one pixel per line, rows from last to first)
    """
    stream.write(
        f"P3\n{framebuffer.width} {framebuffer.height}\n{framebuffer.max_color_value}\n"
    )
    pixels = framebuffer.pixels
    for row in range(framebuffer.height - 1, -1, -1):
        for r, g, b in pixels[row]:
            stream.write(f"{r} {g} {b}\n")


def save_ppm(framebuffer: Framebuffer, filepath: str | Path) -> None:
    """Save a framebuffer as a plain-text PPM file."""
    with open(filepath, "w", encoding="ascii") as stream:
        write_ppm(framebuffer, stream)
    logger.info("Saved PPM image: %s", filepath)


def to_pil_image(framebuffer: Framebuffer) -> PILImage.Image:
    """Convert a framebuffer to a Pillow RGB image (row 0 at the top)."""
    return PILImage.fromarray(framebuffer.pixels)


def save_png(framebuffer: Framebuffer, filepath: str | Path) -> None:
    """Save a framebuffer as an 8-bit RGB PNG."""
    to_pil_image(framebuffer).save(filepath)
    logger.info("Saved PNG image: %s", filepath)


def save_image(framebuffer: Framebuffer, filepath: str | Path) -> None:
    """Save a framebuffer, picking the format from the file extension.

    Raises:
        ValueError: If the extension is neither .ppm nor .png.
    """
    suffix = Path(filepath).suffix.lower()
    if suffix == ".ppm":
        save_ppm(framebuffer, filepath)
    elif suffix == ".png":
        save_png(framebuffer, filepath)
    else:
        raise ValueError(f"Unsupported image format '{suffix}'; use .ppm or .png")
