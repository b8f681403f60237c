"""Framebuffer: a row-major 8-bit RGB pixel buffer."""

from __future__ import annotations

import numpy as np
import numpy.typing as npt


class Framebuffer:
    """Pixel storage indexed by [row, column].

    Args:
        width: Image width in pixels (>= 1).
        height: Image height in pixels (>= 1).
        pixels: Optional initial contents of shape (height, width, 3). Copied
            and converted to uint8.

    Raises:
        ValueError: If a dimension is below 1 or pixels has the wrong shape.
    """

    max_color_value = 255

    def __init__(
        self,
        width: int,
        height: int,
        pixels: npt.ArrayLike | None = None,
    ) -> None:
        if width < 1 or height < 1:
            raise ValueError(f"Framebuffer dimensions must be positive, got {width}x{height}")
        self._width = int(width)
        self._height = int(height)

        if pixels is None:
            self._pixels = np.zeros((self._height, self._width, 3), dtype=np.uint8)
        else:
            array = np.asarray(pixels)
            if array.shape != (self._height, self._width, 3):
                raise ValueError(
                    f"Pixel array shape {array.shape} does not match "
                    f"({self._height}, {self._width}, 3)"
                )
            self._pixels = array.astype(np.uint8, copy=True)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def pixels(self) -> npt.NDArray[np.uint8]:
        """The backing array, shape (height, width, 3)."""
        return self._pixels

    def __getitem__(self, index: tuple[int, int]) -> tuple[int, int, int]:
        row, column = index
        r, g, b = self._pixels[row, column]
        return int(r), int(g), int(b)

    def __setitem__(self, index: tuple[int, int], color: tuple[int, int, int]) -> None:
        row, column = index
        self._pixels[row, column] = color

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Framebuffer):
            return NotImplemented
        return bool(np.array_equal(self._pixels, other._pixels))

    def __repr__(self) -> str:
        return f"Framebuffer(width={self._width}, height={self._height})"

    def to_bytes(self) -> bytes:
        return self._pixels.tobytes()
