"""Render options."""

from dataclasses import dataclass

from pathtracer.core.random import DEFAULT_SEED


@dataclass(frozen=True)
class Options:
    """Sampling configuration for a render.

    Attributes:
        samples_per_pixel: Paths averaged per pixel (>= 1).
        max_ray_bounces: Bounce budget per path (>= 0). A path that uses it up
            without escaping or being absorbed contributes black.
        positive_is_up: If True, framebuffer row 0 holds the top scanline
            (world +y up). If False, row 0 holds the bottom scanline.
        seed: Non-zero seed for the per-pixel random streams.
    """

    samples_per_pixel: int = 32
    max_ray_bounces: int = 8
    positive_is_up: bool = True
    seed: int = DEFAULT_SEED

    def __post_init__(self) -> None:
        if self.samples_per_pixel < 1:
            raise ValueError(
                f"samples_per_pixel must be at least 1, got {self.samples_per_pixel}"
            )
        if self.max_ray_bounces < 0:
            raise ValueError(
                f"max_ray_bounces must be non-negative, got {self.max_ray_bounces}"
            )
        if int(self.seed) & 0xFFFFFFFF == 0:
            raise ValueError("seed must be non-zero (after masking to 32 bits)")
