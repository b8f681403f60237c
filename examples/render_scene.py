#!/usr/bin/env python3
"""Render a scene file to a PPM or PNG image.

Usage:
    python -m examples.render_scene SCENE [options]

Options:
    --width WIDTH       Image width in pixels (default: 400)
    --height HEIGHT     Image height in pixels (default: width / camera aspect)
    --samples SAMPLES   Samples per pixel (overrides the scene's options)
    --bounces BOUNCES   Maximum bounces per path (overrides the scene's options)
    --seed SEED         Random seed (default: 2547549)
    --arch {cpu,gpu}    Taichi backend (default: cpu)
    --output OUTPUT     Output file, .ppm or .png (default: render.ppm)
    --quiet             Only log warnings and errors

Example:
    python -m examples.render_scene examples/scenes/spheres.scene --width 320 --samples 64
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
import time
from pathlib import Path

import taichi as ti

logger = logging.getLogger("render_scene")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a scene file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("scene", type=Path, help="Scene description file")
    parser.add_argument(
        "--width",
        type=int,
        default=400,
        help="Image width in pixels (default: 400)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Image height in pixels (default: width / camera aspect)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=None,
        help="Samples per pixel (default: from the scene, else 32)",
    )
    parser.add_argument(
        "--bounces",
        type=int,
        default=None,
        help="Maximum bounces per path (default: from the scene, else 8)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed, non-zero (default: 2547549)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("render.ppm"),
        help="Output file, .ppm or .png (default: render.ppm)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )
    return parser.parse_args(argv)


def render_scene_file(
    scene_path: Path,
    output_path: Path,
    width: int = 400,
    height: int | None = None,
    samples: int | None = None,
    bounces: int | None = None,
    seed: int | None = None,
) -> Path:
    """Parse, render and save one scene file.

    Command-line values override the scene's options statement.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports so Taichi is initialized before fields are declared
    from pathtracer.core.integrator import render
    from pathtracer.image.export import save_image
    from pathtracer.scene.parser import load_scene

    scene = load_scene(scene_path)

    overrides = {}
    if samples is not None:
        overrides["samples_per_pixel"] = samples
    if bounces is not None:
        overrides["max_ray_bounces"] = bounces
    if seed is not None:
        overrides["seed"] = seed
    options = dataclasses.replace(scene.options, **overrides)

    start_time = time.perf_counter()
    framebuffer = render(scene.world, scene.camera, options, width=width, height=height)
    save_image(framebuffer, output_path)

    logger.info(
        "Wrote %s (%dx%d) in %.2fs",
        output_path.absolute(),
        framebuffer.width,
        framebuffer.height,
        time.perf_counter() - start_time,
    )
    return output_path


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    ti.init(arch=ti.gpu if args.arch == "gpu" else ti.cpu)

    try:
        render_scene_file(
            scene_path=args.scene,
            output_path=args.output,
            width=args.width,
            height=args.height,
            samples=args.samples,
            bounces=args.bounces,
            seed=args.seed,
        )
    except (OSError, ValueError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
