"""Path tracing integrator for Monte Carlo light transport.

Each path starts with white throughput and follows at most max_bounces
segments:

    no hit          -> throughput * background(direction), stop
    material scatters -> throughput *= attenuation, continue from the hit point
    no continuation -> throughput * material color, stop (absorption or emission)
    budget used up  -> black

Pixels average samples_per_pixel jittered paths, apply the approximate
gamma sqrt(mean), and are stored as 8-bit channels. Every pixel draws from
its own random stream seeded by (Options.seed, pixel index), so the render
is parallel over pixels and still bit-reproducible.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.core.integrator import render
    >>> from pathtracer.core.options import Options
    >>> framebuffer = render(world, camera, Options(samples_per_pixel=16), width=200)
"""

import logging
import time

import taichi as ti
import taichi.math as tm

from pathtracer.camera.pinhole import Camera, get_ray, setup_camera
from pathtracer.core.options import Options
from pathtracer.core.random import DEFAULT_SEED, next_unit_float, seed_pixel_stream
from pathtracer.core.ray import make_ray
from pathtracer.core.vector import Vector3
from pathtracer.image.framebuffer import Framebuffer
from pathtracer.materials.dielectric import scatter_dielectric
from pathtracer.materials.diffuse import scatter_diffuse
from pathtracer.materials.emission import scatter_emission
from pathtracer.materials.material import MaterialType
from pathtracer.materials.metal import scatter_metal
from pathtracer.materials.table import (
    get_material_color,
    get_material_param,
    get_material_type,
)
from pathtracer.scene.intersection import T_MAX, T_MIN, intersect_world, load_world
from pathtracer.scene.world import World

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Sky gradient: white looking straight down, light blue straight up
BACKGROUND_BOTTOM = vec3(1.0, 1.0, 1.0)
BACKGROUND_TOP = vec3(0.5, 0.7, 1.0)

# =============================================================================
# Render Target
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# 8-bit channel values, indexed [row, column]
_framebuffer = ti.Vector.field(3, dtype=ti.i32, shape=(MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH))


def _check_dimensions(width: int, height: int) -> None:
    if width < 1 or height < 1:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )


# =============================================================================
# Light Transport
# =============================================================================


@ti.func
def background(direction: vec3) -> vec3:
    """Vertical sky gradient: t = 0.5 (y + 1), lerp(white, light blue, t)."""
    unit_direction = tm.normalize(direction)
    t = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - t) * BACKGROUND_BOTTOM + t * BACKGROUND_TOP


@ti.func
def scatter(
    material_id: ti.i32,
    incident_direction: vec3,
    normal: vec3,
    state: ti.u32,
):
    """Dispatch to the scatter rule of the hit material.

    Returns:
        A tuple of (state, scattered_direction, color, did_scatter). For an
        invalid material id the path ends black.
    """
    mat_type = get_material_type(material_id)

    s = state
    scattered_direction = vec3(0.0, 0.0, 0.0)
    color = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if mat_type == int(MaterialType.DIFFUSE):
        s, scattered_direction, color, did_scatter = scatter_diffuse(
            get_material_color(material_id), normal, s
        )

    elif mat_type == int(MaterialType.METAL):
        s, scattered_direction, color, did_scatter = scatter_metal(
            get_material_color(material_id),
            get_material_param(material_id),
            incident_direction,
            normal,
            s,
        )

    elif mat_type == int(MaterialType.DIELECTRIC):
        scattered_direction, color, did_scatter = scatter_dielectric(
            get_material_param(material_id), incident_direction, normal
        )

    elif mat_type == int(MaterialType.EMISSION):
        scattered_direction, color, did_scatter = scatter_emission(
            get_material_color(material_id)
        )

    return s, scattered_direction, color, did_scatter


@ti.func
def trace_path(origin: vec3, direction: vec3, max_bounces: ti.i32, state: ti.u32):
    """Follow one light path through the loaded scene.

    Args:
        origin: Primary ray origin.
        direction: Primary ray direction (normalized).
        max_bounces: Maximum number of intersection steps.
        state: The pixel's random stream state.

    Returns:
        A tuple of (state, color).
    """
    s = state
    ray_origin = origin
    ray_direction = direction
    throughput = vec3(1.0, 1.0, 1.0)
    color = vec3(0.0, 0.0, 0.0)

    # Taichi doesn't support break in ti.func loops
    active = 1

    for _ in range(max_bounces):
        if active == 1:
            rec = intersect_world(ray_origin, ray_direction, T_MIN, T_MAX)

            if rec.hit == 0:
                color = throughput * background(ray_direction)
                active = 0
            else:
                s, scattered_direction, material_color, did_scatter = scatter(
                    rec.material_id, ray_direction, rec.normal, s
                )
                if did_scatter == 1:
                    throughput *= material_color
                    ray_origin = rec.point
                    ray_direction = scattered_direction
                else:
                    color = throughput * material_color
                    active = 0

    return s, color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_pixels(
    width: ti.i32,
    height: ti.i32,
    samples_per_pixel: ti.i32,
    max_bounces: ti.i32,
    seed: ti.u32,
    positive_is_up: ti.i32,
):
    """Render every pixel into the 8-bit render target.

    Row 0 of the sampling grid is the bottom of the viewport (t = 0).
    """
    for row, column in ti.ndrange(height, width):
        u_scale = 1.0 / ti.cast(ti.max(width - 1, 1), ti.f32)
        v_scale = 1.0 / ti.cast(ti.max(height - 1, 1), ti.f32)
        state = seed_pixel_stream(seed, row * width + column)
        color = vec3(0.0, 0.0, 0.0)

        for _ in range(samples_per_pixel):
            state, xi_u = next_unit_float(state)
            state, xi_v = next_unit_float(state)
            u = (ti.cast(column, ti.f32) + xi_u) * u_scale
            v = (ti.cast(row, ti.f32) + xi_v) * v_scale
            ray = get_ray(u, v)
            state, sample = trace_path(ray.origin, ray.direction, max_bounces, state)
            color += sample

        mean = color / ti.cast(samples_per_pixel, ti.f32)

        rgb = ti.Vector([0, 0, 0], dt=ti.i32)
        for c in ti.static(range(3)):
            # Approximate gamma 2 correction
            value = ti.sqrt(tm.max(mean[c], 0.0)) * 255.999
            if tm.isnan(value):
                value = 0.0
            rgb[c] = ti.cast(tm.min(value, 255.0), ti.i32)

        target_row = row
        if positive_is_up == 1:
            target_row = height - row - 1
        _framebuffer[target_row, column] = rgb


@ti.kernel
def _trace_single(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    max_bounces: ti.i32,
    seed: ti.u32,
) -> vec3:
    ray = make_ray(vec3(ox, oy, oz), vec3(dx, dy, dz))
    _, color = trace_path(ray.origin, ray.direction, max_bounces, seed)
    return color


# =============================================================================
# Public Rendering API
# =============================================================================


def ray_color(
    origin: Vector3,
    direction: Vector3,
    max_bounces: int = 8,
    seed: int = DEFAULT_SEED,
) -> tuple[float, float, float]:
    """Trace one path through the currently loaded scene.

    This is a Python-callable function for testing. For production rendering,
    use render() which processes all pixels in parallel.

    Args:
        origin: Ray origin.
        direction: Ray direction (normalized inside the kernel).
        max_bounces: Bounce budget for the path.
        seed: Starting state of the random stream (non-zero).

    Returns:
        Tuple of (R, G, B) linear color values.
    """
    seed = int(seed) & 0xFFFFFFFF
    if seed == 0:
        raise ValueError("seed must be non-zero (after masking to 32 bits)")

    color = _trace_single(
        origin.x, origin.y, origin.z,
        direction.x, direction.y, direction.z,
        max_bounces,
        seed,
    )
    return (float(color[0]), float(color[1]), float(color[2]))


def render(
    world: World,
    camera: Camera,
    options: Options | None = None,
    width: int = 400,
    height: int | None = None,
) -> Framebuffer:
    """Render a world through a camera into a new framebuffer.

    Args:
        world: The scene to render. It is uploaded to the device first.
        camera: The camera to render from.
        options: Sampling options. Defaults to Options().
        width: Image width in pixels.
        height: Image height in pixels. Defaults to width / camera.aspect_ratio.

    Returns:
        A Framebuffer of gamma-corrected 8-bit pixels.

    Raises:
        ValueError: If the dimensions are not positive or exceed the
            preallocated render target.
        RuntimeError: If the world exceeds a device capacity.
    """
    if options is None:
        options = Options()
    if height is None:
        height = max(1, int(width / camera.aspect_ratio))
    _check_dimensions(width, height)

    load_world(world)
    setup_camera(camera)

    logger.info(
        "Rendering %dx%d, %d samples per pixel, %d max bounces",
        width,
        height,
        options.samples_per_pixel,
        options.max_ray_bounces,
    )
    start_time = time.perf_counter()

    _render_pixels(
        width,
        height,
        options.samples_per_pixel,
        options.max_ray_bounces,
        int(options.seed) & 0xFFFFFFFF,
        1 if options.positive_is_up else 0,
    )
    pixels = _framebuffer.to_numpy()[:height, :width, :]

    logger.info("Render finished in %.2fs", time.perf_counter() - start_time)
    return Framebuffer(width, height, pixels)
