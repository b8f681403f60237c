"""Pytest configuration for path tracer tests.

Taichi must be initialized once per session, before any module declaring
ti.field() is imported. Test modules therefore import pathtracer modules
inside the test functions.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_device_scene():
    """Clear the device scene and material table around each test."""
    from pathtracer.materials.table import clear_materials
    from pathtracer.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        clear_materials()

    _clear_all()
    yield
    _clear_all()


@pytest.fixture
def simple_world():
    """A diffuse ball resting on a large diffuse ground sphere."""
    from pathtracer.core.vector import Vector3
    from pathtracer.geometry.sphere import Sphere
    from pathtracer.materials.material import Material
    from pathtracer.scene.world import World

    world = World()
    world.add_sphere(
        Sphere(Vector3(0.0, -100.5, -1.0), 100.0, Material.diffuse((0.8, 0.8, 0.0)))
    )
    world.add_sphere(
        Sphere(Vector3(0.0, 0.0, -1.0), 0.5, Material.diffuse((0.1, 0.2, 0.5)))
    )
    return world
