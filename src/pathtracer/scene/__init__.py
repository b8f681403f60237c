"""Scene module: world container, device upload and scene files.

Components:
    world: Host-side World holding materials, spheres and meshes
    intersection: Device scene storage and closest-hit queries
    parser: Textual scene format
"""

from .intersection import (
    MAX_MESHES,
    MAX_SPHERES,
    MAX_TRIANGLES,
    T_MAX,
    T_MIN,
    HitInfo,
    clear_scene,
    intersect_world,
    load_world,
    world_hit,
)
from .parser import ParseError, ParseErrorKind, Scene, load_scene, parse_input
from .world import World

__all__ = [
    "World",
    "HitInfo",
    "T_MIN",
    "T_MAX",
    "MAX_SPHERES",
    "MAX_TRIANGLES",
    "MAX_MESHES",
    "clear_scene",
    "load_world",
    "intersect_world",
    "world_hit",
    "Scene",
    "ParseError",
    "ParseErrorKind",
    "parse_input",
    "load_scene",
]
