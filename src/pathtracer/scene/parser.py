"""Recursive-descent parser for the textual scene format.

Syntax (whitespace-insensitive, statements end with ';'):

    program  :  <camera> [<options>] (<material>)* (<sphere> | <triangle>)*
    camera   :  camera origin <vec3> [look_at <vec3>] [fov <f32>] aspect <f32> ;
    options  :  options samples <int> bounces <int> ;
    material :  material <name> : <type> ;
    type     :  Diffuse color <vec3>
             |  Metal color <vec3> fuzz <f32>
             |  Dielectric ir <f32>
             |  Emission color <vec3>
    sphere   :  sphere center <vec3> radius <f32> material <name> ;
    triangle :  triangle v0 <vec3> v1 <vec3> v2 <vec3> material <name> ;
    vec3     :  <f32> <f32> <f32>

Every rule takes the remaining input and returns (value, rest), or raises
ParseError. Nothing is retried: the first malformed statement fails the
whole parse. All triangles in a file form a single mesh.

Example:
    >>> from pathtracer.scene.parser import parse_input
    >>> scene = parse_input('''
    ...     camera origin 0 0 0 aspect 1.5;
    ...     material red : Diffuse color 0.8 0.1 0.1;
    ...     sphere center 0 0 -1 radius 0.5 material red;
    ... ''')
    >>> len(scene.world.spheres)
    1
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pathtracer.camera.pinhole import Camera
from pathtracer.core.options import Options
from pathtracer.core.vector import Vector3
from pathtracer.geometry.mesh import Mesh
from pathtracer.geometry.sphere import Sphere
from pathtracer.geometry.triangle import Triangle
from pathtracer.materials.material import Material
from pathtracer.scene.world import World

logger = logging.getLogger(__name__)

DEFAULT_LOOK_AT_FOV = 90.0
WORLD_UP = Vector3(0.0, 1.0, 0.0)

_DIGITS = "0123456789"


class ParseErrorKind(Enum):
    """Category of a scene parse failure."""

    MISSING_CAMERA = "missing camera"
    UNEXPECTED_TOKEN = "unexpected token"
    MALFORMED_NUMBER = "malformed number"
    UNDEFINED_MATERIAL = "undefined material"
    DUPLICATE_MATERIAL = "duplicate material"
    INVALID_VALUE = "invalid value"
    TRAILING_INPUT = "trailing input"


class ParseError(ValueError):
    """A structured scene parse error.

    Attributes:
        kind: The error category.
        message: Human-readable description without position.
        remaining: The unparsed input at the point of failure.
        offset: Character offset into the full input, set by parse_input.
        line: 1-based line number, set by parse_input.
        column: 1-based column number, set by parse_input.
    """

    def __init__(self, kind: ParseErrorKind, message: str, remaining: str = "") -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.remaining = remaining
        self.offset: int | None = None
        self.line: int | None = None
        self.column: int | None = None

    def locate(self, source: str) -> ParseError:
        """Resolve the failure position against the full input."""
        offset = len(source) - len(self.remaining)
        prefix = source[:offset]
        self.offset = offset
        self.line = prefix.count("\n") + 1
        self.column = offset - (prefix.rfind("\n") + 1) + 1
        return self

    def __str__(self) -> str:
        if self.line is None:
            return f"{self.kind.value}: {self.message}"
        return f"{self.kind.value}: {self.message} (line {self.line}, column {self.column})"


@dataclass
class Scene:
    """Everything a scene file describes.

    Attributes:
        camera: The camera from the camera statement.
        world: Spheres, the triangle mesh (if any) and the material table.
        options: Render options from the options statement, or defaults.
        materials: Declared materials by name.
    """

    camera: Camera
    world: World
    options: Options = field(default_factory=Options)
    materials: dict[str, Material] = field(default_factory=dict)

    @property
    def spheres(self) -> tuple[Sphere, ...]:
        return self.world.spheres


# =============================================================================
# Lexical helpers
# =============================================================================


def _is_identifier_char(char: str) -> bool:
    return char.isascii() and (char.isalnum() or char == "_")


def _snippet(source: str) -> str:
    text = source.strip().split("\n", 1)[0]
    return text[:20] if text else "end of input"


def _peek(source: str, literal: str) -> bool:
    """Check whether the next token is literal (keywords need a word boundary)."""
    rest = source.lstrip()
    if not rest.startswith(literal):
        return False
    if _is_identifier_char(literal[-1]):
        after = rest[len(literal):]
        return not (after and _is_identifier_char(after[0]))
    return True


def _expect(source: str, literal: str) -> str:
    """Consume literal or raise UNEXPECTED_TOKEN."""
    rest = source.lstrip()
    if not _peek(rest, literal):
        raise ParseError(
            ParseErrorKind.UNEXPECTED_TOKEN,
            f"expected '{literal}', found '{_snippet(rest)}'",
            rest,
        )
    return rest[len(literal):]


def parse_identifier(source: str) -> tuple[str, str]:
    """identifier : [A-Za-z0-9_]+"""
    rest = source.lstrip()
    end = 0
    while end < len(rest) and _is_identifier_char(rest[end]):
        end += 1
    if end == 0:
        raise ParseError(
            ParseErrorKind.UNEXPECTED_TOKEN,
            f"expected a name, found '{_snippet(rest)}'",
            rest,
        )
    return rest[:end], rest[end:]


def parse_int(source: str) -> tuple[int, str]:
    """int : [0-9]+"""
    rest = source.lstrip()
    end = 0
    while end < len(rest) and rest[end] in _DIGITS:
        end += 1
    if end == 0:
        raise ParseError(
            ParseErrorKind.MALFORMED_NUMBER,
            f"expected an integer, found '{_snippet(rest)}'",
            rest,
        )
    return int(rest[:end]), rest[end:]


def parse_float(source: str) -> tuple[float, str]:
    """f32 : -? [0-9.]+ with at least one digit and at most one '.'"""
    rest = source.lstrip()
    end = 1 if rest.startswith("-") else 0
    digits = 0
    dots = 0
    while end < len(rest) and (rest[end] in _DIGITS or rest[end] == "."):
        if rest[end] == ".":
            dots += 1
        else:
            digits += 1
        end += 1

    if digits == 0 or dots > 1:
        raise ParseError(
            ParseErrorKind.MALFORMED_NUMBER,
            f"malformed number '{rest[:end] or _snippet(rest)}'",
            rest,
        )
    return float(rest[:end]), rest[end:]


def parse_vec3(source: str) -> tuple[Vector3, str]:
    """vec3 : <f32> <f32> <f32>"""
    x, rest = parse_float(source)
    y, rest = parse_float(rest)
    z, rest = parse_float(rest)
    return Vector3(x, y, z), rest


# =============================================================================
# Statements
# =============================================================================


def parse_camera(source: str) -> tuple[Camera, str]:
    """camera : camera origin <vec3> [look_at <vec3>] [fov <f32>] aspect <f32> ;"""
    statement = source.lstrip()
    rest = _expect(statement, "camera")
    rest = _expect(rest, "origin")
    origin, rest = parse_vec3(rest)

    look_at = None
    if _peek(rest, "look_at"):
        look_at, rest = parse_vec3(_expect(rest, "look_at"))

    vertical_fov = None
    if _peek(rest, "fov"):
        vertical_fov, rest = parse_float(_expect(rest, "fov"))

    rest = _expect(rest, "aspect")
    aspect, rest = parse_float(rest)
    rest = _expect(rest, ";")

    try:
        if look_at is not None:
            fov = DEFAULT_LOOK_AT_FOV if vertical_fov is None else vertical_fov
            camera = Camera.look_at(origin, look_at, WORLD_UP, fov, aspect)
        elif vertical_fov is not None:
            camera = Camera.with_vertical_fov(origin, vertical_fov, aspect)
        else:
            camera = Camera.at(origin, aspect)
    except ValueError as e:
        raise ParseError(ParseErrorKind.INVALID_VALUE, str(e), statement) from e

    return camera, rest


def parse_options(source: str) -> tuple[Options, str]:
    """options : options samples <int> bounces <int> ;"""
    statement = source.lstrip()
    rest = _expect(statement, "options")
    samples, rest = parse_int(_expect(rest, "samples"))
    bounces, rest = parse_int(_expect(rest, "bounces"))
    rest = _expect(rest, ";")

    try:
        options = Options(samples_per_pixel=samples, max_ray_bounces=bounces)
    except ValueError as e:
        raise ParseError(ParseErrorKind.INVALID_VALUE, str(e), statement) from e

    return options, rest


def parse_material(source: str) -> tuple[tuple[str, Material], str]:
    """material : material <name> : <type> ;"""
    statement = source.lstrip()
    rest = _expect(statement, "material")
    name, rest = parse_identifier(rest)
    rest = _expect(rest, ":")

    type_position = rest.lstrip()
    kind, rest = parse_identifier(rest)
    try:
        if kind == "Diffuse":
            color, rest = parse_vec3(_expect(rest, "color"))
            material = Material.diffuse(color)
        elif kind == "Metal":
            color, rest = parse_vec3(_expect(rest, "color"))
            fuzz, rest = parse_float(_expect(rest, "fuzz"))
            material = Material.metal(color, fuzz)
        elif kind == "Dielectric":
            ior, rest = parse_float(_expect(rest, "ir"))
            material = Material.dielectric(ior)
        elif kind == "Emission":
            color, rest = parse_vec3(_expect(rest, "color"))
            material = Material.emission(color)
        else:
            raise ParseError(
                ParseErrorKind.UNEXPECTED_TOKEN,
                f"unknown material type '{kind}'",
                type_position,
            )
    except ParseError:
        raise
    except ValueError as e:
        raise ParseError(ParseErrorKind.INVALID_VALUE, str(e), statement) from e

    rest = _expect(rest, ";")
    return (name, material), rest


def _parse_material_reference(source: str, known: Mapping[str, object]) -> tuple[str, str]:
    rest = _expect(source, "material")
    name_position = rest.lstrip()
    name, rest = parse_identifier(rest)
    if name not in known:
        raise ParseError(
            ParseErrorKind.UNDEFINED_MATERIAL,
            f"material '{name}' is not defined",
            name_position,
        )
    return name, rest


def parse_sphere(source: str, materials: Mapping[str, Material]) -> tuple[Sphere, str]:
    """sphere : sphere center <vec3> radius <f32> material <name> ;"""
    statement = source.lstrip()
    rest = _expect(statement, "sphere")
    center, rest = parse_vec3(_expect(rest, "center"))
    radius, rest = parse_float(_expect(rest, "radius"))
    name, rest = _parse_material_reference(rest, materials)
    rest = _expect(rest, ";")

    try:
        sphere = Sphere(center, radius, materials[name])
    except ValueError as e:
        raise ParseError(ParseErrorKind.INVALID_VALUE, str(e), statement) from e

    return sphere, rest


def parse_triangle(source: str, material_ids: Mapping[str, int]) -> tuple[Triangle, str]:
    """triangle : triangle v0 <vec3> v1 <vec3> v2 <vec3> material <name> ;"""
    statement = source.lstrip()
    rest = _expect(statement, "triangle")
    v0, rest = parse_vec3(_expect(rest, "v0"))
    v1, rest = parse_vec3(_expect(rest, "v1"))
    v2, rest = parse_vec3(_expect(rest, "v2"))
    name, rest = _parse_material_reference(rest, material_ids)
    rest = _expect(rest, ";")

    try:
        triangle = Triangle(v0, v1, v2, material_ids[name])
    except ValueError as e:
        raise ParseError(ParseErrorKind.INVALID_VALUE, str(e), statement) from e

    return triangle, rest


# =============================================================================
# Program
# =============================================================================


def _parse_program(source: str) -> Scene:
    if not _peek(source, "camera"):
        raise ParseError(
            ParseErrorKind.MISSING_CAMERA,
            "scene must start with a camera statement",
            source.lstrip(),
        )
    camera, rest = parse_camera(source)

    options = Options()
    if _peek(rest, "options"):
        options, rest = parse_options(rest)

    world = World()
    materials: dict[str, Material] = {}
    material_ids: dict[str, int] = {}
    while _peek(rest, "material"):
        statement = rest.lstrip()
        (name, material), rest = parse_material(rest)
        if name in materials:
            raise ParseError(
                ParseErrorKind.DUPLICATE_MATERIAL,
                f"material '{name}' is already defined",
                statement,
            )
        materials[name] = material
        material_ids[name] = world.add_material(material)

    triangles: list[Triangle] = []
    while True:
        if _peek(rest, "sphere"):
            sphere, rest = parse_sphere(rest, materials)
            world.add_sphere(sphere)
        elif _peek(rest, "triangle"):
            triangle, rest = parse_triangle(rest, material_ids)
            triangles.append(triangle)
        else:
            break

    if rest.strip():
        raise ParseError(
            ParseErrorKind.TRAILING_INPUT,
            f"unexpected input '{_snippet(rest)}'",
            rest.lstrip(),
        )

    if triangles:
        world.add_mesh(Mesh.from_triangles(triangles))

    return Scene(camera=camera, world=world, options=options, materials=materials)


def parse_input(source: str) -> Scene:
    """Parse a whole scene description.

    Args:
        source: The scene text.

    Returns:
        The parsed Scene.

    Raises:
        ParseError: On any syntax or value error, with offset, line and
            column resolved against source.
    """
    try:
        scene = _parse_program(source)
    except ParseError as error:
        error.locate(source)
        raise

    logger.debug(
        "Parsed scene: %d materials, %r", len(scene.materials), scene.world
    )
    return scene


def load_scene(filepath: str | Path) -> Scene:
    """Read and parse a scene file.

    Raises:
        OSError: If the file cannot be read.
        ParseError: If the contents are not a valid scene.
    """
    source = Path(filepath).read_text(encoding="utf-8")
    scene = parse_input(source)
    logger.info("Loaded scene %s: %r", filepath, scene.world)
    return scene
