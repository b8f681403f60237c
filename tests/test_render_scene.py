"""End-to-end tests for the render_scene example script."""

from pathlib import Path

SCENES = Path(__file__).resolve().parent.parent / "examples" / "scenes"


class TestParseArgs:
    """Tests for command-line parsing."""

    def test_defaults(self):
        """Test default argument values."""
        from examples.render_scene import parse_args

        args = parse_args(["scene.txt"])
        assert args.scene == Path("scene.txt")
        assert args.width == 400
        assert args.height is None
        assert args.samples is None
        assert args.output == Path("render.ppm")
        assert args.arch == "cpu"
        assert not args.quiet

    def test_overrides(self):
        """Test explicit options."""
        from examples.render_scene import parse_args

        args = parse_args(
            ["s.scene", "--width", "64", "--samples", "4", "--seed", "9", "--output", "x.png"]
        )
        assert (args.width, args.samples, args.seed) == (64, 4, 9)
        assert args.output == Path("x.png")


class TestRenderSceneFile:
    """Tests for rendering the bundled scenes."""

    def test_spheres_scene_to_ppm(self, tmp_path):
        """Test rendering the sample sphere scene to a PPM file."""
        from examples.render_scene import render_scene_file

        output = tmp_path / "spheres.ppm"
        render_scene_file(
            SCENES / "spheres.scene", output, width=32, samples=2, bounces=4
        )
        header = output.read_text(encoding="ascii").split("\n", 3)[:3]
        assert header[0] == "P3"
        assert header[1] == "32 18"
        assert header[2] == "255"

    def test_lit_room_scene_to_png(self, tmp_path):
        """Test rendering the sample scene with lights and triangles to PNG."""
        from PIL import Image

        from examples.render_scene import render_scene_file

        output = tmp_path / "room.png"
        render_scene_file(SCENES / "lit_room.scene", output, width=24, height=16, samples=1)
        with Image.open(output) as image:
            assert image.size == (24, 16)
