"""Unit tests for triangles and meshes."""

import pytest
import taichi as ti

T_MAX = 3.4e38


def _run_hit(origin, direction, v0, v1, v2, t_min=0.001, t_max=T_MAX):
    """Run hit_triangle in a kernel and return (hit, t, point, normal)."""
    from pathtracer.core.vector import Vector3
    from pathtracer.geometry.triangle import Triangle, hit_triangle, vec3

    triangle = Triangle(Vector3(*v0), Vector3(*v1), Vector3(*v2))

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    point = ti.Vector.field(3, dtype=ti.f32, shape=())
    normal = ti.Vector.field(3, dtype=ti.f32, shape=())
    verts = ti.Vector.field(3, dtype=ti.f32, shape=4)
    verts[0] = triangle.v0.to_tuple()
    verts[1] = triangle.v1.to_tuple()
    verts[2] = triangle.v2.to_tuple()
    verts[3] = triangle.normal.to_tuple()

    @ti.kernel
    def run(
        ox: ti.f32, oy: ti.f32, oz: ti.f32,
        dx: ti.f32, dy: ti.f32, dz: ti.f32,
        lo: ti.f32, hi: ti.f32,
    ):
        rec = hit_triangle(
            vec3(ox, oy, oz), vec3(dx, dy, dz),
            verts[0], verts[1], verts[2], verts[3],
            3, lo, hi,
        )
        hit[None] = rec.hit
        t_val[None] = rec.t
        point[None] = rec.point
        normal[None] = rec.normal

    run(*origin, *direction, t_min, t_max)
    return hit[None], t_val[None], point[None], normal[None]


# Unit right triangle in the z = -1 plane, normal toward +z
V0 = (0.0, 0.0, -1.0)
V1 = (1.0, 0.0, -1.0)
V2 = (0.0, 1.0, -1.0)


class TestTriangleValue:
    """Tests for the host-side Triangle."""

    def test_normal_right_hand_rule(self):
        """Test that the face normal follows the vertex winding."""
        from pathtracer.core.vector import Vector3
        from pathtracer.geometry.triangle import Triangle

        triangle = Triangle(Vector3(*V0), Vector3(*V1), Vector3(*V2))
        assert triangle.normal.to_tuple() == (0.0, 0.0, 1.0)

        flipped = Triangle(Vector3(*V0), Vector3(*V2), Vector3(*V1))
        assert flipped.normal.to_tuple() == (0.0, 0.0, -1.0)

    def test_degenerate_rejected(self):
        """Test that collinear vertices are rejected."""
        from pathtracer.core.vector import Vector3
        from pathtracer.geometry.triangle import Triangle

        with pytest.raises(ValueError):
            Triangle(Vector3(0.0, 0.0, 0.0), Vector3(1.0, 1.0, 1.0), Vector3(2.0, 2.0, 2.0))


class TestTriangleIntersection:
    """Tests for ray-triangle intersection."""

    def test_hit_inside(self):
        """Test a ray through the interior."""
        hit, t, point, normal = _run_hit((0.25, 0.25, 0.0), (0.0, 0.0, -1.0), V0, V1, V2)
        assert hit == 1
        assert abs(t - 1.0) < 1e-5
        assert abs(point[0] - 0.25) < 1e-5
        assert abs(point[1] - 0.25) < 1e-5
        assert abs(point[2] + 1.0) < 1e-5
        assert abs(normal[2] - 1.0) < 1e-5

    def test_plane_at_positive_offset(self):
        """Test the plane solve for a triangle away from the origin plane."""
        a = (0.0, 0.0, -3.0)
        b = (2.0, 0.0, -3.0)
        c = (0.0, 2.0, -3.0)
        hit, t, *_ = _run_hit((0.5, 0.5, 1.0), (0.0, 0.0, -1.0), a, b, c)
        assert hit == 1
        assert abs(t - 4.0) < 1e-5

    def test_miss_outside(self):
        """Test a ray through the plane but outside the triangle."""
        hit, *_ = _run_hit((0.75, 0.75, 0.0), (0.0, 0.0, -1.0), V0, V1, V2)
        assert hit == 0

    def test_back_side_hit(self):
        """Test that a ray from behind still hits and reports the face normal."""
        hit, t, _, normal = _run_hit((0.25, 0.25, -2.0), (0.0, 0.0, 1.0), V0, V1, V2)
        assert hit == 1
        assert abs(t - 1.0) < 1e-5
        assert abs(normal[2] - 1.0) < 1e-5

    def test_behind_origin_misses(self):
        """Test that a plane hit with negative t is rejected."""
        hit, *_ = _run_hit((0.25, 0.25, 0.0), (0.0, 0.0, 1.0), V0, V1, V2)
        assert hit == 0

    @pytest.mark.parametrize(
        "origin",
        [
            (0.25, 0.25, -1.0),
            (0.25, 0.25, 0.0),
            (-5.0, 3.0, -1.0),
            (0.0, 0.0, -1.0),
        ],
    )
    def test_parallel_ray_never_hits(self, origin):
        """Test that a ray parallel to the plane misses from any origin."""
        hit, *_ = _run_hit(origin, (1.0, 0.0, 0.0), V0, V1, V2)
        assert hit == 0

    def test_t_max_excludes_hit(self):
        """Test that a hit beyond t_max is ignored."""
        hit, *_ = _run_hit((0.25, 0.25, 0.0), (0.0, 0.0, -1.0), V0, V1, V2, t_max=0.5)
        assert hit == 0


class TestMesh:
    """Tests for the Mesh container."""

    def test_from_triangles(self):
        """Test building a mesh from an iterable."""
        from pathtracer.core.vector import Vector3
        from pathtracer.geometry.mesh import Mesh
        from pathtracer.geometry.triangle import Triangle

        triangles = [
            Triangle(Vector3(*V0), Vector3(*V1), Vector3(*V2), material_id=0),
            Triangle(Vector3(*V0), Vector3(*V2), Vector3(*V1), material_id=2),
        ]
        mesh = Mesh.from_triangles(iter(triangles))
        assert len(mesh) == 2
        assert list(mesh) == triangles
        assert mesh.material_ids() == {0, 2}
