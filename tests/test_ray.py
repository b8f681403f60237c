"""Tests for device ray helpers."""

import taichi as ti


class TestRay:
    """Tests for the Ray dataclass."""

    def test_make_ray_normalizes(self):
        """Test that make_ray stores a unit direction."""
        from pathtracer.core.ray import make_ray, ray_at, vec3

        point = ti.Vector.field(3, dtype=ti.f32, shape=())
        length = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def run():
            ray = make_ray(vec3(1.0, 2.0, 3.0), vec3(0.0, 0.0, -4.0))
            length[None] = ti.math.length(ray.direction)
            point[None] = ray_at(ray, 2.0)

        run()
        assert abs(length[None] - 1.0) < 1e-6
        p = point[None]
        assert abs(p[0] - 1.0) < 1e-6
        assert abs(p[1] - 2.0) < 1e-6
        assert abs(p[2] - 1.0) < 1e-6


class TestVectorHelpers:
    """Tests for reflect, refract and near_zero."""

    def test_reflect(self):
        """Test mirror reflection about a normal."""
        from pathtracer.core.ray import reflect, vec3

        out = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def run():
            out[None] = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))

        run()
        r = out[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 1.0) < 1e-6
        assert abs(r[2]) < 1e-6

    def test_refract_matches_host(self):
        """Test that device refraction agrees with the host version."""
        from pathtracer.core.ray import refract, vec3
        from pathtracer.core.vector import UnitVector3
        from pathtracer.core.vector import refract as host_refract

        out = ti.Vector.field(3, dtype=ti.f32, shape=())
        incident = UnitVector3(0.3, -1.0, 0.2)
        normal = UnitVector3(0.0, 1.0, 0.0)

        @ti.kernel
        def run(ix: ti.f32, iy: ti.f32, iz: ti.f32):
            out[None] = refract(vec3(ix, iy, iz), vec3(0.0, 1.0, 0.0), 1.0 / 1.5)

        run(incident.x, incident.y, incident.z)
        expected = host_refract(incident, normal, 1.0 / 1.5)
        r = out[None]
        assert abs(r[0] - expected.x) < 1e-5
        assert abs(r[1] - expected.y) < 1e-5
        assert abs(r[2] - expected.z) < 1e-5

    def test_near_zero(self):
        """Test the near_zero threshold on the device."""
        from pathtracer.core.ray import near_zero, vec3

        small = ti.field(dtype=ti.i32, shape=())
        large = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def run():
            small[None] = near_zero(vec3(1e-9, -1e-9, 0.0))
            large[None] = near_zero(vec3(1e-9, 1e-3, 0.0))

        run()
        assert small[None] == 1
        assert large[None] == 0

    def test_random_unit_vector_is_unit(self):
        """Test that device random directions have unit length."""
        from pathtracer.core.ray import random_unit_vector

        lengths = ti.field(dtype=ti.f32, shape=64)

        @ti.kernel
        def run(seed: ti.u32):
            state = seed
            ti.loop_config(serialize=True)
            for i in range(64):
                state, direction = random_unit_vector(state)
                lengths[i] = ti.math.length(direction)

        run(2547549)
        for i in range(64):
            assert abs(lengths[i] - 1.0) < 1e-5
