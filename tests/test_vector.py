"""Tests for the host-side Vector3 and UnitVector3 value types."""

import math

import pytest


class TestVector3:
    """Tests for general vector arithmetic."""

    def test_add_and_sub(self):
        """Test component-wise addition and subtraction."""
        from pathtracer.core.vector import Vector3

        a = Vector3(1.0, 2.0, 3.0)
        b = Vector3(0.5, -1.0, 2.0)
        assert a + b == Vector3(1.5, 1.0, 5.0)
        assert a - b == Vector3(0.5, 3.0, 1.0)

    def test_scalar_and_component_multiply(self):
        """Test scalar scaling from both sides and component-wise product."""
        from pathtracer.core.vector import Vector3

        v = Vector3(1.0, -2.0, 0.5)
        assert v * 2.0 == Vector3(2.0, -4.0, 1.0)
        assert 2.0 * v == Vector3(2.0, -4.0, 1.0)
        assert v * Vector3(2.0, 0.5, 4.0) == Vector3(2.0, -1.0, 2.0)
        assert v / 2.0 == Vector3(0.5, -1.0, 0.25)

    def test_dot_and_cross(self):
        """Test dot product and right-handed cross product."""
        from pathtracer.core.vector import Vector3

        x = Vector3(1.0, 0.0, 0.0)
        y = Vector3(0.0, 1.0, 0.0)
        assert x.dot(y) == 0.0
        assert x.cross(y) == Vector3(0.0, 0.0, 1.0)
        assert Vector3(1.0, 2.0, 3.0).dot(Vector3(4.0, 5.0, 6.0)) == 32.0

    def test_length(self):
        """Test length and squared length."""
        from pathtracer.core.vector import Vector3

        v = Vector3(3.0, 4.0, 0.0)
        assert v.length_squared() == 25.0
        assert v.length() == 5.0

    def test_near_zero(self):
        """Test the 1e-8 per-component threshold."""
        from pathtracer.core.vector import Vector3

        assert Vector3(1e-9, -1e-9, 0.0).near_zero()
        assert not Vector3(1e-9, 1e-7, 0.0).near_zero()

    def test_iteration_and_tuple(self):
        """Test unpacking a vector."""
        from pathtracer.core.vector import Vector3

        x, y, z = Vector3(1.0, 2.0, 3.0)
        assert (x, y, z) == (1.0, 2.0, 3.0)
        assert Vector3(1.0, 2.0, 3.0).to_tuple() == (1.0, 2.0, 3.0)


class TestUnitVector3:
    """Tests for the unit-length invariant."""

    @pytest.mark.parametrize(
        "components",
        [
            (1.0, 0.0, 0.0),
            (3.0, 4.0, 0.0),
            (-2.0, 7.0, 0.25),
            (1e-6, 2e-6, -3e-6),
            (1e6, -1e6, 1e6),
        ],
    )
    def test_constructor_normalizes(self, components):
        """Test that any non-zero input yields a unit-length value."""
        from pathtracer.core.vector import UnitVector3

        u = UnitVector3(*components)
        assert abs(u.length() - 1.0) < 1e-6

    @pytest.mark.parametrize(
        "components, expected",
        [
            ((1e-200, 0.0, 0.0), (1.0, 0.0, 0.0)),
            ((3e-170, 4e-170, 0.0), (0.6, 0.8, 0.0)),
            ((0.0, 3e200, -4e200), (0.0, 0.6, -0.8)),
        ],
    )
    def test_extreme_magnitudes_normalize(self, components, expected):
        """Test that tiny and huge finite inputs normalize without overflow."""
        from pathtracer.core.vector import UnitVector3

        u = UnitVector3(*components)
        for actual, want in zip(u, expected):
            assert abs(actual - want) < 1e-12

    def test_direction_preserved(self):
        """Test that normalization keeps the direction."""
        from pathtracer.core.vector import UnitVector3

        u = UnitVector3(0.0, 3.0, 4.0)
        assert abs(u.y - 0.6) < 1e-12
        assert abs(u.z - 0.8) < 1e-12

    def test_zero_vector_rejected(self):
        """Test that a zero triple cannot become a unit vector."""
        from pathtracer.core.vector import UnitVector3, Vector3

        with pytest.raises(ValueError):
            UnitVector3(0.0, 0.0, 0.0)
        with pytest.raises(ValueError):
            Vector3.zero().normalize()

    def test_arithmetic_returns_general_vector(self):
        """Test that add, sub and scale drop the unit type."""
        from pathtracer.core.vector import UnitVector3, Vector3

        u = UnitVector3(1.0, 0.0, 0.0)
        for result in (u + u, u - u, u * 2.0, 2.0 * u, u / 2.0):
            assert type(result) is Vector3

    def test_negation_keeps_unit_type(self):
        """Test that negation stays a unit vector."""
        from pathtracer.core.vector import UnitVector3

        u = -UnitVector3(0.0, 0.0, 2.0)
        assert isinstance(u, UnitVector3)
        assert u.z == -1.0

    def test_equal_to_general_vector(self):
        """Test that equality and hashing compare components, not types."""
        from pathtracer.core.vector import UnitVector3, Vector3

        u = UnitVector3(1.0, 0.0, 0.0)
        assert u == Vector3(1.0, 0.0, 0.0)
        assert Vector3(1.0, 0.0, 0.0) == u
        assert hash(u) == hash(Vector3(1.0, 0.0, 0.0))
        assert u != Vector3(0.0, 1.0, 0.0)
        assert u != (1.0, 0.0, 0.0)

    def test_frozen(self):
        """Test that components cannot be reassigned."""
        import dataclasses

        from pathtracer.core.vector import UnitVector3

        u = UnitVector3(1.0, 0.0, 0.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            u.x = 5.0


class TestHostReflectRefract:
    """Tests for host-side reflect and refract."""

    def test_reflect(self):
        """Test mirror reflection about an up normal."""
        from pathtracer.core.vector import UnitVector3, Vector3, reflect

        r = reflect(Vector3(1.0, -1.0, 0.0), UnitVector3(0.0, 1.0, 0.0))
        assert r == Vector3(1.0, 1.0, 0.0)

    def test_refract_normal_incidence(self):
        """Test that a ray along the normal passes straight through."""
        from pathtracer.core.vector import UnitVector3, refract

        r = refract(UnitVector3(0.0, 0.0, -1.0), UnitVector3(0.0, 0.0, 1.0), 1.0 / 1.5)
        assert abs(r.x) < 1e-12
        assert abs(r.y) < 1e-12
        assert abs(r.z + 1.0) < 1e-12

    def test_refract_obeys_snell(self):
        """Test n1 sin(theta1) == n2 sin(theta2)."""
        from pathtracer.core.vector import UnitVector3, refract

        ratio = 1.0 / 1.5
        incident = UnitVector3(1.0, -1.0, 0.0)
        normal = UnitVector3(0.0, 1.0, 0.0)
        r = refract(incident, normal, ratio)
        sin_in = math.sqrt(0.5)
        sin_out = abs(r.x) / r.length()
        assert abs(sin_out - ratio * sin_in) < 1e-9
