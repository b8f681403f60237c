"""Tests for render options validation."""

import dataclasses

import pytest


class TestOptions:
    """Tests for the Options dataclass."""

    def test_defaults(self):
        """Test the default sampling configuration."""
        from pathtracer.core.options import Options
        from pathtracer.core.random import DEFAULT_SEED

        options = Options()
        assert options.samples_per_pixel == 32
        assert options.max_ray_bounces == 8
        assert options.positive_is_up is True
        assert options.seed == DEFAULT_SEED

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"samples_per_pixel": 0},
            {"max_ray_bounces": -1},
            {"seed": 0},
        ],
    )
    def test_invalid_values_rejected(self, kwargs):
        """Test that out-of-range options raise ValueError."""
        from pathtracer.core.options import Options

        with pytest.raises(ValueError):
            Options(**kwargs)

    def test_zero_bounces_allowed(self):
        """Test that a zero bounce budget is a valid (all-black) setting."""
        from pathtracer.core.options import Options

        assert Options(max_ray_bounces=0).max_ray_bounces == 0

    def test_replace_revalidates(self):
        """Test that dataclasses.replace runs validation again."""
        from pathtracer.core.options import Options

        with pytest.raises(ValueError):
            dataclasses.replace(Options(), samples_per_pixel=-4)
