"""Unit tests for RenderConfig.

Tests cover:
- Default values
- Validation of every field
- Dictionary round trips and unknown keys
"""

import pytest

from spheretracer.core.config import MAX_IMAGE_WIDTH, MAX_SEED, RenderConfig


class TestRenderConfigDefaults:
    """Tests for default configuration values."""

    def test_defaults(self):
        """Test the default render settings."""
        config = RenderConfig()
        assert config.image_width == 400
        assert config.image_height == 225
        assert config.samples_per_pixel == 100
        assert config.max_bounce_depth == 50
        assert config.output_path == "image.ppm"
        assert config.seed == 0

    def test_aspect_ratio(self):
        """Test aspect ratio is width over height."""
        assert RenderConfig(image_width=200, image_height=100).aspect_ratio == 2.0


class TestRenderConfigValidation:
    """Tests for invalid configuration values."""

    @pytest.mark.parametrize(
        "kwargs,match",
        [
            ({"image_width": 0}, "image_width"),
            ({"image_width": MAX_IMAGE_WIDTH + 1}, "image_width"),
            ({"image_height": -5}, "image_height"),
            ({"samples_per_pixel": 0}, "samples_per_pixel"),
            ({"max_bounce_depth": 0}, "max_bounce_depth"),
            ({"output_path": ""}, "output_path"),
            ({"seed": -1}, "seed"),
            ({"seed": MAX_SEED + 1}, "seed"),
            ({"image_width": 40.5}, "image_width"),
            ({"image_width": "40"}, "image_width"),
            ({"image_height": True}, "image_height"),
            ({"samples_per_pixel": 2.0}, "samples_per_pixel"),
            ({"max_bounce_depth": None}, "max_bounce_depth"),
            ({"seed": 1.5}, "seed"),
            ({"output_path": 42}, "output_path"),
        ],
    )
    def test_invalid_values_raise(self, kwargs, match):
        """Test each invalid field is reported by name."""
        with pytest.raises(ValueError, match=match):
            RenderConfig(**kwargs)

    def test_boundary_values_accepted(self):
        """Test the smallest and largest legal values."""
        config = RenderConfig(
            image_width=1,
            image_height=MAX_IMAGE_WIDTH,
            samples_per_pixel=1,
            max_bounce_depth=1,
            seed=MAX_SEED,
        )
        assert config.seed == MAX_SEED


class TestRenderConfigSerialization:
    """Tests for dictionary conversion."""

    def test_round_trip(self):
        """Test to_dict and from_dict agree."""
        config = RenderConfig(image_width=64, image_height=32, seed=9, output_path="x.png")
        assert RenderConfig.from_dict(config.to_dict()) == config

    def test_partial_dict_uses_defaults(self):
        """Test missing keys fall back to defaults."""
        config = RenderConfig.from_dict({"samples_per_pixel": 8})
        assert config.samples_per_pixel == 8
        assert config.image_width == 400

    def test_unknown_keys_raise(self):
        """Test unknown keys are rejected by name."""
        with pytest.raises(ValueError, match="exposure"):
            RenderConfig.from_dict({"exposure": 2.0})
