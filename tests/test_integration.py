"""Integration tests for complete renders.

Tests cover:
- Renderer over the default scene
- Determinism across seeds and band sizes
- Progress callbacks
- Writing PPM and PNG output
- The render_spheres command-line entry point
"""

import json

import numpy as np
import pytest
from PIL import Image as PILImage


def setup_default_scene(config):
    """Build the default scene and camera for a config's aspect ratio."""
    from spheretracer.camera.pinhole import setup_camera
    from spheretracer.scene.default_scene import DefaultSceneParams, create_default_scene

    scene, camera = create_default_scene(DefaultSceneParams(aspect_ratio=config.aspect_ratio))
    setup_camera(camera)
    return scene


def render_image(**kwargs):
    """Render the default scene and return the 8-bit image."""
    from spheretracer.core.config import RenderConfig
    from spheretracer.core.renderer import Renderer

    band_size = kwargs.pop("band_size", 16)
    config = RenderConfig(**kwargs)
    setup_default_scene(config)
    renderer = Renderer(config)
    renderer.render(band_size=band_size)
    return renderer.get_image_uint8()


class TestRenderer:
    """Tests for the Renderer class."""

    def test_render_small_image(self):
        """Test a small render produces a sensible image."""
        image = render_image(image_width=16, image_height=9, samples_per_pixel=2)

        assert image.shape == (9, 16, 3)
        assert image.dtype == np.uint8
        # Top row is sky: blue saturated, blue at least as bright as red
        assert np.all(image[0, :, 2] == 255)
        assert np.all(image[0, :, 2] >= image[0, :, 0])

    def test_same_seed_identical_images(self):
        """Test renders are reproducible for a fixed seed."""
        a = render_image(image_width=12, image_height=8, samples_per_pixel=3, seed=7)
        b = render_image(image_width=12, image_height=8, samples_per_pixel=3, seed=7)
        np.testing.assert_array_equal(a, b)

    def test_different_seeds_differ(self):
        """Test the seed changes the Monte Carlo noise."""
        a = render_image(image_width=12, image_height=8, samples_per_pixel=1, seed=1)
        b = render_image(image_width=12, image_height=8, samples_per_pixel=1, seed=2)
        assert not np.array_equal(a, b)

    def test_band_size_does_not_change_image(self):
        """Test splitting rows into different bands gives identical results."""
        a = render_image(image_width=10, image_height=7, samples_per_pixel=2, band_size=1)
        b = render_image(image_width=10, image_height=7, samples_per_pixel=2, band_size=16)
        np.testing.assert_array_equal(a, b)

    def test_progress_callback(self):
        """Test the callback reports every band."""
        from spheretracer.core.config import RenderConfig
        from spheretracer.core.renderer import Renderer

        config = RenderConfig(image_width=4, image_height=10, samples_per_pixel=1)
        setup_default_scene(config)
        renderer = Renderer(config)

        calls = []
        renderer.render(band_size=4, callback=lambda done, total: calls.append((done, total)))
        assert calls == [(4, 10), (8, 10), (10, 10)]

    def test_invalid_band_size_raises(self):
        """Test a non-positive band size is rejected."""
        from spheretracer.core.config import RenderConfig
        from spheretracer.core.renderer import Renderer

        renderer = Renderer(RenderConfig(image_width=4, image_height=4))
        with pytest.raises(ValueError, match="band_size"):
            renderer.render(band_size=0)

    def test_image_before_render_raises(self):
        """Test reading the image before rendering raises RuntimeError."""
        from spheretracer.core.config import RenderConfig
        from spheretracer.core.renderer import Renderer

        renderer = Renderer(RenderConfig(image_width=4, image_height=4))
        with pytest.raises(RuntimeError, match="Nothing rendered"):
            renderer.get_linear_image()

    def test_reset(self):
        """Test reset clears the rendered state."""
        from spheretracer.core.config import RenderConfig
        from spheretracer.core.renderer import Renderer

        config = RenderConfig(image_width=4, image_height=4, samples_per_pixel=1)
        setup_default_scene(config)
        renderer = Renderer(config)
        renderer.render()
        assert renderer.is_rendered
        renderer.reset()
        assert not renderer.is_rendered
        assert "rendered=False" in repr(renderer)


class TestSaveOutput:
    """Tests for writing rendered images."""

    def test_save_ppm(self, tmp_path):
        """Test the saved PPM has the right header and pixel count."""
        from spheretracer.core.config import RenderConfig
        from spheretracer.core.renderer import Renderer

        path = tmp_path / "render.ppm"
        config = RenderConfig(
            image_width=8, image_height=4, samples_per_pixel=2, output_path=str(path)
        )
        setup_default_scene(config)
        renderer = Renderer(config)
        renderer.render()
        written = renderer.save()

        assert written == path
        lines = path.read_text().splitlines()
        assert lines[:3] == ["P3", "8 4", "255"]
        assert len(lines) == 3 + 8 * 4
        for line in lines[3:]:
            values = [int(v) for v in line.split(" ")]
            assert len(values) == 3
            assert all(0 <= v <= 255 for v in values)

    def test_save_png_matches_image(self, tmp_path):
        """Test PNG output holds the same pixels as get_image_uint8()."""
        from spheretracer.core.config import RenderConfig
        from spheretracer.core.renderer import Renderer

        config = RenderConfig(image_width=8, image_height=4, samples_per_pixel=2)
        setup_default_scene(config)
        renderer = Renderer(config)
        renderer.render()
        path = renderer.save(tmp_path / "render.png")

        with PILImage.open(path) as loaded:
            np.testing.assert_array_equal(
                np.asarray(loaded.convert("RGB")), renderer.get_image_uint8()
            )


class TestCommandLine:
    """Tests for the render_spheres entry point."""

    @pytest.fixture(autouse=True)
    def skip_taichi_init(self, monkeypatch):
        """Keep the session's Taichi runtime instead of re-initializing."""
        import examples.render_spheres as cli

        monkeypatch.setattr(cli, "init_taichi", lambda quiet=False: None)

    def test_main_writes_image(self, tmp_path):
        """Test a CLI render writes the requested PPM."""
        from examples.render_spheres import main

        output = tmp_path / "cli.ppm"
        code = main(
            [
                "--width", "8",
                "--height", "4",
                "--samples", "1",
                "--max-depth", "5",
                "--output", str(output),
                "--quiet",
            ]
        )

        assert code == 0
        assert output.read_text().startswith("P3\n8 4\n255\n")

    def test_config_file_and_overrides(self, tmp_path):
        """Test CLI options override values from a config file."""
        from examples.render_spheres import build_config, parse_args

        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"image_width": 64, "samples_per_pixel": 3}))

        args = parse_args(["--config", str(config_path), "--samples", "9"])
        config = build_config(args)
        assert config.image_width == 64
        assert config.samples_per_pixel == 9
        assert config.image_height == 225

    def test_scene_file(self, tmp_path):
        """Test a scene file replaces the default spheres."""
        from examples.render_spheres import main
        from spheretracer.scene.intersection import get_sphere_count

        scene_path = tmp_path / "scene.json"
        scene_path.write_text(json.dumps({"spheres": [{"center": [0, 0, -2], "radius": 1}]}))
        output = tmp_path / "scene.ppm"

        code = main(
            [
                "--width", "4",
                "--height", "4",
                "--samples", "1",
                "--scene", str(scene_path),
                "--output", str(output),
                "--quiet",
            ]
        )
        assert code == 0
        assert get_sphere_count() == 1

    def test_invalid_config_returns_error(self, capsys):
        """Test an invalid option reports an error and exits non-zero."""
        from examples.render_spheres import main

        code = main(["--samples", "0", "--quiet"])
        assert code == 1
        assert "samples_per_pixel" in capsys.readouterr().err

    def test_mistyped_config_file_returns_error(self, tmp_path, capsys):
        """Test a config file with a string width reports an error cleanly."""
        from examples.render_spheres import main

        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"image_width": "40"}))

        code = main(["--config", str(config_path), "--quiet"])
        assert code == 1
        assert "image_width must be an integer" in capsys.readouterr().err

    def test_unwritable_output_returns_error(self, tmp_path, capsys):
        """Test a write failure reports an error and exits non-zero."""
        from examples.render_spheres import main

        code = main(
            [
                "--width", "2",
                "--height", "2",
                "--samples", "1",
                "--output", str(tmp_path / "missing" / "out.ppm"),
                "--quiet",
            ]
        )
        assert code == 1
        assert "Could not write image" in capsys.readouterr().err
