"""Unit tests for the SceneManager and the default scene.

Tests cover:
- SceneManager sphere tracking
- Dictionary and JSON scene file round trips
- Malformed scene data
- Built-in two-sphere scene contents
"""

import json

import pytest


class TestSceneManagerBasics:
    """Tests for basic SceneManager operations."""

    def test_new_manager_clears_scene(self):
        """Test creating a manager empties shared sphere storage."""
        from spheretracer.scene.intersection import add_sphere
        from spheretracer.scene.manager import SceneManager

        add_sphere((0.0, 0.0, -1.0), 0.5)
        scene = SceneManager()
        assert scene.get_sphere_count() == 0
        assert scene.spheres == []

    def test_add_sphere_tracks_info(self):
        """Test add_sphere records the sphere on the Python side."""
        from spheretracer.scene.manager import SceneManager

        scene = SceneManager()
        idx = scene.add_sphere((1, 2, 3), 4)

        assert idx == 0
        assert scene.get_sphere_count() == 1
        info = scene.spheres[0]
        assert info.sphere_index == 0
        assert info.center == (1.0, 2.0, 3.0)
        assert info.radius == 4.0

    def test_invalid_sphere_not_tracked(self):
        """Test a rejected sphere leaves the manager unchanged."""
        from spheretracer.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError):
            scene.add_sphere((0, 0, -1), -0.5)
        assert scene.spheres == []

    def test_clear(self):
        """Test clear removes all spheres."""
        from spheretracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere((0, 0, -1), 0.5)
        scene.clear()
        assert scene.get_sphere_count() == 0
        assert scene.spheres == []

    def test_get_max_spheres(self):
        """Test the capacity matches the storage size."""
        from spheretracer.scene.intersection import MAX_SPHERES
        from spheretracer.scene.manager import SceneManager

        assert SceneManager.get_max_spheres() == MAX_SPHERES


class TestSceneSerialization:
    """Tests for scene dictionaries and files."""

    def test_to_dict(self):
        """Test the exported dictionary lists spheres in order."""
        from spheretracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere((0, 0, -1), 0.5)
        scene.add_sphere((0, -100.5, -1), 100)

        assert scene.to_dict() == {
            "spheres": [
                {"center": [0.0, 0.0, -1.0], "radius": 0.5},
                {"center": [0.0, -100.5, -1.0], "radius": 100.0},
            ]
        }

    def test_from_dict_replaces_scene(self):
        """Test loading a dictionary replaces existing spheres."""
        from spheretracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere((5, 5, 5), 1)
        scene.from_dict({"spheres": [{"center": [0, 0, -2], "radius": 0.25}]})

        assert scene.get_sphere_count() == 1
        assert scene.spheres[0].center == (0.0, 0.0, -2.0)
        assert scene.spheres[0].radius == 0.25

    def test_scene_file_round_trip(self, tmp_path):
        """Test a scene saved to JSON loads back identically."""
        from spheretracer.scene.manager import SceneManager

        path = tmp_path / "scene.json"
        scene = SceneManager()
        scene.add_sphere((0, 0, -1), 0.5)
        scene.add_sphere((1.5, 0.25, -2), 0.75)
        scene.save_scene_file(path)
        expected = scene.to_dict()

        loaded = SceneManager()
        loaded.load_scene_file(path)
        assert loaded.to_dict() == expected
        assert json.loads(path.read_text()) == expected

    def test_missing_key_raises(self):
        """Test a sphere entry without a radius is rejected."""
        from spheretracer.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="radius"):
            scene.from_dict({"spheres": [{"center": [0, 0, -1]}]})

    def test_bad_center_length_raises(self):
        """Test a two-component center is rejected."""
        from spheretracer.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="3 components"):
            scene.from_dict({"spheres": [{"center": [0, 0], "radius": 1.0}]})

    def test_invalid_entry_keeps_current_scene(self):
        """Test a bad entry anywhere in the list leaves the old scene untouched."""
        from spheretracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere((5, 5, 5), 1)

        with pytest.raises(ValueError, match="Sphere 2"):
            scene.from_dict(
                {
                    "spheres": [
                        {"center": [0, 0, -1], "radius": 0.5},
                        {"center": [0, -100.5, -1], "radius": 100},
                        {"center": [1, 0, -1], "radius": -0.5},
                    ]
                }
            )

        assert scene.get_sphere_count() == 1
        assert scene.to_dict() == {"spheres": [{"center": [5.0, 5.0, 5.0], "radius": 1.0}]}

    def test_add_sphere_short_center_raises(self):
        """Test a two-component center raises ValueError, not IndexError."""
        from spheretracer.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="3 components"):
            scene.add_sphere((0.0, 0.0), 1.0)
        assert scene.get_sphere_count() == 0

    def test_non_object_file_raises(self, tmp_path):
        """Test a scene file holding a JSON list is rejected."""
        from spheretracer.scene.manager import SceneManager

        path = tmp_path / "scene.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(ValueError, match="JSON object"):
            SceneManager().load_scene_file(path)

    def test_missing_file_raises(self, tmp_path):
        """Test loading a missing file raises OSError."""
        from spheretracer.scene.manager import SceneManager

        with pytest.raises(OSError):
            SceneManager().load_scene_file(tmp_path / "missing.json")


class TestDefaultScene:
    """Tests for the built-in two-sphere scene."""

    def test_default_scene_spheres(self):
        """Test the small sphere and the ground sphere are present."""
        from spheretracer.scene.default_scene import create_default_scene

        scene, _ = create_default_scene()

        assert scene.get_sphere_count() == 2
        assert scene.spheres[0].center == (0.0, 0.0, -1.0)
        assert scene.spheres[0].radius == 0.5
        assert scene.spheres[1].center == (0.0, -100.5, -1.0)
        assert scene.spheres[1].radius == 100.0

    def test_default_camera_viewport(self):
        """Test the camera viewport follows the aspect ratio."""
        from spheretracer.scene.default_scene import DefaultSceneParams, create_default_scene

        _, camera = create_default_scene(DefaultSceneParams(aspect_ratio=2.0))

        assert camera.viewport_height == 2.0
        assert camera.viewport_width == 4.0

    def test_default_scene_replaces_existing(self):
        """Test building the default scene discards earlier spheres."""
        from spheretracer.scene.intersection import add_sphere
        from spheretracer.scene.default_scene import create_default_scene

        add_sphere((9.0, 9.0, 9.0), 1.0)
        scene, _ = create_default_scene()
        assert scene.get_sphere_count() == 2
