"""Scene manager for building and serializing sphere scenes.

This module provides a high-level scene API on top of the sphere storage in
spheretracer.scene.intersection. The SceneManager keeps a Python-side record
of every sphere it adds, which makes scenes easy to inspect and to round-trip
through JSON scene files.

Scene file format:
    {"spheres": [{"center": [0.0, 0.0, -1.0], "radius": 0.5}, ...]}

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretracer.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> scene.add_sphere(center=(0, 0, -1), radius=0.5)
    >>> scene.add_sphere(center=(0, -100.5, -1), radius=100.0)
    >>> scene.save_scene_file("two_spheres.json")
"""

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from spheretracer.scene.intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
)

logger = logging.getLogger(__name__)


def _validate_sphere(center: Any, radius: Any) -> tuple[tuple[float, float, float], float]:
    """Check a sphere definition and return it as floats.

    Raises:
        ValueError: If the center is not three finite numbers or the radius is
            not finite and positive.
    """
    if len(center) != 3:
        raise ValueError(f"Sphere center must have 3 components, got {center}")
    center_tuple = (float(center[0]), float(center[1]), float(center[2]))
    if not all(math.isfinite(c) for c in center_tuple):
        raise ValueError(f"Sphere center must be three finite values, got {center}")
    radius_value = float(radius)
    if not math.isfinite(radius_value) or radius_value <= 0.0:
        raise ValueError(f"Sphere radius must be finite and positive, got {radius}")
    return center_tuple, radius_value


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
    """

    sphere_index: int
    center: tuple[float, float, float]
    radius: float


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        spheres: List of sphere configurations, each with "center" and "radius".
    """

    spheres: list[dict[str, Any]] = field(default_factory=list)


class SceneManager:
    """Scene manager coordinating sphere storage and serialization.

    Creating a SceneManager clears the shared sphere storage, so only one
    scene is live at a time.

    Attributes:
        spheres: List of SphereInfo for all spheres in the scene, in insertion
            order.

    Example:
        >>> scene = SceneManager()
        >>> scene.add_sphere((0, 0, -1), 0.5)
        0
        >>> scene.get_sphere_count()
        1
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.spheres: list[SphereInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear the sphere storage and local tracking."""
        clear_scene()
        self.spheres.clear()

    def clear(self) -> None:
        """Remove every sphere from the scene."""
        self._clear_all()

    def add_sphere(self, center: tuple[float, float, float], radius: float) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (must be positive).

        Returns:
            The index of the added sphere.

        Raises:
            ValueError: If the center does not have three finite components or
                the radius is not finite and positive.
            RuntimeError: If the maximum number of spheres is exceeded.
        """
        center_tuple, radius_value = _validate_sphere(center, radius)
        sphere_index = add_sphere(center_tuple, radius_value)

        self.spheres.append(
            SphereInfo(sphere_index=sphere_index, center=center_tuple, radius=radius_value)
        )
        return sphere_index

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        config = SceneConfig()
        for sphere in self.spheres:
            config.spheres.append({"center": list(sphere.center), "radius": sphere.radius})
        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Every entry is validated before the current scene is touched, so a
        bad configuration leaves the existing scene in place.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If a sphere entry is malformed or invalid.
            RuntimeError: If the configuration holds more than MAX_SPHERES spheres.
        """
        spheres = []
        for i, sphere_config in enumerate(config.spheres):
            if "center" not in sphere_config or "radius" not in sphere_config:
                raise ValueError(f"Sphere {i} must define both 'center' and 'radius'")
            try:
                spheres.append(_validate_sphere(sphere_config["center"], sphere_config["radius"]))
            except (TypeError, ValueError) as e:
                raise ValueError(f"Sphere {i}: {e}") from e

        if len(spheres) > MAX_SPHERES:
            raise RuntimeError(
                f"Scene has {len(spheres)} spheres, maximum is {MAX_SPHERES}"
            )

        self.clear()
        for center, radius in spheres:
            self.add_sphere(center, radius)

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        return {"spheres": self.to_config().spheres}

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary with a 'spheres' key."""
        self.from_config(SceneConfig(spheres=data.get("spheres", [])))

    def save_scene_file(self, filepath: str | Path) -> None:
        """Write the scene to a JSON file."""
        path = Path(filepath)
        path.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Saved scene with %d spheres to %s", len(self.spheres), path)

    def load_scene_file(self, filepath: str | Path) -> None:
        """Replace the scene with the contents of a JSON scene file.

        Args:
            filepath: Path to a JSON file in the scene file format.

        Raises:
            OSError: If the file cannot be read.
            ValueError: If the file is not valid JSON or holds invalid spheres.
        """
        path = Path(filepath)
        data = json.loads(path.read_text())
        if not isinstance(data, dict):
            raise ValueError(f"Scene file {path} must contain a JSON object")
        self.from_dict(data)
        logger.debug("Loaded scene with %d spheres from %s", len(self.spheres), path)

    @staticmethod
    def get_max_spheres() -> int:
        """Get the maximum number of spheres supported."""
        return MAX_SPHERES
