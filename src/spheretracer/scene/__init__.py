"""Scene module for sphere storage and ray-scene queries.

Components:
    intersection: Sphere storage in Taichi fields and nearest-hit queries
    manager: Python-side scene builder with JSON serialization
    default_scene: The built-in two-sphere scene

Scene data is organized for kernel access:
    - Structure-of-Arrays layout for centers and radii
    - A single sphere count field; queries scan spheres linearly
"""

from .default_scene import (
    DefaultSceneParams,
    create_default_scene,
)
from .intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere,
    get_sphere_count,
    intersect_scene,
)
from .manager import (
    SceneConfig,
    SceneManager,
    SphereInfo,
)

__all__ = [
    # Intersection module
    "add_sphere",
    "clear_scene",
    "get_sphere",
    "get_sphere_count",
    "intersect_scene",
    "MAX_SPHERES",
    # Manager module
    "SceneManager",
    "SceneConfig",
    "SphereInfo",
    # Default scene module
    "create_default_scene",
    "DefaultSceneParams",
]
