"""Camera module for primary ray generation.

Components:
    pinhole: Fixed pinhole camera at the origin looking down -z

Camera responsibilities:
    - Precompute viewport geometry once per render
    - Transform (u, v) image coordinates to world-space rays
    - Provide jittered sub-pixel positions for anti-aliasing

Ray generation uses normalized image coordinates:
    u in [0, 1]: left to right across image
    v in [0, 1]: bottom to top across image
"""

from .pinhole import (
    FOCAL_LENGTH,
    PinholeCamera,
    get_camera_info,
    get_jittered_uv,
    get_ray,
    setup_camera,
)

__all__ = [
    "PinholeCamera",
    "FOCAL_LENGTH",
    "setup_camera",
    "get_ray",
    "get_jittered_uv",
    "get_camera_info",
]
