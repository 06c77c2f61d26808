"""Pinhole camera model for primary ray generation.

The camera sits at the origin looking down -z, with a viewport of the requested
width and height at unit distance (focal length 1). There is no lens and no
depth of field.

Viewport geometry, computed once by setup_camera():
- origin = (0, 0, 0)
- horizontal = (width, 0, 0)
- vertical = (0, height, 0)
- lower_left_corner = origin - horizontal/2 - vertical/2 - (0, 0, 1)

Image-plane coordinates are normalized:
- u = 0: left edge, u = 1: right edge
- v = 0: bottom edge, v = 1: top edge

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretracer.camera.pinhole import PinholeCamera, setup_camera, get_ray
    >>>
    >>> camera = PinholeCamera(viewport_height=2.0, viewport_width=16.0 / 9.0 * 2.0)
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0.5, 0.5)  # Ray through image center
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from spheretracer.core.ray import Ray, make_ray
from spheretracer.core.rng import next_float

# Distance from the camera origin to the viewport along -z
FOCAL_LENGTH = 1.0

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class PinholeCamera:
    """Configuration for the pinhole camera.

    Attributes:
        viewport_height: Height of the viewport in world units (positive).
        viewport_width: Width of the viewport in world units (positive).
    """

    viewport_height: float = 2.0
    viewport_width: float = 16.0 / 9.0 * 2.0

    def __post_init__(self) -> None:
        for name in ("viewport_height", "viewport_width"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0.0:
                raise ValueError(f"{name} must be finite and positive, got {value}")

    @classmethod
    def from_aspect_ratio(cls, aspect_ratio: float, viewport_height: float = 2.0) -> "PinholeCamera":
        """Create a camera whose viewport matches an image aspect ratio.

        Args:
            aspect_ratio: Image width divided by image height.
            viewport_height: Height of the viewport in world units.

        Returns:
            A camera with viewport_width = aspect_ratio * viewport_height.
        """
        return cls(viewport_height=viewport_height, viewport_width=aspect_ratio * viewport_height)


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_viewport_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())  # Full width
_viewport_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())  # Full height
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())  # Lower-left of viewport


# =============================================================================
# Camera Setup (Python-side, called once per render)
# =============================================================================


def setup_camera(camera: PinholeCamera) -> None:
    """Compute the viewport geometry and store it for ray generation.

    Must be called before rendering. The geometry stays fixed until the next
    call.

    Args:
        camera: Camera configuration with the viewport size.
    """
    origin = np.zeros(3, dtype=np.float32)
    horizontal = np.array([camera.viewport_width, 0.0, 0.0], dtype=np.float32)
    vertical = np.array([0.0, camera.viewport_height, 0.0], dtype=np.float32)
    forward = np.array([0.0, 0.0, FOCAL_LENGTH], dtype=np.float32)

    lower_left = origin - horizontal / 2.0 - vertical / 2.0 - forward

    _camera_origin[None] = origin.tolist()
    _viewport_horizontal[None] = horizontal.tolist()
    _viewport_vertical[None] = vertical.tolist()
    _lower_left_corner[None] = lower_left.tolist()


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def get_ray(u: ti.f32, v: ti.f32) -> Ray:
    """Generate a ray through normalized image coordinates (u, v).

    The direction runs from the camera origin to the viewport point and is
    deliberately left unnormalized.

    Args:
        u: Horizontal coordinate in [0, 1] (left to right).
        v: Vertical coordinate in [0, 1] (bottom to top).

    Returns:
        A Ray from the camera origin through the viewport point.
    """
    origin = _camera_origin[None]
    point_on_viewport = (
        _lower_left_corner[None] + u * _viewport_horizontal[None] + v * _viewport_vertical[None]
    )
    return make_ray(origin, point_on_viewport - origin)


@ti.func
def get_jittered_uv(
    pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32, state: ti.u32
):
    """Pick a random image-plane position inside a pixel for anti-aliasing.

    Uses u = (i + xi1) / width and v = (j + xi2) / height with xi1, xi2 drawn
    uniformly from [0, 1) on the pixel's random stream. Pass the result to
    get_ray().

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.
        state: The pixel's random stream state.

    Returns:
        A tuple (u, v, new_state).
    """
    jitter_u, s = next_float(state)
    jitter_v, s = next_float(s)

    u = (ti.cast(pixel_i, ti.f32) + jitter_u) / ti.cast(width, ti.f32)
    v = (ti.cast(pixel_j, ti.f32) + jitter_v) / ti.cast(height, ti.f32)

    return u, v, s


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, horizontal, vertical and lower_left.
    """

    def _as_tuple(vec: tm.vec3) -> tuple[float, float, float]:
        return (float(vec[0]), float(vec[1]), float(vec[2]))

    return {
        "origin": _as_tuple(_camera_origin[None]),
        "horizontal": _as_tuple(_viewport_horizontal[None]),
        "vertical": _as_tuple(_viewport_vertical[None]),
        "lower_left": _as_tuple(_lower_left_corner[None]),
    }
