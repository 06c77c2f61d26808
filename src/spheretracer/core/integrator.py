"""Path-color evaluator for diffuse Monte Carlo light transport.

This module implements the rendering kernel: every camera ray is followed
through a chain of diffuse bounces until it escapes to the sky or runs out of
bounce budget.

At each step:
    - The ray is intersected with the scene over (T_MIN, T_MAX).
    - On a hit, a bounce target point + normal + random_in_unit_sphere() is
      picked and the path continues from the hit point toward it, scaled by
      DIFFUSE_ATTENUATION.
    - On a miss, the vertical sky gradient (white at the bottom, sky blue at
      the top) is returned, scaled by the accumulated attenuation.
    - A path still bouncing after max_depth rays contributes black.

The bounce chain is written as a loop with a remaining-depth budget, which is
equivalent to the recursive formulation

    color(ray, depth) = 0                                   if depth == 0
                      = 0.5 * color(bounce(ray), depth - 1) on hit
                      = sky(ray)                            on miss

Each pixel averages samples_per_pixel jittered samples drawn from its own
random stream.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretracer.core.integrator import setup_render_target, render_rows
    >>> from spheretracer.scene.default_scene import create_default_scene
    >>> from spheretracer.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_default_scene()
    >>> setup_camera(camera)
    >>> setup_render_target(400, 225)
    >>> render_rows(0, 225, samples_per_pixel=100, max_depth=50, seed=0)
"""

import math

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from spheretracer.camera.pinhole import get_jittered_uv, get_ray
from spheretracer.core.config import MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH
from spheretracer.core.ray import (
    Ray,
    make_ray,
    near_zero,
    random_in_unit_sphere,
    unit_vector,
)
from spheretracer.core.rng import seed_stream
from spheretracer.scene.intersection import intersect_scene

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Near clip for scene queries; keeps bounce rays from re-hitting their own surface
T_MIN = 0.001

# Far clip for scene queries (largest float32)
T_MAX = float(np.finfo(np.float32).max)

# Fraction of radiance kept per diffuse bounce
DIFFUSE_ATTENUATION = 0.5

# Sky gradient endpoints
SKY_BOTTOM_COLOR = vec3(1.0, 1.0, 1.0)
SKY_TOP_COLOR = vec3(0.5, 0.7, 1.0)

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Averaged linear color per pixel (preallocated to max size)
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffer.

    Sets the active image dimensions and clears the buffer. The buffer is
    preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT to avoid Taichi kernel
    recompilation.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum size.
    """
    if width < 1 or height < 1:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffer to zero."""
    _color_buffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def sky_color(direction: vec3) -> vec3:
    """Color of the background seen along a direction.

    Linearly blends white (looking straight down) into sky blue (looking
    straight up) by t = 0.5 * (unit(direction).y + 1).

    Args:
        direction: The ray direction (any non-zero length).

    Returns:
        The sky radiance (RGB).
    """
    t = 0.5 * (unit_vector(direction).y + 1.0)
    return (1.0 - t) * SKY_BOTTOM_COLOR + t * SKY_TOP_COLOR


@ti.func
def ray_color(ray: Ray, max_depth: ti.i32, state: ti.u32):
    """Estimate the radiance arriving along a ray.

    Args:
        ray: The ray to trace.
        max_depth: Maximum number of rays traced for this path (the camera
            ray counts as the first one).
        state: The random stream state.

    Returns:
        A tuple (color, new_state).
    """
    s = state
    radiance = vec3(0.0, 0.0, 0.0)
    attenuation = 1.0
    origin = ray.origin
    direction = ray.direction

    # Active flag for path continuation (Taichi doesn't support break in ti.func loops)
    active = 1

    for _ in range(max_depth):
        if active == 1:
            rec = intersect_scene(make_ray(origin, direction), T_MIN, T_MAX)

            if rec.hit == 0:
                radiance = attenuation * sky_color(direction)
                active = 0
            else:
                offset, s = random_in_unit_sphere(s)
                target = rec.point + rec.normal + offset
                bounce_direction = target - rec.point

                # A zero-length bounce direction would make a degenerate ray
                if near_zero(bounce_direction):
                    bounce_direction = rec.normal

                origin = rec.point
                direction = bounce_direction
                attenuation *= DIFFUSE_ATTENUATION

    return radiance, s


@ti.func
def shade_pixel(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    samples_per_pixel: ti.i32,
    max_depth: ti.i32,
    seed: ti.u32,
) -> vec3:
    """Average samples_per_pixel jittered path samples for one pixel.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Number of samples to average.
        max_depth: Bounce cap passed to ray_color().
        seed: Render-wide seed; the pixel's stream is derived from it.

    Returns:
        The averaged linear radiance (RGB).
    """
    s = seed_stream(seed, pixel_i, pixel_j, width)
    total = vec3(0.0, 0.0, 0.0)

    for _ in range(samples_per_pixel):
        u, v, s = get_jittered_uv(pixel_i, pixel_j, width, height, s)
        color, s = ray_color(get_ray(u, v), max_depth, s)
        total += color

    return total / ti.cast(samples_per_pixel, ti.f32)


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(
    row_start: ti.i32,
    row_end: ti.i32,
    width: ti.i32,
    height: ti.i32,
    samples_per_pixel: ti.i32,
    max_depth: ti.i32,
    seed: ti.u32,
):
    """Render every pixel in rows [row_start, row_end) into the color buffer."""
    for i, j in ti.ndrange(width, (row_start, row_end)):
        _color_buffer[i, j] = shade_pixel(i, j, width, height, samples_per_pixel, max_depth, seed)


@ti.kernel
def _render_single_pixel(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    samples_per_pixel: ti.i32,
    max_depth: ti.i32,
    seed: ti.u32,
) -> vec3:
    """Render a single pixel without touching the color buffer."""
    return shade_pixel(pixel_i, pixel_j, width, height, samples_per_pixel, max_depth, seed)


@ti.kernel
def _trace_single_ray(origin: vec3, direction: vec3, max_depth: ti.i32, seed: ti.u32) -> vec3:
    """Trace one ray from an explicit origin and direction."""
    s = seed_stream(seed, 0, 0, 1)
    color, s = ray_color(make_ray(origin, direction), max_depth, s)
    return color


# =============================================================================
# Public Rendering API
# =============================================================================


def render_rows(
    row_start: int,
    row_end: int,
    *,
    samples_per_pixel: int,
    max_depth: int,
    seed: int = 0,
) -> None:
    """Render a band of image rows into the color buffer.

    Rows are indexed bottom-up (row 0 is the bottom of the image). Because each
    pixel draws from its own stream, splitting an image into different bands
    produces identical results.

    Args:
        row_start: First row to render (inclusive).
        row_end: Last row to render (exclusive).
        samples_per_pixel: Number of jittered samples averaged per pixel.
        max_depth: Maximum number of rays traced per path.
        seed: Render-wide random seed.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If the row range is outside the image.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    if not 0 <= row_start <= row_end <= height:
        raise ValueError(f"Invalid row range [{row_start}, {row_end}) for height {height}")

    _render_rows(row_start, row_end, width, height, samples_per_pixel, max_depth, seed)


def render_pixel(
    pixel_i: int,
    pixel_j: int,
    *,
    samples_per_pixel: int = 1,
    max_depth: int = 50,
    seed: int = 0,
) -> tuple[float, float, float]:
    """Render a single pixel and return its averaged linear color.

    This is a Python-callable function for testing. For production rendering,
    use render_rows() which processes all pixels in parallel.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        samples_per_pixel: Number of jittered samples averaged.
        max_depth: Maximum number of rays traced per path.
        seed: Render-wide random seed.

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    color = _render_single_pixel(
        pixel_i, pixel_j, width, height, samples_per_pixel, max_depth, seed
    )
    return (float(color[0]), float(color[1]), float(color[2]))


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    *,
    max_depth: int = 50,
    seed: int = 0,
) -> tuple[float, float, float]:
    """Trace one ray through the current scene and return its color.

    Args:
        origin: Ray origin as (x, y, z).
        direction: Ray direction as (x, y, z); must be non-zero.
        max_depth: Maximum number of rays traced for the path.
        seed: Seed for the ray's random stream.

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        ValueError: If the direction has zero length or any value is not finite.
    """
    values = (*origin, *direction)
    if not all(math.isfinite(value) for value in values):
        raise ValueError(f"Ray origin and direction must be finite, got {origin}, {direction}")
    if direction[0] == 0.0 and direction[1] == 0.0 and direction[2] == 0.0:
        raise ValueError("Ray direction must be non-zero")

    color = _trace_single_ray(
        vec3(origin[0], origin[1], origin[2]),
        vec3(direction[0], direction[1], direction[2]),
        max_depth,
        seed,
    )
    return (float(color[0]), float(color[1]), float(color[2]))


def get_linear_image_numpy() -> npt.NDArray[np.float32]:
    """Get the rendered linear radiance as a NumPy array.

    The array shape is (height, width, 3) with row 0 at the top of the image
    (highest v). Values are returned as computed; nothing is clamped and
    non-finite values are left in place for the caller to detect.

    Returns:
        NumPy array of shape (height, width, 3) with dtype float32.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    # Get raw image data (full buffer) and extract the active region
    image = _color_buffer.to_numpy()[:width, :height, :]

    # Transpose from (width, height, 3) to (height, width, 3) for standard image format
    image = np.transpose(image, (1, 0, 2))

    # Flip vertically (row j = 0 is the bottom, images list the top row first)
    image = np.flipud(image)

    return np.ascontiguousarray(image, dtype=np.float32)
