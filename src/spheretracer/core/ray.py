"""Ray data structure and vector utilities for the path tracer.

This module provides the Ray dataclass, the vector helpers used by the
intersection and shading code, and unit-sphere sampling for diffuse bounces.
``vec3`` doubles as an RGB color throughout the package.

All operations are designed to be called from within Taichi kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

from spheretracer.core.rng import next_float

# Type alias for 3D vectors (and RGB colors) using Taichi's math module
vec3 = tm.vec3

# Rejection sampling accepts ~52% of draws; 64 straight rejections is ~1e-20
MAX_REJECTION_SAMPLES = 64


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). It is not required
            to be unit length; intersection code divides by its squared length
            where needed.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction within a Taichi kernel."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared Euclidean length of a vector."""
    return tm.dot(v, v)


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return ti.sqrt(length_squared(v))


@ti.func
def unit_vector(v: vec3) -> vec3:
    """Scale a vector to unit length.

    Computes ``v / length(v)``. A zero-length input produces NaN components;
    callers must only normalize vectors they know to be non-zero.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v.
    """
    return v / length(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Check if a vector is near zero in all components.

    Useful for detecting degenerate bounce directions.

    Args:
        v: The vector to check.

    Returns:
        1 if all components are near zero, 0 otherwise.
    """
    s = 1e-8
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s


# =============================================================================
# Random Sampling for Diffuse Bounces
# =============================================================================


@ti.func
def random_in_unit_sphere(state: ti.u32):
    """Generate a random point strictly inside the unit sphere.

    Uses rejection sampling: draw p = 2 * (rx, ry, rz) - (1, 1, 1) from the
    enclosing cube and retry while |p|^2 >= 1.

    The retry count is capped at MAX_REJECTION_SAMPLES. If every draw is
    rejected the result is a NaN vector, so the failure surfaces as a
    non-finite pixel instead of a silently biased sample.

    Args:
        state: The random stream state.

    Returns:
        A tuple (point, new_state) with length_squared(point) < 1.
    """
    s = state
    p = vec3(tm.nan, tm.nan, tm.nan)
    found = 0
    for _ in range(MAX_REJECTION_SAMPLES):
        if found == 0:
            rx, s = next_float(s)
            ry, s = next_float(s)
            rz, s = next_float(s)
            candidate = 2.0 * vec3(rx, ry, rz) - vec3(1.0, 1.0, 1.0)
            if length_squared(candidate) < 1.0:
                p = candidate
                found = 1
    return p, s
