"""Core rendering module.

This module contains the fundamental building blocks for the path tracer:

Components:
    ray: Ray data structure, vector utilities and unit-sphere sampling
    rng: Explicit per-pixel random number streams
    config: Render configuration (resolution, samples, bounce cap, output)
    integrator: Path-color evaluator and the render target
    renderer: High-level driver that renders a configured image

The evaluator follows a ray through diffuse bounces until it escapes to the sky
gradient or spends its bounce budget, attenuating by a constant factor per
bounce. Randomness is threaded explicitly through every call as a stream state,
so each pixel's samples are independent and reproducible.
"""

from .config import RenderConfig
from .ray import (
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    near_zero,
    random_in_unit_sphere,
    ray_at,
    unit_vector,
    vec3,
)
from .rng import next_float, next_u32, seed_stream, wang_hash

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from spheretracer.core.integrator or spheretracer.core.renderer.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "unit_vector",
    "dot",
    "cross",
    "near_zero",
    "random_in_unit_sphere",
    "wang_hash",
    "seed_stream",
    "next_u32",
    "next_float",
    "RenderConfig",
]
