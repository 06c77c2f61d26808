"""Sphere primitive with ray-sphere intersection.

This module provides a Sphere dataclass, the HitRecord produced by a
successful intersection, and the quadratic-root intersection test.

The intersection solves

    |A + t*B - C|^2 = R^2

for the ray origin A, direction B, sphere center C and radius R, which expands
to the quadratic

    t^2 (B.B) + 2t (oc.B) + (oc.oc - R^2) = 0,    oc = A - C

Tangent rays (discriminant exactly zero) are reported as misses.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretracer.geometry.sphere import Sphere, HitRecord, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -1), radius=0.5)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from spheretracer.core.ray import Ray, ray_at

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-surface intersection.

    A record is always built in one piece by the intersection routine that
    produced it.

    Attributes:
        hit: Whether the ray intersected the surface (1 if hit, 0 if miss).
        t: The ray parameter of the intersection. Only valid if hit == 1.
        point: The world-space intersection point, ray.origin + t * ray.direction.
            Only valid if hit == 1.
        normal: The unit surface normal at the intersection point, always
            pointing outward from the sphere center. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
    )


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Test for ray-sphere intersection within the open interval (t_min, t_max).

    With a = B.B, b = 2(oc.B), c = oc.oc - R^2 and D = b^2 - 4ac:

    - D <= 0: miss (tangent rays included).
    - D > 0: the nearer root (-b - sqrt(D)) / 2a is tried first, then the
      farther root (-b + sqrt(D)) / 2a. The first one strictly inside
      (t_min, t_max) is the hit.

    The ray direction must be non-zero; zero-length directions are rejected
    where rays are built, not here.

    Args:
        ray: The ray to test. Its direction need not be normalized.
        sphere: The sphere to test intersection against.
        t_min: Near clip; roots at or below it are ignored (avoids
            self-intersection of bounce rays).
        t_max: Far clip; roots at or beyond it are ignored.

    Returns:
        A HitRecord. Check the hit field to determine if intersection occurred.
    """
    oc = ray.origin - sphere.center

    a = tm.dot(ray.direction, ray.direction)
    b = 2.0 * tm.dot(oc, ray.direction)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = b * b - 4.0 * a * c

    # Initialize result (Taichi requires outer-scope declaration)
    result = make_miss_record()

    if discriminant > 0.0:
        sqrt_d = ti.sqrt(discriminant)

        t = (-b - sqrt_d) / (2.0 * a)
        valid = (t > t_min) and (t < t_max)

        if not valid:
            t = (-b + sqrt_d) / (2.0 * a)
            valid = (t > t_min) and (t < t_max)

        if valid:
            hit_point = ray_at(ray, t)
            result = HitRecord(
                hit=1,
                t=t,
                point=hit_point,
                normal=(hit_point - sphere.center) / sphere.radius,
            )

    return result

