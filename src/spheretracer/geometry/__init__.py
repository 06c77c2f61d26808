"""Geometry module for the sphere primitive.

Components:
    sphere: Sphere dataclass, HitRecord and ray-sphere intersection

Intersection routines are Taichi functions (@ti.func) and share one shape:

    record = hit_<shape>(ray, shape, t_min, t_max)

The scene-level query in spheretracer.scene.intersection has the same
(ray, t_min, t_max) -> HitRecord contract, so a sphere and a whole scene are
interchangeable wherever a "hittable" is expected.
"""

from .sphere import HitRecord, Sphere, hit_sphere, make_miss_record

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_miss_record",
]
