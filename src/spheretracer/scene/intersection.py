"""Scene-level sphere storage and nearest-hit queries.

The scene is a linear collection of spheres stored in Taichi fields. A query
tests every sphere in insertion order, shrinking the search interval to the
closest hit found so far, so the globally nearest intersection is returned
whatever order the spheres were added in.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretracer.scene.intersection import add_sphere, clear_scene, intersect_scene
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, -1.0), 0.5)
    >>> add_sphere((0.0, -100.5, -1.0), 100.0)
    >>> # Use intersect_scene within a Taichi kernel
"""

import math

import taichi as ti
import taichi.math as tm

from spheretracer.core.ray import Ray
from spheretracer.geometry.sphere import HitRecord, Sphere, hit_sphere, make_miss_record

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all spheres from the scene.

    Resets the sphere count to zero. The field data is overwritten when new
    spheres are added.
    """
    num_spheres[None] = 0


def add_sphere(center: tuple[float, float, float], radius: float) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere as (x, y, z).
        radius: The radius of the sphere. Must be finite and positive.

    Returns:
        The index of the added sphere.

    Raises:
        ValueError: If the radius is not positive or any value is not finite.
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    if not math.isfinite(radius) or radius <= 0.0:
        raise ValueError(f"Sphere radius must be finite and positive, got {radius}")
    if len(center) != 3 or not all(math.isfinite(c) for c in center):
        raise ValueError(f"Sphere center must be three finite values, got {center}")

    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = [center[0], center[1], center[2]]
    sphere_radii[idx] = radius
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def get_sphere(index: ti.i32) -> Sphere:
    """Load the sphere stored at the given index."""
    return Sphere(center=sphere_centers[index], radius=sphere_radii[index])


@ti.func
def intersect_scene(ray: Ray, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Find the nearest intersection of a ray with any sphere in the scene.

    Each sphere is tested with the upper bound lowered to the closest hit so
    far, so a later record always supersedes an earlier one and the final
    record is the globally nearest one in (t_min, t_max).

    Args:
        ray: The ray to test.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        The HitRecord of the nearest intersection, or a miss record.
    """
    closest_t = t_max
    result = make_miss_record()

    for i in range(num_spheres[None]):
        rec = hit_sphere(ray, get_sphere(i), t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = rec

    return result
