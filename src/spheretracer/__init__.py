"""Taichi-based Monte Carlo path tracer for scenes made of spheres.

This package renders a static scene of diffuse spheres into an image with:
- Recursive (depth-capped) diffuse path tracing
- Jittered multi-sample antialiasing
- Gamma-2 tone mapping and 8-bit quantization
- ASCII PPM (P3) and PNG output

Subpackages:
    core: Vectors, rays, random streams, the path-color evaluator and the renderer
    geometry: Sphere primitive and ray-sphere intersection
    scene: Sphere storage, nearest-hit queries and scene building
    camera: Viewport camera with ray generation
    preview: Tone mapping and image export
"""

__version__ = "0.1.0"
