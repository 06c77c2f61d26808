"""Preview module for tone mapping and image output.

Components:
    display: Gamma-2 correction and 8-bit quantization
    export: ASCII PPM (P3) and PNG writers

Example:
    >>> from spheretracer.preview import image_to_uint8, save_image
    >>> save_image(image_to_uint8(linear_image), "output.ppm")
"""

from spheretracer.preview.display import (
    QUANTIZE_SCALE,
    check_finite,
    gamma_correct,
    image_to_uint8,
    quantize,
)
from spheretracer.preview.export import (
    format_ppm,
    save_image,
    save_png,
    save_ppm,
)

__all__ = [
    # Tone mapping
    "gamma_correct",
    "quantize",
    "image_to_uint8",
    "check_finite",
    "QUANTIZE_SCALE",
    # Export functions
    "format_ppm",
    "save_ppm",
    "save_png",
    "save_image",
]
