"""Image export utilities for rendered images.

Supported formats:
    - PPM, ASCII "P3" variant (default for any suffix other than .png)
    - PNG (8-bit RGB via Pillow)

P3 layout:

    P3
    <width> <height>
    255
    <r> <g> <b>      one pixel per line, rows from the top of the image down

Failure to create or write the output file is fatal: it is raised as a
RuntimeError chained to the underlying OSError, and nothing retries.

Example:
    >>> from spheretracer.preview.export import save_image
    >>> save_image(image_uint8, "output.ppm")
    >>> save_image(image_uint8, "output.png")
"""

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)

# Maximum color value written in the PPM header
PPM_MAX_VALUE = 255


def _check_rgb_uint8(image: npt.NDArray[np.uint8]) -> None:
    """Validate that an image is an (H, W, 3) uint8 array."""
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected image of shape (H, W, 3), got {image.shape}")
    if image.dtype != np.uint8:
        raise ValueError(f"Expected image dtype uint8, got {image.dtype}")


def format_ppm(image: npt.NDArray[np.uint8]) -> str:
    """Format an 8-bit RGB image as ASCII PPM (P3) text.

    Args:
        image: Image array of shape (H, W, 3), row 0 at the top.

    Returns:
        The complete P3 file contents.
    """
    _check_rgb_uint8(image)

    height, width, _ = image.shape
    lines = ["P3", f"{width} {height}", str(PPM_MAX_VALUE)]
    for r, g, b in image.reshape(-1, 3).tolist():
        lines.append(f"{r} {g} {b}")
    return "\n".join(lines) + "\n"


def save_ppm(image: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an 8-bit RGB image as an ASCII PPM (P3) file.

    Args:
        image: Image array of shape (H, W, 3), row 0 at the top.
        filepath: Output file path.

    Raises:
        RuntimeError: If the file cannot be created or written.
    """
    path = Path(filepath)
    contents = format_ppm(image)
    try:
        with open(path, "w") as f:
            f.write(contents)
    except OSError as e:
        raise RuntimeError(f"Could not write image to {path}: {e}") from e


def save_png(image: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an 8-bit RGB image as a PNG file.

    Args:
        image: Image array of shape (H, W, 3), row 0 at the top.
        filepath: Output file path.

    Raises:
        RuntimeError: If the file cannot be created or written.
    """
    _check_rgb_uint8(image)

    path = Path(filepath)
    pil_image = PILImage.fromarray(image)
    try:
        pil_image.save(path, format="PNG")
    except OSError as e:
        raise RuntimeError(f"Could not write image to {path}: {e}") from e


def save_image(image: npt.NDArray[np.uint8], filepath: str | Path) -> Path:
    """Save an 8-bit RGB image, choosing the format from the file suffix.

    A ``.png`` suffix writes PNG; anything else writes ASCII PPM.

    Args:
        image: Image array of shape (H, W, 3), row 0 at the top.
        filepath: Output file path.

    Returns:
        The path that was written.

    Raises:
        RuntimeError: If the file cannot be created or written.
    """
    path = Path(filepath)
    if path.suffix.lower() == ".png":
        save_png(image, path)
    else:
        save_ppm(image, path)

    height, width, _ = image.shape
    logger.info("Wrote %dx%d image to %s", width, height, path)
    return path
