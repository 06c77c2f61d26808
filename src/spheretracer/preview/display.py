"""Tone mapping from linear radiance to 8-bit display values.

The display pipeline is:
1. Gamma-2 correction: out = sqrt(color), componentwise
2. Quantization: int(255.99 * out), truncated (not rounded) into [0, 255]

Non-finite input is an error, not something to clamp away: a NaN or Inf pixel
means something upstream produced a degenerate value, and it is reported
instead of being written as an arbitrary color.

Example:
    >>> import numpy as np
    >>> from spheretracer.preview.display import image_to_uint8
    >>> linear = np.full((2, 2, 3), 0.25, dtype=np.float32)
    >>> image_to_uint8(linear)[0, 0]
    array([127, 127, 127], dtype=uint8)
"""

import numpy as np
import numpy.typing as npt

# Scale applied before truncation so that 1.0 maps to 255
QUANTIZE_SCALE = 255.99


def check_finite(image: npt.NDArray[np.floating[npt.NBitBase]]) -> None:
    """Raise if an image contains NaN or Inf values.

    Args:
        image: Image array of any shape.

    Raises:
        ValueError: If any element is not finite.
    """
    bad = ~np.isfinite(image)
    if np.any(bad):
        count = int(np.count_nonzero(bad))
        raise ValueError(f"Image contains {count} non-finite values")


def gamma_correct(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.float32]:
    """Apply gamma-2 correction (square root) componentwise.

    Args:
        image: Linear image array, values expected in [0, 1].

    Returns:
        Gamma corrected image with the same shape.

    Raises:
        ValueError: If the image contains non-finite or negative values.
    """
    check_finite(image)
    if np.any(image < 0.0):
        raise ValueError("Image contains negative radiance values")

    return np.sqrt(image).astype(np.float32)


def quantize(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.uint8]:
    """Map display values in [0, 1] to 8-bit integers by truncation.

    Each channel becomes int(255.99 * value), limited to [0, 255].

    Args:
        image: Display-space image array.

    Returns:
        Image array with dtype uint8.

    Raises:
        ValueError: If the image contains non-finite values.
    """
    check_finite(image)
    scaled = np.trunc(image.astype(np.float64) * QUANTIZE_SCALE)
    return np.clip(scaled, 0, 255).astype(np.uint8)


def image_to_uint8(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to 8-bit display values.

    Applies gamma correction and then quantization.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    return quantize(gamma_correct(image))
