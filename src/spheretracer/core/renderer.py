"""High-level renderer driving a complete image render.

This module wraps the integrator's render target and kernels in a single
object that owns one render configuration:
- Render the whole image in row bands with an optional progress callback
- Fetch the linear or tone-mapped result as NumPy arrays
- Write the finished image through the export module

Rendering is not progressive: render() computes every pixel exactly once with
the configured number of samples. Bands exist only so long renders can report
progress.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretracer.core.config import RenderConfig
    >>> from spheretracer.core.renderer import Renderer
    >>> from spheretracer.scene.default_scene import create_default_scene
    >>> from spheretracer.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_default_scene()
    >>> setup_camera(camera)
    >>>
    >>> renderer = Renderer(RenderConfig(image_width=400, image_height=225))
    >>> renderer.render()
    >>> renderer.save()
"""

import logging
import time
from collections.abc import Callable
from pathlib import Path

import numpy as np
import numpy.typing as npt

from spheretracer.core.config import RenderConfig
from spheretracer.core.integrator import (
    clear_render_target,
    get_linear_image_numpy,
    render_rows,
    setup_render_target,
)
from spheretracer.preview.display import image_to_uint8
from spheretracer.preview.export import save_image

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]

# Rows rendered per kernel launch when no band size is given
DEFAULT_BAND_SIZE = 16


class Renderer:
    """A renderer that produces one image for one configuration.

    The renderer delegates to the global integrator buffers (which are Taichi
    fields), so only one Renderer should be active at a time. The scene and
    camera must be set up before calling render().

    Attributes:
        config: The render configuration.
    """

    def __init__(self, config: RenderConfig) -> None:
        """Initialize the renderer and its render target.

        Args:
            config: The render configuration.
        """
        self.config = config
        self._rendered = False
        setup_render_target(config.image_width, config.image_height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.config.image_width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.config.image_height

    @property
    def is_rendered(self) -> bool:
        """Whether render() has completed since the last reset."""
        return self._rendered

    def reset(self) -> None:
        """Clear the render target so the image can be rendered again."""
        clear_render_target()
        self._rendered = False

    def render(
        self,
        band_size: int = DEFAULT_BAND_SIZE,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render the full image.

        Rows are rendered bottom-up in bands of band_size rows. The result does
        not depend on band_size.

        Args:
            band_size: Number of rows per kernel launch.
            callback: Optional callback function called after each band.
                Receives (rows_done, total_rows).

        Raises:
            ValueError: If band_size is not positive.

        Example:
            >>> def progress(done, total):
            ...     print(f"Rows: {done}/{total}")
            >>> renderer.render(band_size=8, callback=progress)
        """
        if band_size < 1:
            raise ValueError(f"band_size must be at least 1, got {band_size}")

        config = self.config
        logger.info(
            "Rendering %dx%d at %d spp (max depth %d, seed %d)",
            config.image_width,
            config.image_height,
            config.samples_per_pixel,
            config.max_bounce_depth,
            config.seed,
        )
        start_time = time.perf_counter()

        row = 0
        while row < self.height:
            row_end = min(row + band_size, self.height)
            render_rows(
                row,
                row_end,
                samples_per_pixel=config.samples_per_pixel,
                max_depth=config.max_bounce_depth,
                seed=config.seed,
            )
            row = row_end
            logger.debug("Rendered rows %d/%d", row, self.height)

            if callback is not None:
                callback(row, self.height)

        self._rendered = True
        logger.info("Render finished in %.2fs", time.perf_counter() - start_time)

    def _check_rendered(self) -> None:
        if not self._rendered:
            raise RuntimeError("Nothing rendered yet. Call render() first.")

    def get_linear_image(self) -> npt.NDArray[np.float32]:
        """Get the averaged linear radiance, shape (height, width, 3), top row first.

        Raises:
            RuntimeError: If render() has not been called.
        """
        self._check_rendered()
        return get_linear_image_numpy()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the gamma-corrected 8-bit image, shape (height, width, 3).

        Raises:
            RuntimeError: If render() has not been called.
            ValueError: If the render produced non-finite values.
        """
        return image_to_uint8(self.get_linear_image())

    def save(self, filepath: str | Path | None = None) -> Path:
        """Write the rendered image to a file.

        Args:
            filepath: Output path. Defaults to config.output_path.

        Returns:
            The path that was written.

        Raises:
            RuntimeError: If nothing has been rendered or the file cannot be
                written.
        """
        path = Path(filepath if filepath is not None else self.config.output_path)
        return save_image(self.get_image_uint8(), path)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"samples_per_pixel={self.config.samples_per_pixel}, rendered={self._rendered})"
        )
