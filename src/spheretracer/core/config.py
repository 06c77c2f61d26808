"""Render configuration.

RenderConfig gathers every knob of a render: resolution, samples per pixel,
the bounce cap, the output path and the random seed. Values are validated on
construction so that a bad configuration fails before any kernel is compiled.

Example:
    >>> config = RenderConfig(image_width=400, image_height=225, samples_per_pixel=50)
    >>> config.aspect_ratio
    1.7777777777777777
    >>> RenderConfig.from_dict({"image_width": 200, "image_height": 100})
"""

from dataclasses import asdict, dataclass, fields
from typing import Any

# Maximum supported image dimensions (render target is preallocated to this size)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Largest seed that fits the u32 stream state
MAX_SEED = 2**32 - 1

_INT_FIELDS = ("image_width", "image_height", "samples_per_pixel", "max_bounce_depth", "seed")


@dataclass
class RenderConfig:
    """Configuration for a single render.

    Attributes:
        image_width: Image width in pixels (1 to MAX_IMAGE_WIDTH).
        image_height: Image height in pixels (1 to MAX_IMAGE_HEIGHT).
        samples_per_pixel: Number of jittered samples averaged per pixel.
        max_bounce_depth: Maximum number of rays traced per path. A path that
            is still bouncing when the budget runs out contributes black.
        output_path: Where the finished image is written. A ``.png`` suffix
            selects PNG output, anything else is written as ASCII PPM.
        seed: Seed for the per-pixel random streams.
    """

    image_width: int = 400
    image_height: int = 225
    samples_per_pixel: int = 100
    max_bounce_depth: int = 50
    output_path: str = "image.ppm"
    seed: int = 0

    def __post_init__(self) -> None:
        for name in _INT_FIELDS:
            value = getattr(self, name)
            # bool is an int subclass but never a valid count
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        if not isinstance(self.output_path, str):
            raise ValueError(f"output_path must be a string, got {self.output_path!r}")

        if not 1 <= self.image_width <= MAX_IMAGE_WIDTH:
            raise ValueError(
                f"image_width must be in [1, {MAX_IMAGE_WIDTH}], got {self.image_width}"
            )
        if not 1 <= self.image_height <= MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"image_height must be in [1, {MAX_IMAGE_HEIGHT}], got {self.image_height}"
            )
        if self.samples_per_pixel < 1:
            raise ValueError(
                f"samples_per_pixel must be at least 1, got {self.samples_per_pixel}"
            )
        if self.max_bounce_depth < 1:
            raise ValueError(
                f"max_bounce_depth must be at least 1, got {self.max_bounce_depth}"
            )
        if not self.output_path:
            raise ValueError("output_path must not be empty")
        if not 0 <= self.seed <= MAX_SEED:
            raise ValueError(f"seed must be in [0, {MAX_SEED}], got {self.seed}")

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height of the output image."""
        return self.image_width / self.image_height

    def to_dict(self) -> dict[str, Any]:
        """Export the configuration to a dictionary (for JSON serialization)."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RenderConfig":
        """Build a configuration from a dictionary.

        Missing keys take their default values.

        Args:
            data: Dictionary with any subset of the RenderConfig field names.

        Returns:
            A validated RenderConfig.

        Raises:
            ValueError: If the dictionary has unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown render config keys: {', '.join(unknown)}")
        return cls(**data)
