#!/usr/bin/env python3
"""Render a sphere scene to an image file.

This script renders the built-in two-sphere scene (or a scene loaded from a
JSON file) with diffuse path tracing and writes the result as ASCII PPM, or as
PNG when the output path ends in .png.

Usage:
    python -m examples.render_spheres [options]

Options:
    --config CONFIG       JSON file with render settings (RenderConfig fields)
    --scene SCENE         JSON scene file ({"spheres": [...]}); default two spheres
    --width WIDTH         Image width in pixels (default: 400)
    --height HEIGHT       Image height in pixels (default: 225)
    --samples SAMPLES     Samples per pixel (default: 100)
    --max-depth DEPTH     Maximum rays traced per path (default: 50)
    --seed SEED           Random seed (default: 0)
    --output OUTPUT       Output file path (default: image.ppm)
    --band-size ROWS      Rows per progress update (default: 16)
    --quiet               Suppress progress output
    --verbose             Enable debug logging

Command-line options override values from --config.

Example:
    python -m examples.render_spheres --width 200 --height 100 --samples 20
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

import taichi as ti

if TYPE_CHECKING:
    from spheretracer.core.config import RenderConfig


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a sphere scene with diffuse path tracing.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=str, default=None, help="JSON render config file")
    parser.add_argument("--scene", type=str, default=None, help="JSON scene file")
    parser.add_argument("--width", type=int, default=None, help="Image width in pixels")
    parser.add_argument("--height", type=int, default=None, help="Image height in pixels")
    parser.add_argument("--samples", type=int, default=None, help="Samples per pixel")
    parser.add_argument(
        "--max-depth", type=int, default=None, help="Maximum rays traced per path"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--output", type=str, default=None, help="Output file path")
    parser.add_argument(
        "--band-size",
        type=int,
        default=16,
        help="Rows per progress update (default: 16)",
    )
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> RenderConfig:
    """Merge the optional config file with command-line overrides.

    Returns:
        A validated RenderConfig.

    Raises:
        ValueError: If the config file or an option holds an invalid value.
        OSError: If the config file cannot be read.
    """
    from spheretracer.core.config import RenderConfig

    data = {}
    if args.config is not None:
        data = json.loads(Path(args.config).read_text())
        if not isinstance(data, dict):
            raise ValueError(f"Config file {args.config} must contain a JSON object")

    overrides = {
        "image_width": args.width,
        "image_height": args.height,
        "samples_per_pixel": args.samples,
        "max_bounce_depth": args.max_depth,
        "seed": args.seed,
        "output_path": args.output,
    }
    data.update({key: value for key, value in overrides.items() if value is not None})
    return RenderConfig.from_dict(data)


def render_spheres(
    config: RenderConfig,
    scene_path: str | None = None,
    band_size: int = 16,
    quiet: bool = False,
) -> Path:
    """Render the scene described by config and save it to config.output_path.

    Args:
        config: The RenderConfig to render with.
        scene_path: Optional JSON scene file. If None, the default two-sphere
            scene is used.
        band_size: Number of rows to render between progress updates.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from spheretracer.camera.pinhole import setup_camera
    from spheretracer.core.renderer import Renderer
    from spheretracer.scene.default_scene import DefaultSceneParams, create_default_scene

    scene, camera = create_default_scene(DefaultSceneParams(aspect_ratio=config.aspect_ratio))
    if scene_path is not None:
        scene.load_scene_file(scene_path)

    if not quiet:
        print(
            f"Scene: {scene.get_sphere_count()} spheres, "
            f"{config.image_width}x{config.image_height}"
        )

    setup_camera(camera)
    renderer = Renderer(config)

    if not quiet:
        print(f"Rendering {config.samples_per_pixel} samples per pixel...")

    start_time = time.time()

    def progress_callback(rows_done: int, total_rows: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (rows_done / total_rows) * 100 if total_rows > 0 else 0
            print(
                f"\r  Progress: {rows_done}/{total_rows} rows "
                f"({progress_pct:.1f}%) - {elapsed:.1f}s",
                end="",
                flush=True,
            )

    renderer.render(band_size=band_size, callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = renderer.save()

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def init_taichi(quiet: bool = False) -> None:
    """Initialize Taichi, using the GPU if available and falling back to CPU."""
    try:
        ti.init(arch=ti.gpu)
        if not quiet:
            print("Using GPU backend")
    except Exception:
        ti.init(arch=ti.cpu)
        if not quiet:
            print("Using CPU backend")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        config = build_config(args)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    init_taichi(quiet=args.quiet)

    try:
        render_spheres(
            config,
            scene_path=args.scene,
            band_size=args.band_size,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
