"""Built-in two-sphere scene.

The default scene is the classic "sphere on a ground sphere" setup:
- A small sphere of radius 0.5 centered one unit in front of the camera
- A huge sphere of radius 100 whose top surface acts as the ground plane

The camera is the fixed pinhole camera at the origin looking down -z with a
viewport height of 2.0 and a width that follows the image aspect ratio.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretracer.scene.default_scene import create_default_scene
    >>> from spheretracer.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_default_scene()
    >>> setup_camera(camera)
"""

from dataclasses import dataclass

from spheretracer.camera.pinhole import PinholeCamera
from spheretracer.scene.manager import SceneManager

# =============================================================================
# Default Scene Constants
# =============================================================================

SMALL_SPHERE_CENTER = (0.0, 0.0, -1.0)
SMALL_SPHERE_RADIUS = 0.5

GROUND_SPHERE_CENTER = (0.0, -100.5, -1.0)
GROUND_SPHERE_RADIUS = 100.0

DEFAULT_VIEWPORT_HEIGHT = 2.0
DEFAULT_ASPECT_RATIO = 16.0 / 9.0


@dataclass
class DefaultSceneParams:
    """Parameters for the default scene's camera.

    Attributes:
        viewport_height: Height of the camera viewport in world units.
        aspect_ratio: Viewport width divided by height. Should match the
            image aspect ratio to avoid stretching.
    """

    viewport_height: float = DEFAULT_VIEWPORT_HEIGHT
    aspect_ratio: float = DEFAULT_ASPECT_RATIO


def create_default_scene(
    params: DefaultSceneParams | None = None,
) -> tuple[SceneManager, PinholeCamera]:
    """Create the two-sphere scene and its camera.

    Clears any existing scene before adding the spheres.

    Args:
        params: Optional camera parameters. If None, uses DefaultSceneParams().

    Returns:
        A tuple of (SceneManager, PinholeCamera).
    """
    if params is None:
        params = DefaultSceneParams()

    scene = SceneManager()
    scene.add_sphere(SMALL_SPHERE_CENTER, SMALL_SPHERE_RADIUS)
    scene.add_sphere(GROUND_SPHERE_CENTER, GROUND_SPHERE_RADIUS)

    camera = PinholeCamera.from_aspect_ratio(params.aspect_ratio, params.viewport_height)
    return scene, camera
