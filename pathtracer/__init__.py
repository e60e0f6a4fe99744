"""Monte-Carlo path tracer.

Cast one ray per pixel from a Camera, estimate the light arriving along it
with Scene.estimate_radiance, and write the result into the camera's pixel
buffer with `render`.
"""

from pathtracer.camera import Camera
from pathtracer.render_settings import RenderSettings
from pathtracer.renderer import render, save_image
from pathtracer.scene import Scene, SceneBuilder, SceneObject
from pathtracer.surfaces import Box, Capsule, HalfSpace, RoundedBox, Sphere, intersect
from pathtracer.typings.isometry import Isometry
from pathtracer.typings.material import Diffuse, Emissive, ScatterModel
from pathtracer.typings.ray import Ray
from pathtracer.utils.vector_operations import make_color

__version__ = "0.1.0"

__all__ = [
    "Box",
    "Camera",
    "Capsule",
    "Diffuse",
    "Emissive",
    "HalfSpace",
    "Isometry",
    "Ray",
    "RenderSettings",
    "RoundedBox",
    "ScatterModel",
    "Scene",
    "SceneBuilder",
    "SceneObject",
    "Sphere",
    "intersect",
    "make_color",
    "render",
    "save_image",
]
