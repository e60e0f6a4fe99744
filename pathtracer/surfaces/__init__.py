from typing import Union

from pathtracer.surfaces.box import Box
from pathtracer.surfaces.capsule import Capsule
from pathtracer.surfaces.half_space import HalfSpace
from pathtracer.surfaces.rounded_box import RoundedBox
from pathtracer.surfaces.sphere import Sphere
from pathtracer.surfaces.surface import Surface, intersect

Shape = Union[Sphere, Box, Capsule, RoundedBox, HalfSpace]

__all__ = ["Box", "Capsule", "HalfSpace", "RoundedBox", "Shape", "Sphere", "Surface", "intersect"]
