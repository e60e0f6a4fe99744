from __future__ import annotations

import math

import numpy as np

from pathtracer.surfaces.quadrics import sphere_roots
from pathtracer.surfaces.surface import LocalHit, Surface
from pathtracer.utils.vector_operations import EPSILON

CENTER: np.ndarray = np.zeros(3)


class Sphere(Surface):
    def __init__(self, radius: float) -> None:
        self.radius: float = float(radius)
        self.degenerate = not (math.isfinite(self.radius) and self.radius > 0.0)

    def local_intersect(self, origin: np.ndarray, direction: np.ndarray) -> LocalHit | None:
        roots = sphere_roots(origin, direction, CENTER, self.radius)
        if roots is None:
            return None

        t_near, t_far = roots
        hit_distance = t_near if t_near > EPSILON else t_far
        if hit_distance <= EPSILON:
            return None

        hit_point = origin + hit_distance * direction
        return hit_distance, hit_point / self.radius

    def __repr__(self) -> str:
        return f"Sphere(radius={self.radius})"
