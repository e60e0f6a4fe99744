from __future__ import annotations

import numpy as np

from pathtracer.surfaces.surface import LocalHit, Surface
from pathtracer.utils.vector_operations import EPSILON, as_vector, is_finite_vector


class Box(Surface):
    """Axis-aligned box centered on the local origin."""

    def __init__(self, half_extents: np.ndarray) -> None:
        self.half_extents: np.ndarray = as_vector(half_extents)
        self.degenerate = not (is_finite_vector(self.half_extents) and bool(np.all(self.half_extents > 0.0)))

    def local_intersect(self, origin: np.ndarray, direction: np.ndarray) -> LocalHit | None:
        box_max = self.half_extents
        box_min = -box_max
        t_entry = -float("inf")
        t_exit = float("inf")

        for axis in range(3):
            if abs(direction[axis]) < EPSILON:
                if origin[axis] < box_min[axis] or origin[axis] > box_max[axis]:
                    return None
                continue

            inverse_direction = 1.0 / float(direction[axis])
            t_near = (float(box_min[axis]) - float(origin[axis])) * inverse_direction
            t_far = (float(box_max[axis]) - float(origin[axis])) * inverse_direction
            if t_near > t_far:
                t_near, t_far = t_far, t_near

            t_entry = max(t_entry, t_near)
            t_exit = min(t_exit, t_far)
            if t_exit < t_entry:
                return None

        if t_exit <= EPSILON:
            return None

        hit_distance = t_entry if t_entry > EPSILON else t_exit
        hit_point = origin + hit_distance * direction

        # Face normal from whichever slab the hit point lies closest to.
        face_distances = np.abs(np.abs(hit_point) - box_max)
        closest_axis = int(np.argmin(face_distances))

        surface_normal = np.zeros(3, dtype=float)
        surface_normal[closest_axis] = 1.0 if hit_point[closest_axis] >= 0 else -1.0
        return hit_distance, surface_normal

    def __repr__(self) -> str:
        return f"Box(half_extents={self.half_extents.tolist()})"
