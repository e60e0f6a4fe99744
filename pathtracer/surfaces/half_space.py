import numpy as np

from pathtracer.surfaces.surface import LocalHit, Surface
from pathtracer.utils.vector_operations import EPSILON, as_vector, is_finite_vector, vector_dot, vector_length


class HalfSpace(Surface):
    """Solid half-space {p : dot(normal, p) <= 0}; only its boundary plane is hit."""

    def __init__(self, normal: np.ndarray) -> None:
        raw_normal = as_vector(normal)
        self.degenerate = not is_finite_vector(raw_normal) or vector_length(raw_normal) < EPSILON
        self.normal: np.ndarray = raw_normal if self.degenerate else raw_normal / vector_length(raw_normal)

    def local_intersect(self, origin: np.ndarray, direction: np.ndarray) -> LocalHit | None:
        direction_dot_normal = vector_dot(self.normal, direction)
        if abs(direction_dot_normal) < EPSILON:
            return None

        hit_distance = -vector_dot(self.normal, origin) / direction_dot_normal
        if hit_distance <= EPSILON:
            return None
        return hit_distance, self.normal

    def __repr__(self) -> str:
        return f"HalfSpace(normal={self.normal.tolist()})"
