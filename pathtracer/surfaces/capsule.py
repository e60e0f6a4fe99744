from __future__ import annotations

import math
from typing import List

import numpy as np

from pathtracer.surfaces.quadrics import cylinder_roots, sphere_roots
from pathtracer.surfaces.surface import LocalHit, Surface, nearest_local_hit
from pathtracer.utils.vector_operations import EPSILON, as_vector, is_finite_vector, vector_dot


class Capsule(Surface):
    """All points within `radius` of the segment from `segment_a` to `segment_b`."""

    def __init__(self, segment_a: np.ndarray, segment_b: np.ndarray, radius: float) -> None:
        self.segment_a: np.ndarray = as_vector(segment_a)
        self.segment_b: np.ndarray = as_vector(segment_b)
        self.radius: float = float(radius)
        self.degenerate = not (
            is_finite_vector(self.segment_a)
            and is_finite_vector(self.segment_b)
            and math.isfinite(self.radius)
            and self.radius > 0.0
        )

        segment = self.segment_b - self.segment_a
        self.segment_length: float = float(np.linalg.norm(segment)) if not self.degenerate else 0.0
        self.axis: np.ndarray | None = None
        if self.segment_length >= EPSILON:
            self.axis = segment / self.segment_length

    def local_intersect(self, origin: np.ndarray, direction: np.ndarray) -> LocalHit | None:
        candidates: List[LocalHit] = []

        if self.axis is not None:
            roots = cylinder_roots(origin, direction, self.segment_a, self.axis, self.radius)
            for t in roots or ():
                point = origin + t * direction
                along = vector_dot(point - self.segment_a, self.axis)
                if 0.0 <= along <= self.segment_length:
                    radial = point - (self.segment_a + along * self.axis)
                    candidates.append((t, radial / self.radius))

        for center, is_a_end in ((self.segment_a, True), (self.segment_b, False)):
            roots = sphere_roots(origin, direction, center, self.radius)
            for t in roots or ():
                point = origin + t * direction
                if self.axis is not None:
                    # each cap only owns the hemisphere facing away from the segment
                    along = vector_dot(point - self.segment_a, self.axis)
                    if is_a_end and along > 0.0:
                        continue
                    if not is_a_end and along < self.segment_length:
                        continue
                candidates.append((t, (point - center) / self.radius))

        return nearest_local_hit(candidates)

    def __repr__(self) -> str:
        return (
            f"Capsule(segment_a={self.segment_a.tolist()}, segment_b={self.segment_b.tolist()}, "
            f"radius={self.radius})"
        )
