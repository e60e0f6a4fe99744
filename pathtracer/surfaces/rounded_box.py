from __future__ import annotations

import itertools
import math
from typing import List

import numpy as np

from pathtracer.surfaces.quadrics import cylinder_roots, sphere_roots
from pathtracer.surfaces.surface import LocalHit, Surface, nearest_local_hit
from pathtracer.utils.vector_operations import EPSILON, as_vector, is_finite_vector

AXES: np.ndarray = np.eye(3)


class RoundedBox(Surface):
    """Box of `half_extents` inflated by `border_radius` in every direction.

    The surface is split into six flat faces, twelve quarter-cylinder edges
    and eight corner spheres. Each piece only accepts hits inside its own
    region, so the nearest accepted candidate is the true crossing.
    """

    def __init__(self, half_extents: np.ndarray, border_radius: float) -> None:
        self.half_extents: np.ndarray = as_vector(half_extents)
        self.border_radius: float = float(border_radius)
        self.degenerate = not (
            is_finite_vector(self.half_extents)
            and bool(np.all(self.half_extents > 0.0))
            and math.isfinite(self.border_radius)
            and self.border_radius > 0.0
        )

    def local_intersect(self, origin: np.ndarray, direction: np.ndarray) -> LocalHit | None:
        candidates: List[LocalHit] = []
        candidates.extend(self._face_hits(origin, direction))
        candidates.extend(self._edge_hits(origin, direction))
        candidates.extend(self._corner_hits(origin, direction))
        return nearest_local_hit(candidates)

    def _face_hits(self, origin: np.ndarray, direction: np.ndarray) -> List[LocalHit]:
        hits: List[LocalHit] = []
        extents = self.half_extents
        for axis in range(3):
            if abs(direction[axis]) < EPSILON:
                continue
            others = [other for other in range(3) if other != axis]
            for sign in (1.0, -1.0):
                plane = sign * (extents[axis] + self.border_radius)
                t = (plane - origin[axis]) / direction[axis]
                point = origin + t * direction
                if all(abs(point[other]) <= extents[other] for other in others):
                    hits.append((t, sign * AXES[axis]))
        return hits

    def _edge_hits(self, origin: np.ndarray, direction: np.ndarray) -> List[LocalHit]:
        hits: List[LocalHit] = []
        extents = self.half_extents
        for axis in range(3):
            first, second = [other for other in range(3) if other != axis]
            for first_sign, second_sign in itertools.product((1.0, -1.0), repeat=2):
                edge_center = np.zeros(3)
                edge_center[first] = first_sign * extents[first]
                edge_center[second] = second_sign * extents[second]
                roots = cylinder_roots(origin, direction, edge_center, AXES[axis], self.border_radius)
                for t in roots or ():
                    point = origin + t * direction
                    if abs(point[axis]) > extents[axis]:
                        continue
                    if first_sign * point[first] < extents[first] or second_sign * point[second] < extents[second]:
                        continue
                    radial = point - edge_center
                    radial[axis] = 0.0
                    hits.append((t, radial / self.border_radius))
        return hits

    def _corner_hits(self, origin: np.ndarray, direction: np.ndarray) -> List[LocalHit]:
        hits: List[LocalHit] = []
        for signs in itertools.product((1.0, -1.0), repeat=3):
            sign_vector = np.array(signs)
            corner = sign_vector * self.half_extents
            roots = sphere_roots(origin, direction, corner, self.border_radius)
            for t in roots or ():
                point = origin + t * direction
                if np.all(sign_vector * point >= self.half_extents):
                    hits.append((t, (point - corner) / self.border_radius))
        return hits

    def __repr__(self) -> str:
        return f"RoundedBox(half_extents={self.half_extents.tolist()}, border_radius={self.border_radius})"
