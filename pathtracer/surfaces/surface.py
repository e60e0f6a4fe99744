from __future__ import annotations

import math
from typing import Iterable, Tuple

import numpy as np

from pathtracer.typings.hit import Hit
from pathtracer.typings.isometry import Isometry
from pathtracer.typings.ray import Ray
from pathtracer.utils.vector_operations import EPSILON, is_finite_vector, vector_dot, vector_length

# (distance, outward unit normal) in the shape's local frame
LocalHit = Tuple[float, np.ndarray]


def nearest_local_hit(candidates: Iterable[LocalHit]) -> LocalHit | None:
    best: LocalHit | None = None
    for t, normal in candidates:
        if t <= EPSILON:
            continue
        if best is None or t < best[0]:
            best = (t, normal)
    return best


class Surface:
    """Geometry in its own local frame. Subclasses implement `local_intersect`.

    `degenerate` is set by subclasses whose parameters describe no surface
    (non-positive radius or extent, non-finite values); such shapes are never hit.
    """

    degenerate: bool = False

    def local_intersect(self, origin: np.ndarray, direction: np.ndarray) -> LocalHit | None:
        raise NotImplementedError

    def intersect(self, isometry: Isometry, ray: Ray) -> Hit | None:
        if self.degenerate:
            return None
        if not (is_finite_vector(ray.origin) and is_finite_vector(ray.direction)):
            return None
        if vector_length(ray.direction) < EPSILON:
            return None

        local_hit = self.local_intersect(
            isometry.inverse_transform_point(ray.origin),
            isometry.inverse_transform_vector(ray.direction),
        )
        if local_hit is None:
            return None

        hit_distance, local_normal = local_hit
        if not math.isfinite(hit_distance) or hit_distance <= EPSILON:
            return None

        surface_normal = isometry.transform_vector(local_normal)
        front_face = vector_dot(surface_normal, ray.direction) < 0.0
        if not front_face:
            surface_normal = -surface_normal
        return Hit(t=float(hit_distance), point=ray.point_at(hit_distance), normal=surface_normal, front_face=front_face)


def intersect(shape: Surface, isometry: Isometry, ray: Ray) -> Hit | None:
    """Nearest hit of `ray` with `shape` placed by `isometry`, beyond EPSILON."""
    return shape.intersect(isometry, ray)
