from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import numpy as np

from pathtracer.surfaces import Shape
from pathtracer.typings.hit import Hit
from pathtracer.typings.isometry import Isometry
from pathtracer.typings.material import Material
from pathtracer.typings.ray import Ray
from pathtracer.utils.sampling import random_hemisphere_direction
from pathtracer.utils.vector_operations import make_color, rotation_onto, vector_dot


@dataclass(frozen=True, slots=True)
class SceneObject:
    shape: Shape
    isometry: Isometry
    material: Material

    def intersect(self, ray: Ray) -> Hit | None:
        return self.shape.intersect(self.isometry, ray)


class Scene:
    """Read-only collection of objects and the background color.

    Nothing mutates a Scene after it is built, so any number of render
    threads may query it at once.
    """

    def __init__(self, objects: Sequence[SceneObject] = (), background: np.ndarray = (0.0, 0.0, 0.0)) -> None:
        self._objects: Tuple[SceneObject, ...] = tuple(objects)
        self._background: np.ndarray = make_color(*background)
        self._background.flags.writeable = False

    @property
    def objects(self) -> Tuple[SceneObject, ...]:
        return self._objects

    @property
    def background(self) -> np.ndarray:
        return self._background

    def __len__(self) -> int:
        return len(self._objects)

    def closest_intersection(self, ray: Ray) -> Tuple[int, Hit] | None:
        """Index and hit of the nearest object along `ray`.

        Linear scan in insertion order; on equal distances the earlier object wins.
        """
        best: Tuple[int, Hit] | None = None
        for index, scene_object in enumerate(self._objects):
            hit = scene_object.intersect(ray)
            if hit is None or hit.t <= 0.0:
                continue
            if best is None or hit.t < best[1].t:
                best = (index, hit)
        return best

    def estimate_radiance(
        self,
        ray: Ray,
        samples_per_bounce: int,
        max_depth: int,
        rng: np.random.Generator,
    ) -> np.ndarray:
        """
        Monte-Carlo estimate of the radiance arriving along `ray`.

        Paths end at an emitter, at the background, or when `max_depth`
        reaches zero (which also returns the background). At a diffuse
        surface `samples_per_bounce` directions are drawn uniformly over the
        hemisphere around the normal; every deeper bounce follows a single
        direction.
        """
        if samples_per_bounce < 1:
            raise ValueError(f"samples_per_bounce must be at least 1, got {samples_per_bounce}")
        if max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {max_depth}")
        if max_depth == 0:
            return self._background.copy()

        closest = self.closest_intersection(ray)
        if closest is None:
            return self._background.copy()

        index, hit = closest
        material = self._objects[index].material
        emitted = material.emission()
        if emitted is not None:
            return emitted

        surface_normal = hit.normal
        to_world = rotation_onto(surface_normal)
        color = np.zeros(3, dtype=float)

        for _ in range(samples_per_bounce):
            out_going = to_world @ random_hemisphere_direction(rng)
            # below-hemisphere samples from rounding get zero weight here
            factor = material.scatter_weight(ray.direction, out_going, surface_normal) * max(
                0.0, vector_dot(surface_normal, out_going)
            )
            bounce_ray = Ray(origin=hit.point, direction=out_going)
            color += material.albedo * factor * self.estimate_radiance(bounce_ray, 1, max_depth - 1, rng)

        return color / samples_per_bounce


@dataclass(slots=True)
class SceneBuilder:
    """Append-only assembly of a Scene."""

    background: np.ndarray = field(default_factory=lambda: np.zeros(3))
    _objects: List[SceneObject] = field(default_factory=list)

    def add(self, shape: Shape, material: Material, isometry: Isometry | None = None) -> SceneBuilder:
        placement = Isometry.identity() if isometry is None else isometry
        self._objects.append(SceneObject(shape=shape, isometry=placement, material=material))
        return self

    def build(self) -> Scene:
        return Scene(self._objects, self.background)
