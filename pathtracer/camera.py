from __future__ import annotations

import math
from typing import Iterator, Tuple

import numpy as np

from pathtracer.typings.isometry import Isometry
from pathtracer.typings.ray import Ray
from pathtracer.utils.vector_operations import as_vector, normalize_vector

WORLD_UP: np.ndarray = np.array([0.0, 0.0, 1.0])


class Camera:
    def __init__(self, isometry: Isometry, fov: float, width: int, height: int) -> None:
        if not (math.isfinite(fov) and 0.0 < fov < math.pi):
            raise ValueError(f"Field of view must be in (0, pi) radians, got {fov}")
        if width < 0 or height < 0:
            raise ValueError(f"Resolution must be non-negative, got {width}x{height}")

        self.isometry: Isometry = isometry
        self.fov: float = float(fov)
        self.image: np.ndarray = np.zeros((int(height), int(width), 3), dtype=float)

        self._recompute_basis()

    @classmethod
    def face_towards(
        cls,
        eye: np.ndarray,
        target: np.ndarray,
        fov: float,
        width: int,
        height: int,
        up: np.ndarray = WORLD_UP,
    ) -> Camera:
        return cls(Isometry.face_towards(as_vector(eye), as_vector(target), as_vector(up)), fov, width, height)

    @classmethod
    def default(cls) -> Camera:
        return cls.face_towards(np.array([10.0, 5.0, 8.0]), np.zeros(3), math.pi / 3.0, 100, 100)

    def _recompute_basis(self) -> None:
        """World-space eye and axes. The face-towards frame has local +x on the viewer's left,
        so right is the image of -x."""
        self.eye: np.ndarray = self.isometry.transform_point(np.zeros(3))
        self.forward: np.ndarray = self.isometry.transform_vector(np.array([0.0, 0.0, 1.0]))
        self.up: np.ndarray = self.isometry.transform_vector(np.array([0.0, 1.0, 0.0]))
        self.right: np.ndarray = self.isometry.transform_vector(np.array([-1.0, 0.0, 0.0]))

    @property
    def width(self) -> int:
        return self.image.shape[1]

    @property
    def height(self) -> int:
        return self.image.shape[0]

    @property
    def pixel_length(self) -> float:
        """Image-plane spacing between pixel centers at unit distance from the eye."""
        if self.width == 0:
            return 0.0
        return 2.0 * math.tan(self.fov / 2.0) / self.width

    def ray_for_pixel(self, row: int, col: int) -> Ray:
        # row 0 is the top of the image, so rows grow downward in world space
        horizontal = (float(col) - self.width / 2.0) * self.pixel_length
        vertical = (self.height / 2.0 - float(row)) * self.pixel_length
        direction = normalize_vector(self.forward + self.right * horizontal + self.up * vertical)
        return Ray(origin=self.eye, direction=direction)

    def generate_rays(self) -> Iterator[Tuple[Ray, np.ndarray]]:
        """Yields (ray, pixel) in row-major order.

        `pixel` is a writable view of exactly one cell of `image`; no two
        entries share a cell.
        """
        for row in range(self.height):
            for col in range(self.width):
                yield self.ray_for_pixel(row, col), self.image[row, col]
