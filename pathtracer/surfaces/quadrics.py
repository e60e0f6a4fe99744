from __future__ import annotations

from typing import Tuple

import numpy as np

from pathtracer.utils.vector_operations import solve_quadratic, vector_dot


def sphere_roots(
    origin: np.ndarray, direction: np.ndarray, center: np.ndarray, radius: float
) -> Tuple[float, float] | None:
    origin_to_center = origin - center
    quadratic_a = vector_dot(direction, direction)
    quadratic_b = 2.0 * vector_dot(origin_to_center, direction)
    quadratic_c = vector_dot(origin_to_center, origin_to_center) - radius * radius
    return solve_quadratic(quadratic_a, quadratic_b, quadratic_c)


def cylinder_roots(
    origin: np.ndarray, direction: np.ndarray, base: np.ndarray, axis: np.ndarray, radius: float
) -> Tuple[float, float] | None:
    """Roots against the infinite cylinder through `base` along unit `axis`.

    Rays parallel to the axis give None.
    """
    origin_to_base = origin - base
    direction_perp = direction - axis * vector_dot(direction, axis)
    offset_perp = origin_to_base - axis * vector_dot(origin_to_base, axis)
    quadratic_a = vector_dot(direction_perp, direction_perp)
    quadratic_b = 2.0 * vector_dot(offset_perp, direction_perp)
    quadratic_c = vector_dot(offset_perp, offset_perp) - radius * radius
    return solve_quadratic(quadratic_a, quadratic_b, quadratic_c)
