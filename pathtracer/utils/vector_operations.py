from __future__ import annotations

import math
from typing import Tuple

import numpy as np

EPSILON: float = 1e-5 # rays ignore hits closer than this, so a bounce never re-hits its own launch point

UP_AXIS: np.ndarray = np.array([0.0, 0.0, 1.0])


def as_vector(v) -> np.ndarray:
    vector_array = np.asarray(v, dtype=float)
    if vector_array.shape != (3,):
        raise ValueError(f"Expected a 3-vector, got shape {vector_array.shape}")
    return vector_array


def is_finite_vector(v: np.ndarray) -> bool:
    return bool(np.all(np.isfinite(v)))


def vector_length(v: np.ndarray) -> float: #Euclidean length (magnitude) of a vector
    vector_array = np.asarray(v, dtype=float)
    return float(np.linalg.norm(vector_array))


def normalize_vector(v: np.ndarray) -> np.ndarray:
    vector_array = np.asarray(v, dtype=float)
    magnitude = np.linalg.norm(vector_array)
    if magnitude < EPSILON:
        raise ValueError("Cannot normalize near-zero vector")
    return vector_array / magnitude


def vector_dot(a: np.ndarray, b: np.ndarray) -> float:
    vector_a = np.asarray(a, dtype=float)
    vector_b = np.asarray(b, dtype=float)
    return float(np.dot(vector_a, vector_b))


def vector_cross(a: np.ndarray, b: np.ndarray) -> np.ndarray: #cross product of two vectors (3D)
    vector_a = np.asarray(a, dtype=float)
    vector_b = np.asarray(b, dtype=float)
    return np.cross(vector_a, vector_b)


def axis_angle_matrix(axis: np.ndarray, angle: float) -> np.ndarray:
    """Rotation matrix for a right-handed rotation of `angle` radians about `axis` (Rodrigues)."""
    unit_axis = normalize_vector(axis)
    x, y, z = unit_axis
    cross_matrix = np.array([
        [0.0, -z, y],
        [z, 0.0, -x],
        [-y, x, 0.0],
    ])
    return np.eye(3) + math.sin(angle) * cross_matrix + (1.0 - math.cos(angle)) * (cross_matrix @ cross_matrix)


def rotation_onto(normal: np.ndarray) -> np.ndarray:
    """Rotation matrix carrying the +z axis onto the unit vector `normal`.

    Hemisphere samples drawn around +z are moved into world space with it.
    """
    cos_angle = max(-1.0, min(1.0, vector_dot(UP_AXIS, normal)))
    axis = vector_cross(UP_AXIS, normal)
    if vector_length(axis) < EPSILON:
        if cos_angle > 0.0:
            return np.eye(3)
        # anti-parallel: any axis perpendicular to z works
        return axis_angle_matrix(np.array([1.0, 0.0, 0.0]), math.pi)
    return axis_angle_matrix(axis, math.acos(cos_angle))


def solve_quadratic(a: float, b: float, c: float) -> Tuple[float, float] | None:
    """Real roots of a*t^2 + b*t + c, smallest first, or None."""
    if abs(a) < EPSILON * EPSILON:
        return None
    discriminant = b * b - 4.0 * a * c
    if discriminant < 0.0:
        return None
    sqrt_discriminant = math.sqrt(discriminant)
    inverse_2a = 1.0 / (2.0 * a)
    t_near = (-b - sqrt_discriminant) * inverse_2a
    t_far = (-b + sqrt_discriminant) * inverse_2a
    if t_near > t_far:
        t_near, t_far = t_far, t_near
    return t_near, t_far


def make_color(r: float, g: float, b: float) -> np.ndarray:
    """Linear radiance triple. Channels may exceed 1.0 for bright emitters."""
    color_array = np.array([r, g, b], dtype=float)
    if not is_finite_vector(color_array) or np.any(color_array < 0.0):
        raise ValueError(f"Color channels must be finite and non-negative, got {color_array}")
    return color_array


def clamp_color01(color_rgb: np.ndarray) -> np.ndarray:
    """Clamps an RGB color array to the range [0.0, 1.0]."""
    color_array = np.asarray(color_rgb, dtype=float)
    return np.clip(color_array, 0.0, 1.0)


def color_to_uint8(color_rgb: np.ndarray) -> np.ndarray:
    """Converts a floating-point RGB color array (clamped to [0, 1]) to 8-bit integer [0, 255]."""
    clamped_color = clamp_color01(color_rgb)
    return (clamped_color * 255.0 + 0.5).astype(np.uint8) # 0.5 before conversion ensures correct rounding
