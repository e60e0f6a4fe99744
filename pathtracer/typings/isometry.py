from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from pathtracer.utils.vector_operations import (
    as_vector,
    axis_angle_matrix,
    is_finite_vector,
    normalize_vector,
    vector_cross,
)

ORTHONORMAL_TOLERANCE: float = 1e-6


@dataclass(frozen=True, slots=True, eq=False)
class Isometry:
    """Rigid transform: rotation followed by translation, no scaling."""

    rotation: np.ndarray = field(default_factory=lambda: np.eye(3))
    translation: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self) -> None:
        rotation = np.asarray(self.rotation, dtype=float)
        translation = as_vector(self.translation)
        if rotation.shape != (3, 3):
            raise ValueError(f"Rotation must be 3x3, got shape {rotation.shape}")
        if not np.all(np.isfinite(rotation)) or not is_finite_vector(translation):
            raise ValueError("Isometry components must be finite")
        if not np.allclose(rotation.T @ rotation, np.eye(3), atol=ORTHONORMAL_TOLERANCE):
            raise ValueError("Rotation matrix is not orthonormal")
        if np.linalg.det(rotation) < 0.0:
            raise ValueError("Rotation matrix must not contain a reflection")
        object.__setattr__(self, "rotation", rotation)
        object.__setattr__(self, "translation", translation)

    @classmethod
    def identity(cls) -> Isometry:
        return cls()

    @classmethod
    def from_translation(cls, x: float, y: float, z: float) -> Isometry:
        return cls(translation=np.array([x, y, z], dtype=float))

    @classmethod
    def from_axis_angle(cls, axis: np.ndarray, angle: float, translation: np.ndarray | None = None) -> Isometry:
        offset = np.zeros(3) if translation is None else translation
        return cls(rotation=axis_angle_matrix(axis, angle), translation=offset)

    @classmethod
    def face_towards(cls, eye: np.ndarray, target: np.ndarray, up: np.ndarray) -> Isometry:
        """Places the origin at `eye` with the local +z axis pointing at `target`.

        Local +y is as close to `up` as possible; local +x is up x forward,
        which is the viewer's left.
        """
        eye = as_vector(eye)
        z_axis = normalize_vector(as_vector(target) - eye)
        x_axis = normalize_vector(vector_cross(as_vector(up), z_axis))
        y_axis = vector_cross(z_axis, x_axis)
        return cls(rotation=np.column_stack([x_axis, y_axis, z_axis]), translation=eye)

    def transform_point(self, point: np.ndarray) -> np.ndarray:
        return self.rotation @ point + self.translation

    def transform_vector(self, vector: np.ndarray) -> np.ndarray:
        return self.rotation @ vector

    def inverse_transform_point(self, point: np.ndarray) -> np.ndarray:
        return self.rotation.T @ (point - self.translation)

    def inverse_transform_vector(self, vector: np.ndarray) -> np.ndarray:
        return self.rotation.T @ vector
