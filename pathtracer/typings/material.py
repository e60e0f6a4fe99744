from __future__ import annotations

from enum import Enum
from typing import Union

import numpy as np

from pathtracer.utils.vector_operations import make_color


class ScatterModel(str, Enum):
    """Reflectance models a diffuse surface can select.

    Only UNIT (reflectance 1 in every direction) is implemented.
    """

    UNIT = "unit"
    LAMBERTIAN = "lambertian"
    MIRROR = "mirror"
    GLOSSY = "glossy"


class Emissive:
    """Idealized area light: terminates a path with its own color."""

    def __init__(self, color: np.ndarray) -> None:
        self.color: np.ndarray = make_color(*color)

    @property
    def albedo(self) -> np.ndarray:
        return self.color

    def emission(self) -> np.ndarray | None:
        return self.color.copy()

    def scatter_weight(self, incident: np.ndarray, outgoing: np.ndarray, normal: np.ndarray) -> float:
        return 1.0

    def __repr__(self) -> str:
        return f"Emissive(color={self.color.tolist()})"


class Diffuse:
    def __init__(self, color: np.ndarray, scatter_model: ScatterModel = ScatterModel.UNIT) -> None:
        self.color: np.ndarray = make_color(*color)
        self.scatter_model: ScatterModel = ScatterModel(scatter_model)

    @property
    def albedo(self) -> np.ndarray:
        return self.color

    def emission(self) -> np.ndarray | None:
        return None

    def scatter_weight(self, incident: np.ndarray, outgoing: np.ndarray, normal: np.ndarray) -> float:
        """Reflectance for light leaving along `outgoing`. The cosine term is applied by the caller."""
        if self.scatter_model is ScatterModel.UNIT:
            return 1.0
        raise NotImplementedError(f"Scatter model '{self.scatter_model.value}' is not implemented")

    def __repr__(self) -> str:
        return f"Diffuse(color={self.color.tolist()}, scatter_model={self.scatter_model.value!r})"


Material = Union[Emissive, Diffuse]
