from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, slots=True)
class Hit:
    t: float
    point: np.ndarray
    normal: np.ndarray # unit length, facing against the incoming ray
    front_face: bool # True when the ray struck the outside of the surface
