from __future__ import annotations

import math

import numpy as np


def random_hemisphere_direction(rng: np.random.Generator) -> np.ndarray:
    """Unit vector with non-negative z, uniform over solid angle.

    Azimuth is drawn first, then the polar angle as acos(u).
    """
    theta = 2.0 * math.pi * rng.random()
    phi = math.acos(rng.random())
    sin_phi = math.sin(phi)
    return np.array([math.cos(theta) * sin_phi, math.sin(theta) * sin_phi, math.cos(phi)])


def pixel_rng(seed: int, pixel_index: int) -> np.random.Generator:
    """Independent generator for one pixel, derived from the render seed.

    The stream depends only on (seed, pixel_index), so the schedule that
    renders the pixel cannot change its value.
    """
    return np.random.default_rng(np.random.SeedSequence(seed, spawn_key=(pixel_index,)))
