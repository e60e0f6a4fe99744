"""Pytest configuration for path tracer tests.

Shared fixtures: a seeded random generator and a few small scenes that
several test modules render or query.
"""

import numpy as np
import pytest

from pathtracer.scene import SceneBuilder
from pathtracer.surfaces import HalfSpace, Sphere
from pathtracer.typings.isometry import Isometry
from pathtracer.typings.material import Diffuse, Emissive
from pathtracer.typings.ray import Ray


@pytest.fixture
def rng():
    """Deterministic generator so estimator tests are reproducible."""
    return np.random.default_rng(1234)


@pytest.fixture
def light_color():
    return np.array([4.0, 3.0, 2.0])


@pytest.fixture
def emitter_scene(light_color):
    """A single emissive sphere of radius 1 at the origin on a dark background."""
    return (
        SceneBuilder(background=np.array([0.1, 0.2, 0.3]))
        .add(Sphere(1.0), Emissive(light_color))
        .build()
    )


@pytest.fixture
def lit_floor_scene(light_color):
    """Grey diffuse floor at z=0 with an emissive sphere hovering above it."""
    return (
        SceneBuilder(background=np.zeros(3))
        .add(HalfSpace(np.array([0.0, 0.0, 1.0])), Diffuse(np.array([0.5, 0.5, 0.5])))
        .add(Sphere(1.0), Emissive(light_color), Isometry.from_translation(0.0, 0.0, 3.0))
        .build()
    )


def make_ray(origin, direction):
    direction = np.asarray(direction, dtype=float)
    return Ray(origin=np.asarray(origin, dtype=float), direction=direction / np.linalg.norm(direction))
