"""Unit tests for scene assembly and nearest-hit queries.

Tests cover:
- Append-only builder producing an immutable scene
- Nearest hit chosen by distance, not insertion order
- Exact ties resolved to the first inserted object
- Misses and empty scenes
"""

import numpy as np
import pytest
from conftest import make_ray

from pathtracer.scene import Scene, SceneBuilder, SceneObject
from pathtracer.surfaces import Box, Sphere
from pathtracer.typings.isometry import Isometry
from pathtracer.typings.material import Diffuse, Emissive

GREY = Diffuse(np.array([0.5, 0.5, 0.5]))
LIGHT = Emissive(np.array([1.0, 1.0, 1.0]))


class TestSceneBuilder:
    def test_add_is_chainable_and_keeps_order(self):
        scene = (
            SceneBuilder()
            .add(Sphere(1.0), GREY)
            .add(Box(np.ones(3)), LIGHT, Isometry.from_translation(3.0, 0.0, 0.0))
            .build()
        )
        assert len(scene) == 2
        assert isinstance(scene.objects[0].shape, Sphere)
        assert isinstance(scene.objects[1].shape, Box)
        np.testing.assert_array_equal(scene.objects[0].isometry.translation, np.zeros(3))

    def test_built_scene_is_not_affected_by_later_additions(self):
        builder = SceneBuilder().add(Sphere(1.0), GREY)
        scene = builder.build()
        builder.add(Sphere(2.0), GREY)
        assert len(scene) == 1
        assert len(builder.build()) == 2

    def test_objects_are_a_tuple(self):
        scene = SceneBuilder().add(Sphere(1.0), GREY).build()
        assert isinstance(scene.objects, tuple)

    def test_background_is_read_only(self):
        scene = Scene(background=np.array([0.1, 0.2, 0.3]))
        with pytest.raises(ValueError):
            scene.background[0] = 1.0

    def test_rejects_negative_background(self):
        with pytest.raises(ValueError):
            Scene(background=np.array([-0.1, 0.0, 0.0]))


class TestClosestIntersection:
    def _two_spheres(self, near_first):
        near = (Sphere(1.0), GREY, Isometry.from_translation(0.0, 0.0, 3.0))
        far = (Sphere(1.0), LIGHT, Isometry.identity())
        builder = SceneBuilder()
        for shape, material, iso in ((near, far) if near_first else (far, near)):
            builder.add(shape, material, iso)
        return builder.build()

    @pytest.mark.parametrize("near_first", [True, False])
    def test_nearest_object_wins_regardless_of_order(self, near_first):
        scene = self._two_spheres(near_first)
        index, hit = scene.closest_intersection(make_ray([0, 0, 10], [0, 0, -1]))
        assert hit.t == pytest.approx(6.0)
        assert scene.objects[index].material is GREY

    def test_exact_tie_resolves_to_first_inserted(self):
        scene = SceneBuilder().add(Sphere(1.0), GREY).add(Sphere(1.0), LIGHT).build()
        index, hit = scene.closest_intersection(make_ray([0, 0, 10], [0, 0, -1]))
        assert index == 0
        assert hit.t == pytest.approx(9.0)

    def test_miss_returns_none(self):
        scene = self._two_spheres(True)
        assert scene.closest_intersection(make_ray([0, 5, 10], [0, 0, -1])) is None

    def test_empty_scene_returns_none(self):
        assert Scene().closest_intersection(make_ray([0, 0, 0], [1, 0, 0])) is None

    def test_objects_behind_ray_are_ignored(self):
        scene = self._two_spheres(True)
        index, hit = scene.closest_intersection(make_ray([0, 0, 1.5], [0, 0, -1]))
        assert scene.objects[index].material is LIGHT
        assert hit.t == pytest.approx(0.5)


class TestSceneObject:
    def test_intersect_uses_placement(self):
        obj = SceneObject(Sphere(1.0), Isometry.from_translation(0.0, 0.0, -5.0), GREY)
        hit = obj.intersect(make_ray([0, 0, 0], [0, 0, -1]))
        assert hit.t == pytest.approx(4.0)
