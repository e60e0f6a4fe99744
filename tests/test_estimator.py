"""Tests for the recursive radiance estimator.

Tests cover:
- Empty scenes and max_depth=0 return the background
- A directly visible emitter returns its color exactly
- Unlit closed scenes produce no light
- Sample fan-out happens only at the first bounce
- Reproducibility for a fixed random stream
- Expected value of a single diffuse bounce under a uniform sky
- Unimplemented scatter models and invalid tunables raise
"""

import numpy as np
import pytest
from conftest import make_ray

from pathtracer.scene import Scene, SceneBuilder
from pathtracer.surfaces import HalfSpace, Sphere
from pathtracer.typings.material import Diffuse, ScatterModel

DOWN_RAY = make_ray([0, 0, 10], [0, 0, -1])


class CountingRng:
    """Wraps a Generator and counts uniform draws."""

    def __init__(self, seed):
        self._rng = np.random.default_rng(seed)
        self.draws = 0

    def random(self):
        self.draws += 1
        return self._rng.random()


class TestBaseCases:
    @pytest.mark.parametrize("samples_per_bounce", [1, 3, 8])
    @pytest.mark.parametrize("max_depth", [0, 1, 4])
    def test_empty_scene_returns_background(self, rng, samples_per_bounce, max_depth):
        background = np.array([0.2, 0.4, 0.6])
        scene = Scene(background=background)
        color = scene.estimate_radiance(make_ray([1, 2, 3], [0.3, -0.2, 1]), samples_per_bounce, max_depth, rng)
        np.testing.assert_array_equal(color, background)

    def test_max_depth_zero_returns_background(self, rng, emitter_scene):
        color = emitter_scene.estimate_radiance(DOWN_RAY, 4, 0, rng)
        np.testing.assert_array_equal(color, emitter_scene.background)

    def test_miss_returns_background(self, rng, emitter_scene):
        color = emitter_scene.estimate_radiance(make_ray([0, 5, 10], [0, 0, -1]), 4, 3, rng)
        np.testing.assert_array_equal(color, emitter_scene.background)

    @pytest.mark.parametrize("samples_per_bounce", [1, 2, 16])
    @pytest.mark.parametrize("max_depth", [1, 2, 7])
    def test_visible_emitter_returns_its_color_exactly(self, rng, emitter_scene, light_color, samples_per_bounce, max_depth):
        color = emitter_scene.estimate_radiance(DOWN_RAY, samples_per_bounce, max_depth, rng)
        np.testing.assert_array_equal(color, light_color)

    def test_returned_background_is_a_copy(self, rng, emitter_scene):
        color = emitter_scene.estimate_radiance(DOWN_RAY, 1, 0, rng)
        color += 1.0
        np.testing.assert_array_equal(emitter_scene.background, [0.1, 0.2, 0.3])


class TestDiffuseBounces:
    def test_unlit_closed_scene_is_black(self, rng):
        """Inside a diffuse sphere with no emitters and a black background nothing is lit."""
        scene = SceneBuilder().add(Sphere(5.0), Diffuse(np.array([0.9, 0.9, 0.9]))).build()
        color = scene.estimate_radiance(make_ray([0, 0, 0], [0, 0, 1]), 8, 5, rng)
        np.testing.assert_array_equal(color, np.zeros(3))

    def test_fan_out_only_at_first_bounce(self):
        """4 first-bounce samples, then one sample per deeper bounce: 4 + 4 * 2 = 12 directions."""
        scene = SceneBuilder().add(Sphere(5.0), Diffuse(np.array([0.9, 0.9, 0.9]))).build()
        counting = CountingRng(3)
        scene.estimate_radiance(make_ray([0, 0, 0], [0, 0, 1]), 4, 3, counting)
        assert counting.draws == 2 * 12

    def test_sky_lit_floor_matches_expected_value(self):
        """Floor albedo a under a uniform sky L: E[a * cos * L] = a * L / 2 for uniform hemisphere sampling."""
        sky = np.array([1.0, 2.0, 4.0])
        albedo = np.array([0.5, 0.25, 1.0])
        scene = SceneBuilder(background=sky).add(HalfSpace(np.array([0.0, 0.0, 1.0])), Diffuse(albedo)).build()
        color = scene.estimate_radiance(DOWN_RAY, 4000, 2, np.random.default_rng(5))
        np.testing.assert_allclose(color, albedo * sky / 2.0, rtol=0.05)

    def test_floor_receives_light_from_emitter(self, rng, lit_floor_scene):
        color = lit_floor_scene.estimate_radiance(make_ray([0.5, 0, 10], [0, 0, -1]), 1, 1, rng)
        # the emitter hovers between the eye and the floor at x=0.5
        np.testing.assert_array_equal(color, lit_floor_scene.objects[1].material.color)
        floor_color = lit_floor_scene.estimate_radiance(make_ray([3, 0, 1], [0, 0, -1]), 2000, 2, rng)
        assert np.all(floor_color > 0.0)
        assert np.all(floor_color < lit_floor_scene.objects[1].material.color)

    def test_same_stream_reproduces_bit_identical_color(self, lit_floor_scene):
        ray = make_ray([3, 0, 1], [0, 0, -1])
        first = lit_floor_scene.estimate_radiance(ray, 8, 4, np.random.default_rng(99))
        second = lit_floor_scene.estimate_radiance(ray, 8, 4, np.random.default_rng(99))
        np.testing.assert_array_equal(first, second)

    def test_colors_are_non_negative(self, lit_floor_scene):
        rng = np.random.default_rng(11)
        for x in np.linspace(-4.0, 4.0, 9):
            color = lit_floor_scene.estimate_radiance(make_ray([x, 0.5, 2], [0.1, 0, -1]), 4, 3, rng)
            assert np.all(color >= 0.0)


class TestErrors:
    def test_unimplemented_scatter_model_raises(self, rng):
        scene = SceneBuilder(background=np.ones(3)).add(
            HalfSpace(np.array([0.0, 0.0, 1.0])), Diffuse(np.ones(3), ScatterModel.MIRROR)
        ).build()
        with pytest.raises(NotImplementedError, match="mirror"):
            scene.estimate_radiance(DOWN_RAY, 1, 2, rng)

    def test_zero_samples_rejected(self, rng, emitter_scene):
        with pytest.raises(ValueError):
            emitter_scene.estimate_radiance(DOWN_RAY, 0, 2, rng)

    def test_negative_depth_rejected(self, rng, emitter_scene):
        with pytest.raises(ValueError):
            emitter_scene.estimate_radiance(DOWN_RAY, 1, -1, rng)
