"""
Unit tests for the k-means++ clustering engine.

Seeding is random, so these tests assert structural properties (counts,
membership, distinctness) rather than exact centroid values.
"""
import numpy as np
import pytest

from palettekit.services.colors.clustering import (
    assign, cluster, cluster_with_counts, lloyd, seed_centroids
)
from palettekit.services.colors.conversion import RGB

RED = RGB(255, 0, 0)
GREEN = RGB(0, 255, 0)
BLUE = RGB(0, 0, 255)
WHITE = RGB(255, 255, 255)


class TestClusterEdgeCases:
    """Inputs that skip clustering"""

    def test_empty_input(self):
        assert cluster([], k=5) == []

    def test_fewer_pixels_than_k_returned_unchanged(self):
        pixels = [RGB(1, 2, 3), RGB(4, 5, 6)]
        assert cluster(pixels, k=3) == pixels

    def test_exactly_k_pixels_returned_unchanged(self):
        pixels = [RED, GREEN, BLUE]
        assert cluster(pixels, k=3) == pixels

    def test_non_positive_k_rejected(self):
        with pytest.raises(ValueError):
            cluster([RED, GREEN], k=0)


class TestCluster:
    """Full clustering runs"""

    def test_returns_exactly_k_colors(self, rng):
        pixels = rng.integers(0, 256, size=(500, 3))
        centroids = cluster(pixels, k=7, rng=rng)

        assert len(centroids) == 7
        assert all(isinstance(c, RGB) for c in centroids)

    def test_two_solid_colors_are_recovered(self, rng):
        pixels = [RED] * 100 + [BLUE] * 100
        centroids = cluster(pixels, k=2, rng=rng)
        assert set(centroids) == {RED, BLUE}

    def test_every_distinct_color_is_seeded(self, rng):
        pixels = [RED] * 50 + [GREEN] * 50 + [BLUE] * 50 + [WHITE] * 50
        centroids = cluster(pixels, k=7, rng=rng)

        assert len(centroids) == 7
        assert {RED, GREEN, BLUE, WHITE} <= set(centroids)

    def test_uniform_input_collapses(self, rng):
        pixels = [RGB(0, 0, 0)] * 100
        centroids = cluster(pixels, k=7, rng=rng)

        assert len(centroids) == 7
        assert set(centroids) == {RGB(0, 0, 0)}

    def test_injected_seed_is_reproducible(self):
        pixels = np.random.default_rng(0).integers(0, 256, size=(300, 3))
        first = cluster(pixels, k=5, rng=np.random.default_rng(123))
        second = cluster(pixels, k=5, rng=np.random.default_rng(123))
        assert first == second

    def test_counts_cover_every_pixel(self, rng):
        pixels = rng.integers(0, 256, size=(250, 3))
        centroids, counts = cluster_with_counts(pixels, k=6, rng=rng)

        assert len(counts) == len(centroids) == 6
        assert sum(counts) == 250

    def test_gradient_centroids_stay_in_range(self, rng):
        pixels = np.stack([np.arange(256)] * 3, axis=1)
        for c in cluster(pixels, k=4, rng=rng):
            assert 0 <= c.r <= 255 and 0 <= c.g <= 255 and 0 <= c.b <= 255


class TestSeeding:
    """k-means++ initialization"""

    def test_seeds_are_drawn_from_pixels(self, rng):
        pixels = rng.integers(0, 256, size=(100, 3)).astype(np.float64)
        seeds = seed_centroids(pixels, 5, rng)

        pixel_set = {tuple(p) for p in pixels}
        assert seeds.shape == (5, 3)
        assert all(tuple(s) in pixel_set for s in seeds)

    def test_zero_weight_pixels_are_not_reselected(self, rng):
        pixels = np.array([RED.as_tuple()] * 30 + [BLUE.as_tuple()] * 30, dtype=np.float64)
        seeds = seed_centroids(pixels, 2, rng)
        assert {tuple(s) for s in seeds} == {(255.0, 0.0, 0.0), (0.0, 0.0, 255.0)}


class TestLloyd:
    """Assignment and update steps"""

    def test_empty_centroid_keeps_previous_value(self):
        pixels = np.array([[10, 10, 10], [12, 12, 12], [11, 11, 11]], dtype=np.float64)
        centroids = np.array([[10, 10, 10], [250, 250, 250]], dtype=np.float64)

        result = lloyd(pixels, centroids, iterations=5)

        np.testing.assert_array_equal(result[1], [250, 250, 250])
        np.testing.assert_array_equal(result[0], [11, 11, 11])

    def test_means_round_half_up(self):
        pixels = np.array([[0, 0, 0], [1, 1, 1]], dtype=np.float64)
        centroids = np.array([[0, 0, 0]], dtype=np.float64)

        result = lloyd(pixels, centroids, iterations=1)

        np.testing.assert_array_equal(result[0], [1, 1, 1])

    def test_input_centroids_not_mutated(self):
        pixels = np.array([[0, 0, 0], [100, 100, 100]], dtype=np.float64)
        centroids = np.array([[10, 10, 10]], dtype=np.float64)
        lloyd(pixels, centroids, iterations=3)
        np.testing.assert_array_equal(centroids, [[10, 10, 10]])

    def test_assign_picks_nearest(self):
        pixels = np.array([[250, 5, 5], [5, 5, 250]], dtype=np.float64)
        centroids = np.array([[0, 0, 255], [255, 0, 0]], dtype=np.float64)
        assert assign(pixels, centroids).tolist() == [1, 0]
