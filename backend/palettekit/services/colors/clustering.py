"""
Clustering Engine

k-means++ seeding followed by a fixed number of Lloyd iterations, using
the shared weighted RGB distance for every assignment.

There is no convergence check; cost is bounded by
``iterations`` regardless of the input. A centroid that ends an iteration
with no members keeps its previous value rather than being reseeded, so
on small or degenerate inputs some centroids can stay "dead" (duplicates
of a seed) for the whole run. Downstream deduplication absorbs these.
"""

from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from loguru import logger

from palettekit.config import config
from .conversion import RGB, RGBLike, to_rgb
from .distance import pairwise_distance_sq

PixelInput = Union[Sequence[RGBLike], np.ndarray]


def _as_pixel_array(pixels: PixelInput) -> np.ndarray:
    if isinstance(pixels, np.ndarray):
        return pixels.reshape(-1, 3).astype(np.float64)
    return np.array([tuple(p) for p in pixels], dtype=np.float64).reshape(-1, 3)


def _to_rgb_list(rows: np.ndarray) -> List[RGB]:
    return [to_rgb(row) for row in rows.astype(int)]


def seed_centroids(pixels: np.ndarray, k: int, rng: np.random.Generator) -> np.ndarray:
    """
    Choose ``k`` initial centroids with k-means++ weighting.

    The first centroid is uniform over the pixels; each following one is
    drawn with probability proportional to its squared distance from the
    nearest centroid already chosen. When every pixel coincides with a
    chosen centroid (zero total weight) the first pixel is taken.

    Args:
        pixels: (N, 3) float array, N > k
        k: Number of centroids
        rng: Random source

    Returns:
        (k, 3) float array of seed colors taken from ``pixels``
    """
    n = len(pixels)
    chosen = [int(rng.integers(n))]
    nearest_sq = pairwise_distance_sq(pixels, pixels[chosen[0]:chosen[0] + 1])[:, 0]

    while len(chosen) < k:
        total = float(nearest_sq.sum())
        if total <= 0.0:
            index = 0
        else:
            target = rng.random() * total
            index = int(np.searchsorted(np.cumsum(nearest_sq), target, side="left"))
            index = min(index, n - 1)
        chosen.append(index)
        nearest_sq = np.minimum(
            nearest_sq, pairwise_distance_sq(pixels, pixels[index:index + 1])[:, 0]
        )

    return pixels[chosen].copy()


def assign(pixels: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Index of the nearest centroid for every pixel (first wins ties)."""
    return np.argmin(pairwise_distance_sq(pixels, centroids), axis=1)


def lloyd(pixels: np.ndarray, centroids: np.ndarray, iterations: int) -> np.ndarray:
    """
    Run ``iterations`` rounds of assign-then-average.

    New centroids are the channel means of their members rounded half up
    to integers; centroids without members are left unchanged.
    """
    k = len(centroids)
    centroids = centroids.copy()
    for _ in range(iterations):
        labels = assign(pixels, centroids)
        counts = np.bincount(labels, minlength=k)
        populated = counts > 0
        for channel in range(3):
            sums = np.bincount(labels, weights=pixels[:, channel], minlength=k)
            means = sums[populated] / counts[populated]
            centroids[populated, channel] = np.floor(means + 0.5)
    return centroids


def cluster_with_counts(pixels: PixelInput, k: int,
                        iterations: Optional[int] = None,
                        rng: Optional[np.random.Generator] = None) -> Tuple[List[RGB], List[int]]:
    """
    Cluster pixels and report how many pixels end up nearest each centroid.

    Same contract as :func:`cluster`; the counts come from a final
    assignment against the returned centroids.
    """
    if iterations is None:
        iterations = config.KMEANS_ITERATIONS
    if k < 1:
        raise ValueError(f"k must be positive, got {k}")

    arr = _as_pixel_array(pixels)
    n = len(arr)
    if n == 0:
        return [], []
    if n <= k:
        return _to_rgb_list(arr), [1] * n

    rng = rng if rng is not None else np.random.default_rng()

    logger.debug(f"Clustering {n} pixels into k={k} for {iterations} iterations")
    seeds = seed_centroids(arr, k, rng)
    centroids = lloyd(arr, seeds, iterations)

    counts = np.bincount(assign(arr, centroids), minlength=k)
    logger.debug(f"Cluster sizes: {counts.tolist()}")

    return _to_rgb_list(centroids), [int(c) for c in counts]


def cluster(pixels: PixelInput, k: int,
            iterations: Optional[int] = None,
            rng: Optional[np.random.Generator] = None) -> List[RGB]:
    """
    Reduce pixels to at most ``k`` representative colors.

    Args:
        pixels: Sequence of RGB values or an (N, 3) array
        k: Number of clusters
        iterations: Lloyd iterations (default from config, 15)
        rng: Injectable random source; a fresh unseeded generator if None

    Returns:
        Centroid colors. Empty input gives an empty list and inputs with
        ``len(pixels) <= k`` are returned unchanged. Otherwise exactly
        ``k`` colors, possibly with duplicates.
    """
    centroids, _ = cluster_with_counts(pixels, k, iterations=iterations, rng=rng)
    return centroids
