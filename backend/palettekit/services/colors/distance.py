"""
Color Distance Metric

Weighted Euclidean RGB distance ("redmean" approximation). Cheap and
perceptually better than plain RGB Euclidean, but not a CIE delta E.
Both clustering and palette deduplication use this module so that
thresholds mean the same thing everywhere.
"""

import math

import numpy as np

from .conversion import RGBLike


def _weighted_sq(d_r, d_g, d_b, r_mean):
    """Squared distance from channel deltas; works on scalars and arrays."""
    return ((2 + r_mean / 256) * d_r * d_r
            + 4 * d_g * d_g
            + (2 + (255 - r_mean) / 256) * d_b * d_b)


def distance_sq(a: RGBLike, b: RGBLike) -> float:
    """Squared weighted distance between two colors."""
    ar, ag, ab = (float(v) for v in a)
    br, bg, bb = (float(v) for v in b)
    return _weighted_sq(ar - br, ag - bg, ab - bb, (ar + br) / 2)


def distance(a: RGBLike, b: RGBLike) -> float:
    """
    Weighted RGB distance between two colors.

    Symmetric, zero only for identical colors, and strictly increasing
    with the difference in any channel.
    """
    return math.sqrt(distance_sq(a, b))


def pairwise_distance_sq(pixels: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Squared distances between every pixel and every centroid.

    Args:
        pixels: (N, 3) array of RGB values
        centroids: (K, 3) array of RGB values

    Returns:
        (N, K) float64 array
    """
    p = pixels.astype(np.float64)[:, None, :]
    c = centroids.astype(np.float64)[None, :, :]
    delta = p - c
    r_mean = (p[..., 0] + c[..., 0]) / 2
    return _weighted_sq(delta[..., 0], delta[..., 1], delta[..., 2], r_mean)
