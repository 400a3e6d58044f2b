"""
Palette Post-Processing

Turns raw centroids into a display-ready palette: convert, deduplicate,
rank by vibrancy, truncate. Also selects the dominant color, which is a
separate question from display rank.
"""

from typing import List, Optional, Sequence, Tuple

from loguru import logger

from palettekit.config import config
from palettekit.errors import ExtractionFailure
from .conversion import RGBLike
from .distance import distance
from .models import Color


def vibrancy_score(color: Color) -> float:
    """Favor saturated, mid-lightness colors over near-black/white/gray."""
    return color.hsl.s * 0.6 + (50 - abs(color.hsl.l - 50)) * 0.4


def dominance_score(color: Color) -> float:
    """Saturation, halved for colors outside the 20-80 lightness band."""
    return color.hsl.s * (1.0 if 20 < color.hsl.l < 80 else 0.5)


def dedupe(colors: Sequence[Color], threshold: float) -> Tuple[List[Color], List[Color]]:
    """
    Greedy, order-dependent deduplication.

    A color is kept only if its distance to every already-kept color
    exceeds ``threshold``; the first of a group of near-duplicates wins.

    Returns:
        Tuple of (kept, rejected), both in input order
    """
    kept: List[Color] = []
    rejected: List[Color] = []
    for color in colors:
        if all(distance(color.rgb, existing.rgb) > threshold for existing in kept):
            kept.append(color)
        else:
            rejected.append(color)
    return kept, rejected


def process(centroids: Sequence[RGBLike], target_count: int,
            dedup_threshold: Optional[float] = None) -> List[Color]:
    """
    Build the ranked palette from clustering output.

    Steps:
        1. Convert every centroid to a Color
        2. Deduplicate with ``dedup_threshold`` (default 25)
        3. If fewer than ``target_count`` survive, backfill with the
           rejected near-duplicates in input order so degenerate images
           (e.g. a single flat color) still yield a full palette
        4. Sort by vibrancy, most vibrant first (stable)
        5. Truncate to ``target_count``

    Args:
        centroids: Cluster centroids, in clustering order
        target_count: Maximum palette size
        dedup_threshold: Minimum distance between kept colors

    Returns:
        At most ``target_count`` colors
    """
    if dedup_threshold is None:
        dedup_threshold = config.DEDUP_THRESHOLD

    candidates = [Color.from_rgb(rgb) for rgb in centroids]
    kept, rejected = dedupe(candidates, dedup_threshold)

    if len(kept) < target_count and rejected:
        shortfall = target_count - len(kept)
        logger.debug(f"Backfilling {min(shortfall, len(rejected))} near-duplicate colors")
        kept.extend(rejected[:shortfall])

    ranked = sorted(kept, key=vibrancy_score, reverse=True)
    logger.debug(f"Post-processed {len(candidates)} centroids -> {len(ranked[:target_count])} colors")
    return ranked[:target_count]


def select_dominant(colors: Sequence[Color]) -> Color:
    """
    Pick the dominant color from a final palette.

    Raises:
        ExtractionFailure: If the palette is empty
    """
    if not colors:
        raise ExtractionFailure("Cannot select a dominant color from an empty palette")

    best = colors[0]
    best_score = dominance_score(best)
    for color in colors[1:]:
        score = dominance_score(color)
        if score > best_score:
            best, best_score = color, score
    return best
