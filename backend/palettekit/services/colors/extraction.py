"""
Color extraction service for photos.

This module implements the extraction pipeline: pixel flattening,
k-means++ clustering with over-provisioned k, palette post-processing,
dominant color selection and wall-clock timing.
"""

import time
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np
from loguru import logger
from pydantic import ValidationError

from palettekit.config import config
from palettekit.errors import ExtractionFailure, InvalidImageError, InvalidInputError
from palettekit.schemas import ExtractionOptions
from ..reliability import CancellationToken, checkpoint
from .clustering import cluster_with_counts
from .conversion import RGB
from .distance import pairwise_distance_sq
from .models import Color, ExtractionResult, PixelBuffer
from .naming import color_name
from .postprocess import process, select_dominant

OptionsInput = Union[ExtractionOptions, Mapping[str, Any], None]


def resolve_options(options: OptionsInput) -> ExtractionOptions:
    """
    Normalize caller options.

    Raises:
        InvalidInputError: If a mapping fails validation
    """
    if options is None:
        return ExtractionOptions()
    if isinstance(options, ExtractionOptions):
        return options
    try:
        return ExtractionOptions.model_validate(dict(options))
    except ValidationError as e:
        raise InvalidInputError(f"Invalid extraction options: {e}") from e


def validate_buffer(buffer: PixelBuffer) -> None:
    """
    Check buffer dimensions against its data length.

    Raises:
        InvalidImageError: Zero dimension, bad channel count, or length mismatch
    """
    if buffer.width <= 0 or buffer.height <= 0:
        raise InvalidImageError(
            f"Invalid image dimensions: {buffer.width}×{buffer.height}"
        )
    if buffer.channels not in (3, 4):
        raise InvalidImageError(f"Unsupported channel count: {buffer.channels}")

    expected = buffer.width * buffer.height * buffer.channels
    actual = buffer.data.size if isinstance(buffer.data, np.ndarray) else len(buffer.data)
    if actual != expected:
        raise InvalidImageError(
            f"Buffer length {actual} does not match "
            f"{buffer.width}×{buffer.height}×{buffer.channels} = {expected}"
        )


def flatten_pixels(buffer: PixelBuffer, include_transparent: bool = True) -> np.ndarray:
    """
    Stride over the buffer and return RGB pixels, alpha discarded.

    Args:
        buffer: Validated pixel buffer
        include_transparent: When False, pixels with alpha below the
            cutoff (128) are skipped

    Returns:
        (N, 3) uint8 array
    """
    arr = buffer.as_array()
    if not include_transparent and buffer.channels == 4:
        arr = arr[arr[:, 3] >= config.ALPHA_CUTOFF]
    return arr[:, :3]


def _percentages(pixels: np.ndarray, colors: Sequence[Color]) -> List[float]:
    """
    Share of pixels nearest to each color, in percent with one decimal.

    Identical colors (backfilled duplicates) split their pixels evenly, so
    a flat image with three black entries reports 33.3 for each.
    """
    centers = np.array([c.rgb.as_tuple() for c in colors], dtype=np.float64)
    labels = np.argmin(pairwise_distance_sq(pixels, centers), axis=1)
    counts = np.bincount(labels, minlength=len(colors)).astype(np.float64)

    groups: Dict[RGB, List[int]] = {}
    for index, color in enumerate(colors):
        groups.setdefault(color.rgb, []).append(index)
    for members in groups.values():
        if len(members) > 1:
            counts[members] = counts[members].sum() / len(members)

    return [round(float(c) / len(pixels) * 100, 1) for c in counts]


def extract(buffer: PixelBuffer,
            options: OptionsInput = None,
            rng: Optional[np.random.Generator] = None,
            token: Optional[CancellationToken] = None) -> ExtractionResult:
    """
    Extract a ranked palette from a downsampled pixel buffer.

    The buffer must already be reduced to the quality tier's maximum
    dimension by the decoder (services.imaging does this for Pillow
    images); the engine does no resizing of its own.

    Args:
        buffer: RGBA (or RGB) pixel buffer
        options: ExtractionOptions or an equivalent mapping
        rng: Random source for clustering seeds
        token: Optional cancellation token, polled before clustering
            and before post-processing

    Returns:
        ExtractionResult with at most ``color_count`` colors

    Raises:
        InvalidInputError: Bad options
        InvalidImageError: Bad buffer shape or no usable pixels
        ExtractionCancelled: Token cancelled at a checkpoint
        ExtractionFailure: Unexpected internal fault
    """
    start_time = time.perf_counter()
    opts = resolve_options(options)
    validate_buffer(buffer)

    pixels = flatten_pixels(buffer, opts.include_transparent)
    if len(pixels) == 0:
        raise InvalidImageError("No valid colors found in image")

    logger.info(
        f"Starting extraction: {buffer.width}×{buffer.height}, "
        f"{len(pixels)} pixels, color_count={opts.color_count}, quality={opts.quality}"
    )

    checkpoint(token, "clustering")

    k = opts.color_count + config.EXTRA_CLUSTERS
    try:
        centroids, counts = cluster_with_counts(
            pixels, k, iterations=config.KMEANS_ITERATIONS, rng=rng
        )
    except Exception as e:
        logger.error(f"Clustering failed: {e}")
        raise ExtractionFailure() from e

    checkpoint(token, "post-processing")

    try:
        colors = process(centroids, opts.color_count)
        dominant_index = colors.index(select_dominant(colors))
        shares = _percentages(pixels.astype(np.float64), colors)
    except Exception as e:
        logger.error(f"Palette post-processing failed: {e}")
        raise ExtractionFailure() from e

    named = tuple(
        color.with_details(name=color_name(color.rgb), percentage=share)
        for color, share in zip(colors, shares)
    )
    dominant = named[dominant_index]

    processing_time = (time.perf_counter() - start_time) * 1000

    logger.info(
        f"Extraction complete in {processing_time:.1f}ms: "
        f"{[c.hex for c in named]} dominant={dominant.hex}"
    )

    return ExtractionResult(
        colors=named,
        dominant_color=dominant,
        processing_time=processing_time,
        metadata={
            "cluster_count": len(centroids),
            "cluster_sizes": counts,
            "total_pixels_analyzed": int(len(pixels)),
            "quality": opts.quality,
        },
    )
