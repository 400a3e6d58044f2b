"""
Swatch Rendering Module

Renders a palette as a horizontal PNG strip for previews and QA.
"""

import base64
from typing import List, Optional, Tuple

import cv2
import numpy as np
from loguru import logger

from .conversion import hex_to_rgb


def hex_to_bgr(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color to BGR tuple for OpenCV."""
    rgb = hex_to_rgb(hex_color)
    return (rgb.b, rgb.g, rgb.r)


def render_swatch_strip(hex_colors: List[str],
                        chip_size: int = 40,
                        highlight_index: Optional[int] = None,
                        border_color: Tuple[int, int, int] = (0, 0, 0),
                        border_width: int = 2) -> str:
    """
    Render a horizontal strip of color swatches.

    Args:
        hex_colors: List of hex color strings
        chip_size: Size of each color chip in pixels
        highlight_index: Index of color to outline (e.g. the dominant color)
        border_color: BGR color for the outline
        border_width: Outline width in pixels

    Returns:
        Base64-encoded PNG image string

    Raises:
        ValueError: Empty color list or an invalid hex string
        RuntimeError: PNG encoding failed
    """
    if not hex_colors:
        raise ValueError("Empty hex_colors list provided")

    k = len(hex_colors)
    logger.debug(f"Rendering swatch strip with {k} colors, chip_size={chip_size}")

    chips = np.array([hex_to_bgr(h) for h in hex_colors], dtype=np.uint8)
    row = np.repeat(chips, chip_size, axis=0)
    # copy: cv2 draws in place and broadcast views are read-only
    img = np.array(np.broadcast_to(row, (chip_size, chip_size * k, 3)))

    if highlight_index is not None and 0 <= highlight_index < k:
        x_start = highlight_index * chip_size
        cv2.rectangle(
            img,
            (x_start, 0),
            (x_start + chip_size - 1, chip_size - 1),
            border_color,
            border_width
        )

    success, buffer = cv2.imencode('.png', img)
    if not success:
        raise RuntimeError("Failed to encode swatch strip as PNG")

    b64_string = base64.b64encode(buffer.tobytes()).decode('ascii')
    logger.debug(f"Encoded swatch strip: {chip_size * k}×{chip_size} -> {len(b64_string)} chars")
    return b64_string


def render_palette(result, chip_size: int = 40) -> str:
    """Swatch strip for an ExtractionResult with its dominant color outlined."""
    hex_colors = [color.hex for color in result.colors]
    highlight = hex_colors.index(result.dominant_color.hex)
    return render_swatch_strip(hex_colors, chip_size=chip_size, highlight_index=highlight)
