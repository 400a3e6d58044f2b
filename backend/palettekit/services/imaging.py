"""
Palettekit Imaging Utilities
Decoder-side helpers that turn images into engine-ready pixel buffers.

The extraction engine never resizes. Callers must downsample so the long
edge is at most the quality tier's maximum (low=100, medium=150,
high=200); these helpers do that for Pillow images and encoded bytes.
"""
import io
from typing import Union

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from palettekit.config import config
from palettekit.errors import InvalidImageError, InvalidInputError
from palettekit.services.colors.models import PixelBuffer


def max_dimension_for(quality: str) -> int:
    """
    Maximum sampling dimension for a quality tier.

    Raises:
        InvalidInputError: Unknown tier
    """
    if not config.validate_quality(quality):
        raise InvalidInputError(
            f"Unknown quality '{quality}'. Supported: {', '.join(config.QUALITY_MAX_DIMENSION)}"
        )
    return config.QUALITY_MAX_DIMENSION[quality]


def resize_long_edge(img: np.ndarray, max_edge: int) -> np.ndarray:
    """
    Resize image so the longest edge is at most max_edge pixels.

    Args:
        img: Input image array (H, W, C)
        max_edge: Maximum edge size

    Returns:
        Resized image (unchanged if already small enough)
    """
    height, width = img.shape[:2]
    current_max = max(height, width)

    if current_max <= max_edge:
        return img

    scale = max_edge / current_max
    new_width = max(1, int(width * scale))
    new_height = max(1, int(height * scale))

    # INTER_AREA for downscaling
    return cv2.resize(img, (new_width, new_height), interpolation=cv2.INTER_AREA)


def pixel_buffer_from_image(image: Image.Image, quality: str = "medium") -> PixelBuffer:
    """
    Convert a Pillow image into an RGBA PixelBuffer at the tier's size.

    Args:
        image: Any-mode Pillow image
        quality: "low", "medium" or "high"

    Returns:
        Downsampled RGBA PixelBuffer
    """
    max_edge = max_dimension_for(quality)
    rgba = np.array(image.convert("RGBA"), dtype=np.uint8)
    resized = np.ascontiguousarray(resize_long_edge(rgba, max_edge))
    height, width = resized.shape[:2]
    return PixelBuffer(data=resized.tobytes(), width=width, height=height, channels=4)


def pixel_buffer_from_bytes(data: Union[bytes, bytearray], quality: str = "medium") -> PixelBuffer:
    """
    Decode encoded image bytes (PNG, JPEG, ...) into a PixelBuffer.

    Raises:
        InvalidImageError: Bytes are empty or cannot be decoded
    """
    if not data:
        raise InvalidImageError("Empty image data")
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            return pixel_buffer_from_image(image, quality)
    except (UnidentifiedImageError, OSError) as e:
        raise InvalidImageError(f"Failed to decode image: {e}") from e
