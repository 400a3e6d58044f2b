"""
Palettekit
Dominant color palette extraction from sampled pixel buffers.
"""
from palettekit.errors import (
    ExtractionCancelled,
    ExtractionFailure,
    InvalidImageError,
    InvalidInputError,
    PaletteError,
)
from palettekit.schemas import ExtractionOptions
from palettekit.services.cache import ResultCache, cache_key
from palettekit.services.colors.clustering import cluster
from palettekit.services.colors.conversion import HSL, RGB, hex_to_rgb, hsl_to_rgb, rgb_to_hex, rgb_to_hsl
from palettekit.services.colors.distance import distance
from palettekit.services.colors.export import export_text
from palettekit.services.colors.extraction import extract
from palettekit.services.colors.models import Color, ExtractionResult, PixelBuffer
from palettekit.services.colors.postprocess import process, select_dominant
from palettekit.services.orchestrator import PaletteOrchestrator
from palettekit.services.reliability import CancellationToken

__version__ = "1.0.0"

__all__ = [
    "CancellationToken",
    "Color",
    "ExtractionCancelled",
    "ExtractionFailure",
    "ExtractionOptions",
    "ExtractionResult",
    "HSL",
    "InvalidImageError",
    "InvalidInputError",
    "PaletteError",
    "PaletteOrchestrator",
    "PixelBuffer",
    "RGB",
    "ResultCache",
    "cache_key",
    "cluster",
    "distance",
    "export_text",
    "extract",
    "hex_to_rgb",
    "hsl_to_rgb",
    "process",
    "rgb_to_hex",
    "rgb_to_hsl",
    "select_dominant",
]
