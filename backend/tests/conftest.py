"""
Test configuration and fixtures for palette extraction tests.
"""
import numpy as np
import pytest

from palettekit.services.colors.models import Color, ExtractionResult, PixelBuffer


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def buffer_from_array(rgba: np.ndarray) -> PixelBuffer:
    """Wrap an (H, W, 4) uint8 array as a PixelBuffer."""
    height, width = rgba.shape[:2]
    return PixelBuffer(data=rgba.astype(np.uint8).tobytes(), width=width, height=height)


@pytest.fixture
def rng():
    """Seeded random source for clustering."""
    return np.random.default_rng(42)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def solid_buffer():
    """Factory for single-color RGBA buffers."""
    def _make(rgb, width: int = 10, height: int = 10, alpha: int = 255) -> PixelBuffer:
        arr = np.zeros((height, width, 4), dtype=np.uint8)
        arr[..., :3] = rgb
        arr[..., 3] = alpha
        return buffer_from_array(arr)
    return _make


@pytest.fixture
def quadrant_buffer():
    """20x20 buffer: red, green, blue and white quadrants of equal size."""
    arr = np.full((20, 20, 4), 255, dtype=np.uint8)
    arr[:10, :10, :3] = (255, 0, 0)
    arr[:10, 10:, :3] = (0, 255, 0)
    arr[10:, :10, :3] = (0, 0, 255)
    arr[10:, 10:, :3] = (255, 255, 255)
    return buffer_from_array(arr)


@pytest.fixture
def make_result():
    """Factory for minimal ExtractionResult values keyed by hex color."""
    def _make(hex_color: str = "#336699", processing_time: float = 1.0) -> ExtractionResult:
        color = Color.from_hex(hex_color)
        return ExtractionResult(colors=(color,), dominant_color=color, processing_time=processing_time)
    return _make


@pytest.fixture
def rgba_buffer():
    """Wrap arbitrary (H, W, 4) arrays as PixelBuffers."""
    return buffer_from_array
