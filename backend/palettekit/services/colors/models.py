"""
Palette Value Types

Color, PixelBuffer and ExtractionResult. A Color's hex and HSL are pure
functions of its RGB; the constructor rejects any triple that disagrees.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

from .conversion import HSL, RGB, RGBLike, hex_to_rgb, rgb_to_hex, rgb_to_hsl, to_rgb

BufferData = Union[bytes, bytearray, memoryview, np.ndarray]


@dataclass(frozen=True)
class Color:
    """A palette color with derived hex/HSL and optional display metadata."""
    hex: str
    rgb: RGB
    hsl: HSL
    name: Optional[str] = None
    percentage: Optional[float] = None

    def __post_init__(self):
        if self.hex != rgb_to_hex(self.rgb):
            raise ValueError(f"hex {self.hex} does not match {self.rgb}")
        if self.hsl != rgb_to_hsl(self.rgb):
            raise ValueError(f"hsl {self.hsl} does not match {self.rgb}")

    @classmethod
    def from_rgb(cls, rgb: RGBLike, name: Optional[str] = None,
                 percentage: Optional[float] = None) -> "Color":
        rgb = to_rgb(rgb)
        return cls(hex=rgb_to_hex(rgb), rgb=rgb, hsl=rgb_to_hsl(rgb),
                   name=name, percentage=percentage)

    @classmethod
    def from_hex(cls, hex_color: str, name: Optional[str] = None) -> "Color":
        return cls.from_rgb(hex_to_rgb(hex_color), name=name)

    def with_details(self, name: Optional[str] = None,
                     percentage: Optional[float] = None) -> "Color":
        """Copy with name/percentage set; the color itself is unchanged."""
        return replace(self, name=name, percentage=percentage)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "hex": self.hex,
            "rgb": {"r": self.rgb.r, "g": self.rgb.g, "b": self.rgb.b},
            "hsl": {"h": self.hsl.h, "s": self.hsl.s, "l": self.hsl.l},
        }
        if self.name is not None:
            data["name"] = self.name
        if self.percentage is not None:
            data["percentage"] = self.percentage
        return data


@dataclass(frozen=True)
class PixelBuffer:
    """
    Raw interleaved pixel data, RGBA by default.

    The buffer is produced by the decoder, already downsampled to the
    quality tier's maximum dimension (see services.imaging). The engine
    only reads it.
    """
    data: BufferData
    width: int
    height: int
    channels: int = 4

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def as_array(self) -> np.ndarray:
        """Read-only (N, channels) uint8 view of the data."""
        if isinstance(self.data, np.ndarray):
            flat = np.ascontiguousarray(self.data, dtype=np.uint8).reshape(-1)
        else:
            flat = np.frombuffer(self.data, dtype=np.uint8)
        view = flat.reshape(-1, self.channels)
        view.flags.writeable = False
        return view


@dataclass(frozen=True)
class ExtractionResult:
    """Ranked palette, its dominant color and the wall-clock cost in ms."""
    colors: Tuple[Color, ...]
    dominant_color: Color
    processing_time: float
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "colors": [color.to_dict() for color in self.colors],
            "dominant_color": self.dominant_color.to_dict(),
            "processing_time": self.processing_time,
        }

    def to_schema(self):
        """Pydantic response model, suitable for persisting verbatim."""
        from palettekit.schemas import ExtractionResponse
        return ExtractionResponse.model_validate(self.to_dict())
