"""
Palettekit Schemas
Pydantic models for extraction options and persisted palette payloads.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from palettekit.config import config

Quality = Literal["low", "medium", "high"]


class ExtractionOptions(BaseModel):
    """Caller-supplied extraction settings. Out-of-range values are rejected, never clamped."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    color_count: int = Field(
        config.DEFAULT_COLOR_COUNT,
        ge=config.MIN_COLOR_COUNT,
        le=config.MAX_COLOR_COUNT,
        description="Number of palette colors to return (3-10)"
    )
    quality: Quality = Field(
        config.DEFAULT_QUALITY,
        description="Sampling tier; the decoder downsamples to low=100, medium=150, high=200 px"
    )
    include_transparent: bool = Field(
        True,
        description="Sample pixels regardless of alpha; when False, pixels with alpha < 128 are skipped"
    )

    @property
    def max_dimension(self) -> int:
        """Maximum buffer edge the decoder should produce for this tier."""
        return config.QUALITY_MAX_DIMENSION[self.quality]


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================

class RGBSchema(BaseModel):
    r: int = Field(..., ge=0, le=255)
    g: int = Field(..., ge=0, le=255)
    b: int = Field(..., ge=0, le=255)


class HSLSchema(BaseModel):
    h: int = Field(..., ge=0, lt=360)
    s: int = Field(..., ge=0, le=100)
    l: int = Field(..., ge=0, le=100)


class ColorSchema(BaseModel):
    """Single palette color."""
    hex: str = Field(
        ...,
        pattern=r"^#[0-9A-F]{6}$",
        description="Uppercase hex color code in format #RRGGBB"
    )
    rgb: RGBSchema
    hsl: HSLSchema
    name: Optional[str] = Field(None, description="Nearest human-readable color name")
    percentage: Optional[float] = Field(
        None,
        ge=0.0,
        le=100.0,
        description="Share of sampled pixels closest to this color"
    )


class ExtractionResponse(BaseModel):
    """Extraction result as persisted or returned to callers."""
    colors: List[ColorSchema] = Field(..., description="Palette, most vibrant first")
    dominant_color: ColorSchema = Field(..., description="Most saturated mid-lightness color")
    processing_time: float = Field(..., ge=0.0, description="Wall-clock extraction time in ms")
