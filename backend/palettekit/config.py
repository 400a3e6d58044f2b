"""
Palettekit Configuration
Manages environment variables and defaults for the extraction engine.
"""
import os
from typing import Dict, Literal

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Configuration class for palette extraction services."""

    # Logging
    LOG_LEVEL: str = os.environ.get("PALETTE_LOG_LEVEL", "INFO")

    # Result cache
    CACHE_CAPACITY: int = int(os.environ.get("PALETTE_CACHE_CAPACITY", "50"))
    CACHE_TTL_SECONDS: float = float(os.environ.get("PALETTE_CACHE_TTL_SECONDS", "3600"))  # 1 hour

    # Clustering
    KMEANS_ITERATIONS: int = int(os.environ.get("PALETTE_KMEANS_ITERATIONS", "15"))
    EXTRA_CLUSTERS: int = int(os.environ.get("PALETTE_EXTRA_CLUSTERS", "4"))

    # Post-processing
    DEDUP_THRESHOLD: float = float(os.environ.get("PALETTE_DEDUP_THRESHOLD", "25.0"))

    # Request defaults
    DEFAULT_COLOR_COUNT: int = int(os.environ.get("PALETTE_DEFAULT_COLOR_COUNT", "6"))
    DEFAULT_QUALITY: Literal["low", "medium", "high"] = os.environ.get("PALETTE_DEFAULT_QUALITY", "medium")

    # Option bounds
    MIN_COLOR_COUNT: int = 3
    MAX_COLOR_COUNT: int = 10

    # Maximum sampling dimension per quality tier (applied by the decoder)
    QUALITY_MAX_DIMENSION: Dict[str, int] = {
        "low": 100,
        "medium": 150,
        "high": 200,
    }

    # Pixels below this alpha are skipped when transparency is excluded
    ALPHA_CUTOFF: int = 128

    @classmethod
    def validate_quality(cls, quality: str) -> bool:
        """Validate quality tier."""
        return quality in cls.QUALITY_MAX_DIMENSION

    @classmethod
    def validate_color_count(cls, count: int) -> bool:
        """Validate requested palette size."""
        return cls.MIN_COLOR_COUNT <= count <= cls.MAX_COLOR_COUNT


# Global config instance
config = Config()
