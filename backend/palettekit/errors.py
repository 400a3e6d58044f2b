"""
Palettekit Errors
Typed failures returned by the extraction engine.
"""


class PaletteError(Exception):
    """Base class for all palette extraction errors."""
    pass


class InvalidInputError(PaletteError, ValueError):
    """Malformed or empty pixel buffer, or out-of-range options."""
    pass


class InvalidImageError(InvalidInputError):
    """Pixel buffer dimensions or contents are unusable."""
    pass


class ExtractionFailure(PaletteError):
    """Unexpected internal fault while extracting a palette."""

    def __init__(self, message: str = "Failed to extract colors"):
        super().__init__(message)


class ExtractionCancelled(PaletteError):
    """Extraction was cancelled or superseded by a newer request."""
    pass
