"""
Color Space Conversion Utilities

RGB/HSL value types and the commodity conversions (hex, HSL, contrast)
used by the extraction engine and its callers.
"""

import math
import re
from dataclasses import dataclass
from typing import Iterator, Tuple, Union

_HEX_PATTERN = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class RGB:
    """sRGB color with integer channels in [0, 255]."""
    r: int
    g: int
    b: int

    def __post_init__(self):
        for channel, value in (("r", self.r), ("g", self.g), ("b", self.b)):
            if not 0 <= value <= 255:
                raise ValueError(f"RGB channel {channel}={value} outside [0, 255]")

    def __iter__(self) -> Iterator[int]:
        return iter((self.r, self.g, self.b))

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)


@dataclass(frozen=True)
class HSL:
    """Hue in [0, 360), saturation and lightness in [0, 100]."""
    h: int
    s: int
    l: int

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.h, self.s, self.l)


RGBLike = Union[RGB, Tuple[int, int, int]]


def to_rgb(value: RGBLike) -> RGB:
    """Coerce a 3-tuple (or numpy row) into an RGB value."""
    if isinstance(value, RGB):
        return value
    r, g, b = (int(v) for v in value)
    return RGB(r, g, b)


def hex_to_rgb(hex_color: str) -> RGB:
    """
    Convert hex color string to RGB.

    Accepts "#RRGGBB" or "RRGGBB" in either case.

    Raises:
        ValueError: If the string is not a 6-digit hex color
    """
    match = _HEX_PATTERN.match(hex_color.strip())
    if not match:
        raise ValueError(f"Invalid HEX color: {hex_color}")
    return RGB(*(int(part, 16) for part in match.groups()))


def rgb_to_hex(rgb: RGBLike) -> str:
    """Convert RGB to canonical uppercase "#RRGGBB"."""
    r, g, b = (max(0, min(255, _round_half_up(float(v)))) for v in rgb)
    return f"#{r:02X}{g:02X}{b:02X}"


def rgb_to_hsl(rgb: RGBLike) -> HSL:
    """
    Convert RGB to integer-rounded HSL.

    Hue is wrapped into [0, 360) after rounding so that values such as
    359.6 do not escape the range.
    """
    r, g, b = (v / 255.0 for v in rgb)

    high = max(r, g, b)
    low = min(r, g, b)
    h = 0.0
    s = 0.0
    l = (high + low) / 2

    if high != low:
        d = high - low
        s = d / (2 - high - low) if l > 0.5 else d / (high + low)
        if high == r:
            h = ((g - b) / d + (6 if g < b else 0)) / 6
        elif high == g:
            h = ((b - r) / d + 2) / 6
        else:
            h = ((r - g) / d + 4) / 6

    return HSL(
        h=_round_half_up(h * 360) % 360,
        s=_round_half_up(s * 100),
        l=_round_half_up(l * 100),
    )


def _hue_to_channel(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(hsl: HSL) -> RGB:
    """Convert HSL back to integer RGB."""
    h = (hsl.h % 360) / 360.0
    s = max(0, min(100, hsl.s)) / 100.0
    l = max(0, min(100, hsl.l)) / 100.0

    if s == 0:
        r = g = b = l
    else:
        q = l * (1 + s) if l < 0.5 else l + s - l * s
        p = 2 * l - q
        r = _hue_to_channel(p, q, h + 1 / 3)
        g = _hue_to_channel(p, q, h)
        b = _hue_to_channel(p, q, h - 1 / 3)

    return RGB(_round_half_up(r * 255), _round_half_up(g * 255), _round_half_up(b * 255))


def relative_luminance(rgb: RGBLike) -> float:
    """WCAG relative luminance in [0, 1]."""
    def linearize(v: float) -> float:
        v /= 255.0
        return v / 12.92 if v <= 0.03928 else ((v + 0.055) / 1.055) ** 2.4

    r, g, b = (linearize(v) for v in rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(first: RGBLike, second: RGBLike) -> float:
    """WCAG contrast ratio between two colors (1.0 to 21.0)."""
    l1 = relative_luminance(first)
    l2 = relative_luminance(second)
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def is_light_color(rgb: RGBLike) -> bool:
    """True when perceived brightness is above the midpoint."""
    r, g, b = rgb
    return (0.299 * r + 0.587 * g + 0.114 * b) / 255 > 0.5


def text_color_for(background: RGBLike) -> RGB:
    """Black or white, whichever reads better on the background."""
    return RGB(0, 0, 0) if is_light_color(background) else RGB(255, 255, 255)
