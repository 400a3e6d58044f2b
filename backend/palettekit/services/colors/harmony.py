"""
Color Harmony Helpers

Hue rotations on HSL and palette generation from a single base color.
Generated colors are rebuilt from their converted RGB so every result
satisfies the Color invariant.
"""

from typing import List, Tuple

from .conversion import HSL, RGBLike, hsl_to_rgb, rgb_to_hsl, to_rgb
from .models import Color


def rotate_hue(hsl: HSL, degrees: int) -> HSL:
    return HSL(h=(hsl.h + degrees) % 360, s=hsl.s, l=hsl.l)


def complementary(hsl: HSL) -> HSL:
    return rotate_hue(hsl, 180)


def analogous(hsl: HSL) -> Tuple[HSL, HSL]:
    return rotate_hue(hsl, 30), rotate_hue(hsl, 330)


def triadic(hsl: HSL) -> Tuple[HSL, HSL]:
    return rotate_hue(hsl, 120), rotate_hue(hsl, 240)


def split_complementary(hsl: HSL) -> Tuple[HSL, HSL]:
    return rotate_hue(hsl, 150), rotate_hue(hsl, 210)


def adjust_lightness(hsl: HSL, amount: int) -> HSL:
    """Lighten (positive) or darken (negative), clamped to [0, 100]."""
    return HSL(h=hsl.h, s=hsl.s, l=max(0, min(100, hsl.l + amount)))


def adjust_saturation(hsl: HSL, amount: int) -> HSL:
    """Saturate (positive) or desaturate (negative), clamped to [0, 100]."""
    return HSL(h=hsl.h, s=max(0, min(100, hsl.s + amount)), l=hsl.l)


def color_from_hsl(hsl: HSL) -> Color:
    return Color.from_rgb(hsl_to_rgb(hsl))


def generate_palette_from_color(base: RGBLike, count: int = 5) -> List[Color]:
    """
    Build a palette around ``base`` using classic harmony rules.

    Order: base, complementary, analogous (+30, +330), triadic (+120).

    Args:
        base: Base color
        count: Palette size, at most 5

    Returns:
        ``min(count, 5)`` colors, the base first (empty when count < 1)
    """
    base_rgb = to_rgb(base)
    base_hsl = rgb_to_hsl(base_rgb)
    warm, cool = analogous(base_hsl)

    palette = [Color.from_rgb(base_rgb)]
    for hsl in (complementary(base_hsl), warm, cool, rotate_hue(base_hsl, 120)):
        palette.append(color_from_hsl(hsl))

    return palette[:max(0, count)]
