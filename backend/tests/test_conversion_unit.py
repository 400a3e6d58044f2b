"""
Unit tests for color conversions and the Color value type.
"""
import pytest

from palettekit.services.colors.conversion import (
    HSL, RGB, contrast_ratio, hex_to_rgb, hsl_to_rgb, is_light_color,
    rgb_to_hex, rgb_to_hsl, text_color_for
)
from palettekit.services.colors.models import Color


class TestHexConversion:
    """Hex parsing and formatting"""

    @pytest.mark.parametrize("value,expected", [
        ("#FF0000", RGB(255, 0, 0)),
        ("#00ff80", RGB(0, 255, 128)),
        ("336699", RGB(51, 102, 153)),
    ])
    def test_hex_to_rgb(self, value, expected):
        assert hex_to_rgb(value) == expected

    @pytest.mark.parametrize("value", ["", "#FFF", "#GG0000", "#1234567", "red"])
    def test_invalid_hex_rejected(self, value):
        with pytest.raises(ValueError, match="Invalid HEX color"):
            hex_to_rgb(value)

    def test_rgb_to_hex_is_uppercase(self):
        assert rgb_to_hex(RGB(171, 205, 239)) == "#ABCDEF"
        assert rgb_to_hex((0, 0, 0)) == "#000000"


class TestHSLConversion:
    """RGB <-> HSL"""

    def test_primary_and_neutral_colors(self):
        assert rgb_to_hsl(RGB(255, 0, 0)) == HSL(0, 100, 50)
        assert rgb_to_hsl(RGB(0, 0, 255)) == HSL(240, 100, 50)
        assert rgb_to_hsl(RGB(255, 255, 255)) == HSL(0, 0, 100)
        assert rgb_to_hsl(RGB(0, 0, 0)) == HSL(0, 0, 0)

    def test_hue_wraps_below_360(self):
        # Raw hue is ~359.8 and rounds up to 360
        assert rgb_to_hsl(RGB(255, 0, 1)).h == 0

    @pytest.mark.parametrize("rgb", [
        RGB(255, 0, 0), RGB(0, 128, 0), RGB(255, 255, 255), RGB(0, 0, 0), RGB(0, 255, 255),
    ])
    def test_round_trip(self, rgb):
        assert hsl_to_rgb(rgb_to_hsl(rgb)) == rgb

    def test_hsl_to_rgb_gray(self):
        assert hsl_to_rgb(HSL(200, 0, 50)) == RGB(128, 128, 128)


class TestValueTypes:
    """RGB range and Color consistency checks"""

    @pytest.mark.parametrize("channels", [(256, 0, 0), (0, -1, 0), (0, 0, 300)])
    def test_rgb_out_of_range(self, channels):
        with pytest.raises(ValueError):
            RGB(*channels)

    def test_color_from_rgb_is_consistent(self):
        color = Color.from_rgb((18, 52, 86))

        assert color.hex == "#123456"
        assert hex_to_rgb(color.hex) == color.rgb
        assert rgb_to_hsl(color.rgb) == color.hsl

    def test_inconsistent_color_rejected(self):
        with pytest.raises(ValueError):
            Color(hex="#000000", rgb=RGB(1, 1, 1), hsl=rgb_to_hsl(RGB(1, 1, 1)))
        with pytest.raises(ValueError):
            Color(hex="#FF0000", rgb=RGB(255, 0, 0), hsl=HSL(10, 100, 50))

    def test_with_details_keeps_color(self):
        color = Color.from_hex("#FF0000").with_details(name="Red", percentage=12.5)

        assert color.rgb == RGB(255, 0, 0)
        assert color.to_dict()["name"] == "Red"
        assert color.to_dict()["percentage"] == 12.5


class TestContrast:
    """Readability helpers"""

    def test_black_on_white(self):
        assert contrast_ratio(RGB(0, 0, 0), RGB(255, 255, 255)) == pytest.approx(21.0)

    def test_same_color(self):
        assert contrast_ratio(RGB(90, 90, 90), RGB(90, 90, 90)) == pytest.approx(1.0)

    def test_text_color(self):
        assert is_light_color(RGB(255, 255, 0))
        assert text_color_for(RGB(255, 255, 255)) == RGB(0, 0, 0)
        assert text_color_for(RGB(0, 0, 128)) == RGB(255, 255, 255)
