"""
Palette Export

Text, code and file formats for a finished palette: plain hex/RGB/HSL
lists, CSS/SCSS variables, a Tailwind config, JSON, SwiftUI, Android
resources, an SVG preview and Adobe Swatch Exchange (ASE) bytes.

Every generator is a pure function of the colors; writing files or
copying to a clipboard is left to the caller.
"""

import json
import re
import struct
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Sequence
from xml.sax.saxutils import escape

from loguru import logger

from palettekit.errors import InvalidInputError
from .conversion import is_light_color
from .models import Color

DEFAULT_PALETTE_NAME = "Untitled Palette"
GENERATOR = "palettekit"


def _slug(name: Optional[str], default: str, separator: str = "-") -> str:
    if not name:
        return default
    return re.sub(r"\s+", separator, name)


def _number(value: float):
    """Render whole floats without a trailing .0."""
    return int(value) if float(value).is_integer() else round(value, 2)


# ============================================================================
# TEXT / CODE FORMATS
# ============================================================================

def hex_list(colors: Sequence[Color]) -> str:
    return "\n".join(c.hex for c in colors)


def rgb_list(colors: Sequence[Color]) -> str:
    return "\n".join(f"rgb({c.rgb.r}, {c.rgb.g}, {c.rgb.b})" for c in colors)


def hsl_list(colors: Sequence[Color]) -> str:
    return "\n".join(f"hsl({c.hsl.h}, {c.hsl.s}%, {c.hsl.l}%)" for c in colors)


def css_variables(colors: Sequence[Color], prefix: str = "color") -> str:
    """``:root`` block with one custom property per color, numbered from 1."""
    lines = [f"  --{prefix}-{i}: {c.hex};" for i, c in enumerate(colors, start=1)]
    return ":root {\n" + "\n".join(lines) + "\n}"


def scss_variables(colors: Sequence[Color], prefix: str = "color") -> str:
    return "\n".join(f"${prefix}-{i}: {c.hex};" for i, c in enumerate(colors, start=1))


def tailwind_config(colors: Sequence[Color], palette_name: Optional[str] = None) -> str:
    """``tailwind.config.js`` snippet extending the theme with the palette."""
    name = _slug(palette_name, "palette").lower()
    entries = "\n".join(f"      '{i}': '{c.hex}'," for i, c in enumerate(colors, start=1))
    return (
        "// tailwind.config.js\n"
        "module.exports = {\n"
        "  theme: {\n"
        "    extend: {\n"
        "      colors: {\n"
        f"        '{name}': {{\n"
        f"{entries}\n"
        "        },\n"
        "      },\n"
        "    },\n"
        "  },\n"
        "};"
    )


def json_export(colors: Sequence[Color],
                palette_name: Optional[str] = None,
                exported_at: Optional[datetime] = None) -> str:
    """
    Pretty-printed JSON document describing the palette.

    Args:
        colors: Palette colors, in display order
        palette_name: Document name (default "Untitled Palette")
        exported_at: Timestamp to record; now (UTC) if omitted

    Returns:
        JSON string with ``name``, ``colors``, ``exportedAt``, ``generator``
    """
    exported_at = exported_at or datetime.now(timezone.utc)
    entries = []
    for position, color in enumerate(colors, start=1):
        entry = {
            "position": position,
            "hex": color.hex,
            "rgb": {"r": color.rgb.r, "g": color.rgb.g, "b": color.rgb.b},
            "hsl": {"h": color.hsl.h, "s": color.hsl.s, "l": color.hsl.l},
        }
        if color.name:
            entry["name"] = color.name
        entries.append(entry)

    document = {
        "name": palette_name or DEFAULT_PALETTE_NAME,
        "colors": entries,
        "exportedAt": exported_at.isoformat(),
        "generator": GENERATOR,
    }
    return json.dumps(document, indent=2)


def swift_code(colors: Sequence[Color], palette_name: Optional[str] = None) -> str:
    """SwiftUI ``Color`` extension with one static constant per color."""
    name = _slug(palette_name, "Palette", separator="")
    entries = "\n".join(
        f"    static let color{i} = Color(red: {c.rgb.r / 255:.3f}, "
        f"green: {c.rgb.g / 255:.3f}, blue: {c.rgb.b / 255:.3f})"
        for i, c in enumerate(colors, start=1)
    )
    return (
        "import SwiftUI\n"
        "\n"
        "extension Color {\n"
        f"    struct {name} {{\n"
        f"{entries}\n"
        "    }\n"
        "}"
    )


def android_xml(colors: Sequence[Color], prefix: str = "palette") -> str:
    """Android ``res/values/colors.xml`` content."""
    entries = "\n".join(
        f'    <color name="{prefix}_color_{i}">{c.hex}</color>'
        for i, c in enumerate(colors, start=1)
    )
    return f'<?xml version="1.0" encoding="utf-8"?>\n<resources>\n{entries}\n</resources>'


# ============================================================================
# IMAGE / FILE FORMATS
# ============================================================================

def svg_palette(colors: Sequence[Color],
                width: int = 800,
                height: int = 400,
                show_hex: bool = True,
                show_names: bool = False,
                palette_name: Optional[str] = None) -> str:
    """
    Vertical-stripe SVG preview of the palette.

    Labels use black or white text depending on the swatch's brightness.
    A header with the palette name is added when one is given.

    Raises:
        ValueError: Empty palette
    """
    if not colors:
        raise ValueError("Cannot render an SVG for an empty palette")

    swatch_width = width / len(colors)
    header_height = 60 if palette_name else 0
    swatch_height = height - header_height

    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">',
        f'<rect width="{width}" height="{height}" fill="#1a1a1a"/>',
    ]
    if palette_name:
        parts.append(
            f'<text x="{_number(width / 2)}" y="38" text-anchor="middle" fill="#ffffff" '
            f'font-family="system-ui, sans-serif" font-size="24" font-weight="600">'
            f'{escape(palette_name)}</text>'
        )

    for i, color in enumerate(colors):
        x = i * swatch_width
        center = _number(x + swatch_width / 2)
        text_color = "#000000" if is_light_color(color.rgb) else "#ffffff"
        text_y = header_height + swatch_height - 20

        parts.append(
            f'<rect x="{_number(x)}" y="{header_height}" width="{_number(swatch_width)}" '
            f'height="{swatch_height}" fill="{color.hex}"/>'
        )
        if show_hex:
            parts.append(
                f'<text x="{center}" y="{text_y}" text-anchor="middle" fill="{text_color}" '
                f'font-family="monospace" font-size="14">{color.hex}</text>'
            )
        if show_names and color.name:
            name_y = text_y - 24 if show_hex else text_y
            parts.append(
                f'<text x="{center}" y="{name_y}" text-anchor="middle" fill="{text_color}" '
                f'font-family="system-ui, sans-serif" font-size="12">{escape(color.name)}</text>'
            )

    parts.append("</svg>")
    return "".join(parts)


def _ase_name(text: str) -> bytes:
    """Length-prefixed, null-terminated UTF-16BE string."""
    encoded = text.encode("utf-16-be") + b"\x00\x00"
    return struct.pack(">H", len(encoded) // 2) + encoded


def ase_bytes(colors: Sequence[Color], palette_name: Optional[str] = None) -> bytes:
    """
    Adobe Swatch Exchange (v1.0) file with one group holding every color.

    Colors are stored as RGB floats in [0, 1], named after their color
    name (or hex when unnamed), truncated to 31 characters.
    """
    group_name = _ase_name(palette_name or "palettekit Palette")
    blocks = [struct.pack(">HI", 0xC001, len(group_name)) + group_name]

    for color in colors:
        name = _ase_name((color.name or color.hex)[:31])
        body = (
            name
            + b"RGB "
            + struct.pack(">fff", color.rgb.r / 255, color.rgb.g / 255, color.rgb.b / 255)
            + struct.pack(">H", 2)  # normal (non-global, non-spot) color
        )
        blocks.append(struct.pack(">HI", 0x0001, len(body)) + body)

    blocks.append(struct.pack(">HI", 0xC002, 0))

    header = b"ASEF" + struct.pack(">HHI", 1, 0, len(blocks))
    return header + b"".join(blocks)


# ============================================================================
# DISPATCH
# ============================================================================

TEXT_FORMATS: Dict[str, Callable[..., str]] = {
    "hex": lambda colors, name: hex_list(colors),
    "rgb": lambda colors, name: rgb_list(colors),
    "hsl": lambda colors, name: hsl_list(colors),
    "css": lambda colors, name: css_variables(colors),
    "scss": lambda colors, name: scss_variables(colors),
    "tailwind": lambda colors, name: tailwind_config(colors, name),
    "json": lambda colors, name: json_export(colors, name),
    "swift": lambda colors, name: swift_code(colors, name),
    "android": lambda colors, name: android_xml(colors),
}


def export_text(colors: Sequence[Color], fmt: str, palette_name: Optional[str] = None) -> str:
    """
    Render the palette in one of :data:`TEXT_FORMATS`.

    Raises:
        InvalidInputError: Unknown format
    """
    generator = TEXT_FORMATS.get(fmt)
    if generator is None:
        raise InvalidInputError(
            f"Unknown export format '{fmt}'. Supported: {', '.join(TEXT_FORMATS)}"
        )
    logger.debug(f"Exporting {len(colors)} colors as {fmt}")
    return generator(colors, palette_name)
