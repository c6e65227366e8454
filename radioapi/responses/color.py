"""Color extraction results returned by ``/colorthief``.

The backend may send a color as a hex string, as an ``{"r", "g", "b"}``
object, or both. Missing representations are derived locally: hex <-> RGB,
CSS ``rgb(r, g, b)`` and Flutter ``0xFFRRGGBB`` are pure string formatting of
the RGB components and never require another request.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Sequence

from radioapi.core.accessors import JsonView
from radioapi.responses.base import ApiResponse

__all__ = [
    "ColorResponse",
    "ColorValue",
    "PaletteColor",
    "css_rgb",
    "flutter_hex",
    "hex_to_rgb",
    "rgb_to_hex",
]

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

RGB = tuple[int, int, int]


def _channel(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return max(0, min(255, value))
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return max(0, min(255, int(round(value))))
    if isinstance(value, str):
        try:
            return _channel(float(value.strip()))
        except ValueError:
            return None
    return None


def _coerce_rgb(value: Any) -> RGB | None:
    if isinstance(value, dict):
        channels = [_channel(value.get(key)) for key in ("r", "g", "b")]
    elif isinstance(value, (list, tuple)) and len(value) >= 3:
        channels = [_channel(item) for item in value[:3]]
    else:
        return None
    if any(channel is None for channel in channels):
        return None
    r, g, b = channels
    return (r, g, b)  # type: ignore[return-value]


def hex_to_rgb(value: str) -> RGB | None:
    """Parse ``#RRGGBB`` / ``#RGB`` (leading ``#`` optional)."""
    match = _HEX_RE.match((value or "").strip())
    if not match:
        return None
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def rgb_to_hex(rgb: Sequence[int]) -> str:
    r, g, b = rgb[:3]
    return f"#{r:02X}{g:02X}{b:02X}"


def css_rgb(rgb: Sequence[int]) -> str:
    r, g, b = rgb[:3]
    return f"rgb({r}, {g}, {b})"


def flutter_hex(rgb: Sequence[int], *, alpha: int = 0xFF) -> str:
    r, g, b = rgb[:3]
    return f"0x{alpha:02X}{r:02X}{g:02X}{b:02X}"


@dataclass(frozen=True, slots=True)
class ColorValue:
    """One color in every representation the backend (or we) can provide."""

    hex: str | None
    rgb: RGB | None
    flutter_hex: str | None = None

    @property
    def css(self) -> str | None:
        return css_rgb(self.rgb) if self.rgb is not None else None


@dataclass(frozen=True, slots=True)
class PaletteColor:
    hex: str | None
    rgb: RGB | None
    weight: float | None = None

    @property
    def css(self) -> str | None:
        return css_rgb(self.rgb) if self.rgb is not None else None


def _color(view: JsonView, prefix: str) -> ColorValue | None:
    hex_value = view.get_str(f"{prefix}_hex")
    rgb = _coerce_rgb(view.raw(f"{prefix}_rgb"))
    flutter = view.get_str(f"{prefix}_flutter_hex")
    if rgb is None and hex_value:
        rgb = hex_to_rgb(hex_value)
    if hex_value is None and rgb is not None:
        hex_value = rgb_to_hex(rgb)
    if flutter is None and rgb is not None:
        flutter = flutter_hex(rgb)
    if hex_value is None and rgb is None:
        return None
    return ColorValue(hex=hex_value, rgb=rgb, flutter_hex=flutter)


def _palette_color(item: Any) -> PaletteColor | None:
    if isinstance(item, str):
        rgb = hex_to_rgb(item)
        return PaletteColor(hex=item, rgb=rgb) if rgb is not None else None
    if isinstance(item, (list, tuple)):
        rgb = _coerce_rgb(item)
        return PaletteColor(hex=rgb_to_hex(rgb), rgb=rgb) if rgb is not None else None
    if not isinstance(item, dict):
        return None
    view = JsonView(item)
    hex_value = view.get_str("hex", "color")
    rgb = _coerce_rgb(view.raw("rgb")) or _coerce_rgb(item)
    if rgb is None and hex_value:
        rgb = hex_to_rgb(hex_value)
    if hex_value is None and rgb is not None:
        hex_value = rgb_to_hex(rgb)
    if hex_value is None and rgb is None:
        return None
    weight = view.get_float("population", "weight", "percentage", "count")
    return PaletteColor(hex=hex_value, rgb=rgb, weight=weight)


class ColorResponse(ApiResponse):
    @property
    def dominant_color(self) -> ColorValue | None:
        return _color(self._view, "dominant_color")

    @property
    def text_color(self) -> ColorValue | None:
        return _color(self._view, "text_color")

    def get_dominant_color_hex(self) -> str | None:
        color = self.dominant_color
        return color.hex if color else None

    def get_text_color_hex(self) -> str | None:
        color = self.text_color
        return color.hex if color else None

    def get_dominant_color_rgb(self) -> RGB | None:
        color = self.dominant_color
        return color.rgb if color else None

    def get_text_color_rgb(self) -> RGB | None:
        color = self.text_color
        return color.rgb if color else None

    def get_dominant_color_css(self) -> str | None:
        color = self.dominant_color
        return color.css if color else None

    def get_text_color_css(self) -> str | None:
        color = self.text_color
        return color.css if color else None

    def get_dominant_color_flutter_hex(self) -> str | None:
        color = self.dominant_color
        return color.flutter_hex if color else None

    def get_text_color_flutter_hex(self) -> str | None:
        color = self.text_color
        return color.flutter_hex if color else None

    def get_palette(self) -> list[PaletteColor]:
        """Palette in backend order; unusable entries are skipped."""
        colors = (_palette_color(item) for item in self._view.get_list("palette"))
        return [color for color in colors if color is not None]

    def get_palette_color(self, index: int) -> PaletteColor | None:
        palette = self.get_palette()
        if 0 <= index < len(palette):
            return palette[index]
        return None

    @property
    def palette_count(self) -> int:
        return len(self.get_palette())
