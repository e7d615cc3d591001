"""
Map a color index to a fill color.

The hue advances by 137° per index so consecutive indices land far apart on
the color wheel without a bounded palette. Saturation cycles through a 3-value
table, and lightness cycles through another 3-value table at one third of that
rate, so indices that share a similar hue still differ in tone.

HSL reference: https://www.quackit.com/css/color/charts/hsl_color_chart.cfm
"""

import colorsys
from typing import Tuple

# Configuration
HUE_STEP = 137
SATURATION_CYCLE = (62, 70, 78)
LIGHTNESS_CYCLE = (46, 54, 62)


def hsl_components(index: int) -> Tuple[int, int, int]:
    """
    Hue/saturation/lightness for a color index.

    Args:
        index: Non-negative color index

    Returns:
        (hue in degrees 0-359, saturation 0-100, lightness 0-100)
    """
    if index < 0:
        raise ValueError(f"Color index must be non-negative, got {index}")

    hue = (index * HUE_STEP) % 360
    saturation = SATURATION_CYCLE[index % len(SATURATION_CYCLE)]
    lightness = LIGHTNESS_CYCLE[(index // len(SATURATION_CYCLE)) % len(LIGHTNESS_CYCLE)]
    return hue, saturation, lightness


def color_from_index(index: int) -> str:
    """CSS color string for a color index, e.g. "hsl(137 70% 46%)"."""
    hue, saturation, lightness = hsl_components(index)
    return f"hsl({hue} {saturation}% {lightness}%)"


def hsl_to_hex(h: float, s: float, l: float) -> str:
    """Uppercase "#RRGGBB" for a hue in degrees (wrapped mod 360) and percent saturation/lightness."""
    # colorsys works in 0-1 and takes (h, l, s) order
    r, g, b = colorsys.hls_to_rgb((h % 360) / 360.0, l / 100.0, s / 100.0)
    return f"#{int(round(r * 255)):02X}{int(round(g * 255)):02X}{int(round(b * 255)):02X}"


def color_hex_from_index(index: int) -> str:
    """Same color as color_from_index, as "#RRGGBB" for GIS symbology and reports."""
    return hsl_to_hex(*hsl_components(index))
