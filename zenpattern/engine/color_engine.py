#!/usr/bin/env python3
"""
Color Engine for the Zen Pattern engine

Derives a seeded palette of HSL colors from the shared random stream and
provides the conversions renderers and exporters need.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import List, Tuple

from .rng import RandomStream

log = logging.getLogger(__name__)

# Saturation and lightness windows, in percent
SATURATION_BASE = 50
SATURATION_SPAN = 30
LIGHTNESS_BASE = 45
LIGHTNESS_SPAN = 20
HUE_JITTER = 10


@dataclass(frozen=True)
class Color:
    """HSL color: hue in [0, 360), saturation/lightness in percent."""

    hue: int
    saturation: int
    lightness: int

    @property
    def css(self) -> str:
        return f"hsl({self.hue}, {self.saturation}%, {self.lightness}%)"

    def to_hex(self) -> str:
        return hsl_to_hex(self.hue / 360.0, self.saturation / 100.0, self.lightness / 100.0)


Palette = List[Color]


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def generate_palette(rng: RandomStream, size: int) -> Palette:
    """
    Generate a palette of ``size`` colors spread evenly around a random base hue.

    Draw order: one base-hue draw, then per entry hue jitter, saturation and
    lightness. Changing that order changes every later draw in the run.
    """
    if size <= 0:
        raise ValueError(f"Palette size must be positive, got {size}")

    base = math.floor(rng.next() * 360)
    step = _round_half_up(360 / size)
    palette: Palette = []
    for i in range(size):
        jitter = math.floor(rng.next() * (2 * HUE_JITTER) - HUE_JITTER)
        hue = (base + i * step + jitter) % 360
        sat = SATURATION_BASE + math.floor(rng.next() * SATURATION_SPAN)
        light = LIGHTNESS_BASE + math.floor(rng.next() * LIGHTNESS_SPAN)
        palette.append(Color(hue, sat, light))

    log.debug(f"Generated palette of {size} colors from base hue {base}")
    return palette


_HSL_PATTERN = re.compile(r"^hsl\(\s*(\d+)\s*,\s*(\d+)%\s*,\s*(\d+)%\s*\)$")


def css_to_hex(value: str) -> str:
    """
    Normalize a paint string to #rrggbb.

    Accepts hex colors and the ``hsl(h, s%, l%)`` form produced by Color.css.
    """
    if value.startswith("#"):
        return value.lower()
    m = _HSL_PATTERN.match(value.strip())
    if not m:
        raise ValueError(f"Unsupported color: {value}")
    return Color(*(int(g) for g in m.groups())).to_hex()


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color to RGB tuple."""
    hex_color = hex_color.lstrip('#')
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Convert RGB tuple to hex color."""
    return f"#{r:02x}{g:02x}{b:02x}"


def hsl_to_hex(h: float, s: float, l: float) -> str:
    """Convert HSL tuple (0-1 range) to hex color."""
    def hue_to_rgb(m1: float, m2: float, h: float) -> float:
        h = h % 1.0
        if h < 1/6:
            return m1 + (m2 - m1) * 6 * h
        elif h < 1/2:
            return m2
        elif h < 2/3:
            return m1 + (m2 - m1) * 6 * (2/3 - h)
        else:
            return m1

    if s == 0:
        r = g = b = l
    else:
        m2 = l * (1 + s) if l <= 0.5 else l + s - l * s
        m1 = 2 * l - m2
        r = hue_to_rgb(m1, m2, h + 1/3)
        g = hue_to_rgb(m1, m2, h)
        b = hue_to_rgb(m1, m2, h - 1/3)

    r_clamped = max(0, min(255, int(round(r * 255))))
    g_clamped = max(0, min(255, int(round(g * 255))))
    b_clamped = max(0, min(255, int(round(b * 255))))

    return rgb_to_hex(r_clamped, g_clamped, b_clamped)
