#!/usr/bin/env python3
"""
Procedural Motif Generators

Each generator turns one placed motif (center, size, color) into primitive
drawing instructions, drawing any extra randomness from the run's shared
stream. Draw order inside a generator is part of the reproducibility contract:
reordering two draws changes every motif that follows.
"""

import math
from typing import Callable, Dict, List

from .color_engine import Color
from .rng import RandomStream
from .sdk import (
    Ellipse,
    Group,
    LineSegment,
    Point,
    PrimitiveInstruction,
    Rectangle,
    ShapeKind,
)

MotifGenerator = Callable[[Point, float, Color, RandomStream], List[PrimitiveInstruction]]


def make_circle(center: Point, size: float, color: Color, rng: RandomStream) -> List[PrimitiveInstruction]:
    cx, cy = center
    radius = size * (0.5 + rng.next() * 0.9)
    opacity = 0.92 - rng.next() * 0.3
    return [Ellipse(cx=cx, cy=cy, rx=radius, ry=radius, fill=color.css, fill_opacity=opacity)]


def make_rounded_square(center: Point, size: float, color: Color, rng: RandomStream) -> List[PrimitiveInstruction]:
    """Rounded square tilted up to 25 degrees either way about its center."""
    cx, cy = center
    s = size * (0.45 + rng.next() * 0.9)
    opacity = 0.9 - rng.next() * 0.4
    rotation = rng.next() * 50 - 25
    return [
        Rectangle(
            x=cx - s / 2,
            y=cy - s / 2,
            width=s,
            height=s,
            fill=color.css,
            fill_opacity=opacity,
            corner_radius=s * 0.2,
            rotation=rotation,
        )
    ]


def make_line_cluster(center: Point, size: float, color: Color, rng: RandomStream) -> List[PrimitiveInstruction]:
    """
    Generate a cluster of 3-7 roughly parallel horizontal strokes.

    Per segment the draws are: left extent, right extent, vertical offset,
    stroke width, opacity. A final draw rotates the whole cluster by
    [-90, 90) degrees about the motif center.
    """
    cx, cy = center
    count = 3 + math.floor(rng.next() * 5)
    segments = []
    for _ in range(count):
        x1 = cx - size * (0.5 + rng.next() * 0.4)
        x2 = cx + size * (0.5 + rng.next() * 0.4)
        y = cy + (rng.next() - 0.5) * size * 0.4
        stroke_width = 1 + rng.next() * 3
        opacity = 0.6 + rng.next() * 0.4
        segments.append(
            LineSegment(
                x1=x1, y1=y, x2=x2, y2=y,
                stroke=color.css,
                stroke_width=stroke_width,
                opacity=opacity,
            )
        )
    rotation = rng.next() * 180 - 90
    return [Group(children=tuple(segments), rotation=rotation, rotation_center=(cx, cy))]


def make_petal_rosette(center: Point, size: float, color: Color, rng: RandomStream) -> List[PrimitiveInstruction]:
    """
    Generate 4-8 elliptical petals arranged evenly around the center.

    Each petal sits 0.4 * size out along its angle and is rotated to point
    along it, with +/-20 degrees of jitter.
    """
    cx, cy = center
    petals = 4 + math.floor(rng.next() * 5)
    children = []
    for i in range(petals):
        angle = (i / petals) * math.pi * 2
        px = cx + math.cos(angle) * size * 0.4
        py = cy + math.sin(angle) * size * 0.4
        rx = size * (0.2 + rng.next() * 0.4)
        ry = size * (0.45 + rng.next() * 0.35)
        opacity = 0.6 + rng.next() * 0.4
        rotation = angle * (180 / math.pi) + rng.next() * 40 - 20
        children.append(
            Ellipse(cx=px, cy=py, rx=rx, ry=ry, fill=color.css, fill_opacity=opacity, rotation=rotation)
        )
    return [Group(children=tuple(children), rotation=0.0, rotation_center=(cx, cy))]


SHAPE_GENERATORS: Dict[ShapeKind, MotifGenerator] = {
    ShapeKind.CIRCLE: make_circle,
    ShapeKind.RECT: make_rounded_square,
    ShapeKind.LINE: make_line_cluster,
    ShapeKind.PETAL: make_petal_rosette,
}
