#!/usr/bin/env python3
"""
SVG renderer for generated scenes.

Maps each primitive instruction to one svgwrite element, preserving scene
order (paint order = list order, background first). Coordinates are written
with two decimals.
"""

import logging
from pathlib import Path
from typing import Union

import svgwrite

from .color_engine import css_to_hex
from .sdk import Ellipse, Group, LineSegment, PrimitiveInstruction, Rectangle, Scene

log = logging.getLogger(__name__)

PRECISION = 2


def _r(value: float) -> float:
    return round(value, PRECISION)


def _rotate(element, angle: float, cx: float, cy: float) -> None:
    if angle:
        element.rotate(_r(angle), center=(_r(cx), _r(cy)))


def _build_element(dwg: svgwrite.Drawing, instruction: PrimitiveInstruction, paint):
    if isinstance(instruction, Ellipse):
        el = dwg.ellipse(
            center=(_r(instruction.cx), _r(instruction.cy)),
            r=(_r(instruction.rx), _r(instruction.ry)),
            fill=paint(instruction.fill),
            fill_opacity=_r(instruction.fill_opacity),
        )
        _rotate(el, instruction.rotation, instruction.cx, instruction.cy)
        return el

    if isinstance(instruction, Rectangle):
        kwargs = {}
        if instruction.corner_radius:
            kwargs["rx"] = _r(instruction.corner_radius)
        if instruction.fill_opacity != 1.0:
            kwargs["fill_opacity"] = _r(instruction.fill_opacity)
        el = dwg.rect(
            insert=(_r(instruction.x), _r(instruction.y)),
            size=(_r(instruction.width), _r(instruction.height)),
            fill=paint(instruction.fill),
            **kwargs,
        )
        cx, cy = instruction.center
        _rotate(el, instruction.rotation, cx, cy)
        return el

    if isinstance(instruction, LineSegment):
        return dwg.line(
            start=(_r(instruction.x1), _r(instruction.y1)),
            end=(_r(instruction.x2), _r(instruction.y2)),
            stroke=paint(instruction.stroke),
            stroke_width=_r(instruction.stroke_width),
            stroke_linecap="round",
            opacity=_r(instruction.opacity),
        )

    if isinstance(instruction, Group):
        g = dwg.g()
        for child in instruction.children:
            g.add(_build_element(dwg, child, paint))
        cx, cy = instruction.rotation_center
        _rotate(g, instruction.rotation, cx, cy)
        return g

    raise TypeError(f"Unsupported instruction: {type(instruction).__name__}")


def _keep(value: str) -> str:
    return value


def build_drawing(
    scene: Scene, width: float, height: float, hex_colors: bool = False
) -> svgwrite.Drawing:
    """
    Build an svgwrite Drawing for the scene.

    With ``hex_colors`` every paint is normalized to #rrggbb, for rasterizers
    without CSS hsl() support.
    """
    paint = css_to_hex if hex_colors else _keep
    # Validation off: svgwrite's type checker rejects hsl() paints
    dwg = svgwrite.Drawing(size=(_r(width), _r(height)), debug=False)
    dwg.viewbox(0, 0, _r(width), _r(height))
    for instruction in scene:
        dwg.add(_build_element(dwg, instruction, paint))
    return dwg


def render_svg(scene: Scene, width: float, height: float, hex_colors: bool = False) -> str:
    """Render a scene to an SVG document string."""
    return build_drawing(scene, width, height, hex_colors=hex_colors).tostring()


def save_svg(scene: Scene, width: float, height: float, path: Union[str, Path]) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(render_svg(scene, width, height), encoding="utf-8")
    log.info(f"Wrote SVG with {len(scene)} instructions to {out}")
    return out
