#!/usr/bin/env python3
"""
Layout Engine for the Zen Pattern engine

Lays a jittered grid over the canvas, decides occupancy per cell from the
density, and hands each placed motif to its shape generator. All randomness
comes from one RandomStream created per run, so a run is a pure function of
its GenerationParameters.

All units in canvas pixels.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping, Tuple, Union

from .color_engine import Color, Palette, generate_palette
from .motif_generators import SHAPE_GENERATORS
from .rng import RandomStream
from .sdk import (
    BACKGROUND_FILL,
    MIN_GRID_CELLS,
    REFERENCE_H,
    REFERENCE_W,
    GenerationParameters,
    Point,
    Rectangle,
    Scene,
    build_parameters,
)

log = logging.getLogger(__name__)

# Center jitter as a fraction of the cell gap
JITTER = 0.6
SCALE_MIN = 0.25
SCALE_SPAN = 0.9
SCALE_FACTOR = 0.6


@dataclass(frozen=True)
class Motif:
    """Resolved placement of one occupied cell."""

    center: Point
    scale: float
    color: Color


def grid_dimensions(complexity: float, width: float, height: float) -> Tuple[int, int]:
    """Return (cols, rows); never fewer than MIN_GRID_CELLS either way."""
    cols = max(MIN_GRID_CELLS, math.floor(complexity * (width / REFERENCE_W)))
    rows = max(MIN_GRID_CELLS, math.floor(complexity * (height / REFERENCE_H)))
    return cols, rows


def background(width: float, height: float) -> Rectangle:
    return Rectangle(x=0.0, y=0.0, width=width, height=height, fill=BACKGROUND_FILL)


class SceneComposer:
    """Composes a Scene for one parameter set."""

    def __init__(self, params: GenerationParameters):
        self.params = params
        self.cols, self.rows = grid_dimensions(
            params.complexity, params.canvas_width, params.canvas_height
        )
        self.gap_x = params.canvas_width / self.cols
        self.gap_y = params.canvas_height / self.rows

    def place_motif(self, col: int, row: int, rng: RandomStream, palette: Palette) -> Motif:
        """Resolve center, color and scale for an occupied cell (four draws)."""
        cx = (col + 0.5 + (rng.next() - 0.5) * JITTER) * self.gap_x
        cy = (row + 0.5 + (rng.next() - 0.5) * JITTER) * self.gap_y
        index = math.floor(rng.next() * len(palette))
        scale = (SCALE_MIN + rng.next() * SCALE_SPAN) * min(self.gap_x, self.gap_y) * SCALE_FACTOR
        return Motif(center=(cx, cy), scale=scale, color=palette[index])

    def compose(self) -> Scene:
        params = self.params
        rng = RandomStream(params.seed)
        palette = generate_palette(rng, params.palette_size)
        generator = SHAPE_GENERATORS[params.shape]

        scene: Scene = [background(params.canvas_width, params.canvas_height)]
        motifs = 0
        # Row-major; the occupancy draw happens for every cell, kept or not
        for row in range(self.rows):
            for col in range(self.cols):
                if rng.next() > params.density:
                    continue
                motif = self.place_motif(col, row, rng, palette)
                scene.extend(generator(motif.center, motif.scale, motif.color, rng))
                motifs += 1

        log.debug(
            f"Composed seed={params.seed} grid={self.cols}x{self.rows} "
            f"motifs={motifs} instructions={len(scene)}"
        )
        return scene


def compose(params: GenerationParameters) -> Scene:
    return SceneComposer(params).compose()


def generate_scene(params: Union[GenerationParameters, Mapping[str, Any]]) -> Scene:
    """
    Generate the scene for ``params``.

    Mappings are validated first, so invalid input raises InvalidParameterError
    before any random draw happens.
    """
    if not isinstance(params, GenerationParameters):
        params = build_parameters(params)
    return compose(params)
