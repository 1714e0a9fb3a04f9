"""
Zen Pattern - Engine Package

Deterministic generation pipeline: seeded random stream, palette derivation,
grid placement and per-shape motif generators, plus the SVG renderer and PNG
exporter that consume the resulting scene.
"""

from .color_engine import Color, Palette, css_to_hex, generate_palette
from .layout_engine import Motif, SceneComposer, compose, generate_scene, grid_dimensions
from .motif_generators import (
    SHAPE_GENERATORS,
    make_circle,
    make_line_cluster,
    make_petal_rosette,
    make_rounded_square,
)
from .raster_export import RasterExportError, export_png, rasterize_svg
from .rng import RandomStream
from .sdk import (  # Constants; Enums; Errors; Models; Instructions; Helpers
    BACKGROUND_FILL,
    MAX_SEED,
    MIN_GRID_CELLS,
    REFERENCE_H,
    REFERENCE_W,
    Ellipse,
    GenerationParameters,
    Group,
    InvalidParameterError,
    LineSegment,
    PrimitiveInstruction,
    Rectangle,
    Scene,
    ShapeKind,
    build_parameters,
    parameters_fingerprint,
    scene_fingerprint,
    scene_to_dicts,
)
from .svg_render import render_svg, save_svg

__version__ = "0.1.0"
__all__ = [
    "BACKGROUND_FILL",
    "MAX_SEED",
    "MIN_GRID_CELLS",
    "REFERENCE_W",
    "REFERENCE_H",
    "ShapeKind",
    "InvalidParameterError",
    "GenerationParameters",
    "build_parameters",
    "parameters_fingerprint",
    "Ellipse",
    "Rectangle",
    "LineSegment",
    "Group",
    "PrimitiveInstruction",
    "Scene",
    "scene_to_dicts",
    "scene_fingerprint",
    "RandomStream",
    "Color",
    "Palette",
    "css_to_hex",
    "generate_palette",
    "SHAPE_GENERATORS",
    "make_circle",
    "make_rounded_square",
    "make_line_cluster",
    "make_petal_rosette",
    "Motif",
    "SceneComposer",
    "compose",
    "generate_scene",
    "grid_dimensions",
    "render_svg",
    "save_svg",
    "export_png",
    "rasterize_svg",
    "RasterExportError",
]
