#!/usr/bin/env python3
"""
PNG exporter for generated scenes.

Rasterizes the rendered SVG at exactly canvas_width x canvas_height and
composites it over a canvas pre-filled with the scene's background color.
Uses cairosvg as the preferred rasterizer with rsvg-convert as fallback.
Exports are optionally cached on disk by parameter fingerprint.
"""

import io
import logging
import shutil
import subprocess
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Tuple, Union

from PIL import Image, ImageColor

from .sdk import (
    BACKGROUND_FILL,
    GenerationParameters,
    Rectangle,
    Scene,
    parameters_fingerprint,
)
from .svg_render import render_svg

log = logging.getLogger(__name__)

OUTPUT_FORMAT = "png"


class RasterExportError(RuntimeError):
    """No rasterizer could turn the scene into a PNG."""


def default_filename(params: GenerationParameters) -> str:
    return f"zen-pattern-{params.seed}.{OUTPUT_FORMAT}"


def canvas_size(params: GenerationParameters) -> Tuple[int, int]:
    return int(round(params.canvas_width)), int(round(params.canvas_height))


def _rasterize_with_cairosvg(svg: str, width: int, height: int) -> Optional[bytes]:
    """
    Rasterize SVG using cairosvg (preferred method).

    Returns:
        PNG bytes if successful, None otherwise
    """
    try:
        import cairosvg
    except (ImportError, OSError) as e:
        # cairosvg raises OSError when the cairo shared library is missing
        log.debug(f"cairosvg not available: {e}")
        return None

    try:
        return cairosvg.svg2png(
            bytestring=svg.encode("utf-8"),
            output_width=width,
            output_height=height,
        )
    except Exception as e:
        log.warning(f"cairosvg failed: {e}")
        return None


def _rasterize_with_rsvg(svg: str, width: int, height: int) -> Optional[bytes]:
    """
    Rasterize SVG using rsvg-convert (fallback method).

    Returns:
        PNG bytes if successful, None otherwise
    """
    if shutil.which("rsvg-convert") is None:
        log.debug("rsvg-convert not available")
        return None

    cmd = ["rsvg-convert", "-w", str(width), "-h", str(height), "-f", OUTPUT_FORMAT]
    try:
        result = subprocess.run(cmd, input=svg.encode("utf-8"), capture_output=True, timeout=30)
    except (subprocess.TimeoutExpired, OSError) as e:
        log.warning(f"rsvg-convert error: {e}")
        return None

    if result.returncode != 0:
        log.warning(f"rsvg-convert failed: {result.stderr.decode('utf-8', 'replace')}")
        return None
    return result.stdout


def rasterize_svg(svg: str, width: int, height: int) -> bytes:
    """
    Rasterize an SVG string to PNG bytes, trying each backend in order.

    Raises:
        RasterExportError: if every backend fails
    """
    for rasterizer in (_rasterize_with_cairosvg, _rasterize_with_rsvg):
        png = rasterizer(svg, width, height)
        if png:
            return png
    raise RasterExportError("No SVG rasterizer available (install cairosvg or rsvg-convert)")


@contextmanager
def _open_raster(png: bytes) -> Iterator[Image.Image]:
    """Decode PNG bytes; the image and its buffer are released on exit."""
    buf = io.BytesIO(png)
    img = Image.open(buf)
    try:
        img.load()
        yield img
    finally:
        img.close()
        buf.close()


def _background_of(scene: Scene) -> str:
    if scene and isinstance(scene[0], Rectangle):
        return scene[0].fill
    return BACKGROUND_FILL


def compose_png(scene: Scene, width: int, height: int) -> Image.Image:
    """Rasterize a scene onto a background-filled RGB canvas of exactly width x height."""
    svg = render_svg(scene, width, height, hex_colors=True)
    png = rasterize_svg(svg, width, height)
    canvas = Image.new("RGBA", (width, height), ImageColor.getcolor(_background_of(scene), "RGBA"))
    try:
        with _open_raster(png) as overlay:
            layer = overlay.convert("RGBA")
            if layer.size != canvas.size:
                layer = layer.resize(canvas.size)
            canvas.alpha_composite(layer)
        return canvas.convert("RGB")
    finally:
        canvas.close()


def _cached_path(cache_dir: Union[str, Path], params: GenerationParameters) -> Path:
    return Path(cache_dir) / f"{parameters_fingerprint(params)}.{OUTPUT_FORMAT}"


def export_png(
    scene: Scene,
    params: GenerationParameters,
    path: Optional[Union[str, Path]] = None,
    cache_dir: Optional[Union[str, Path]] = None,
) -> Path:
    """
    Export a generated scene to a PNG file.

    Args:
        scene: Scene generated from ``params``
        params: Parameters the scene was generated from (canvas size, seed, cache key)
        path: Output file; defaults to ``zen-pattern-<seed>.png`` in the working directory
        cache_dir: When set, reuse/populate a PNG cache keyed by parameter fingerprint

    Returns:
        Path of the written PNG
    """
    out = Path(path) if path else Path(default_filename(params))
    out.parent.mkdir(parents=True, exist_ok=True)

    cached = _cached_path(cache_dir, params) if cache_dir else None
    if cached is not None and cached.exists():
        log.debug(f"Cache hit for seed {params.seed} at {cached}")
        shutil.copyfile(cached, out)
        return out

    width, height = canvas_size(params)
    image = compose_png(scene, width, height)
    try:
        image.save(out, format="PNG")
    finally:
        image.close()
    log.info(f"Exported {width}x{height} PNG to {out}")

    if cached is not None:
        cached.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(out, cached)
        log.debug(f"Cached export at {cached}")
    return out
