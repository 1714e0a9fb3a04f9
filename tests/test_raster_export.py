"""
Unit tests for the PNG exporter.

Tests backend fallback, background fill, output sizing and the export cache.
Backends are mocked so no cairo installation is needed; the real cairosvg
round-trip is skipped when cairo is unavailable.
"""

import io
from unittest.mock import patch

import pytest
from PIL import Image

from zenpattern.engine.layout_engine import generate_scene
from zenpattern.engine.raster_export import (
    RasterExportError,
    _cached_path,
    canvas_size,
    compose_png,
    default_filename,
    export_png,
    rasterize_svg,
)
from zenpattern.engine.sdk import build_parameters


def _transparent_png(width, height):
    buf = io.BytesIO()
    Image.new("RGBA", (width, height), (0, 0, 0, 0)).save(buf, format="PNG")
    return buf.getvalue()


def _red_square_png(width, height):
    img = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    img.paste((255, 0, 0, 255), (0, 0, width // 2, height // 2))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def small_params():
    return build_parameters(
        seed=3, complexity=4, density=1, palette_size=3, shape="circle",
        canvas_width=120, canvas_height=80,
    )


class TestRasterizerFallback:
    @patch("zenpattern.engine.raster_export._rasterize_with_rsvg")
    @patch("zenpattern.engine.raster_export._rasterize_with_cairosvg")
    def test_cairosvg_preferred(self, mock_cairo, mock_rsvg):
        mock_cairo.return_value = b"png-from-cairo"
        assert rasterize_svg("<svg/>", 10, 10) == b"png-from-cairo"
        mock_rsvg.assert_not_called()

    @patch("zenpattern.engine.raster_export._rasterize_with_rsvg")
    @patch("zenpattern.engine.raster_export._rasterize_with_cairosvg")
    def test_falls_back_to_rsvg(self, mock_cairo, mock_rsvg):
        mock_cairo.return_value = None
        mock_rsvg.return_value = b"png-from-rsvg"
        assert rasterize_svg("<svg/>", 10, 10) == b"png-from-rsvg"
        mock_rsvg.assert_called_once_with("<svg/>", 10, 10)

    @patch("zenpattern.engine.raster_export._rasterize_with_rsvg", return_value=None)
    @patch("zenpattern.engine.raster_export._rasterize_with_cairosvg", return_value=None)
    def test_all_backends_fail(self, mock_cairo, mock_rsvg):
        with pytest.raises(RasterExportError):
            rasterize_svg("<svg/>", 10, 10)


class TestCompose:
    def test_background_fills_transparent_areas(self, small_params):
        scene = generate_scene(small_params)
        with patch(
            "zenpattern.engine.raster_export.rasterize_svg",
            side_effect=lambda svg, w, h: _transparent_png(w, h),
        ):
            img = compose_png(scene, 120, 80)
        assert img.size == (120, 80)
        assert img.mode == "RGB"
        assert img.getpixel((60, 40)) == (7, 24, 39)

    def test_overlay_composited_over_background(self, small_params):
        scene = generate_scene(small_params)
        with patch(
            "zenpattern.engine.raster_export.rasterize_svg",
            side_effect=lambda svg, w, h: _red_square_png(w, h),
        ):
            img = compose_png(scene, 120, 80)
        assert img.getpixel((5, 5)) == (255, 0, 0)
        assert img.getpixel((110, 70)) == (7, 24, 39)

    def test_wrong_sized_raster_is_resized(self, small_params):
        scene = generate_scene(small_params)
        with patch(
            "zenpattern.engine.raster_export.rasterize_svg",
            return_value=_transparent_png(60, 40),
        ):
            img = compose_png(scene, 120, 80)
        assert img.size == (120, 80)

    def test_rasterizer_receives_hex_paints(self, small_params):
        scene = generate_scene(small_params)
        seen = {}

        def _capture(svg, w, h):
            seen["svg"] = svg
            return _transparent_png(w, h)

        with patch("zenpattern.engine.raster_export.rasterize_svg", side_effect=_capture):
            compose_png(scene, 120, 80)
        assert "hsl(" not in seen["svg"]


class TestExport:
    def test_export_writes_png_of_canvas_size(self, tmp_path, small_params):
        scene = generate_scene(small_params)
        out = tmp_path / "out" / "pattern.png"
        with patch(
            "zenpattern.engine.raster_export.rasterize_svg",
            side_effect=lambda svg, w, h: _transparent_png(w, h),
        ):
            result = export_png(scene, small_params, out)
        assert result == out
        with Image.open(out) as img:
            assert img.size == canvas_size(small_params) == (120, 80)

    def test_default_filename(self, small_params):
        assert default_filename(small_params) == "zen-pattern-3.png"

    def test_cache_hit_skips_rasterizing(self, tmp_path, small_params):
        scene = generate_scene(small_params)
        cache_dir = tmp_path / "cache"
        with patch(
            "zenpattern.engine.raster_export.rasterize_svg",
            side_effect=lambda svg, w, h: _transparent_png(w, h),
        ) as mock_raster:
            export_png(scene, small_params, tmp_path / "a.png", cache_dir=cache_dir)
            assert _cached_path(cache_dir, small_params).exists()
            export_png(scene, small_params, tmp_path / "b.png", cache_dir=cache_dir)
            assert mock_raster.call_count == 1
        assert (tmp_path / "a.png").read_bytes() == (tmp_path / "b.png").read_bytes()

    def test_export_failure_propagates(self, tmp_path, small_params):
        scene = generate_scene(small_params)
        with patch(
            "zenpattern.engine.raster_export.rasterize_svg",
            side_effect=RasterExportError("no backend"),
        ):
            with pytest.raises(RasterExportError):
                export_png(scene, small_params, tmp_path / "x.png")
        assert not (tmp_path / "x.png").exists()


def _cairo_available():
    try:
        import cairosvg  # noqa: F401
    except (ImportError, OSError):
        return False
    return True


@pytest.mark.skipif(not _cairo_available(), reason="cairosvg/cairo not installed")
def test_real_cairosvg_round_trip(tmp_path, small_params):
    scene = generate_scene(small_params)
    out = export_png(scene, small_params, tmp_path / "real.png")
    with Image.open(out) as img:
        assert img.size == (120, 80)
        assert len(img.getcolors(maxcolors=120 * 80)) > 1
