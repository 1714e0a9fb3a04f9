# tests/test_cli.py
import io
import json
import xml.etree.ElementTree as ET
from unittest.mock import patch

import pytest
from PIL import Image

from zenpattern.generate import EXIT_EXPORT_FAILED, EXIT_INVALID, main
from zenpattern.engine.raster_export import RasterExportError
from zenpattern.utils.presets import PresetStore


@pytest.fixture
def config_path(tmp_path, write_config):
    return write_config(
        {
            "canvas": {"width": 120, "height": 80},
            "defaults": {"seed": 3, "complexity": 4, "density": 1.0, "palette_size": 3, "shape": "circle"},
            "export": {
                "output_dir": str(tmp_path / "out"),
                "cache_dir": str(tmp_path / "cache"),
                "use_cache": True,
            },
            "presets": {"path": str(tmp_path / "presets.yaml")},
        }
    )


def _blank_png(svg, width, height):
    buf = io.BytesIO()
    Image.new("RGBA", (width, height), (0, 0, 0, 0)).save(buf, format="PNG")
    return buf.getvalue()


def test_svg_default_output_path(config_path, tmp_path):
    assert main(["--config", config_path]) == 0
    out = tmp_path / "out" / "zen-pattern-3.svg"
    root = ET.parse(out).getroot()
    assert float(root.get("width")) == 120


def test_json_output_reflects_flags(config_path, tmp_path):
    out = tmp_path / "scene.json"
    rc = main(["--config", config_path, "--format", "json", "--out", str(out), "--shape", "rect", "--seed", "11"])
    assert rc == 0
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["parameters"]["shape"] == "rect"
    assert payload["parameters"]["seed"] == 11
    assert payload["parameters"]["canvas_width"] == 120.0
    assert payload["scene"][0]["kind"] == "rect"
    assert all(item["kind"] == "rect" for item in payload["scene"])


def test_invalid_parameter_exit_code(config_path, tmp_path):
    out = tmp_path / "bad.svg"
    assert main(["--config", config_path, "--density", "1.5", "--out", str(out)]) == EXIT_INVALID
    assert not out.exists()


def test_unknown_preset_exit_code(config_path):
    assert main(["--config", config_path, "--preset", "nope"]) == EXIT_INVALID


def test_save_then_load_preset(config_path, tmp_path):
    first = tmp_path / "first.json"
    second = tmp_path / "second.json"
    assert main(["--config", config_path, "--seed", "99", "--shape", "petal", "--save-preset", "mine",
                 "--format", "json", "--out", str(first)]) == 0
    assert PresetStore(tmp_path / "presets.yaml").names() == ["mine"]

    assert main(["--config", config_path, "--preset", "mine", "--format", "json", "--out", str(second)]) == 0
    assert json.loads(first.read_text()) == json.loads(second.read_text())


def test_flags_override_preset(config_path, tmp_path):
    assert main(["--config", config_path, "--seed", "5", "--save-preset", "base", "--format", "json",
                 "--out", str(tmp_path / "a.json")]) == 0
    out = tmp_path / "b.json"
    assert main(["--config", config_path, "--preset", "base", "--seed", "6", "--format", "json", "--out", str(out)]) == 0
    assert json.loads(out.read_text())["parameters"]["seed"] == 6


def test_randomize_keeps_explicit_flags(config_path, tmp_path):
    out = tmp_path / "r.json"
    assert main(["--config", config_path, "--randomize", "--shape", "line", "--format", "json", "--out", str(out)]) == 0
    params = json.loads(out.read_text())["parameters"]
    assert params["shape"] == "line"
    assert 0 <= params["seed"] < 9999
    assert params["canvas_width"] == 120.0


@patch("zenpattern.engine.raster_export.rasterize_svg", side_effect=_blank_png)
def test_png_export_uses_cache(mock_raster, config_path, tmp_path):
    out = tmp_path / "p.png"
    assert main(["--config", config_path, "--format", "png", "--out", str(out)]) == 0
    assert main(["--config", config_path, "--format", "png", "--out", str(out)]) == 0
    assert mock_raster.call_count == 1
    with Image.open(out) as img:
        assert img.size == (120, 80)


@patch("zenpattern.engine.raster_export.rasterize_svg", side_effect=_blank_png)
def test_png_no_cache_flag(mock_raster, config_path, tmp_path):
    out = tmp_path / "p.png"
    assert main(["--config", config_path, "--format", "png", "--out", str(out), "--no-cache"]) == 0
    assert main(["--config", config_path, "--format", "png", "--out", str(out), "--no-cache"]) == 0
    assert mock_raster.call_count == 2
    assert not (tmp_path / "cache").exists()


@patch("zenpattern.engine.raster_export.rasterize_svg", side_effect=RasterExportError("no backend"))
def test_png_failure_exit_code(mock_raster, config_path, tmp_path):
    out = tmp_path / "p.png"
    assert main(["--config", config_path, "--format", "png", "--out", str(out), "--no-cache"]) == EXIT_EXPORT_FAILED
    assert not out.exists()


def test_invalid_config_exit_code(write_config, tmp_path):
    path = write_config({"defaults": {"density": 2.0}}, name="bad.yaml")
    assert main(["--config", path, "--out", str(tmp_path / "x.svg")]) == EXIT_INVALID
    assert not (tmp_path / "x.svg").exists()


def test_missing_config_exit_code(tmp_path):
    assert main(["--config", str(tmp_path / "absent.yaml")]) == EXIT_INVALID


def test_blank_preset_name_exit_code(config_path, tmp_path):
    out = tmp_path / "x.svg"
    assert main(["--config", config_path, "--save-preset", "  ", "--out", str(out)]) == EXIT_INVALID
    assert not out.exists()
    assert not (tmp_path / "presets.yaml").exists()


@pytest.mark.parametrize("content", ["bad: 3\n", "- not\n- a mapping\n"])
def test_malformed_preset_file_exit_code(config_path, tmp_path, content):
    (tmp_path / "presets.yaml").write_text(content, encoding="utf-8")
    assert main(["--config", config_path, "--preset", "bad"]) == EXIT_INVALID
