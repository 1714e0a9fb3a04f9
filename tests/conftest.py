"""
Test configuration and fixtures for the pattern engine.

This module provides pytest fixtures for:
- Baseline generation parameters
- Scripted random streams for draw-order checks
- Isolated config files
"""

import os
import sys

import pytest
import yaml

# Ensure repo root is on sys.path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from zenpattern.engine.sdk import build_parameters


class ScriptedStream:
    """Stand-in for RandomStream that replays fixed values and records how many were drawn."""

    def __init__(self, values):
        self.values = list(values)
        self.drawn = 0

    def next(self):
        value = self.values[self.drawn]
        self.drawn += 1
        return value


@pytest.fixture
def scripted_stream():
    return ScriptedStream


@pytest.fixture
def circle_params():
    """The reference end-to-end scenario: 4x4 grid, every cell occupied."""
    return build_parameters(
        seed=1,
        complexity=4,
        density=1,
        palette_size=3,
        shape="circle",
        canvas_width=900,
        canvas_height=700,
    )


@pytest.fixture
def write_config(tmp_path):
    """Write a config YAML into tmp_path and return its path."""

    def _write(obj, name="zenpattern.yaml"):
        p = tmp_path / name
        with open(p, "w", encoding="utf-8") as f:
            yaml.safe_dump(obj, f, sort_keys=False)
        return str(p)

    return _write
