# zenpattern/utils/params.py
from __future__ import annotations

import random
import time
from typing import Any, Dict, Mapping, Optional

from zenpattern.core import GlobalCfg
from zenpattern.engine.sdk import GenerationParameters, ShapeKind, build_parameters

RANDOM_SEED_LIMIT = 9999


def defaults_from_config(cfg: GlobalCfg) -> Dict[str, Any]:
    """Raw parameter mapping built from the config's defaults and canvas sections."""
    d = cfg.defaults
    return {
        "seed": d.seed,
        "complexity": d.complexity,
        "density": d.density,
        "palette_size": d.palette_size,
        "shape": d.shape,
        "canvas_width": cfg.canvas.width,
        "canvas_height": cfg.canvas.height,
    }


def randomize_parameters(
    rng: Optional[random.Random] = None, base: Optional[Mapping[str, Any]] = None
) -> GenerationParameters:
    """
    Pick a fresh, pleasant parameter set.

    Canvas size (and anything else not randomized) is carried over from ``base``.
    """
    rng = rng or random.Random(time.time())
    shapes = list(ShapeKind)
    data: Dict[str, Any] = dict(base or {})
    data.update(
        seed=rng.randrange(RANDOM_SEED_LIMIT),
        palette_size=3 + rng.randrange(6),
        complexity=3 + rng.randrange(18),
        density=round(0.3 + rng.random() * 0.7, 2),
        shape=shapes[rng.randrange(len(shapes))],
    )
    return build_parameters(data)


def merge_overrides(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """Overlay non-None overrides onto base."""
    merged = dict(base)
    merged.update({k: v for k, v in overrides.items() if v is not None})
    return merged
