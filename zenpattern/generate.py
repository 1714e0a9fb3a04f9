#!/usr/bin/env python3
"""
Command-line entry point: resolve parameters, generate a scene and write it
as SVG, PNG or JSON.

Parameter precedence: config defaults < preset < --randomize < explicit flags.
"""

import json
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from zenpattern.cli.args import build_generation_parser
from zenpattern.core import configure_logging, load_config
from zenpattern.core import log as core_log
from zenpattern.engine.layout_engine import generate_scene
from zenpattern.engine.raster_export import RasterExportError, export_png
from zenpattern.engine.sdk import GenerationParameters, InvalidParameterError, build_parameters, scene_to_dicts
from zenpattern.engine.svg_render import save_svg
from zenpattern.utils.params import defaults_from_config, merge_overrides, randomize_parameters
from zenpattern.utils.presets import PresetNotFoundError, PresetStore

EXIT_INVALID = 2
EXIT_EXPORT_FAILED = 3


def resolve_parameters(args, cfg, store: PresetStore) -> GenerationParameters:
    raw = defaults_from_config(cfg)
    if args.preset:
        raw = store.load(args.preset).model_dump()
    if args.randomize:
        raw = randomize_parameters(base=raw).model_dump()
    overrides = {
        "seed": args.seed,
        "complexity": args.complexity,
        "density": args.density,
        "palette_size": args.palette_size,
        "shape": args.shape,
        "canvas_width": args.width,
        "canvas_height": args.height,
    }
    return build_parameters(merge_overrides(raw, overrides))


def main(argv: Optional[List[str]] = None) -> int:
    args = build_generation_parser().parse_args(argv)
    try:
        cfg = load_config(args.config)
    except (ValidationError, FileNotFoundError, ValueError) as e:
        core_log.error(f"Unusable config: {e}")
        return EXIT_INVALID
    log = configure_logging(cfg, verbose=args.verbose)
    store = PresetStore(cfg.presets.path)

    try:
        params = resolve_parameters(args, cfg, store)
    except InvalidParameterError as e:
        log.error(str(e))
        return EXIT_INVALID
    except ValueError as e:
        # unreadable preset file
        log.error(str(e))
        return EXIT_INVALID
    except PresetNotFoundError as e:
        log.error(f"Unknown preset: {e.args[0]}")
        return EXIT_INVALID

    if args.save_preset is not None:
        try:
            store.save(args.save_preset, params)
        except ValueError as e:
            log.error(str(e))
            return EXIT_INVALID

    scene = generate_scene(params)
    out = Path(args.out) if args.out else Path(cfg.export.output_dir) / f"zen-pattern-{params.seed}.{args.format}"

    if args.format == "svg":
        save_svg(scene, params.canvas_width, params.canvas_height, out)
    elif args.format == "json":
        out.parent.mkdir(parents=True, exist_ok=True)
        payload = {"parameters": params.model_dump(mode="json"), "scene": scene_to_dicts(scene)}
        out.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        log.info(f"Wrote scene JSON with {len(scene)} instructions to {out}")
    else:
        cache_dir = None if args.no_cache or not cfg.export.use_cache else cfg.export.cache_dir
        try:
            export_png(scene, params, out, cache_dir=cache_dir)
        except RasterExportError as e:
            log.error(str(e))
            return EXIT_EXPORT_FAILED

    print(str(out))
    return 0


if __name__ == "__main__":
    sys.exit(main())
