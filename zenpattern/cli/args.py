import argparse

from zenpattern.engine.sdk import ShapeKind


def build_common_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(add_help=False)
    ap.add_argument("--config", default=None, help="Path to config YAML (default: conf/zenpattern.yaml)")
    ap.add_argument("--preset", default=None, help="Start from a saved preset")
    ap.add_argument("--randomize", action="store_true", help="Pick random seed, palette, complexity, density and shape")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def build_generation_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Generate a deterministic Zen pattern",
        parents=[build_common_parser()],
    )
    ap.add_argument("--seed", type=int, default=None, help="32-bit unsigned seed")
    ap.add_argument("--complexity", type=int, default=None, help="Grid resolution driver")
    ap.add_argument("--density", type=float, default=None, help="Cell occupancy probability 0..1")
    ap.add_argument("--palette-size", type=int, default=None, help="Number of palette colors")
    ap.add_argument("--shape", choices=[s.value for s in ShapeKind], default=None, help="Motif shape")
    ap.add_argument("--width", type=float, default=None, help="Canvas width")
    ap.add_argument("--height", type=float, default=None, help="Canvas height")
    ap.add_argument("--format", choices=["svg", "png", "json"], default="svg", help="Output format")
    ap.add_argument("--out", default=None, help="Output path (default: <output_dir>/zen-pattern-<seed>.<format>)")
    ap.add_argument("--save-preset", default=None, help="Save the resolved parameters under this name")
    ap.add_argument("--no-cache", action="store_true", help="Bypass the PNG export cache")
    return ap
