import logging
import logging.handlers
import os
import sys
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

BASE = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# ---------------- Logging ----------------

LOG_FORMAT = '{"ts":"%(asctime)s","level":"%(levelname)s","step":"%(name)s","msg":"%(message)s"}'


def _add_file_handler(logger: logging.Logger, log_file: str) -> None:
    """Attach a rotating file handler for log_file unless one is already attached."""
    target = os.path.abspath(log_file)
    for h in logger.handlers:
        if isinstance(h, logging.handlers.RotatingFileHandler) and h.baseFilename == target:
            return
    os.makedirs(os.path.dirname(target), exist_ok=True)
    fh = logging.handlers.RotatingFileHandler(target, maxBytes=5_000_000, backupCount=5)
    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(fh)


def get_logger(name="zenpattern", log_file=None):
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(logging.INFO)
        sh = logging.StreamHandler(sys.stdout)
        sh.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(sh)
    if log_file:
        _add_file_handler(logger, log_file)
    return logger


log = get_logger("zenpattern")

# ---------------- Config Models ----------------


class CanvasCfg(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    width: float = Field(900.0, gt=0)
    height: float = Field(700.0, gt=0)


class DefaultsCfg(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    seed: int = Field(42, ge=0, le=0xFFFFFFFF)
    complexity: int = Field(8, ge=0)
    density: float = Field(0.75, ge=0.0, le=1.0)
    palette_size: int = Field(5, ge=1)
    shape: str = "circle"


class ExportCfg(BaseModel):
    output_dir: str = "output"
    cache_dir: str = "render_cache"
    use_cache: bool = True


class PresetsCfg(BaseModel):
    path: str = "presets.yaml"


class LoggingCfg(BaseModel):
    level: str = "INFO"
    file: Optional[str] = None


class GlobalCfg(BaseModel):
    canvas: CanvasCfg = Field(default_factory=CanvasCfg)
    defaults: DefaultsCfg = Field(default_factory=DefaultsCfg)
    export: ExportCfg = Field(default_factory=ExportCfg)
    presets: PresetsCfg = Field(default_factory=PresetsCfg)
    logging: LoggingCfg = Field(default_factory=LoggingCfg)


def load_yaml(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML at {path} must be a mapping/object.")
    return data


def _resolve_config_path(path: Optional[str]) -> Optional[str]:
    if path:
        return path
    env_path = os.environ.get("ZENPATTERN_CONFIG")
    if env_path:
        return env_path
    for candidate in ("zenpattern.yaml", "zenpattern.example.yaml"):
        p = os.path.join(BASE, "conf", candidate)
        if os.path.exists(p):
            return p
    return None


def load_config(path: Optional[str] = None) -> GlobalCfg:
    """
    Load the global config.

    Resolution order: explicit ``path``, ``$ZENPATTERN_CONFIG``,
    ``conf/zenpattern.yaml``, ``conf/zenpattern.example.yaml``. When none of
    them exists the built-in defaults are used.
    """
    resolved = _resolve_config_path(path)
    if resolved is None:
        log.debug("No config file found, using built-in defaults")
        return GlobalCfg()
    if not os.path.exists(resolved):
        raise FileNotFoundError(f"Config file not found: {resolved}")

    raw = load_yaml(resolved)

    # Handle relative output_dir
    if (raw.get("export") or {}).get("output_dir") == ".":
        raw["export"]["output_dir"] = BASE

    try:
        cfg = GlobalCfg(**raw)
    except ValidationError as e:
        log.error(f"Config validation failed: {e}")
        raise
    return cfg


def configure_logging(cfg: GlobalCfg, verbose: bool = False) -> logging.Logger:
    """Apply the config's logging section to the package logger."""
    logger = get_logger("zenpattern", cfg.logging.file)
    level = logging.DEBUG if verbose else getattr(logging, cfg.logging.level.upper(), logging.INFO)
    logger.setLevel(level)
    return logger
