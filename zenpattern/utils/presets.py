# zenpattern/utils/presets.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from zenpattern.engine.sdk import GenerationParameters, InvalidParameterError, build_parameters

log = logging.getLogger(__name__)


class PresetNotFoundError(KeyError):
    pass


class PresetStore:
    """
    Named parameter presets persisted as a YAML mapping of name -> parameters.

    Presets are revalidated on load, so a hand-edited file with bad values
    raises InvalidParameterError rather than producing a scene.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> Dict[str, Dict[str, Any]]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        if not isinstance(data, dict):
            raise ValueError(f"YAML at {self.path} must be a mapping/object.")
        return data

    def _write(self, data: Dict[str, Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as fh:
            yaml.safe_dump(data, fh, sort_keys=True)

    def names(self) -> List[str]:
        return sorted(self._read())

    def save(self, name: str, params: GenerationParameters) -> None:
        if not name or not name.strip():
            raise ValueError("Preset name must not be empty")
        data = self._read()
        data[name.strip()] = params.model_dump(mode="json")
        self._write(data)
        log.info(f"Saved preset '{name.strip()}' to {self.path}")

    def load(self, name: str) -> GenerationParameters:
        data = self._read()
        if name not in data:
            raise PresetNotFoundError(name)
        if not isinstance(data[name], dict):
            raise InvalidParameterError(f"Preset '{name}' must be a mapping of parameters", fields=[name])
        return build_parameters(data[name])

    def delete(self, name: str) -> None:
        data = self._read()
        if name not in data:
            raise PresetNotFoundError(name)
        del data[name]
        self._write(data)
        log.info(f"Deleted preset '{name}' from {self.path}")
