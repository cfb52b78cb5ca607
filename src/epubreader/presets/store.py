"""Preset files under ``presets/`` and the background media listing."""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

from epubreader.config import AppConfig
from epubreader.errors import NotFoundError, ParseError, StoreIOError, ValidationError
from epubreader.storage import read_json, write_json

from .models import Preset, validate_preset

log = logging.getLogger(__name__)

BACKGROUND_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "webp", "svg"})


def _check_name(name: str) -> None:
    # The name doubles as the file stem.
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise ValidationError("name", name, f"Invalid preset name: {name!r}")


class PresetStore:
    def __init__(self, config: AppConfig) -> None:
        self._dir = config.presets_dir
        self._lock = threading.Lock()

    def _path(self, name: str) -> Path:
        _check_name(name)
        return self._dir / f"{name}.json"

    def list(self) -> list[str]:
        """Names of all presets, in directory order."""
        if not self._dir.exists():
            return []
        try:
            return [
                p.stem for p in self._dir.iterdir() if p.is_file() and p.suffix == ".json"
            ]
        except OSError as e:
            raise StoreIOError("list", self._dir, e) from e

    def load(self, name: str) -> Preset:
        path = self._path(name)
        with self._lock:
            if not path.exists():
                raise NotFoundError("preset", name)
            data = read_json(path)
        try:
            preset = Preset.from_dict(data)
        except ParseError as e:
            raise ParseError(str(e), path) from e
        validate_preset(preset)
        return preset

    def save(self, name: str, preset_json: str) -> Preset:
        """Store a user preset. The requested name overrides the payload's."""
        path = self._path(name)
        try:
            data = json.loads(preset_json)
        except json.JSONDecodeError as e:
            raise ParseError(f"invalid preset JSON: {e}") from e
        preset = Preset.from_dict(data)
        preset.name = name
        validate_preset(preset)

        with self._lock:
            write_json(path, preset.to_dict())
        log.info("Saved preset %s", name)
        return preset

    def delete(self, name: str) -> None:
        path = self._path(name)
        with self._lock:
            if not path.exists():
                raise NotFoundError("preset", name)
            try:
                path.unlink()
            except OSError as e:
                raise StoreIOError("delete", path, e) from e
        log.info("Deleted preset %s", name)


class BackgroundStore:
    """Background images available to presets."""

    def __init__(self, config: AppConfig) -> None:
        self._dir = config.backgrounds_dir

    def list(self) -> list[str]:
        if not self._dir.exists():
            return []
        try:
            return [
                str(p)
                for p in self._dir.iterdir()
                if p.is_file() and p.suffix[1:].lower() in BACKGROUND_EXTENSIONS
            ]
        except OSError as e:
            raise StoreIOError("list", self._dir, e) from e
