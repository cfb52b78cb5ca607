"""User preferences stored in ``preferences.json``."""

from __future__ import annotations

import logging
import threading
from dataclasses import asdict, dataclass
from typing import Any, Optional

from epubreader.config import AppConfig
from epubreader.errors import ParseError, StoreError, ValidationError
from epubreader.storage import read_json, write_json

log = logging.getLogger(__name__)

FONT_FAMILIES = ("serif", "sans-serif", "monospace")
READING_MODES = ("paginated", "scrolled")
FONT_SIZE_RANGE = (12, 32)

# attribute name -> JSON key
_KEYS = {
    "font_family": "fontFamily",
    "font_size": "fontSize",
    "last_preset": "lastPreset",
    "reading_mode": "readingMode",
    "text_color": "textColor",
    "container_color": "containerColor",
    "container_opacity": "containerOpacity",
    "glassmorphism": "glassmorphism",
    "glass_blur": "glassBlur",
    "bg_media_path": "bgMediaPath",
    "bg_audio_muted": "bgAudioMuted",
    "bg_music_path": "bgMusicPath",
    "bg_music_volume": "bgMusicVolume",
    "bg_music_muted": "bgMusicMuted",
    "scrollbar_track": "scrollbarTrack",
    "scrollbar_thumb": "scrollbarThumb",
}


@dataclass
class Preferences:
    font_family: str = "serif"
    font_size: int = 18
    last_preset: Optional[str] = "Cozy Reading"
    reading_mode: str = "paginated"
    text_color: str = "#1a1a1a"
    container_color: str = "#FFFFFF"
    container_opacity: int = 95
    glassmorphism: bool = False
    glass_blur: int = 12
    bg_media_path: Optional[str] = None
    bg_audio_muted: bool = True
    bg_music_path: Optional[str] = None
    bg_music_volume: int = 50
    bg_music_muted: bool = True
    scrollbar_track: str = "transparent"
    scrollbar_thumb: str = "rgba(255, 255, 255, 0.25)"

    def to_dict(self) -> dict[str, Any]:
        return {_KEYS[k]: v for k, v in asdict(self).items()}

    @classmethod
    def from_dict(cls, data: Any) -> Preferences:
        """Decode stored preferences.

        ``fontFamily`` and ``fontSize`` are required; ``lastPreset`` is
        None when missing and every other field falls back to its default.
        """
        if not isinstance(data, dict):
            raise ParseError("preferences must be a JSON object")
        for key in ("fontFamily", "fontSize"):
            if key not in data:
                raise ParseError(f"missing field '{key}'")
        if not isinstance(data["fontFamily"], str):
            raise ParseError("'fontFamily' must be a string")
        size = data["fontSize"]
        if isinstance(size, bool) or not isinstance(size, int):
            raise ParseError("'fontSize' must be an integer")

        kwargs = {attr: data[key] for attr, key in _KEYS.items() if key in data}
        kwargs.setdefault("last_preset", None)
        return cls(**kwargs)


def validate_preferences(prefs: Preferences) -> None:
    low, high = FONT_SIZE_RANGE
    size = prefs.font_size
    if isinstance(size, bool) or not isinstance(size, int):
        raise ValidationError(
            "fontSize", size, f"Font size must be an integer, got {size!r}"
        )
    if not low <= size <= high:
        raise ValidationError(
            "fontSize",
            size,
            f"Font size must be between {low} and {high}, got {size}",
        )
    if prefs.font_family not in FONT_FAMILIES:
        raise ValidationError(
            "fontFamily", prefs.font_family, f"Invalid font family: {prefs.font_family}"
        )
    if prefs.reading_mode not in READING_MODES:
        raise ValidationError(
            "readingMode",
            prefs.reading_mode,
            f"Invalid reading mode: {prefs.reading_mode}",
        )


class PreferenceStore:
    def __init__(self, config: AppConfig) -> None:
        self._path = config.preferences_path
        self._lock = threading.Lock()

    def get(self) -> Preferences:
        """Stored preferences, or the defaults if they cannot be read."""
        with self._lock:
            if not self._path.exists():
                return Preferences()
            try:
                return Preferences.from_dict(read_json(self._path))
            except StoreError as e:
                log.warning("Failed to load preferences, using defaults: %s", e)
                return Preferences()

    def set(self, prefs: Preferences) -> None:
        validate_preferences(prefs)
        with self._lock:
            write_json(self._path, prefs.to_dict())
