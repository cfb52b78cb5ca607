"""Visual preset schema.

Presets are shared between releases, so every reader field added after
schema 1.0 is optional and decodes to ``None`` when a file omits it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from epubreader.errors import ParseError, ValidationError

SUPPORTED_VERSIONS = ("1.0", "2.0")


def _require(data: Any, key: str, where: str) -> Any:
    if not isinstance(data, dict):
        raise ParseError(f"{where} must be an object")
    if key not in data:
        raise ParseError(f"missing field '{key}' in {where}")
    return data[key]


def _str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise ParseError(f"'{name}' must be a string")
    return value


def _number(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ParseError(f"'{name}' must be a number")
    return float(value)


@dataclass
class Background:
    type: str  # image, video, color, ...
    path: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> Background:
        return cls(
            type=_str(_require(data, "type", "background"), "type"),
            path=data.get("path"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "path": self.path}


@dataclass
class Overlay:
    color: str
    opacity: float

    @classmethod
    def from_dict(cls, data: Any) -> Overlay:
        return cls(
            color=_str(_require(data, "color", "overlay"), "color"),
            opacity=_number(_require(data, "opacity", "overlay"), "opacity"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"color": self.color, "opacity": self.opacity}


# Optional reader fields: attribute name -> JSON key.
_READER_EXTRAS = {
    "text_color": "textColor",
    "font_family": "fontFamily",
    "font_size": "fontSize",
    "reading_mode": "readingMode",
    "glassmorphism": "glassmorphism",
    "glass_blur": "glassBlur",
    "scrollbar_track": "scrollbarTrack",
    "scrollbar_thumb": "scrollbarThumb",
}


@dataclass
class ReaderSettings:
    opacity: float
    background_color: str

    # Added in 2.0; absent in older presets.
    text_color: Optional[str] = None
    font_family: Optional[str] = None
    font_size: Optional[int] = None
    reading_mode: Optional[str] = None
    glassmorphism: Optional[bool] = None
    glass_blur: Optional[int] = None
    scrollbar_track: Optional[str] = None
    scrollbar_thumb: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> ReaderSettings:
        opacity = _number(_require(data, "opacity", "reader"), "opacity")
        bg = _str(_require(data, "backgroundColor", "reader"), "backgroundColor")
        extras = {attr: data.get(key) for attr, key in _READER_EXTRAS.items()}
        return cls(opacity=opacity, background_color=bg, **extras)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "opacity": self.opacity,
            "backgroundColor": self.background_color,
        }
        for attr, key in _READER_EXTRAS.items():
            out[key] = getattr(self, attr)
        return out


@dataclass
class Preset:
    version: str
    name: str
    background: Background
    overlay: Overlay
    reader: ReaderSettings
    author: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> Preset:
        return cls(
            version=_str(_require(data, "version", "preset"), "version"),
            name=_str(_require(data, "name", "preset"), "name"),
            background=Background.from_dict(_require(data, "background", "preset")),
            overlay=Overlay.from_dict(_require(data, "overlay", "preset")),
            reader=ReaderSettings.from_dict(_require(data, "reader", "preset")),
            author=data.get("author"),
            description=data.get("description"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "name": self.name,
            "author": self.author,
            "description": self.description,
            "background": self.background.to_dict(),
            "overlay": self.overlay.to_dict(),
            "reader": self.reader.to_dict(),
        }


def validate_preset(preset: Preset) -> None:
    """Only the schema version is checked, so newer optional fields pass."""
    if preset.version not in SUPPORTED_VERSIONS:
        raise ValidationError(
            "version", preset.version, f"Unsupported schema version: {preset.version}"
        )
