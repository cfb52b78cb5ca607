"""Configuration: the storage root and the paths derived from it."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

APP_DIR_NAME = ".epub-reader"


def _default_root() -> Path:
    return Path.home() / APP_DIR_NAME


@dataclass
class AppConfig:
    # Paths
    root_dir: Path = field(default_factory=_default_root)
    library_path: Path = field(init=False)
    preferences_path: Path = field(init=False)
    presets_dir: Path = field(init=False)
    backgrounds_dir: Path = field(init=False)
    covers_dir: Path = field(init=False)
    log_path: Path = field(init=False)

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.root_dir = Path(self.root_dir)
        self.library_path = self.root_dir / "library.json"
        self.preferences_path = self.root_dir / "preferences.json"
        self.presets_dir = self.root_dir / "presets"
        self.backgrounds_dir = self.root_dir / "media" / "backgrounds"
        self.covers_dir = self.root_dir / "cache" / "covers"
        self.log_path = self.root_dir / "epubreader.log"


def load_config(env_path: Optional[Path] = None) -> AppConfig:
    """Load config from .env file. Searches CWD then the app dir."""
    search_paths = [
        env_path,
        Path.cwd() / ".env",
        _default_root() / ".env",
    ]
    for p in search_paths:
        if p and p.exists():
            load_dotenv(p)
            break

    defaults = AppConfig()
    root = os.getenv("EPUB_READER_HOME")
    return AppConfig(
        root_dir=Path(root).expanduser() if root else defaults.root_dir,
        log_level=os.getenv("EPUB_READER_LOG_LEVEL", defaults.log_level).upper(),
    )
