"""Tests for configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from epubreader.config import AppConfig, load_config


class TestAppConfig:
    def test_default_root_under_home(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("HOME", str(tmp_path))
        config = AppConfig()
        assert config.root_dir == Path.home() / ".epub-reader"

    def test_derived_paths(self, tmp_path: Path):
        config = AppConfig(root_dir=tmp_path)
        assert config.library_path == tmp_path / "library.json"
        assert config.preferences_path == tmp_path / "preferences.json"
        assert config.presets_dir == tmp_path / "presets"
        assert config.backgrounds_dir == tmp_path / "media" / "backgrounds"
        assert config.covers_dir == tmp_path / "cache" / "covers"

    def test_does_not_create_dirs(self, tmp_path: Path):
        AppConfig(root_dir=tmp_path / "root")
        assert not (tmp_path / "root").exists()

    def test_accepts_str_root(self, tmp_path: Path):
        config = AppConfig(root_dir=str(tmp_path))  # type: ignore[arg-type]
        assert config.library_path == tmp_path / "library.json"


class TestLoadConfig:
    @pytest.fixture(autouse=True)
    def _clean_env(self, monkeypatch):
        # load_dotenv writes into os.environ; register both names so that
        # teardown restores them whatever the test loads.
        for name in ("EPUB_READER_HOME", "EPUB_READER_LOG_LEVEL"):
            monkeypatch.setenv(name, "")
            monkeypatch.delenv(name)

    def test_load_from_env_file(self, tmp_path: Path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text(
            f"EPUB_READER_HOME={tmp_path / 'custom'}\n"
            "EPUB_READER_LOG_LEVEL=debug\n"
        )
        config = load_config(env_path=env_file)
        assert config.root_dir == tmp_path / "custom"
        assert config.library_path == tmp_path / "custom" / "library.json"
        assert config.log_level == "DEBUG"

    def test_defaults_without_overrides(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.chdir(tmp_path)
        env_file = tmp_path / "empty.env"
        env_file.write_text("")
        config = load_config(env_path=env_file)
        assert config.root_dir == tmp_path / ".epub-reader"
        assert config.log_level == "INFO"
