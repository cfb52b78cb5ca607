"""Shared fixtures for tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import pytest
from ebooklib import epub

from epubreader.config import AppConfig
from epubreader.library.covers import CoverData, CoverDocument, CoverExtractor
from epubreader.library.store import LibraryStore
from epubreader.preferences import PreferenceStore
from epubreader.presets.store import PresetStore

PNG_BYTES = b"\x89PNG\r\n\x1a\n fake png"
JPEG_BYTES = b"\xff\xd8\xff\xe0 fake jpeg"


class FakeDocument(CoverDocument):
    """In-memory resource index."""

    def __init__(
        self,
        resources: Optional[dict[str, CoverData]] = None,
        cover: Optional[CoverData] = None,
        cover_id: Optional[str] = None,
    ) -> None:
        self._resources = resources or {}
        self._cover = cover
        self._cover_id = cover_id
        self.lookups: list[str] = []

    def get_cover(self) -> Optional[CoverData]:
        return self._cover

    def get_cover_id(self) -> Optional[str]:
        return self._cover_id

    def get_resource(self, resource_id: str) -> Optional[CoverData]:
        self.lookups.append(resource_id)
        return self._resources.get(resource_id)

    def resources(self) -> dict[str, str]:
        return {rid: mime for rid, (_, mime) in self._resources.items()}


class FakeClock:
    """Returns a strictly increasing UTC time on every call."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def config(tmp_path: Path) -> AppConfig:
    return AppConfig(root_dir=tmp_path / "app")


@pytest.fixture
def documents() -> dict[str, CoverDocument]:
    """Documents the fake opener can open, keyed by path."""
    return {}


@pytest.fixture
def extractor(config: AppConfig, documents: dict[str, CoverDocument]) -> CoverExtractor:
    def opener(path: str) -> CoverDocument:
        if path not in documents:
            raise FileNotFoundError(path)
        return documents[path]

    return CoverExtractor(config.covers_dir, opener=opener)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def library(config: AppConfig, extractor: CoverExtractor, clock: FakeClock) -> LibraryStore:
    return LibraryStore(config, cover_extractor=extractor, clock=clock)


@pytest.fixture
def presets(config: AppConfig) -> PresetStore:
    return PresetStore(config)


@pytest.fixture
def preferences(config: AppConfig) -> PreferenceStore:
    return PreferenceStore(config)


def write_epub(
    path: Path, cover: Optional[bytes] = None, image: Optional[bytes] = None
) -> None:
    """Write a one-chapter EPUB, optionally with a declared cover or a loose image."""
    book = epub.EpubBook()
    book.set_identifier("test-id")
    book.set_title("Test Title")
    book.set_language("en")
    book.add_author("Test Author")
    if cover is not None:
        book.set_cover("cover.jpg", cover)
    if image is not None:
        book.add_item(
            epub.EpubImage(
                uid="fig-1",
                file_name="images/fig1.png",
                media_type="image/png",
                content=image,
            )
        )
    ch = epub.EpubHtml(title="Intro", file_name="chap_01.xhtml", lang="en")
    ch.content = "<h1>Intro</h1><p>Hello.</p>"
    book.add_item(ch)
    book.toc = (epub.Link("chap_01.xhtml", "Intro", "intro"),)
    book.add_item(epub.EpubNcx())
    book.add_item(epub.EpubNav())
    book.spine = ["nav", ch]
    epub.write_epub(str(path), book, {})
