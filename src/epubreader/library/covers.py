"""Cover image extraction for library entries.

A document exposes a resource index (id -> bytes + MIME type) and, where
its packaging declares one, cover metadata. EPUB files in the wild are
inconsistent about how they mark their cover, so several strategies are
tried in order and the first one that yields an image wins:

1. the manifest item the document flags as its cover,
2. the resource named by the ``<meta name="cover">`` identifier,
3. a handful of conventional resource ids ("cover", "cover-image", ...),
4. the first resource with an ``image/*`` MIME type.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Iterable, Optional

import ebooklib
from ebooklib import epub

from epubreader.errors import StoreIOError
from epubreader.storage import write_bytes

log = logging.getLogger(__name__)

CoverData = tuple[bytes, str]  # (image bytes, MIME type)
Strategy = Callable[["CoverDocument"], Optional[CoverData]]

CONVENTIONAL_COVER_IDS = ("cover-image", "cover", "Cover", "CoverImage", "coverimage")

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}


class CoverDocument(ABC):
    """Resource index of an opened document."""

    def get_cover(self) -> Optional[CoverData]:
        """Cover declared directly by the document's metadata, if any."""
        return None

    def get_cover_id(self) -> Optional[str]:
        """Resource id the document names as its cover, if any."""
        return None

    @abstractmethod
    def get_resource(self, resource_id: str) -> Optional[CoverData]:
        """Return (bytes, MIME type) for a resource id, or None."""

    @abstractmethod
    def resources(self) -> dict[str, str]:
        """Map of every resource id to its MIME type, in manifest order."""


class EpubDocument(CoverDocument):
    """CoverDocument backed by an ebooklib ``EpubBook``."""

    def __init__(self, book: epub.EpubBook) -> None:
        self._book = book

    def get_cover(self) -> Optional[CoverData]:
        for item in self._book.get_items_of_type(ebooklib.ITEM_COVER):
            media_type = item.media_type or ""
            content = item.get_content()
            if content and media_type.startswith("image/"):
                return content, media_type
        return None

    def get_cover_id(self) -> Optional[str]:
        # <meta name="cover" content="..."/> may be filed under the OPF
        # namespace or under None depending on how the package was read.
        for by_name in self._book.metadata.values():
            for entries in by_name.values():
                for _value, attrs in entries:
                    attrs = attrs or {}
                    if attrs.get("name") == "cover" and attrs.get("content"):
                        return attrs["content"]
        return None

    def get_resource(self, resource_id: str) -> Optional[CoverData]:
        item = self._book.get_item_with_id(resource_id)
        if item is None:
            return None
        return item.get_content(), item.media_type or ""

    def resources(self) -> dict[str, str]:
        return {
            item.get_id(): item.media_type or ""
            for item in self._book.get_items()
            if item.get_id()
        }


def open_epub(path: str) -> CoverDocument:
    return EpubDocument(epub.read_epub(path, options={"ignore_ncx": True}))


# ── Strategies ─────────────────────────────────────────


def direct_cover(doc: CoverDocument) -> Optional[CoverData]:
    return doc.get_cover()


def cover_by_id(doc: CoverDocument) -> Optional[CoverData]:
    cover_id = doc.get_cover_id()
    if not cover_id:
        return None
    return doc.get_resource(cover_id)


def conventional_ids(doc: CoverDocument) -> Optional[CoverData]:
    for cid in CONVENTIONAL_COVER_IDS:
        found = doc.get_resource(cid)
        if found is not None:
            return found
    return None


def first_image(doc: CoverDocument) -> Optional[CoverData]:
    for rid, mime in doc.resources().items():
        if mime.startswith("image/"):
            found = doc.get_resource(rid)
            if found is not None:
                return found
    return None


STRATEGIES: tuple[Strategy, ...] = (
    direct_cover,
    cover_by_id,
    conventional_ids,
    first_image,
)


def first_success(
    strategies: Iterable[Strategy], doc: CoverDocument
) -> Optional[CoverData]:
    """Run strategies in order and return the first non-None result."""
    for strategy in strategies:
        result = strategy(doc)
        if result is not None:
            log.debug("Cover found by %s (%s)", strategy.__name__, result[1])
            return result
        log.debug("Cover strategy %s found nothing", strategy.__name__)
    return None


def find_cover(doc: CoverDocument) -> Optional[CoverData]:
    return first_success(STRATEGIES, doc)


def extension_for(mime: str) -> str:
    return _EXTENSIONS.get(mime, "jpg")


class CoverExtractor:
    """Finds a document's cover and saves it as ``<covers_dir>/<book_id>.<ext>``.

    Nothing here raises: a document that cannot be opened, has no image,
    or whose cover cannot be written simply yields no cover.

    A book re-extracted with a different image type gets a file with a new
    extension; the old file is left behind.
    """

    def __init__(
        self,
        covers_dir: Path,
        opener: Callable[[str], CoverDocument] = open_epub,
    ) -> None:
        self._covers_dir = covers_dir
        self._opener = opener

    def extract(self, path: str, book_id: str) -> Optional[str]:
        try:
            doc = self._opener(path)
        except Exception as e:
            log.warning("Failed to open %s for cover extraction: %s", path, e)
            return None

        found = find_cover(doc)
        if found is None:
            log.info("No cover image found in %s", path)
            return None
        return self.save(book_id, *found)

    def save(self, book_id: str, data: bytes, mime: str) -> Optional[str]:
        cover_file = self._covers_dir / f"{book_id}.{extension_for(mime)}"
        try:
            write_bytes(cover_file, data)
        except StoreIOError as e:
            log.warning("Failed to write cover: %s", e)
            return None
        log.info("Cover saved: %s", cover_file)
        return str(cover_file.resolve())
