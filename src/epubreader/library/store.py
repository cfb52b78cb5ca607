"""JSON-file library: books, recency and reading progress."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from epubreader.config import AppConfig
from epubreader.errors import NotFoundError, ParseError
from epubreader.storage import read_json, write_json

from .covers import CoverExtractor
from .models import Book, Library, utcnow

log = logging.getLogger(__name__)


class LibraryStore:
    def __init__(
        self,
        config: AppConfig,
        cover_extractor: Optional[CoverExtractor] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._path = config.library_path
        self._covers = cover_extractor or CoverExtractor(config.covers_dir)
        self._clock = clock
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    # ── File access ────────────────────────────────────────

    def _load(self) -> Library:
        """Read library.json; an absent file is an empty library."""
        if not self._path.exists():
            return Library()
        data = read_json(self._path)
        try:
            return Library.from_dict(data)
        except ParseError as e:
            raise ParseError(str(e), self._path) from e

    def _save(self, library: Library) -> None:
        write_json(self._path, library.to_dict())

    # ── Books ──────────────────────────────────────────────

    def add_or_touch(self, path: str, title: str, author: str) -> Book:
        """Add a book, or mark an existing one as just opened.

        The id is derived from ``path`` so re-adding a file never creates a
        second entry. An existing entry keeps its title and author; only
        ``last_opened`` and, if a cover was extracted, ``cover_path`` change.
        """
        book_id = Book.make_id(path)
        with self._lock:
            # Load first so a corrupt library fails before any cover is written.
            library = self._load()
            cover_path = self._covers.extract(path, book_id)

            book = library.find(book_id)
            if book is not None:
                book.last_opened = self._clock()
                if cover_path is not None:
                    book.cover_path = cover_path
            else:
                book = Book(
                    id=book_id,
                    title=title,
                    author=author,
                    file_path=path,
                    cover_path=cover_path,
                    last_opened=self._clock(),
                )
                library.books.append(book)
                log.info("Added book %s (%s)", book_id, path)

            self._save(library)
            return book

    def get(self, book_id: str) -> Optional[Book]:
        with self._lock:
            return self._load().find(book_id)

    def list_recent(self, limit: int) -> list[Book]:
        with self._lock:
            library = self._load()
        books = sorted(library.books, key=lambda b: b.last_opened, reverse=True)
        return books[: max(limit, 0)]

    def remove(self, book_id: str) -> None:
        with self._lock:
            if not self._path.exists():
                raise NotFoundError("book", book_id)
            library = self._load()
            book = library.find(book_id)
            if book is None:
                raise NotFoundError("book", book_id)

            if book.cover_path:
                try:
                    Path(book.cover_path).unlink()
                except OSError as e:
                    log.warning("Could not delete cover %s: %s", book.cover_path, e)

            library.books = [b for b in library.books if b.id != book_id]
            self._save(library)
            log.info("Removed book %s", book_id)

    # ── Reading Progress ───────────────────────────────────

    def get_progress_marker(self, book_id: str) -> Optional[str]:
        with self._lock:
            book = self._load().find(book_id)
        return book.cfi if book else None

    def update_progress(self, book_id: str, progress: float, cfi: str) -> None:
        """Record the reading position. Unknown ids are ignored."""
        with self._lock:
            library = self._load()
            book = library.find(book_id)
            if book is None:
                log.debug("Ignoring progress update for unknown book %s", book_id)
                return
            book.progress = progress
            book.cfi = cfi
            book.last_opened = self._clock()
            self._save(library)
