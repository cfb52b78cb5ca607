"""epubreader - local library, presets and preferences for an EPUB reader."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from ebooklib import epub

from epubreader.config import AppConfig, load_config
from epubreader.errors import StoreError
from epubreader.library.covers import CoverExtractor
from epubreader.library.models import Book
from epubreader.library.store import LibraryStore
from epubreader.preferences import PreferenceStore
from epubreader.presets.store import BackgroundStore, PresetStore

log = logging.getLogger(__name__)

RECENT_LIMIT = 10


class ReaderServices:
    """All stores, built from one config."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self.covers = CoverExtractor(config.covers_dir)
        self.library = LibraryStore(config, cover_extractor=self.covers)
        self.presets = PresetStore(config)
        self.backgrounds = BackgroundStore(config)
        self.preferences = PreferenceStore(config)


def _get_meta(book: epub.EpubBook, field: str) -> str:
    values = book.get_metadata("DC", field)
    if values:
        val = values[0]
        if isinstance(val, tuple):
            return str(val[0]) if val[0] else ""
        return str(val)
    return ""


def read_title_author(file_path: Path) -> tuple[str, str]:
    """Title and author from the EPUB's Dublin Core metadata."""
    try:
        book = epub.read_epub(str(file_path), options={"ignore_ncx": True})
    except Exception as e:
        log.warning("Could not read metadata from %s: %s", file_path, e)
        return file_path.stem, "Unknown"
    title = _get_meta(book, "title") or file_path.stem
    author = _get_meta(book, "creator") or "Unknown"
    return title, author


def import_file(services: ReaderServices, file_path_str: str) -> Optional[Book]:
    file_path = Path(file_path_str).expanduser().resolve()
    if not file_path.exists():
        print(f"File not found: {file_path}", file=sys.stderr)
        return None
    title, author = read_title_author(file_path)
    return services.library.add_or_touch(str(file_path), title, author)


def _format_book(book: Book) -> str:
    opened = book.last_opened.strftime("%Y-%m-%d %H:%M")
    return f"{opened}  {book.progress * 100:5.1f}%  {book.title} - {book.author}"


def setup_logging(config: AppConfig) -> None:
    config.log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(config.log_path, encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root = logging.getLogger("epubreader")
    root.setLevel(getattr(logging, config.log_level, logging.INFO))
    root.addHandler(handler)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    config = load_config()
    setup_logging(config)
    services = ReaderServices(config)

    try:
        if args:
            book = import_file(services, args[0])
            if book is None:
                return 1
            print(f"Opened: {book.title}")
        for book in services.library.list_recent(RECENT_LIMIT):
            print(_format_book(book))
    except StoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
