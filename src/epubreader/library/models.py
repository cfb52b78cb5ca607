"""Data models for the book library."""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from epubreader.errors import ParseError

_FRACTION_RE = re.compile(r"\.(\d{6})\d+")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 timestamp. Sub-microsecond digits are dropped."""
    text = _FRACTION_RE.sub(r".\1", value.strip())
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _optional_str(data: dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ParseError(f"book field '{key}' must be a string or null")
    return value


@dataclass
class Book:
    id: str  # md5 of file path
    title: str
    author: str
    file_path: str
    cover_path: Optional[str] = None
    last_opened: datetime = field(default_factory=utcnow)
    progress: float = 0.0  # 0.0 - 1.0, not clamped
    cfi: Optional[str] = None  # set once progress has been saved

    @staticmethod
    def make_id(file_path: str) -> str:
        return hashlib.md5(file_path.encode("utf-8")).hexdigest()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "filePath": self.file_path,
            "coverPath": self.cover_path,
            "lastOpened": format_timestamp(self.last_opened),
            "progress": self.progress,
            "cfi": self.cfi,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Book:
        if not isinstance(data, dict):
            raise ParseError(f"book entry must be an object, got {type(data).__name__}")
        try:
            return cls(
                id=str(data["id"]),
                title=str(data["title"]),
                author=str(data["author"]),
                file_path=str(data["filePath"]),
                cover_path=_optional_str(data, "coverPath"),
                last_opened=parse_timestamp(data["lastOpened"]),
                progress=float(data["progress"]),
                cfi=_optional_str(data, "cfi"),
            )
        except KeyError as e:
            raise ParseError(f"book entry is missing field {e.args[0]!r}") from e
        except (TypeError, ValueError, AttributeError) as e:
            raise ParseError(f"malformed book entry: {e}") from e


@dataclass
class Library:
    """Contents of ``library.json``."""

    books: list[Book] = field(default_factory=list)
    # Top-level keys we do not model (older files carry "collections"/"tags").
    extra: dict[str, Any] = field(default_factory=dict)

    def find(self, book_id: str) -> Optional[Book]:
        for book in self.books:
            if book.id == book_id:
                return book
        return None

    def to_dict(self) -> dict[str, Any]:
        data = dict(self.extra)
        data["books"] = [b.to_dict() for b in self.books]
        return data

    @classmethod
    def from_dict(cls, data: Any) -> Library:
        if not isinstance(data, dict):
            raise ParseError("library must be a JSON object")
        raw_books = data.get("books")
        if not isinstance(raw_books, list):
            raise ParseError("library is missing the 'books' list")
        extra = {k: v for k, v in data.items() if k != "books"}
        return cls(books=[Book.from_dict(b) for b in raw_books], extra=extra)
