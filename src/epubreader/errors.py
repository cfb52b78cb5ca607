"""Error types raised by the stores."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional


class StoreError(Exception):
    """Base for all store failures."""


class StoreIOError(StoreError):
    def __init__(self, action: str, path: Path, cause: OSError) -> None:
        super().__init__(f"Failed to {action} {path}: {cause}")
        self.action = action
        self.path = path
        self.cause = cause


class ParseError(StoreError):
    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
        self.path = path


class ValidationError(StoreError):
    def __init__(self, field: str, value: Any, message: str = "") -> None:
        super().__init__(message or f"Invalid {field}: {value!r}")
        self.field = field
        self.value = value


class NotFoundError(StoreError):
    def __init__(self, kind: str, key: str) -> None:
        super().__init__(f"{kind.capitalize()} '{key}' not found")
        self.kind = kind
        self.key = key
