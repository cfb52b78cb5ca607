"""JSON file helpers shared by the stores."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from epubreader.errors import ParseError, StoreIOError


def read_json(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise StoreIOError("read", path, e) from e
    except UnicodeDecodeError as e:
        raise ParseError(f"not valid UTF-8: {e}", path) from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"invalid JSON: {e}", path) from e


def write_json(path: Path, data: Any) -> None:
    """Write ``data`` as pretty-printed JSON, replacing ``path`` atomically.

    The payload goes to a temporary file next to the target which is then
    renamed over it, so an interrupted write never leaves a truncated file.
    """
    payload = json.dumps(data, indent=2, ensure_ascii=False)
    tmp_name: Optional[str] = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            delete=False,
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
        ) as f:
            tmp_name = f.name
            f.write(payload)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
        raise StoreIOError("write", path, e) from e


def write_bytes(path: Path, data: bytes) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise StoreIOError("write", path, e) from e
