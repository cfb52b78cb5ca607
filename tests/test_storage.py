"""Tests for the JSON file helpers."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from epubreader.errors import ParseError, StoreIOError
from epubreader.storage import read_json, write_json


def test_write_creates_parent_and_pretty_prints(tmp_path: Path):
    target = tmp_path / "a" / "b" / "data.json"
    write_json(target, {"books": []})
    text = target.read_text(encoding="utf-8")
    assert json.loads(text) == {"books": []}
    assert "\n" in text


def test_write_leaves_no_temp_files(tmp_path: Path):
    target = tmp_path / "data.json"
    write_json(target, {"x": 1})
    write_json(target, {"x": 2})
    assert [p.name for p in tmp_path.iterdir()] == ["data.json"]
    assert read_json(target) == {"x": 2}


def test_read_missing_is_io_error(tmp_path: Path):
    with pytest.raises(StoreIOError) as exc:
        read_json(tmp_path / "nope.json")
    assert exc.value.path == tmp_path / "nope.json"
    assert exc.value.action == "read"
    assert isinstance(exc.value.cause, OSError)


def test_read_malformed_is_parse_error(tmp_path: Path):
    target = tmp_path / "bad.json"
    target.write_text("{not json")
    with pytest.raises(ParseError) as exc:
        read_json(target)
    assert exc.value.path == target


def test_write_into_file_path_is_io_error(tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    with pytest.raises(StoreIOError):
        write_json(blocker / "data.json", {})


def test_read_non_utf8_is_parse_error(tmp_path: Path):
    target = tmp_path / "bad.json"
    target.write_bytes(b'{"x": "\xff\xfe"}')
    with pytest.raises(ParseError) as exc:
        read_json(target)
    assert exc.value.path == target
