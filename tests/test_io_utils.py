"""Tests for getresult.io_utils."""

from pathlib import Path

import orjson

from getresult.io_utils import dumps_json, read_payloads, save_json


def test_read_payloads_whole_file(tmp_path: Path) -> None:
    path = tmp_path / "one.json"
    path.write_bytes(b'{"_id": "1"}\n')
    assert read_payloads(path) == [b'{"_id": "1"}\n']


def test_read_payloads_jsonl_skips_blank_lines(tmp_path: Path) -> None:
    path = tmp_path / "many.jsonl"
    path.write_bytes(b'{"_id": "1"}\n\n  \n{"_id": "2"}\n')
    assert read_payloads(path, jsonl=True) == [b'{"_id": "1"}', b'{"_id": "2"}']


def test_dumps_json_sorts_keys() -> None:
    assert dumps_json({"b": 1, "a": [1]}, pretty=False) == '{"a":[1],"b":1}'


def test_save_json_creates_parents(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "report.json"
    save_json({"parsed": 1}, path)
    assert orjson.loads(path.read_bytes()) == {"parsed": 1}
    assert path.read_text(encoding="utf-8").endswith("\n")
