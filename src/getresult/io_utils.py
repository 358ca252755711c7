"""I/O utilities for JSON and JSONL payloads.

Payloads are handed around as raw bytes so the token cursor sees exactly
what was on disk; only reports are encoded here, with orjson.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson


def read_payloads(path: Path, *, jsonl: bool = False) -> list[bytes]:
    """Return the file as one payload, or one payload per line for JSONL.

    Blank JSONL lines are skipped.
    """
    raw = path.read_bytes()
    if not jsonl:
        return [raw]
    payloads: list[bytes] = []
    for line in raw.split(b"\n"):
        line = line.strip()
        if line:
            payloads.append(line)
    return payloads


def dumps_json(obj: Any, *, pretty: bool = True) -> str:
    opts = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS if pretty else orjson.OPT_SORT_KEYS
    return orjson.dumps(obj, option=opts).decode("utf-8")


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    """Save an object as JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_json(obj, pretty=pretty) + "\n", encoding="utf-8")
