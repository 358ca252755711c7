"""Parser options, loadable from a JSON file.

Example ``parser_options.json``::

    {
        "max_depth": 32,
        "allow_duplicate_keys": false,
        "pretty_source": true
    }

Unknown keys are rejected so that a typo does not silently fall back to a
default.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import orjson

from getresult.cursor import DEFAULT_MAX_DEPTH


@dataclass(frozen=True, slots=True)
class ParserOptions:
    """Knobs for the token cursor and for source re-serialization."""

    max_depth: int = DEFAULT_MAX_DEPTH   # nesting limit enforced by the cursor
    allow_duplicate_keys: bool = True    # False: a repeated key is a syntax error
    pretty_source: bool = False          # indent the captured _source bytes
    sort_source_keys: bool = False       # sort keys in the captured _source bytes

    def __post_init__(self) -> None:
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            raise ValueError(f"max_depth must be an int, got {self.max_depth!r}")
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ParserOptions:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown parser option(s): {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_json(cls, path: Path) -> ParserOptions:
        """Load from a parser_options.json file."""
        data = orjson.loads(path.read_bytes())
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object, got {type(data).__name__}")
        return cls.from_dict(data)
