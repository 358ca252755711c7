"""The assembled document retrieval result.

A ``GetResult`` is immutable: both field maps are exposed as read-only
views and the captured source is a ``bytes`` object. Absent numeric
attributes carry sentinel values rather than None:

  seq_no        UNASSIGNED_SEQ_NO (-2)
  primary_term  UNASSIGNED_PRIMARY_TERM (0)
  version       NOT_FOUND_VERSION (-1)

Writers never emit these for a stored document (sequence numbers start at 0,
primary terms and versions at 1), so a sentinel always means "absent".
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

import orjson

from getresult.document_field import DocumentField

UNASSIGNED_SEQ_NO = -2
UNASSIGNED_PRIMARY_TERM = 0
NOT_FOUND_VERSION = -1


def _frozen_fields(
    fields_by_name: Mapping[str, DocumentField],
    label: str,
) -> Mapping[str, DocumentField]:
    for name in fields_by_name:
        if not name:
            raise ValueError(f"{label} cannot contain an empty field name")
    return MappingProxyType(dict(fields_by_name))


@dataclass(frozen=True, slots=True)
class GetResult:
    """One document as returned by a get/lookup response."""

    index: str | None
    id: str | None
    seq_no: int = UNASSIGNED_SEQ_NO
    primary_term: int = UNASSIGNED_PRIMARY_TERM
    version: int = NOT_FOUND_VERSION
    found: bool | None = None
    source: bytes | None = None
    document_fields: Mapping[str, DocumentField] = field(default_factory=dict)
    meta_fields: Mapping[str, DocumentField] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "document_fields", _frozen_fields(self.document_fields, "document_fields"),
        )
        object.__setattr__(
            self, "meta_fields", _frozen_fields(self.meta_fields, "meta_fields"),
        )

    @property
    def exists(self) -> bool:
        """True only when the response said ``"found": true``."""
        return self.found is True

    @property
    def is_source_empty(self) -> bool:
        return self.source is None

    def source_as_string(self) -> str | None:
        if self.source is None:
            return None
        return self.source.decode("utf-8")

    def source_as_map(self) -> dict[str, Any] | None:
        """Decode the captured source back into Python objects."""
        if self.source is None:
            return None
        return orjson.loads(self.source)

    @property
    def fields(self) -> Mapping[str, DocumentField]:
        """Meta fields and document fields in one view.

        Document fields win when a name exists in both maps.
        """
        merged = dict(self.meta_fields)
        merged.update(self.document_fields)
        return MappingProxyType(merged)

    def get_field(self, name: str) -> DocumentField | None:
        found = self.document_fields.get(name)
        if found is None:
            found = self.meta_fields.get(name)
        return found
