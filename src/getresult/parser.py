"""Assemble a ``GetResult`` from a token stream.

Entry points:

* ``parse_get_result(cursor)`` — standalone record; the next token must
  open the enclosing object.
* ``parse_get_result_embedded(cursor, index=None, doc_id=None)`` — the
  record's fields follow directly; the next token must be a field name.
  ``index``/``doc_id`` are defaults known from the outer context, the stream
  overrides them when it carries its own.
* ``parse_get_result_fields(cursor, index, doc_id)`` — as above, but the
  cursor is already positioned on the first field name.
* ``parse_get_result_json(data, options)`` — convenience over raw JSON.

Top-level vocabulary (exact, case-sensitive):

    _index _id _version _seq_no _primary_term found   scalars
    _source                                          object, copied as bytes
    fields                                           object of field records
    _ignored _ignored_source                         arrays, kept as meta fields

Any other scalar becomes a single-valued meta field. Any other object or
array is skipped whole, so producers can add nested content without breaking
readers. Null values are never recorded.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeAlias
from dataclasses import dataclass, field
from enum import StrEnum

from getresult.builder import ContentBuilder
from getresult.config import ParserOptions
from getresult.cursor import TokenCursor
from getresult.document_field import DocumentField
from getresult.errors import UnexpectedTokenError, ensure_expected_token
from getresult.get_result import (
    NOT_FOUND_VERSION,
    UNASSIGNED_PRIMARY_TERM,
    UNASSIGNED_SEQ_NO,
    GetResult,
)
from getresult.tokens import Token

log = logging.getLogger(__name__)

_DEFAULT_OPTIONS = ParserOptions()


class ResultKey(StrEnum):
    """Recognized top-level field names."""

    INDEX = "_index"
    ID = "_id"
    VERSION = "_version"
    SEQ_NO = "_seq_no"
    PRIMARY_TERM = "_primary_term"
    FOUND = "found"
    SOURCE = "_source"
    FIELDS = "fields"
    IGNORED = "_ignored"
    IGNORED_SOURCE = "_ignored_source"


_KEYS_BY_NAME: dict[str, ResultKey] = {key.value: key for key in ResultKey}

IGNORED_FIELD_KEYS: frozenset[ResultKey] = frozenset({
    ResultKey.IGNORED,
    ResultKey.IGNORED_SOURCE,
})


# ---------------------------------------------------------------------------
# Scratch state
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class _Scratch:
    """Per-call accumulator; discarded once the GetResult is built."""

    index: str | None
    doc_id: str | None
    version: int = NOT_FOUND_VERSION
    seq_no: int = UNASSIGNED_SEQ_NO
    primary_term: int = UNASSIGNED_PRIMARY_TERM
    found: bool | None = None
    source: bytes | None = None
    document_fields: dict[str, DocumentField] = field(default_factory=dict[str, DocumentField])
    meta_fields: dict[str, DocumentField] = field(default_factory=dict[str, DocumentField])

    def build(self) -> GetResult:
        return GetResult(
            index=self.index,
            id=self.doc_id,
            seq_no=self.seq_no,
            primary_term=self.primary_term,
            version=self.version,
            found=self.found,
            source=self.source,
            document_fields=self.document_fields,
            meta_fields=self.meta_fields,
        )


_Handler: TypeAlias = Callable[[_Scratch, TokenCursor, ParserOptions], None]


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

def _read_index(scratch: _Scratch, cursor: TokenCursor, options: ParserOptions) -> None:
    scratch.index = cursor.text()


def _read_id(scratch: _Scratch, cursor: TokenCursor, options: ParserOptions) -> None:
    scratch.doc_id = cursor.text()


def _read_version(scratch: _Scratch, cursor: TokenCursor, options: ParserOptions) -> None:
    scratch.version = cursor.long_value()


def _read_seq_no(scratch: _Scratch, cursor: TokenCursor, options: ParserOptions) -> None:
    scratch.seq_no = cursor.long_value()


def _read_primary_term(scratch: _Scratch, cursor: TokenCursor, options: ParserOptions) -> None:
    scratch.primary_term = cursor.long_value()


def _read_found(scratch: _Scratch, cursor: TokenCursor, options: ParserOptions) -> None:
    scratch.found = cursor.boolean_value()


def _copy_source(scratch: _Scratch, cursor: TokenCursor, options: ParserOptions) -> None:
    # whitespace and pretty printing of the input are not preserved
    with ContentBuilder(
        pretty=options.pretty_source,
        sort_keys=options.sort_source_keys,
    ) as builder:
        builder.copy_current_structure(cursor)
        scratch.source = builder.getvalue()


def _read_document_fields(scratch: _Scratch, cursor: TokenCursor, options: ParserOptions) -> None:
    while cursor.next_token() is not Token.END_OBJECT:
        doc_field = DocumentField.from_tokens(cursor)
        scratch.document_fields[doc_field.name] = doc_field


def _read_ignored_fields(scratch: _Scratch, cursor: TokenCursor, options: ParserOptions) -> None:
    name = str(cursor.current_name)
    scratch.meta_fields[name] = DocumentField(name=name, values=tuple(cursor.list()))


_SCALAR_HANDLERS: dict[ResultKey, _Handler] = {
    ResultKey.INDEX: _read_index,
    ResultKey.ID: _read_id,
    ResultKey.VERSION: _read_version,
    ResultKey.SEQ_NO: _read_seq_no,
    ResultKey.PRIMARY_TERM: _read_primary_term,
    ResultKey.FOUND: _read_found,
}

_OBJECT_HANDLERS: dict[ResultKey, _Handler] = {
    ResultKey.SOURCE: _copy_source,
    ResultKey.FIELDS: _read_document_fields,
}

_ARRAY_HANDLERS: dict[ResultKey, _Handler] = {
    ResultKey.IGNORED: _read_ignored_fields,
    ResultKey.IGNORED_SOURCE: _read_ignored_fields,
}


def _mismatch(cursor: TokenCursor, name: str, expected: str) -> UnexpectedTokenError:
    token = cursor.current_token
    found = "END_OF_STREAM" if token is None else token.name
    return UnexpectedTokenError.at(
        cursor, f"Field [{name}] expects {expected} but found [{found}]"
    )


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def _on_value(scratch: _Scratch, name: str, cursor: TokenCursor, options: ParserOptions) -> None:
    key = _KEYS_BY_NAME.get(name)
    if key is None or key in IGNORED_FIELD_KEYS:
        if not name:
            log.debug("Skipping value with an empty field name")
            return
        scratch.meta_fields[name] = DocumentField(name=name, values=(cursor.object_text(),))
        return
    handler = _SCALAR_HANDLERS.get(key)
    if handler is None:
        raise _mismatch(cursor, name, "an object")
    handler(scratch, cursor, options)


def _on_object(scratch: _Scratch, name: str, cursor: TokenCursor, options: ParserOptions) -> None:
    key = _KEYS_BY_NAME.get(name)
    if key is not None:
        handler = _OBJECT_HANDLERS.get(key)
        if handler is not None:
            handler(scratch, cursor, options)
            return
        if key in _SCALAR_HANDLERS:
            raise _mismatch(cursor, name, "a value")
    log.debug("Skipping object under unknown field [%s]", name)
    cursor.skip_children()


def _on_array(scratch: _Scratch, name: str, cursor: TokenCursor, options: ParserOptions) -> None:
    key = _KEYS_BY_NAME.get(name)
    if key is not None:
        handler = _ARRAY_HANDLERS.get(key)
        if handler is not None:
            handler(scratch, cursor, options)
            return
        raise _mismatch(cursor, name, "a value" if key in _SCALAR_HANDLERS else "an object")
    log.debug("Skipping array under unknown field [%s]", name)
    cursor.skip_children()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_get_result_fields(
    cursor: TokenCursor,
    index: str | None,
    doc_id: str | None,
    *,
    options: ParserOptions | None = None,
) -> GetResult:
    """Assemble a GetResult from the field sequence under the cursor.

    The cursor must be on the first ``FIELD_NAME`` of the record and ends on
    the ``END_OBJECT`` that closes it.
    """
    ensure_expected_token(Token.FIELD_NAME, cursor.current_token, cursor)
    opts = options or _DEFAULT_OPTIONS
    scratch = _Scratch(index=index, doc_id=doc_id)
    current_name = str(cursor.current_name)
    while (token := cursor.next_token()) is not Token.END_OBJECT:
        if token is None:
            raise UnexpectedTokenError.at(
                cursor, "Unexpected end of stream while reading get result"
            )
        if token is Token.FIELD_NAME:
            current_name = str(cursor.current_name)
        elif token.is_value:
            _on_value(scratch, current_name, cursor, opts)
        elif token is Token.START_OBJECT:
            _on_object(scratch, current_name, cursor, opts)
        elif token is Token.START_ARRAY:
            _on_array(scratch, current_name, cursor, opts)
    result = scratch.build()
    log.debug(
        "Assembled get result index=%s id=%s found=%s (%d document fields, %d meta fields)",
        result.index,
        result.id,
        result.found,
        len(result.document_fields),
        len(result.meta_fields),
    )
    return result


def parse_get_result_embedded(
    cursor: TokenCursor,
    index: str | None = None,
    doc_id: str | None = None,
    *,
    options: ParserOptions | None = None,
) -> GetResult:
    """Advance onto the record's first field name, then assemble."""
    token = cursor.next_token()
    ensure_expected_token(Token.FIELD_NAME, token, cursor)
    return parse_get_result_fields(cursor, index, doc_id, options=options)


def parse_get_result(
    cursor: TokenCursor,
    *,
    options: ParserOptions | None = None,
) -> GetResult:
    """Assemble a standalone record wrapped in its own object."""
    token = cursor.next_token()
    ensure_expected_token(Token.START_OBJECT, token, cursor)
    return parse_get_result_embedded(cursor, options=options)


def parse_get_result_json(
    data: str | bytes | bytearray,
    options: ParserOptions | None = None,
) -> GetResult:
    """Parse one JSON-encoded get result; trailing content is rejected."""
    opts = options or _DEFAULT_OPTIONS
    cursor = TokenCursor.from_options(data, opts)
    result = parse_get_result(cursor, options=opts)
    cursor.next_token()
    return result
