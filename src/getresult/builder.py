"""Scoped byte buffer for structural copies of a token stream.

``ContentBuilder`` reads the complete structure under the cursor and writes
it back out as JSON bytes. Formatting of the input is not preserved, only
its structure: whitespace is normalized and, with ``sort_keys``, key order
too.

The buffer is owned by the builder and released by ``close()``; use the
builder as a context manager so the release happens on every exit path::

    with ContentBuilder() as builder:
        builder.copy_current_structure(cursor)
        source = builder.getvalue()
"""

from __future__ import annotations

import io
from types import TracebackType
from typing import Any

import orjson

from getresult.cursor import TokenCursor
from getresult.errors import ParsingError, UnexpectedTokenError, ensure_expected_token
from getresult.tokens import Token


class ContentBuilder:
    """JSON byte buffer fed from a token cursor."""

    def __init__(self, *, pretty: bool = False, sort_keys: bool = False) -> None:
        self._option = 0
        if pretty:
            self._option |= orjson.OPT_INDENT_2
        if sort_keys:
            self._option |= orjson.OPT_SORT_KEYS
        self._buffer: io.BytesIO | None = io.BytesIO()

    def __enter__(self) -> ContentBuilder:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._buffer is None

    def _require_buffer(self) -> io.BytesIO:
        if self._buffer is None:
            raise ValueError("ContentBuilder is closed")
        return self._buffer

    def copy_current_structure(self, cursor: TokenCursor) -> None:
        """Append the value under the cursor, advancing past all of it.

        Objects and arrays are copied with every descendant; the cursor ends
        on their closing token. Scalars are copied as-is. Numbers keep their
        source text, so wide integers and out-of-range exponents survive.
        """
        buffer = self._require_buffer()
        token = cursor.current_token
        if token is None or not (token.is_start or token.is_value or token is Token.VALUE_NULL):
            name = "END_OF_STREAM" if token is None else token.name
            raise UnexpectedTokenError.at(
                cursor, f"Cannot copy structure starting at token [{name}]"
            )
        value = _read_tree(cursor)
        try:
            buffer.write(orjson.dumps(value, option=self._option or None))
        except orjson.JSONEncodeError as exc:
            raise ParsingError.at(cursor, f"Failed to copy structure: {exc}") from None

    def getvalue(self) -> bytes:
        """Everything written so far."""
        return self._require_buffer().getvalue()

    def close(self) -> None:
        if self._buffer is not None:
            self._buffer.close()
            self._buffer = None


def _read_tree(cursor: TokenCursor) -> Any:
    # numbers become orjson fragments holding their raw text
    token = cursor.current_token
    if token is Token.START_OBJECT:
        members: dict[str, Any] = {}
        while (token := cursor.next_token()) is not Token.END_OBJECT:
            ensure_expected_token(Token.FIELD_NAME, token, cursor)
            name = str(cursor.current_name)
            cursor.next_token()
            members[name] = _read_tree(cursor)
        return members
    if token is Token.START_ARRAY:
        items: list[Any] = []
        while cursor.next_token() is not Token.END_ARRAY:
            items.append(_read_tree(cursor))
        return items
    if token is Token.VALUE_NUMBER:
        return orjson.Fragment(cursor.text())
    return cursor.object_text()
