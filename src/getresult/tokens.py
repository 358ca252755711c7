"""Token kinds emitted by the JSON token cursor."""

from __future__ import annotations

from enum import Enum


class Token(Enum):
    """Structural and value events of a tokenized JSON document."""

    START_OBJECT = "START_OBJECT"
    END_OBJECT = "END_OBJECT"
    START_ARRAY = "START_ARRAY"
    END_ARRAY = "END_ARRAY"
    FIELD_NAME = "FIELD_NAME"
    VALUE_STRING = "VALUE_STRING"
    VALUE_NUMBER = "VALUE_NUMBER"
    VALUE_BOOLEAN = "VALUE_BOOLEAN"
    VALUE_NULL = "VALUE_NULL"

    @property
    def is_value(self) -> bool:
        """True for string, number and boolean tokens.

        ``VALUE_NULL`` is deliberately not a value: readers that dispatch on
        ``is_value`` leave their defaults untouched when a field is null.
        """
        return self in _VALUE_TOKENS

    @property
    def is_start(self) -> bool:
        return self is Token.START_OBJECT or self is Token.START_ARRAY

    @property
    def is_end(self) -> bool:
        return self is Token.END_OBJECT or self is Token.END_ARRAY


_VALUE_TOKENS: frozenset[Token] = frozenset({
    Token.VALUE_STRING,
    Token.VALUE_NUMBER,
    Token.VALUE_BOOLEAN,
})
