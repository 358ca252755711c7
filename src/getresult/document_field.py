"""Named field: a field name plus its ordered values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from getresult.cursor import TokenCursor
from getresult.errors import ParsingError, ensure_expected_token
from getresult.tokens import Token


@dataclass(frozen=True, slots=True)
class DocumentField:
    """A field name and the values stored under it.

    Values keep stream order and may mix types (str, int, float, bool,
    None, and dict/list for object and array values).
    """

    name: str
    values: tuple[Any, ...]

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("DocumentField name cannot be empty")
        if not isinstance(self.values, tuple):
            object.__setattr__(self, "values", tuple(self.values))

    @property
    def value(self) -> Any:
        """First value, or None when the field holds no values."""
        return self.values[0] if self.values else None

    @classmethod
    def from_tokens(cls, cursor: TokenCursor) -> DocumentField:
        """Read one ``"name": [value, ...]`` record.

        The cursor must be on the record's ``FIELD_NAME`` token and ends on
        the ``END_ARRAY`` closing its values.
        """
        ensure_expected_token(Token.FIELD_NAME, cursor.current_token, cursor)
        name = cursor.current_name
        if not name:
            raise ParsingError.at(cursor, "Field record name cannot be empty")
        token = cursor.next_token()
        ensure_expected_token(Token.START_ARRAY, token, cursor)
        values: list[Any] = []
        while (token := cursor.next_token()) is not Token.END_ARRAY:
            if token is Token.START_OBJECT:
                values.append(cursor.map())
            elif token is Token.START_ARRAY:
                values.append(cursor.list())
            else:
                values.append(cursor.object_text())
        return cls(name=name, values=tuple(values))
