"""Pull-style token cursor over JSON text.

``TokenCursor`` turns the flat lexeme stream into structural events
(``START_OBJECT``, ``FIELD_NAME``, ``VALUE_STRING`` ...) one call at a time,
validating the JSON grammar as it goes. It also owns the typed readers
(``text``, ``long_value`` ...) and the recursive helpers (``list``, ``map``,
``skip_children``) that higher-level readers are written against.

Usage::

    cursor = TokenCursor(b'{"a": [1, 2]}')
    cursor.next_token()   # Token.START_OBJECT
    cursor.next_token()   # Token.FIELD_NAME, cursor.current_name == "a"
    cursor.next_token()   # Token.START_ARRAY
    cursor.list()         # [1, 2]
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from getresult.errors import (
    JsonSyntaxError,
    MalformedNumberError,
    ParsingError,
    UnexpectedTokenError,
    ensure_expected_token,
)
from getresult.lexer import Lexeme, LexemeValue, iter_lexemes
from getresult.tokens import Token

if TYPE_CHECKING:
    from getresult.config import ParserOptions

DEFAULT_MAX_DEPTH = 64

LONG_MIN = -(2**63)
LONG_MAX = 2**63 - 1

# int() would also take "1_000" and non-ASCII digits
_LONG_TEXT_RE = re.compile(r"[+-]?[0-9]+", re.ASCII)

# Frame states: what the grammar accepts next inside the open container.
_KEY_OR_END = "key_or_end"      # right after '{'
_KEY = "key"                    # right after ',' in an object
_VALUE = "value"                # right after ':' or ',' in an array
_VALUE_OR_END = "value_or_end"  # right after '['
_SEP_OR_END = "sep_or_end"      # right after a complete member/element

_CLOSERS = {True: "RBRACE", False: "RBRACKET"}


@dataclass(slots=True)
class _Frame:
    """One open object or array on the nesting stack."""

    is_object: bool
    owner_name: str | None      # field name the container was the value of
    state: str
    keys: set[str] | None = None  # only tracked when duplicates are rejected


class TokenCursor:
    """Token stream cursor over a single JSON document."""

    def __init__(
        self,
        data: str | bytes | bytearray,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        allow_duplicate_keys: bool = True,
    ) -> None:
        if max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {max_depth}")
        self._lexemes = iter_lexemes(data)
        self._max_depth = max_depth
        self._allow_duplicate_keys = allow_duplicate_keys
        self._stack: list[_Frame] = []
        self._token: Token | None = None
        self._lexeme: Lexeme | None = None
        self._name: str | None = None
        self._started = False
        self._finished = False

    @classmethod
    def from_options(
        cls,
        data: str | bytes | bytearray,
        options: ParserOptions,
    ) -> TokenCursor:
        return cls(
            data,
            max_depth=options.max_depth,
            allow_duplicate_keys=options.allow_duplicate_keys,
        )

    # ─── State ────────────────────────────────────────────────────

    @property
    def current_token(self) -> Token | None:
        return self._token

    @property
    def current_name(self) -> str | None:
        """Field name of the current token.

        On ``FIELD_NAME`` this is the name itself; on a value or a container
        start/end it is the name the value belongs to (None at the root and
        for values before the first field of an object).
        """
        return self._name

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def location(self) -> tuple[int, int] | None:
        """(line, column) of the current token, 1-based."""
        if self._lexeme is None:
            return None
        return (self._lexeme.line, self._lexeme.column)

    # ─── Advancing ────────────────────────────────────────────────

    def next_token(self) -> Token | None:
        """Advance to the next token; None once the document is exhausted."""
        if self._finished:
            return None
        if not self._stack:
            lexeme = next(self._lexemes, None)
            if self._started and lexeme is not None:
                raise self._syntax_error(
                    lexeme, f"Unexpected {lexeme.raw!r} after the root value"
                )
            if lexeme is None:
                self._finished = True
                self._token = None
                return None
            self._started = True
            return self._begin_value(lexeme)

        frame = self._stack[-1]
        lexeme = self._read()
        if frame.state == _SEP_OR_END:
            if lexeme.kind == _CLOSERS[frame.is_object]:
                return self._end(frame, lexeme)
            if lexeme.kind != "COMMA":
                closer = "'}'" if frame.is_object else "']'"
                raise self._syntax_error(
                    lexeme, f"Unexpected {lexeme.raw!r}, expected ',' or {closer}"
                )
            frame.state = _KEY if frame.is_object else _VALUE
            lexeme = self._read()

        if not frame.is_object:
            if frame.state == _VALUE_OR_END and lexeme.kind == "RBRACKET":
                return self._end(frame, lexeme)
            frame.state = _SEP_OR_END
            return self._begin_value(lexeme)

        if frame.state == _VALUE:
            frame.state = _SEP_OR_END
            return self._begin_value(lexeme)
        if frame.state == _KEY_OR_END and lexeme.kind == "RBRACE":
            return self._end(frame, lexeme)
        if lexeme.kind != "STRING":
            raise self._syntax_error(
                lexeme, f"Unexpected {lexeme.raw!r}, expected a field name"
            )
        name = str(lexeme.value)
        if frame.keys is not None:
            if name in frame.keys:
                raise self._syntax_error(lexeme, f"Duplicate field [{name}]")
            frame.keys.add(name)
        colon = self._read()
        if colon.kind != "COLON":
            raise self._syntax_error(
                colon, f"Unexpected {colon.raw!r}, expected ':' after field name"
            )
        frame.state = _VALUE
        self._name = name
        return self._emit(Token.FIELD_NAME, lexeme)

    def _read(self) -> Lexeme:
        lexeme = next(self._lexemes, None)
        if lexeme is None:
            raise JsonSyntaxError.at(self, "Unexpected end of input")
        return lexeme

    def _begin_value(self, lexeme: Lexeme) -> Token:
        kind = lexeme.kind
        if kind == "LBRACE" or kind == "LBRACKET":
            if len(self._stack) >= self._max_depth:
                raise self._syntax_error(
                    lexeme, f"Depth limit of {self._max_depth} exceeded"
                )
            is_object = kind == "LBRACE"
            track_keys = is_object and not self._allow_duplicate_keys
            self._stack.append(
                _Frame(
                    is_object=is_object,
                    owner_name=self._name,
                    state=_KEY_OR_END if is_object else _VALUE_OR_END,
                    keys=set() if track_keys else None,
                ),
            )
            return self._emit(Token.START_OBJECT if is_object else Token.START_ARRAY, lexeme)
        if kind == "STRING":
            return self._emit(Token.VALUE_STRING, lexeme)
        if kind == "NUMBER":
            return self._emit(Token.VALUE_NUMBER, lexeme)
        if kind == "LITERAL":
            token = Token.VALUE_NULL if lexeme.value is None else Token.VALUE_BOOLEAN
            return self._emit(token, lexeme)
        raise self._syntax_error(lexeme, f"Unexpected {lexeme.raw!r}, expected a value")

    def _end(self, frame: _Frame, lexeme: Lexeme) -> Token:
        self._stack.pop()
        self._name = frame.owner_name
        return self._emit(Token.END_OBJECT if frame.is_object else Token.END_ARRAY, lexeme)

    def _emit(self, token: Token, lexeme: Lexeme) -> Token:
        self._token = token
        self._lexeme = lexeme
        return token

    def _syntax_error(self, lexeme: Lexeme, message: str) -> JsonSyntaxError:
        return JsonSyntaxError(message, line=lexeme.line, column=lexeme.column)

    def skip_children(self) -> None:
        """Consume the container the cursor is positioned on, at any depth.

        Leaves the cursor on the matching ``END_OBJECT``/``END_ARRAY``. A
        no-op when the current token does not open a container.
        """
        if self._token is None or not self._token.is_start:
            return
        open_count = 1
        while open_count:
            token = self.next_token()
            if token is None:
                raise JsonSyntaxError.at(self, "Unexpected end of input while skipping")
            if token.is_start:
                open_count += 1
            elif token.is_end:
                open_count -= 1

    # ─── Typed readers ────────────────────────────────────────────

    def _not_a(self, what: str) -> UnexpectedTokenError:
        name = "END_OF_STREAM" if self._token is None else self._token.name
        return UnexpectedTokenError.at(self, f"Current token [{name}] is not {what}")

    def _current_value(self) -> LexemeValue:
        assert self._lexeme is not None
        return self._lexeme.value

    def text(self) -> str:
        """Text of a string, number or boolean token."""
        token = self._token
        if token is Token.VALUE_STRING:
            return str(self._current_value())
        if token is Token.VALUE_NUMBER or token is Token.VALUE_BOOLEAN:
            assert self._lexeme is not None
            return self._lexeme.raw
        raise self._not_a("a value")

    def long_value(self) -> int:
        """Signed 64-bit integer value; numeric strings are coerced."""
        token = self._token
        if token is None or not token.is_value:
            raise self._not_a("a value")
        value = self._current_value()
        if token is Token.VALUE_BOOLEAN:
            raise MalformedNumberError.at(self, f"Current token [{token.name}] is not numeric")
        if token is Token.VALUE_STRING:
            digits = str(value).strip()
            if _LONG_TEXT_RE.fullmatch(digits) is None:
                raise MalformedNumberError.at(self, f"For input string: [{value}]")
            number = int(digits)
        elif isinstance(value, float):
            if not value.is_integer():
                raise MalformedNumberError.at(
                    self, f"Numeric value [{self.text()}] is not an integer"
                )
            number = int(value)
        else:
            number = int(value)  # type: ignore[arg-type]
        if not LONG_MIN <= number <= LONG_MAX:
            raise MalformedNumberError.at(
                self, f"Numeric value [{self.text()}] out of range of long"
            )
        return number

    def number_value(self) -> int | float:
        if self._token is not Token.VALUE_NUMBER:
            raise self._not_a("a number")
        value = self._current_value()
        assert isinstance(value, (int, float))
        return value

    def boolean_value(self) -> bool:
        """Boolean value; the strings "true" and "false" are accepted."""
        token = self._token
        if token is Token.VALUE_BOOLEAN:
            return bool(self._current_value())
        if token is Token.VALUE_STRING:
            value = str(self._current_value())
            if value == "true":
                return True
            if value == "false":
                return False
            raise ParsingError.at(
                self,
                f"Failed to parse value [{value}] as only [true] or [false] are allowed.",
            )
        raise self._not_a("a boolean")

    def object_text(self) -> LexemeValue:
        """Native Python value of the current scalar token (None for null)."""
        token = self._token
        if token is not None and (token.is_value or token is Token.VALUE_NULL):
            return self._current_value()
        raise self._not_a("a scalar value")

    def list(self) -> list[Any]:
        """Read the array starting at the current token into a list.

        Nested objects become dicts and nested arrays become lists. The
        cursor ends on the array's ``END_ARRAY``.
        """
        token = self._token
        if token is None or token is Token.FIELD_NAME:
            token = self.next_token()
        ensure_expected_token(Token.START_ARRAY, token, self)
        items: list[Any] = []
        while self.next_token() is not Token.END_ARRAY:
            items.append(self._read_value())
        return items

    def map(self) -> dict[str, Any]:
        """Read the object starting at the current token into a dict.

        Key order follows the stream; a repeated key keeps its last value.
        """
        token = self._token
        if token is None or token is Token.FIELD_NAME:
            token = self.next_token()
        ensure_expected_token(Token.START_OBJECT, token, self)
        result: dict[str, Any] = {}
        while (token := self.next_token()) is not Token.END_OBJECT:
            ensure_expected_token(Token.FIELD_NAME, token, self)
            name = str(self._name)
            self.next_token()
            result[name] = self._read_value()
        return result

    def _read_value(self) -> Any:
        token = self._token
        if token is Token.START_OBJECT:
            return self.map()
        if token is Token.START_ARRAY:
            return self.list()
        return self.object_text()
