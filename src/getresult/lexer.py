"""Regex lexer turning JSON text into positioned lexemes.

The lexer knows nothing about nesting; it only classifies the next run of
characters. Grammar (brace balance, separators, key/value alternation) is
enforced one level up by ``TokenCursor``.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TypeAlias

import orjson

from getresult.errors import JsonSyntaxError

# ---------------------------------------------------------------------------
# Lexeme patterns
# ---------------------------------------------------------------------------

_NUMBER = r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?"
_STRING = r'"(?:[^"\\\x00-\x1F]|\\.)*"'

_LEXEME_RE = re.compile(
    rf"(?P<STRING>{_STRING})|"
    rf"(?P<NUMBER>{_NUMBER})|"
    r"(?P<LITERAL>true|false|null)|"
    r"(?P<LBRACE>\{)|"
    r"(?P<RBRACE>\})|"
    r"(?P<LBRACKET>\[)|"
    r"(?P<RBRACKET>\])|"
    r"(?P<COMMA>,)|"
    r"(?P<COLON>:)|"
    r"(?P<WHITESPACE>[ \t\n\r]+)",
)

_LITERALS: dict[str, bool | None] = {"true": True, "false": False, "null": None}

LexemeValue: TypeAlias = str | int | float | bool | None


@dataclass(frozen=True, slots=True)
class Lexeme:
    """One classified run of input characters."""

    kind: str            # STRING | NUMBER | LITERAL | LBRACE | RBRACE | LBRACKET | RBRACKET | COMMA | COLON
    value: LexemeValue   # decoded value for STRING/NUMBER/LITERAL, the raw char otherwise
    raw: str             # exact source text of the lexeme
    offset: int          # absolute char offset
    line: int            # 1-based
    column: int          # 1-based


def _decode_string(raw: str, line: int, column: int) -> str:
    # orjson applies the full JSON escape rules, including surrogate pairing
    try:
        value = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise JsonSyntaxError(
            f"Invalid string literal {raw[:32]!r}: {exc}",
            line=line,
            column=column,
        ) from None
    return str(value)


def _decode_number(raw: str) -> int | float:
    if any(c in raw for c in ".eE"):
        return float(raw)
    return int(raw)


def _as_text(data: str | bytes | bytearray) -> str:
    if isinstance(data, str):
        text = data
    else:
        try:
            text = bytes(data).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise JsonSyntaxError(f"Input is not valid UTF-8: {exc}") from None
    if text.startswith("\ufeff"):
        text = text[1:]
    return text


def iter_lexemes(data: str | bytes | bytearray) -> Iterator[Lexeme]:
    """Yield lexemes lazily, skipping whitespace.

    Raises JsonSyntaxError at the first character no pattern accepts.
    """
    text = _as_text(data)
    pos = 0
    line = 1
    line_start = 0
    length = len(text)
    while pos < length:
        m = _LEXEME_RE.match(text, pos)
        column = pos - line_start + 1
        if m is None:
            if text[pos] == '"':
                raise JsonSyntaxError(
                    f"Unterminated string starting at offset {pos}",
                    line=line,
                    column=column,
                )
            raise JsonSyntaxError(
                f"Invalid character {text[pos]!r} at offset {pos}",
                line=line,
                column=column,
            )
        kind = m.lastgroup or ""
        raw = m.group()
        pos = m.end()
        if kind == "WHITESPACE":
            newlines = raw.count("\n")
            if newlines:
                line += newlines
                line_start = m.start() + raw.rfind("\n") + 1
            continue

        value: LexemeValue
        if kind == "STRING":
            value = _decode_string(raw, line, column)
        elif kind == "NUMBER":
            value = _decode_number(raw)
        elif kind == "LITERAL":
            value = _LITERALS[raw]
        else:
            value = raw
        yield Lexeme(
            kind=kind,
            value=value,
            raw=raw,
            offset=m.start(),
            line=line,
            column=column,
        )
