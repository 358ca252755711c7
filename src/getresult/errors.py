"""Exception taxonomy for token cursors and get-result assembly.

Every failure aborts the current parse; nothing here is recoverable.

  ParsingError          — base class, carries the (line, column) of the token
  UnexpectedTokenError  — wrong token kind at a required position
  MalformedNumberError  — numeric value not representable as the target type
  JsonSyntaxError       — the cursor cannot advance over malformed input
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from getresult.cursor import TokenCursor
    from getresult.tokens import Token


class ParsingError(ValueError):
    """Raised when a token stream cannot be turned into the requested value."""

    def __init__(
        self,
        message: str,
        *,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self.message = message
        self.line = line
        self.column = column
        where = f"[{line}:{column}] " if line is not None and column is not None else ""
        super().__init__(f"{where}{message}")

    @classmethod
    def at(cls, cursor: TokenCursor | None, message: str) -> ParsingError:
        """Build an error positioned at the cursor's current token."""
        location = cursor.location if cursor is not None else None
        if location is None:
            return cls(message)
        return cls(message, line=location[0], column=location[1])


class UnexpectedTokenError(ParsingError):
    """Raised when the observed token kind is not the one required."""


class MalformedNumberError(ParsingError):
    """Raised when a numeric value cannot be read as the expected type."""


class JsonSyntaxError(ParsingError):
    """Raised when the underlying text is not well-formed JSON."""


def _token_name(token: Token | None) -> str:
    return "END_OF_STREAM" if token is None else token.name


def ensure_expected_token(
    expected: Token,
    actual: Token | None,
    cursor: TokenCursor | None,
) -> None:
    """Raise UnexpectedTokenError unless ``actual`` is ``expected``."""
    if actual is not expected:
        raise UnexpectedTokenError.at(
            cursor,
            f"Failed to parse object: expecting token of type [{expected.name}] "
            f"but found [{_token_name(actual)}]",
        )
