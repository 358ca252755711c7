"""Token-driven reader for document get results."""

from getresult.builder import ContentBuilder
from getresult.config import ParserOptions
from getresult.cursor import TokenCursor
from getresult.document_field import DocumentField
from getresult.errors import (
    JsonSyntaxError,
    MalformedNumberError,
    ParsingError,
    UnexpectedTokenError,
    ensure_expected_token,
)
from getresult.get_result import (
    NOT_FOUND_VERSION,
    UNASSIGNED_PRIMARY_TERM,
    UNASSIGNED_SEQ_NO,
    GetResult,
)
from getresult.parser import (
    IGNORED_FIELD_KEYS,
    ResultKey,
    parse_get_result,
    parse_get_result_embedded,
    parse_get_result_fields,
    parse_get_result_json,
)
from getresult.tokens import Token

__all__ = [
    "ContentBuilder",
    "DocumentField",
    "GetResult",
    "IGNORED_FIELD_KEYS",
    "JsonSyntaxError",
    "MalformedNumberError",
    "NOT_FOUND_VERSION",
    "ParserOptions",
    "ParsingError",
    "ResultKey",
    "Token",
    "TokenCursor",
    "UNASSIGNED_PRIMARY_TERM",
    "UNASSIGNED_SEQ_NO",
    "UnexpectedTokenError",
    "ensure_expected_token",
    "parse_get_result",
    "parse_get_result_embedded",
    "parse_get_result_fields",
    "parse_get_result_json",
]
