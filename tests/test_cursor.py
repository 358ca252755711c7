"""Tests for TokenCursor: grammar, typed readers and structure helpers."""

import pytest

from getresult.cursor import LONG_MAX, LONG_MIN, TokenCursor
from getresult.errors import (
    JsonSyntaxError,
    MalformedNumberError,
    ParsingError,
    UnexpectedTokenError,
)
from getresult.tokens import Token


def _drain(cursor: TokenCursor) -> list[Token | None]:
    tokens: list[Token | None] = []
    while True:
        token = cursor.next_token()
        tokens.append(token)
        if token is None:
            return tokens


def _value_cursor(payload: str) -> TokenCursor:
    """Cursor positioned on the value of the single field in ``payload``."""
    cursor = TokenCursor(payload)
    cursor.next_token()
    cursor.next_token()
    cursor.next_token()
    return cursor


class TestTokenSequence:
    def test_mixed_document(self) -> None:
        cursor = TokenCursor('{"a": [1, "x", true, null], "b": {}}')
        assert _drain(cursor) == [
            Token.START_OBJECT,
            Token.FIELD_NAME,
            Token.START_ARRAY,
            Token.VALUE_NUMBER,
            Token.VALUE_STRING,
            Token.VALUE_BOOLEAN,
            Token.VALUE_NULL,
            Token.END_ARRAY,
            Token.FIELD_NAME,
            Token.START_OBJECT,
            Token.END_OBJECT,
            Token.END_OBJECT,
            None,
        ]

    def test_current_name_follows_owning_field(self) -> None:
        cursor = TokenCursor('{"a": [1], "b": {"c": 2}}')
        names = []
        while cursor.next_token() is not None:
            names.append((cursor.current_token, cursor.current_name))
        assert names == [
            (Token.START_OBJECT, None),
            (Token.FIELD_NAME, "a"),
            (Token.START_ARRAY, "a"),
            (Token.VALUE_NUMBER, "a"),
            (Token.END_ARRAY, "a"),
            (Token.FIELD_NAME, "b"),
            (Token.START_OBJECT, "b"),
            (Token.FIELD_NAME, "c"),
            (Token.VALUE_NUMBER, "c"),
            (Token.END_OBJECT, "b"),
            (Token.END_OBJECT, None),
        ]

    def test_scalar_root(self) -> None:
        assert _drain(TokenCursor("5")) == [Token.VALUE_NUMBER, None]

    def test_empty_input_has_no_tokens(self) -> None:
        cursor = TokenCursor("   ")
        assert cursor.next_token() is None
        assert cursor.current_token is None
        assert cursor.location is None

    def test_end_of_stream_is_sticky(self) -> None:
        cursor = TokenCursor("[]")
        _drain(cursor)
        assert cursor.next_token() is None

    def test_depth_tracks_open_containers(self) -> None:
        cursor = TokenCursor('{"a": [[]]}')
        depths = []
        while cursor.next_token() is not None:
            depths.append(cursor.depth)
        assert depths == [1, 1, 2, 3, 2, 1, 0]

    def test_location_of_current_token(self) -> None:
        cursor = TokenCursor('{\n  "a": 1\n}')
        cursor.next_token()
        cursor.next_token()
        assert cursor.location == (2, 3)


class TestGrammar:
    @pytest.mark.parametrize(
        ("payload", "message"),
        [
            ('{"a":1 "b":2}', "expected ',' or '}'"),
            ("[1 2]", "expected ',' or ']'"),
            ("[1,]", "expected a value"),
            ('{"a":1,}', "expected a field name"),
            ('{"a" 1}', "expected ':'"),
            ("{1: 2}", "expected a field name"),
            ("[1}", "expected ',' or ']'"),
            ('{"a": }', "expected a value"),
            ('{"a": [1, 2}', "expected ',' or ']'"),
        ],
    )
    def test_malformed_documents(self, payload: str, message: str) -> None:
        with pytest.raises(JsonSyntaxError, match=message):
            _drain(TokenCursor(payload))

    def test_unexpected_end_of_input(self) -> None:
        with pytest.raises(JsonSyntaxError, match="Unexpected end of input"):
            _drain(TokenCursor('{"a": [1, 2'))

    def test_trailing_root_value_rejected(self) -> None:
        with pytest.raises(JsonSyntaxError, match="after the root value"):
            _drain(TokenCursor("{} {}"))

    def test_depth_limit(self) -> None:
        cursor = TokenCursor("[[[1]]]", max_depth=2)
        with pytest.raises(JsonSyntaxError, match="Depth limit of 2 exceeded"):
            _drain(cursor)

    def test_depth_limit_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="max_depth"):
            TokenCursor("{}", max_depth=0)

    def test_duplicate_keys_allowed_by_default(self) -> None:
        assert TokenCursor('{"a": 1, "a": 2}').map() == {"a": 2}

    def test_duplicate_keys_rejected_when_configured(self) -> None:
        cursor = TokenCursor('{"a": 1, "a": 2}', allow_duplicate_keys=False)
        with pytest.raises(JsonSyntaxError, match=r"Duplicate field \[a\]"):
            _drain(cursor)

    def test_duplicate_check_is_per_object(self) -> None:
        cursor = TokenCursor('{"a": {"a": 1}, "b": {"a": 2}}', allow_duplicate_keys=False)
        assert cursor.map() == {"a": {"a": 1}, "b": {"a": 2}}

    def test_syntax_error_carries_location(self) -> None:
        with pytest.raises(JsonSyntaxError) as ei:
            _drain(TokenCursor('{\n"a": 1\n"b": 2}'))
        assert (ei.value.line, ei.value.column) == (3, 1)
        assert str(ei.value).startswith("[3:1] ")


class TestSkipChildren:
    def test_skips_mixed_nesting(self) -> None:
        cursor = TokenCursor(
            '{"skip": {"a": [1, [2, {"b": [3]}]], "c": {}}, "next": 1}'
        )
        cursor.next_token()
        cursor.next_token()
        assert cursor.next_token() is Token.START_OBJECT
        cursor.skip_children()
        assert cursor.current_token is Token.END_OBJECT
        assert cursor.depth == 1
        assert cursor.next_token() is Token.FIELD_NAME
        assert cursor.current_name == "next"

    def test_skips_array(self) -> None:
        cursor = TokenCursor('[[{"a": [[]]}], 7]')
        cursor.next_token()
        cursor.next_token()
        cursor.skip_children()
        assert cursor.current_token is Token.END_ARRAY
        assert cursor.next_token() is Token.VALUE_NUMBER
        assert cursor.number_value() == 7

    def test_noop_on_scalar(self) -> None:
        cursor = _value_cursor('{"a": 1, "b": 2}')
        cursor.skip_children()
        assert cursor.current_token is Token.VALUE_NUMBER
        assert cursor.next_token() is Token.FIELD_NAME

    def test_truncated_input_fails(self) -> None:
        cursor = TokenCursor('{"a": [1, {"b": 2}')
        cursor.next_token()
        cursor.next_token()
        cursor.next_token()
        with pytest.raises(JsonSyntaxError):
            cursor.skip_children()


class TestTextAndBoolean:
    def test_text_of_scalars(self) -> None:
        assert _value_cursor('{"a": "x"}').text() == "x"
        assert _value_cursor('{"a": 1.50}').text() == "1.50"
        assert _value_cursor('{"a": false}').text() == "false"

    def test_text_of_null_fails(self) -> None:
        with pytest.raises(UnexpectedTokenError):
            _value_cursor('{"a": null}').text()

    def test_boolean_value(self) -> None:
        assert _value_cursor('{"a": true}').boolean_value() is True
        assert _value_cursor('{"a": "false"}').boolean_value() is False

    def test_boolean_value_rejects_other_strings(self) -> None:
        with pytest.raises(ParsingError, match=r"only \[true\] or \[false\]"):
            _value_cursor('{"a": "yes"}').boolean_value()

    def test_boolean_value_rejects_numbers(self) -> None:
        with pytest.raises(UnexpectedTokenError):
            _value_cursor('{"a": 1}').boolean_value()


class TestLongValue:
    def test_integer(self) -> None:
        assert _value_cursor('{"a": 42}').long_value() == 42

    def test_numeric_string_is_coerced(self) -> None:
        assert _value_cursor('{"a": " -12 "}').long_value() == -12

    def test_integral_float(self) -> None:
        assert _value_cursor('{"a": 3.0}').long_value() == 3

    def test_bounds(self) -> None:
        assert _value_cursor(f'{{"a": {LONG_MAX}}}').long_value() == LONG_MAX
        assert _value_cursor(f'{{"a": {LONG_MIN}}}').long_value() == LONG_MIN

    @pytest.mark.parametrize(
        "raw",
        ['"abc"', "1.5", "9223372036854775808", "-9223372036854775809", "true", '"1_000"', '"１２"'],
    )
    def test_malformed(self, raw: str) -> None:
        with pytest.raises(MalformedNumberError):
            _value_cursor(f'{{"a": {raw}}}').long_value()

    def test_container_is_not_a_value(self) -> None:
        with pytest.raises(UnexpectedTokenError, match=r"\[START_ARRAY\] is not a value"):
            _value_cursor('{"a": [1]}').long_value()


class TestStructureReaders:
    def test_list_reads_nested_values(self) -> None:
        cursor = _value_cursor('{"a": [1, {"b": [true]}, [], null, "s"]}')
        assert cursor.list() == [1, {"b": [True]}, [], None, "s"]
        assert cursor.current_token is Token.END_ARRAY
        assert cursor.next_token() is Token.END_OBJECT

    def test_map_preserves_order(self) -> None:
        cursor = TokenCursor('{"z": 1, "a": {"y": [2]}, "m": null}')
        result = cursor.map()
        assert list(result) == ["z", "a", "m"]
        assert result == {"z": 1, "a": {"y": [2]}, "m": None}

    def test_map_from_field_name(self) -> None:
        cursor = TokenCursor('{"a": {"b": 1}}')
        cursor.next_token()
        cursor.next_token()
        assert cursor.map() == {"b": 1}
        assert cursor.current_token is Token.END_OBJECT
        assert cursor.depth == 1

    def test_list_requires_array(self) -> None:
        with pytest.raises(UnexpectedTokenError, match="START_ARRAY"):
            _value_cursor('{"a": {}}').list()

    def test_object_text_returns_native_values(self) -> None:
        assert _value_cursor('{"a": 2.5}').object_text() == 2.5
        assert _value_cursor('{"a": null}').object_text() is None

    def test_object_text_rejects_containers(self) -> None:
        with pytest.raises(UnexpectedTokenError):
            _value_cursor('{"a": {}}').object_text()
