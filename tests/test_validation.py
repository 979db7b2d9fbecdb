"""Tests for paste content validation."""

import pytest

from pastr.models import Reason
from pastr.validation import validate


class TestValidate:
    def test_accepts_plain_text(self):
        result = validate("hello world")
        assert result.ok
        assert result.text == "hello world"

    def test_accepts_ascii_whitespace(self):
        text = "line one\n\tindented\r\nform\x0cfeed"
        assert validate(text).text == text

    def test_accepts_bytes_and_decodes(self):
        result = validate(b"print('hi')\n")
        assert result.ok
        assert result.text == "print('hi')\n"

    @pytest.mark.parametrize("raw", [None, "", b"", "   \n\t"])
    def test_empty_input(self, raw):
        result = validate(raw)
        assert not result.ok
        assert result.reason is Reason.EMPTY_INPUT
        assert result.text is None

    @pytest.mark.parametrize("raw", [{"body": "x"}, ["x"], 42, object()])
    def test_wrong_type(self, raw):
        assert validate(raw).reason is Reason.WRONG_TYPE

    def test_rejects_high_byte(self):
        assert validate(b"abc\x80def").reason is Reason.NON_PLAIN_TEXT

    def test_rejects_unicode_text(self):
        assert validate("café").reason is Reason.NON_PLAIN_TEXT

    def test_rejects_control_characters(self):
        assert validate("abc\x00def").reason is Reason.NON_PLAIN_TEXT
        assert validate("bell\x07").reason is Reason.NON_PLAIN_TEXT
        assert validate(b"esc\x1b[0m").reason is Reason.NON_PLAIN_TEXT

    def test_size_limit(self):
        assert validate("a" * 10, max_bytes=10).ok
        assert validate("a" * 11, max_bytes=10).reason is Reason.TOO_LARGE
        assert validate(b"a" * 11, max_bytes=10).reason is Reason.TOO_LARGE
