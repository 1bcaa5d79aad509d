"""
Tests for utils.py - Byte, hex and UTF-8 conversions
"""

import pytest

from smalg import errors
from smalg.crypto.utils import SMCodec


class TestHex:
    """Tests for hex conversions."""

    @pytest.mark.parametrize(
        "data,expected",
        [
            ([0, 255, 16], "00ff10"),
            (b"\x05", "05"),
            (bytearray(b"\x00\x01"), "0001"),
            (memoryview(b"\xab"), "ab"),
            ([], ""),
        ],
    )
    def test_byte_buffer_to_hex(self, data, expected):
        assert SMCodec.byte_buffer_to_hex(data) == expected

    def test_byte_buffer_to_hex_out_of_range(self):
        with pytest.raises(ValueError):
            SMCodec.byte_buffer_to_hex([256])

    @pytest.mark.parametrize(
        "hex_str,expected",
        [
            ("ff", [-1]),
            ("00ff10", [0, -1, 16]),
            ("7f80", [127, -128]),
            ("FF", [-1]),
            ("f", [15]),
            ("abc", [10, -68]),
            ("", []),
        ],
    )
    def test_hex_to_signed_byte_array(self, hex_str, expected):
        assert SMCodec.hex_to_signed_byte_array(hex_str) == expected

    @pytest.mark.parametrize("hex_str", ["zz", "0g", "ab cd", "0x12"])
    def test_hex_to_signed_byte_array_invalid(self, hex_str):
        with pytest.raises(errors.MalformedHexError, match="Invalid hex string"):
            SMCodec.hex_to_signed_byte_array(hex_str)

    @pytest.mark.parametrize(
        "values,expected",
        [
            ([-1], "ff"),
            ([0, -1, 16], "00ff10"),
            ([255, 128], "ff80"),
            ([-128, 127], "807f"),
        ],
    )
    def test_signed_byte_array_to_hex(self, values, expected):
        assert SMCodec.signed_byte_array_to_hex(values) == expected

    @pytest.mark.parametrize("values", [[-129], [256]])
    def test_signed_byte_array_to_hex_out_of_range(self, values):
        with pytest.raises(ValueError, match="Byte value out of range"):
            SMCodec.signed_byte_array_to_hex(values)

    def test_signed_hex_roundtrip(self):
        values = list(range(-128, 128))
        assert SMCodec.hex_to_signed_byte_array(SMCodec.signed_byte_array_to_hex(values)) == values

    @pytest.mark.parametrize(
        "value,width,expected",
        [("abc", 6, "000abc"), ("abc", 3, "abc"), ("abcd", 2, "abcd"), ("", 2, "00")],
    )
    def test_left_pad(self, value, width, expected):
        assert SMCodec.left_pad(value, width) == expected


class TestUtf8:
    """Tests for UTF-8 conversions."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("a", "61"),
            ("abc", "616263"),
            ("é", "c3a9"),
            ("中", "e4b8ad"),
            ("\U0001f600", "f09f9880"),
            ("", ""),
        ],
    )
    def test_utf8_text_to_hex(self, text, expected):
        assert SMCodec.utf8_text_to_hex(text) == expected

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("a", [97]),
            ("\u007f", [127]),
            ("\u0080", [-62, -128]),
            ("é", [-61, -87]),
            ("\u07ff", [-33, -65]),
            ("\u0800", [-32, -96, -128]),
            ("中", [-28, -72, -83]),
            ("\uffff", [-17, -65, -65]),
            ("\U00010000", [-16, -112, -128, -128]),
            ("\U0001f600", [-16, -97, -104, -128]),
            ("\U0010ffff", [-12, -113, -65, -65]),
        ],
    )
    def test_utf8_text_to_signed_byte_array(self, text, expected):
        assert SMCodec.utf8_text_to_signed_byte_array(text) == expected

    def test_lone_surrogate(self):
        with pytest.raises(errors.MalformedTextError):
            SMCodec.utf8_text_to_signed_byte_array("\ud800")

    @pytest.mark.parametrize(
        "text",
        ["", "hello world", "国密 SM4", "café \U0001f600 \U0010ffff"],
    )
    def test_text_roundtrip(self, text):
        values = SMCodec.utf8_text_to_signed_byte_array(text)
        assert SMCodec.signed_byte_array_to_utf8_text(values) == text

    def test_accepts_unsigned_values(self):
        assert SMCodec.signed_byte_array_to_utf8_text([228, 184, 173]) == "中"

    @pytest.mark.parametrize("values", [[-1], [-61], [-128, 97], [-19, -96, -128]])
    def test_malformed_utf8(self, values):
        with pytest.raises(errors.MalformedTextError, match="Malformed UTF-8 data"):
            SMCodec.signed_byte_array_to_utf8_text(values)
