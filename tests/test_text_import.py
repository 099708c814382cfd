"""Tests for parsing byte tables out of text."""

from romglyph.glyph import GlyphConfig
from romglyph.text_import import (
    OUT_OF_RANGE_ERROR,
    parse_result_summary,
    parse_text_to_bytes,
    parse_text_to_characters,
)

C_SOURCE = """
// Letter A
const unsigned char font[] = {
    0x18, 0x3C, 0x66, 0x7E, 0x66, 0x66, 0x66, 0x00,
};
"""


class TestParseTextToBytes:
    def test_c_array(self):
        values, detected, invalid, error = parse_text_to_bytes(C_SOURCE)
        assert values == [0x18, 0x3C, 0x66, 0x7E, 0x66, 0x66, 0x66, 0x00]
        assert detected == "hex"
        assert invalid == 0
        assert error is None

    def test_assembler_hex(self):
        values, detected, _, _ = parse_text_to_bytes(".byte $18,$3c,$FF")
        assert values == [0x18, 0x3C, 0xFF]
        assert detected == "hex"

    def test_binary(self):
        values, detected, _, _ = parse_text_to_bytes("0b00111100, 0b1")
        assert values == [60, 1]
        assert detected == "binary"

    def test_decimal(self):
        values, detected, _, _ = parse_text_to_bytes("DATA 24, 60, 102, 126")
        assert values == [24, 60, 102, 126]
        assert detected == "decimal"

    def test_mixed(self):
        values, detected, _, _ = parse_text_to_bytes("0x3C, 60, 0b111100")
        assert values == [60, 60, 60]
        assert detected == "mixed"

    def test_out_of_range_skipped(self):
        values, detected, invalid, error = parse_text_to_bytes("12, 300, 255, 999")
        assert values == [12, 255]
        assert invalid == 2
        assert error is None

    def test_all_out_of_range(self):
        values, _, invalid, error = parse_text_to_bytes("300 400")
        assert values == []
        assert invalid == 2
        assert error == OUT_OF_RANGE_ERROR

    def test_empty_input(self):
        assert parse_text_to_bytes("   \n")[3] == "No input provided"

    def test_no_numbers(self):
        assert parse_text_to_bytes("hello world")[3] == "No valid byte values found in input"


class TestParseTextToCharacters:
    def test_letter(self, letter_a):
        result = parse_text_to_characters(C_SOURCE, GlyphConfig())
        assert result.error is None
        assert len(result.characters) == 1
        assert result.characters[0].pixels == letter_a.pixels
        assert result.data == bytes([0x18, 0x3C, 0x66, 0x7E, 0x66, 0x66, 0x66, 0x00])

    def test_incomplete_character(self):
        result = parse_text_to_characters("1, 2, 3", GlyphConfig())
        assert result.error is None
        assert result.characters == []
        assert len(result.data) == 3

    def test_error_propagates(self):
        result = parse_text_to_characters("", GlyphConfig())
        assert result.error == "No input provided"
        assert result.characters == []


class TestSummary:
    def test_summary_with_characters(self):
        text = ", ".join(["0xFF"] * 16)
        result = parse_text_to_characters(text, GlyphConfig())
        assert parse_result_summary(result) == (
            "16 bytes detected (hexadecimal) -> 2 characters"
        )

    def test_summary_with_invalid(self):
        result = parse_text_to_characters("1, 2, 3, 4, 5, 6, 7, 8, 256", GlyphConfig())
        assert parse_result_summary(result) == (
            "8 bytes detected (decimal) -> 1 character (1 invalid value skipped)"
        )

    def test_summary_error(self):
        result = parse_text_to_characters("nothing here", GlyphConfig())
        assert parse_result_summary(result) == "No valid byte values found in input"
