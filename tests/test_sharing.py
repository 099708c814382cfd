"""Tests for share string encoding."""

import pytest

from romglyph.glyph import BitDirection, ByteOrder, Character, GlyphConfig, Padding
from romglyph.sharing import (
    base64url_decode,
    base64url_encode,
    can_share,
    compress_data,
    create_share_url,
    decode_share,
    decompress_data,
    encode_share,
    estimate_share_length,
    extract_from_url,
    url_length_status,
)


class TestPrimitives:
    def test_base64url_has_no_padding(self):
        encoded = base64url_encode(b"\xfb\xff")
        assert encoded == "-_8"
        assert base64url_decode(encoded) == b"\xfb\xff"

    def test_compress_round_trip(self):
        data = bytes(2048)
        compressed = compress_data(data)
        assert len(compressed) < 100
        assert decompress_data(compressed) == data


class TestEncodeShare:
    def test_prefix(self, letter_a):
        assert encode_share("A", "", [letter_a], GlyphConfig()).startswith("2:")

    def test_url_safe(self, letter_a):
        encoded = encode_share("Name", "Desc", [letter_a] * 64, GlyphConfig())
        assert "=" not in encoded
        assert "+" not in encoded
        assert "/" not in encoded

    def test_round_trip(self, letter_a):
        characters = [letter_a, Character.filled(8, 8)]
        shared = decode_share(encode_share("My Set", "Über ✓", characters, GlyphConfig()))
        assert shared.name == "My Set"
        assert shared.description == "Über ✓"
        assert [c.pixels for c in shared.characters] == [c.pixels for c in characters]

    def test_format_flags_survive(self, narrow_glyph):
        config = GlyphConfig(width=5, height=7, padding="left", bit_direction="rtl")
        shared = decode_share(encode_share("", "", [narrow_glyph], config))
        assert shared.config.padding == Padding.LEFT
        assert shared.config.bit_direction == BitDirection.RTL
        assert (shared.config.width, shared.config.height) == (5, 7)
        assert shared.characters[0].pixels == narrow_glyph.pixels

    def test_byte_order_not_kept(self):
        wide = Character.from_rows(["100000000001"] * 2)
        config = GlyphConfig(width=12, height=2, byte_order="little")
        shared = decode_share(encode_share("w", "", [wide], config))
        assert shared.config.byte_order == ByteOrder.BIG
        assert shared.characters[0].pixels == wide.pixels


class TestDecodeShare:
    def test_missing_prefix(self):
        with pytest.raises(ValueError, match="Failed to decode shared character set"):
            decode_share("1:abc")

    def test_garbage(self):
        with pytest.raises(ValueError, match="Failed to decode shared character set"):
            decode_share("2:AAAA")

    def test_truncated_header(self):
        encoded = "2:" + base64url_encode(compress_data(b"\x08"))
        with pytest.raises(ValueError, match="header truncated"):
            decode_share(encoded)

    def test_unterminated_name(self):
        encoded = "2:" + base64url_encode(compress_data(b"\x08\x08\x00abc"))
        with pytest.raises(ValueError, match="name not terminated"):
            decode_share(encoded)

    def test_invalid_size(self):
        encoded = "2:" + base64url_encode(compress_data(b"\x00\x08\x00a\x00b\x00"))
        with pytest.raises(ValueError, match="Failed to decode"):
            decode_share(encoded)


class TestUrls:
    def test_create_and_extract(self):
        url = create_share_url("2:abc", "https://example.org/")
        assert url == "https://example.org/tools/character-rom-editor/shared#2:abc"
        assert extract_from_url(url) == "2:abc"

    def test_extract_without_fragment(self):
        assert extract_from_url("https://example.org/shared") is None
        assert extract_from_url("https://example.org/shared#other") is None

    def test_length_status(self):
        assert url_length_status("x" * 100) == "ok"
        assert url_length_status("x" * 2001) == "warning"
        assert url_length_status("x" * 8001) == "error"


class TestEstimates:
    def test_estimate_grows_with_size(self):
        assert estimate_share_length(256, 8, 8) > estimate_share_length(128, 8, 8)

    def test_estimate_value(self):
        # 2048 ROM bytes -> ceil(2101 * 0.5) = 1051 -> ceil(1051 * 1.34) + 2 + 50
        assert estimate_share_length(256, 8, 8) == 1461

    def test_can_share(self):
        assert can_share(256, 8, 8) == (True, "Character set can be shared")
        ok, message = can_share(512, 8, 8)
        assert ok
        assert "may be too long" in message
        ok, message = can_share(10000, 32, 32)
        assert not ok
        assert "too large" in message
