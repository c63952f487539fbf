"""
Tests for identifier widths
"""

import pytest
import numpy as np

from perfect_hasher.widths import IdentifierWidth


class TestIdentifierWidth:
    @pytest.mark.parametrize("width,bits", [
        (IdentifierWidth.U8, 8),
        (IdentifierWidth.U16, 16),
        (IdentifierWidth.U32, 32),
        (IdentifierWidth.U64, 64),
    ])
    def test_bits_and_range(self, width, bits):
        assert width.bits == bits
        assert width.max_value == 2 ** bits - 1
        assert width.size == 2 ** bits

    def test_word_follows_platform(self):
        assert IdentifierWidth.WORD.bits == np.dtype(np.uintp).itemsize * 8

    def test_advance_wraps(self):
        assert IdentifierWidth.U8.advance(254) == 255
        assert IdentifierWidth.U8.advance(255) == 0

    def test_retreat_wraps(self):
        assert IdentifierWidth.U16.retreat(1) == 0
        assert IdentifierWidth.U16.retreat(0) == 65535

    def test_truncate(self):
        assert IdentifierWidth.U8.truncate(0xABCD) == 0xCD
        assert IdentifierWidth.U64.truncate(2 ** 64 + 5) == 5

    @pytest.mark.parametrize("name,expected", [
        ("u8", IdentifierWidth.U8),
        ("U32", IdentifierWidth.U32),
        ("64", IdentifierWidth.U64),
        (" word ", IdentifierWidth.WORD),
    ])
    def test_from_name(self, name, expected):
        assert IdentifierWidth.from_name(name) is expected

    def test_from_name_rejects_unknown(self):
        with pytest.raises(ValueError):
            IdentifierWidth.from_name("u12")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
