"""Tests for the sigil encoder."""

import pytest

from sigil.bits import validate_parity
from sigil.encoder import encode, pattern_to_str


class TestEncode:
    def test_encode_zero(self):
        assert encode(0) == [1, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0, 0]

    def test_encode_max(self):
        assert encode(511) == [1, 1, 0, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 0]

    def test_msb_is_first_data_cell(self):
        assert encode(256)[1] == 1
        assert encode(1)[13] == 1

    def test_anchors_and_sync_fixed(self):
        for sigil_id in (0, 100, 511):
            pattern = encode(sigil_id)
            assert pattern[0] == 1
            assert pattern[9] == 1
            assert pattern[15] == 0

    def test_parity_valid_for_all_ids(self):
        for sigil_id in range(512):
            assert validate_parity(encode(sigil_id))

    def test_patterns_unique(self):
        patterns = {tuple(encode(i)) for i in range(512)}
        assert len(patterns) == 512

    def test_out_of_range_raises(self):
        with pytest.raises(ValueError, match="sigil_id"):
            encode(512)
        with pytest.raises(ValueError, match="sigil_id"):
            encode(-3)


class TestPatternToStr:
    def test_four_rows(self):
        text = pattern_to_str(encode(0))
        lines = text.split("\n")
        assert len(lines) == 4
        assert lines[0].strip() == "1"
        assert lines[3].split() == ["1", "0", "0", "0", "0", "0", "0"]
