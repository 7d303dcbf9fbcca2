"""Tests for sigil bit layout and parity utilities."""

import pytest

from sigil.bits import (
    ANCHOR_INDICES,
    CELL_ROLES,
    DATA_INDICES,
    MAX_SIGIL_ID,
    PARITY_INDICES,
    PARITY_SUBSETS,
    SYNC_INDEX,
    TOTAL_CELLS,
    bits_to_id,
    compute_parity,
    extract_data_bits,
    extract_parity_bits,
    has_valid_structure,
    id_to_bits,
    validate_parity,
)
from sigil.encoder import encode


class TestRoleTables:
    def test_roles_partition_all_cells(self):
        groups = [set(ANCHOR_INDICES), {SYNC_INDEX}, set(DATA_INDICES), set(PARITY_INDICES)]
        assert [len(g) for g in groups] == [2, 1, 9, 4]
        union = set().union(*groups)
        assert union == set(range(TOTAL_CELLS))
        assert sum(len(g) for g in groups) == TOTAL_CELLS, "Role tables must not overlap"

    def test_no_duplicate_indices_in_tables(self):
        assert len(set(DATA_INDICES)) == len(DATA_INDICES)
        assert len(set(PARITY_INDICES)) == len(PARITY_INDICES)

    def test_fixed_positions(self):
        assert ANCHOR_INDICES == (0, 9)
        assert SYNC_INDEX == 15
        assert DATA_INDICES == (1, 3, 4, 5, 7, 8, 11, 12, 13)
        assert PARITY_INDICES == (2, 6, 10, 14)

    def test_cell_roles_table(self):
        assert len(CELL_ROLES) == TOTAL_CELLS
        assert CELL_ROLES[0] == "anchor"
        assert CELL_ROLES[9] == "anchor"
        assert CELL_ROLES[15] == "sync"
        assert CELL_ROLES[6] == "parity"
        assert CELL_ROLES[12] == "data"
        assert "" not in CELL_ROLES


class TestParitySubsets:
    def test_four_distinct_subsets(self):
        assert len(PARITY_SUBSETS) == 4
        assert len({frozenset(s) for s in PARITY_SUBSETS}) == 4

    def test_subsets_reference_data_positions(self):
        for subset in PARITY_SUBSETS:
            for position in subset:
                assert 0 <= position < len(DATA_INDICES)

    def test_every_data_bit_covered_twice(self):
        for position in range(len(DATA_INDICES)):
            coverage = sum(position in s for s in PARITY_SUBSETS)
            assert coverage >= 2, f"d{position} covered by {coverage} parities"

    def test_coverage_patterns_unique(self):
        patterns = [
            tuple(position in s for s in PARITY_SUBSETS) for position in range(len(DATA_INDICES))
        ]
        assert len(set(patterns)) == len(patterns)

    def test_subsets_overlap(self):
        for i, a in enumerate(PARITY_SUBSETS):
            for b in PARITY_SUBSETS[i + 1 :]:
                assert set(a) & set(b)


class TestIdConversion:
    def test_bits_to_id_msb_first(self):
        assert bits_to_id([1, 0, 0, 0, 0, 0, 0, 0, 0]) == 256
        assert bits_to_id([0, 0, 0, 0, 0, 0, 0, 0, 1]) == 1

    def test_id_to_bits(self):
        assert id_to_bits(5) == [0, 0, 0, 0, 0, 0, 1, 0, 1]
        assert id_to_bits(MAX_SIGIL_ID) == [1] * 9

    def test_roundtrip_boundaries(self):
        for sigil_id in (0, 1, 255, 256, 511):
            assert bits_to_id(id_to_bits(sigil_id)) == sigil_id

    def test_id_out_of_range_raises(self):
        with pytest.raises(ValueError, match="sigil_id"):
            id_to_bits(512)
        with pytest.raises(ValueError, match="sigil_id"):
            id_to_bits(-1)


class TestParity:
    def test_all_zero_data(self):
        assert compute_parity([0] * 9) == [0, 0, 0, 0]

    def test_all_one_data(self):
        # Subset sizes 6, 5, 5, 5
        assert compute_parity([1] * 9) == [0, 1, 1, 1]

    def test_validate_encoded_pattern(self):
        assert validate_parity(encode(300))

    def test_validate_rejects_flipped_data_bit(self):
        pattern = encode(300)
        pattern[DATA_INDICES[4]] ^= 1
        assert not validate_parity(pattern)

    def test_validate_rejects_wrong_length(self):
        assert not validate_parity([0] * 15)

    def test_extract_bits(self):
        pattern = encode(0b101010101)
        assert extract_data_bits(pattern) == [1, 0, 1, 0, 1, 0, 1, 0, 1]
        assert extract_parity_bits(pattern) == compute_parity([1, 0, 1, 0, 1, 0, 1, 0, 1])


class TestStructure:
    def test_valid_structure(self):
        assert has_valid_structure(encode(42))

    def test_light_anchor_fails(self):
        pattern = encode(42)
        pattern[9] = 0
        assert not has_valid_structure(pattern)

    def test_dark_sync_fails(self):
        pattern = encode(42)
        pattern[15] = 1
        assert not has_valid_structure(pattern)
