"""Bit layout and parity utilities for the sigil format.

Holds the fixed role tables of the 16 cells and the four parity
equations, plus conversions between identifiers and data bit vectors.
These are constants of the format and must not change between the
encoder and the decoder.
"""

from __future__ import annotations

from collections.abc import Sequence

TOTAL_CELLS = 16
DATA_BITS = 9
MAX_SIGIL_ID = (1 << DATA_BITS) - 1  # 511

# Cell role names
ROLE_ANCHOR = "anchor"
ROLE_SYNC = "sync"
ROLE_DATA = "data"
ROLE_PARITY = "parity"

# Anchors are always dark (1), sync is always light (0)
ANCHOR_INDICES: tuple[int, ...] = (0, 9)
SYNC_INDEX = 15

# Data bits in significance order, d0 (MSB) first
DATA_INDICES: tuple[int, ...] = (1, 3, 4, 5, 7, 8, 11, 12, 13)
PARITY_INDICES: tuple[int, ...] = (2, 6, 10, 14)

# Each parity bit is the XOR of these data positions (indexes into DATA_INDICES).
# Every data position appears in at least two equations, with a unique
# combination, so a single flipped cell always breaks parity.
PARITY_SUBSETS: tuple[tuple[int, ...], ...] = (
    (0, 1, 3, 6, 7, 8),
    (0, 2, 4, 6, 7),
    (1, 2, 5, 6, 8),
    (3, 4, 5, 7, 8),
)


def _build_role_table() -> tuple[str, ...]:
    roles: dict[int, str] = {}
    for index in ANCHOR_INDICES:
        roles[index] = ROLE_ANCHOR
    roles[SYNC_INDEX] = ROLE_SYNC
    for index in DATA_INDICES:
        roles[index] = ROLE_DATA
    for index in PARITY_INDICES:
        roles[index] = ROLE_PARITY
    return tuple(roles.get(i, "") for i in range(TOTAL_CELLS))


CELL_ROLES: tuple[str, ...] = _build_role_table()


def bits_to_id(data_bits: Sequence[int]) -> int:
    """Convert data bits (MSB first) to an integer identifier.

    Args:
        data_bits: Sequence of 0s and 1s, most significant first.

    Returns:
        Identifier in range 0 to 2**len(data_bits) - 1.
    """
    value = 0
    for bit in data_bits:
        value = (value << 1) | (bit & 1)
    return value


def id_to_bits(sigil_id: int) -> list[int]:
    """Convert an identifier to its 9 data bits (MSB first).

    Raises:
        ValueError: If sigil_id is outside 0-511.
    """
    if not 0 <= sigil_id <= MAX_SIGIL_ID:
        raise ValueError(f"sigil_id must be 0-{MAX_SIGIL_ID}, got {sigil_id}")
    return [(sigil_id >> i) & 1 for i in range(DATA_BITS - 1, -1, -1)]


def compute_parity(data_bits: Sequence[int]) -> list[int]:
    """Compute the four parity bits for a 9-bit data vector.

    Args:
        data_bits: Nine data bits in significance order.

    Returns:
        Four parity bits, in PARITY_INDICES order.
    """
    parity: list[int] = []
    for subset in PARITY_SUBSETS:
        value = 0
        for position in subset:
            value ^= data_bits[position]
        parity.append(value)
    return parity


def extract_data_bits(bits: Sequence[int]) -> list[int]:
    """Pull the 9 data bits out of a full 16-bit canonical vector."""
    return [bits[i] for i in DATA_INDICES]


def extract_parity_bits(bits: Sequence[int]) -> list[int]:
    """Pull the 4 parity bits out of a full 16-bit canonical vector."""
    return [bits[i] for i in PARITY_INDICES]


def validate_parity(bits: Sequence[int]) -> bool:
    """Check all four parity equations on a 16-bit canonical vector.

    Returns:
        True only if every parity bit matches its data subset.
    """
    if len(bits) != TOTAL_CELLS:
        return False
    return extract_parity_bits(bits) == compute_parity(extract_data_bits(bits))


def has_valid_structure(bits: Sequence[int]) -> bool:
    """True if anchors read dark (1) and sync reads light (0)."""
    return all(bits[i] == 1 for i in ANCHOR_INDICES) and bits[SYNC_INDEX] == 0
