"""Sigil encoder: identifier to 16-cell bit pattern.

Encoding algorithm:
1. Convert the id to 9 data bits (MSB first)
2. Compute the 4 parity bits from their fixed data subsets
3. Place anchors (1), sync (0), data and parity into canonical order

The output is a canonical (unrotated) pattern. Use
``rotation.capture_rotated`` to obtain how it reads when the printed
marker is turned by 120 or 240 degrees.
"""

from __future__ import annotations

import structlog

from .bits import (
    ANCHOR_INDICES,
    DATA_INDICES,
    PARITY_INDICES,
    SYNC_INDEX,
    TOTAL_CELLS,
    compute_parity,
    id_to_bits,
)

logger = structlog.get_logger(__name__)


def encode(sigil_id: int) -> list[int]:
    """Encode an identifier into a 16-bit canonical pattern.

    Args:
        sigil_id: Identifier (0-511).

    Returns:
        16 bits in canonical cell order (1 = dark).

    Raises:
        ValueError: If sigil_id is out of range.
    """
    data_bits = id_to_bits(sigil_id)
    parity_bits = compute_parity(data_bits)

    pattern = [0] * TOTAL_CELLS
    for index in ANCHOR_INDICES:
        pattern[index] = 1
    pattern[SYNC_INDEX] = 0
    for index, bit in zip(DATA_INDICES, data_bits):
        pattern[index] = bit
    for index, bit in zip(PARITY_INDICES, parity_bits):
        pattern[index] = bit

    logger.debug("sigil_encoded", sigil_id=sigil_id, parity=parity_bits)
    return pattern


def pattern_to_str(pattern: list[int]) -> str:
    """Format a 16-bit pattern row by row as a triangle of 0/1 digits."""
    rows: list[str] = []
    start = 0
    for r in range(4):
        width = 2 * r + 1
        digits = " ".join(str(b) for b in pattern[start : start + width])
        rows.append(" " * (2 * (3 - r)) + digits)
        start += width
    return "\n".join(rows)
