"""Rotation hypotheses for the 3-fold symmetry of a sigil.

A triangular marker can be captured in three physical orientations.
Once the detected triangle is warped into canonical space, each
orientation is just a permutation of the 16 cells. This module
precomputes those permutations by rotating the canonical centroids
about the triangle centroid and matching each rotated point to the
nearest canonical cell.

Map semantics: ``maps[r][i] = j`` means the bit belonging at canonical
index ``i`` was captured at index ``j`` of the sampled vector.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from .layout import CanonicalLayout

logger = structlog.get_logger(__name__)

ROTATION_ANGLES: tuple[int, ...] = (0, 120, 240)


def _nearest_cell(layout: CanonicalLayout, x: float, y: float) -> int:
    """Index of the canonical centroid nearest to (x, y); ties go to the lowest index."""
    best_index = 0
    best_dist = math.inf
    for cell in layout.cells:
        dist = (cell.x - x) ** 2 + (cell.y - y) ** 2
        if dist < best_dist:
            best_dist = dist
            best_index = cell.index
    return best_index


def compute_rotation_map(layout: CanonicalLayout, angle_deg: float) -> tuple[int, ...]:
    """Compute the cell permutation for one rotation angle.

    Args:
        layout: Canonical cell layout.
        angle_deg: Rotation angle in degrees (image coordinates, y down).

    Returns:
        Tuple of 16 sampled indices, one per canonical index.
    """
    cx, cy = layout.centroid
    theta = math.radians(angle_deg)
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)

    mapping: list[int] = []
    for cell in layout.cells:
        dx = cell.x - cx
        dy = cell.y - cy
        rx = dx * cos_t - dy * sin_t + cx
        ry = dx * sin_t + dy * cos_t + cy
        mapping.append(_nearest_cell(layout, rx, ry))
    return tuple(mapping)


@dataclass(frozen=True)
class RotationMaps:
    """Precomputed permutations for the 0, 120 and 240 degree hypotheses.

    Attributes:
        maps: One 16-tuple per angle in ROTATION_ANGLES order.
    """

    maps: tuple[tuple[int, ...], ...]

    @classmethod
    def build(cls, layout: CanonicalLayout) -> RotationMaps:
        """Build the three rotation maps for a layout."""
        identity = tuple(range(len(layout.cells)))
        maps = [identity]
        for angle in ROTATION_ANGLES[1:]:
            maps.append(compute_rotation_map(layout, angle))

        for angle, mapping in zip(ROTATION_ANGLES, maps):
            if sorted(mapping) != list(identity):
                # Only happens if the layout centroids are not a symmetric grid
                logger.warning("rotation_map_not_permutation", angle=angle, mapping=mapping)

        return cls(maps=tuple(maps))

    def __getitem__(self, hypothesis: int) -> tuple[int, ...]:
        return self.maps[hypothesis]

    def __len__(self) -> int:
        return len(self.maps)

    def items(self) -> list[tuple[int, tuple[int, ...]]]:
        """(angle, map) pairs in hypothesis order."""
        return list(zip(ROTATION_ANGLES, self.maps))


def remap(values: Sequence, mapping: Sequence[int]) -> list:
    """Reorder sampled values into a hypothesis's canonical frame.

    ``canon[i] = values[mapping[i]]``.
    """
    return [values[j] for j in mapping]


def capture_rotated(pattern: Sequence, mapping: Sequence[int]) -> list:
    """Simulate capturing a canonical pattern under a physical rotation.

    Inverse of remap: ``captured[mapping[i]] = pattern[i]``.
    """
    captured = list(pattern)
    for i, j in enumerate(mapping):
        captured[j] = pattern[i]
    return captured
