"""Canonical cell layout of a sigil.

The sigil is an equilateral triangle (apex at top) divided into 4 rows
of sub-triangles. Row r holds 2r+1 cells alternating upward/downward,
for 16 cells in total. Cells are indexed row-major, left to right:

            0
         1  2  3
      4  5  6  7  8
   9 10 11 12 13 14 15

All positions are in canonical space: a triangle with base width W and
height W*sqrt(3)/2, as produced by the external warp.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .bits import CELL_ROLES

# Canonical warp size (base width in pixels)
WARP_SIZE = 200
ROW_COUNT = 4


@dataclass(frozen=True)
class Cell:
    """One of the 16 sub-triangles of a sigil.

    Attributes:
        index: Stable cell index (0-15).
        x: Centroid x in canonical space.
        y: Centroid y in canonical space.
        role: anchor, sync, data or parity.
        upward: True for apex-up sub-triangles.
    """

    index: int
    x: float
    y: float
    role: str
    upward: bool


@dataclass(frozen=True)
class CanonicalLayout:
    """Cell centroids of the canonical triangle.

    Attributes:
        width: Base width of the canonical triangle.
        height: Height (width * sqrt(3) / 2).
        cells: The 16 cells in index order.
    """

    width: float
    height: float
    cells: tuple[Cell, ...]

    @classmethod
    def build(cls, width: float = WARP_SIZE) -> CanonicalLayout:
        """Compute the layout for a triangle of the given base width.

        Raises:
            ValueError: If width is not positive.
        """
        if width <= 0:
            raise ValueError(f"width must be positive, got {width}")

        height = width * math.sqrt(3) / 2
        row_height = height / ROW_COUNT
        half_base = width / 8  # half of a sub-triangle base

        cells: list[Cell] = []
        for r in range(ROW_COUNT):
            top = r * row_height
            for k in range(2 * r + 1):
                upward = k % 2 == 0
                cy = top + row_height * (2 / 3 if upward else 1 / 3)
                cx = width / 2 + (k - r) * half_base
                index = len(cells)
                cells.append(Cell(index, cx, cy, CELL_ROLES[index], upward))

        return cls(width=width, height=height, cells=tuple(cells))

    @property
    def centroid(self) -> tuple[float, float]:
        """Centroid of the whole triangle (rotation center)."""
        return (self.width / 2, self.height * 2 / 3)

    @property
    def points(self) -> list[tuple[float, float]]:
        """Cell centroids as (x, y) tuples, in index order."""
        return [(c.x, c.y) for c in self.cells]

    @property
    def vertices(self) -> list[tuple[float, float]]:
        """Outer triangle corners: top, bottom-left, bottom-right."""
        return [(self.width / 2, 0.0), (0.0, self.height), (self.width, self.height)]

    def cell_vertices(self, index: int) -> list[tuple[float, float]]:
        """Corners of one sub-triangle, derived from its centroid."""
        cell = self.cells[index]
        row_height = self.height / ROW_COUNT
        half_base = self.width / 8
        if cell.upward:
            top = cell.y - row_height * 2 / 3
            bottom = top + row_height
            return [
                (cell.x, top),
                (cell.x - half_base, bottom),
                (cell.x + half_base, bottom),
            ]
        top = cell.y - row_height / 3
        bottom = top + row_height
        return [
            (cell.x - half_base, top),
            (cell.x + half_base, top),
            (cell.x, bottom),
        ]
