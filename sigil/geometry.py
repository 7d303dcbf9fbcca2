"""Correspondence between a detected triangle and canonical space.

The external detector hands over three image-space vertices in no
particular order. They are put in a deterministic order (top vertex by
smallest y, then the remaining two by x) and paired with the canonical
triangle corners: top (W/2, 0), bottom-left (0, H), bottom-right (W, H).
Which physical corner ends up on top does not matter here; the rotation
hypotheses resolve that from the sampled bits.

The affine matrix produced here is what the external warp applies to
bring the image into canonical space.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import structlog

from .layout import CanonicalLayout

logger = structlog.get_logger(__name__)

Point = tuple[float, float]

# Twice the triangle area below which vertices are treated as collinear
MIN_DOUBLE_AREA = 1e-6


def order_vertices(points: Sequence[Sequence[float]]) -> tuple[Point, Point, Point]:
    """Order three triangle vertices as (top, bottom_left, bottom_right).

    Args:
        points: Three (x, y) image-space vertices in any order.

    Returns:
        Vertices sorted by y for the top one, the other two by x.

    Raises:
        ValueError: If there are not exactly three vertices.
    """
    if len(points) != 3:
        raise ValueError(f"Expected 3 vertices, got {len(points)}")

    pts = sorted(((float(p[0]), float(p[1])) for p in points), key=lambda p: p[1])
    top = pts[0]
    bottom_left, bottom_right = sorted(pts[1:], key=lambda p: p[0])
    return top, bottom_left, bottom_right


def affine_to_canonical(
    points: Sequence[Sequence[float]],
    layout: CanonicalLayout,
) -> np.ndarray:
    """Affine matrix mapping the detected triangle onto the canonical one.

    Args:
        points: Three image-space vertices in any order.
        layout: Canonical layout whose corners are the destination.

    Returns:
        2x3 float matrix M with ``M @ [x, y, 1] = (u, v)`` in canonical space.

    Raises:
        ValueError: If the vertices are not three distinct, non-collinear points.
    """
    top, bottom_left, bottom_right = order_vertices(points)
    src = np.array([top, bottom_left, bottom_right], dtype=np.float64)

    edge_a = src[1] - src[0]
    edge_b = src[2] - src[0]
    double_area = abs(edge_a[0] * edge_b[1] - edge_a[1] * edge_b[0])
    if double_area < MIN_DOUBLE_AREA:
        logger.debug("degenerate_triangle", vertices=src.tolist())
        raise ValueError("Degenerate triangle: vertices are collinear or repeated")

    a = np.hstack([src, np.ones((3, 1))])
    dst = np.array(layout.vertices, dtype=np.float64)
    return np.linalg.solve(a, dst).T


def apply_affine(matrix: np.ndarray, point: Sequence[float]) -> Point:
    """Map one (x, y) point through a 2x3 affine matrix."""
    u, v = matrix @ np.array([point[0], point[1], 1.0])
    return float(u), float(v)
