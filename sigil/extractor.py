"""Luminance sampling and rotation disambiguation.

Turns 16 raw luminance samples (one per canonical cell) into zero to
three candidate bit vectors, one per rotation hypothesis that passes
the structural checks:

1. Remap samples through the hypothesis permutation
2. Both anchors must be darker than the sync cell
3. Contrast (sync minus mean anchor) must clear the noise floor
4. Threshold at the dark/light midpoint for this frame
5. Binarize (darker than threshold -> 1)
6. Anchors must binarize to 1 and sync to 0

The threshold is recalibrated every frame from the anchor and sync
cells, so decoding does not depend on absolute brightness.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

import numpy as np
import structlog

from .bits import ANCHOR_INDICES, SYNC_INDEX, TOTAL_CELLS, has_valid_structure
from .layout import CanonicalLayout
from .rotation import RotationMaps, remap

logger = structlog.get_logger(__name__)

# Minimum light/dark separation (0-255 scale) below which a frame is noise
MIN_CONTRAST = 30
# Half-size of the square averaging window around each centroid (pixels)
SAMPLE_RADIUS = 3
# Threshold position between dark and light reference
THRESHOLD_RATIO = 0.5


class LuminanceSampler(Protocol):
    """Samples canonical-space luminance averaged over a radius."""

    def __call__(self, x: float, y: float, radius: int) -> float: ...


class ArraySampler:
    """Sampler over a grayscale image that is already in canonical space.

    Averages a square window around each query point, the same way the
    radial decoder sampled cell centroids. Points whose window falls
    entirely outside the image read as white (255).
    """

    def __init__(self, gray: np.ndarray):
        if gray.ndim != 2:
            raise ValueError(f"Expected a 2-D grayscale array, got shape {gray.shape}")
        self.gray = gray

    def __call__(self, x: float, y: float, radius: int) -> float:
        h, w = self.gray.shape
        px = int(x)
        py = int(y)

        y_lo = max(0, py - radius)
        y_hi = min(h, py + radius + 1)
        x_lo = max(0, px - radius)
        x_hi = min(w, px + radius + 1)

        if y_lo < y_hi and x_lo < x_hi:
            region = self.gray[y_lo:y_hi, x_lo:x_hi]
            return float(np.mean(region))
        return 255.0


@dataclass(frozen=True)
class BitCandidate:
    """A rotation hypothesis that survived the structural checks.

    Attributes:
        rotation: Hypothesis angle in degrees (0, 120 or 240).
        bits: 16 bits in canonical order.
        contrast: light_ref - dark_ref.
        dark_ref: Mean anchor luminance.
        light_ref: Sync luminance.
        threshold: Binarization threshold used.
    """

    rotation: int
    bits: tuple[int, ...]
    contrast: float
    dark_ref: float
    light_ref: float
    threshold: float


def sample_cells(
    sampler: LuminanceSampler,
    layout: CanonicalLayout,
    radius: int = SAMPLE_RADIUS,
) -> list[float]:
    """Query the sampler at every canonical cell centroid.

    Returns:
        16 luminance values in canonical index order.
    """
    return [float(sampler(x, y, radius)) for x, y in layout.points]


def evaluate_hypothesis(
    samples: Sequence[float],
    mapping: Sequence[int],
    rotation: int,
    min_contrast: float = MIN_CONTRAST,
) -> BitCandidate | None:
    """Run the structural checks for one rotation hypothesis.

    Returns:
        BitCandidate, or None if the hypothesis is rejected.
    """
    canon = remap(samples, mapping)
    light_ref = float(canon[SYNC_INDEX])
    anchors = [float(canon[i]) for i in ANCHOR_INDICES]

    if not all(a < light_ref for a in anchors):
        logger.debug("hypothesis_rejected", rotation=rotation, reason="anchor_order")
        return None

    dark_ref = sum(anchors) / len(anchors)
    contrast = light_ref - dark_ref
    if contrast < min_contrast:
        logger.debug(
            "hypothesis_rejected",
            rotation=rotation,
            reason="low_contrast",
            contrast=round(contrast, 1),
        )
        return None

    threshold = dark_ref + THRESHOLD_RATIO * contrast
    bits = tuple(1 if v < threshold else 0 for v in canon)

    if not has_valid_structure(bits):
        logger.debug("hypothesis_rejected", rotation=rotation, reason="structure")
        return None

    return BitCandidate(
        rotation=rotation,
        bits=bits,
        contrast=contrast,
        dark_ref=dark_ref,
        light_ref=light_ref,
        threshold=threshold,
    )


def extract_candidates(
    samples: Sequence[float],
    rotation_maps: RotationMaps,
    min_contrast: float = MIN_CONTRAST,
) -> list[BitCandidate]:
    """Evaluate every rotation hypothesis for one sample vector.

    All three hypotheses are evaluated; none short-circuits the others.

    Args:
        samples: 16 luminance values in canonical index order.
        rotation_maps: Precomputed rotation permutations.
        min_contrast: Noise floor for light_ref - dark_ref.

    Returns:
        Surviving candidates in hypothesis order (0 to 3 entries).

    Raises:
        ValueError: If samples does not hold exactly 16 values.
    """
    if len(samples) != TOTAL_CELLS:
        raise ValueError(f"Expected {TOTAL_CELLS} samples, got {len(samples)}")

    candidates: list[BitCandidate] = []
    for rotation, mapping in rotation_maps.items():
        candidate = evaluate_hypothesis(samples, mapping, rotation, min_contrast)
        if candidate is not None:
            candidates.append(candidate)
    return candidates
