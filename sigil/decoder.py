"""Sigil decoder: from luminance samples to a validated identifier.

Decodes one frame by:
1. Sampling luminance at the 16 canonical cell centroids
2. Extracting a bit vector for every rotation hypothesis that passes
   the anchor/sync structure checks
3. Reading the 9 data bits (MSB first) as the identifier
4. Validating all four parity equations
5. Returning the valid candidate with the highest contrast

More than one rotation can pass the structural checks on noisy data,
so every hypothesis is decoded and parity decides between them.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import structlog

from .bits import (
    CELL_ROLES,
    bits_to_id,
    compute_parity,
    extract_data_bits,
    extract_parity_bits,
    validate_parity,
)
from .extractor import (
    MIN_CONTRAST,
    SAMPLE_RADIUS,
    BitCandidate,
    LuminanceSampler,
    extract_candidates,
    sample_cells,
)
from .geometry import affine_to_canonical
from .layout import WARP_SIZE, CanonicalLayout
from .rotation import RotationMaps

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class DecoderConfig:
    """Tuning for the decoder.

    Attributes:
        warp_size: Base width of the canonical triangle the sampler works in.
        min_contrast: Noise floor for light_ref - dark_ref (0-255 scale).
        sample_radius: Averaging radius passed to the sampler.
    """

    warp_size: int = WARP_SIZE
    min_contrast: float = MIN_CONTRAST
    sample_radius: int = SAMPLE_RADIUS


@dataclass(frozen=True)
class DecodeResult:
    """A validated sigil read from one frame.

    Attributes:
        sigil_id: Decoded identifier (0-511).
        bits: Full 16-bit vector in canonical order.
        data_bits: The 9 data bits, MSB first.
        parity_bits: The 4 parity bits.
        rotation: Capture rotation in degrees (0, 120 or 240).
        contrast: light_ref - dark_ref for the chosen hypothesis.
        dark_ref: Mean anchor luminance.
        light_ref: Sync luminance.
        threshold: Binarization threshold used.
    """

    sigil_id: int
    bits: tuple[int, ...]
    data_bits: tuple[int, ...]
    parity_bits: tuple[int, ...]
    rotation: int
    contrast: float
    dark_ref: float
    light_ref: float
    threshold: float

    def tagged_bits(self) -> list[tuple[int, str, int]]:
        """(index, role, bit) for each cell, for display."""
        return [(i, CELL_ROLES[i], bit) for i, bit in enumerate(self.bits)]


def decode_candidate(candidate: BitCandidate) -> DecodeResult | None:
    """Validate parity on one candidate and read its identifier.

    Returns:
        DecodeResult, or None if any parity equation fails.
    """
    data_bits = extract_data_bits(candidate.bits)
    parity_bits = extract_parity_bits(candidate.bits)

    if not validate_parity(candidate.bits):
        logger.debug(
            "parity_mismatch",
            rotation=candidate.rotation,
            parity=parity_bits,
            expected=compute_parity(data_bits),
        )
        return None

    return DecodeResult(
        sigil_id=bits_to_id(data_bits),
        bits=candidate.bits,
        data_bits=tuple(data_bits),
        parity_bits=tuple(parity_bits),
        rotation=candidate.rotation,
        contrast=candidate.contrast,
        dark_ref=candidate.dark_ref,
        light_ref=candidate.light_ref,
        threshold=candidate.threshold,
    )


def decode_samples(
    samples: Sequence[float],
    rotation_maps: RotationMaps,
    min_contrast: float = MIN_CONTRAST,
) -> DecodeResult | None:
    """Decode one frame's sample vector.

    Args:
        samples: 16 luminance values in canonical index order.
        rotation_maps: Precomputed rotation permutations.
        min_contrast: Noise floor for light_ref - dark_ref.

    Returns:
        The highest-contrast valid DecodeResult, or None if no
        hypothesis survives structure and parity checks.

    Raises:
        ValueError: If samples does not hold exactly 16 values.
    """
    candidates = extract_candidates(samples, rotation_maps, min_contrast)

    valid: list[DecodeResult] = []
    for candidate in candidates:
        result = decode_candidate(candidate)
        if result is not None:
            valid.append(result)

    if not valid:
        logger.debug("decode_no_valid_candidate", candidates=len(candidates))
        return None

    # max() keeps the first of equal contrasts, i.e. the lowest rotation
    best = max(valid, key=lambda r: r.contrast)
    logger.debug(
        "decode_success",
        sigil_id=best.sigil_id,
        rotation=best.rotation,
        contrast=round(best.contrast, 1),
        valid_candidates=len(valid),
    )
    return best


class SigilDecoder:
    """Frame decoder holding the precomputed layout and rotation maps.

    Build once at startup and reuse for every frame.
    """

    def __init__(self, config: DecoderConfig | None = None):
        self.config = config or DecoderConfig()
        self.layout = CanonicalLayout.build(self.config.warp_size)
        self.rotation_maps = RotationMaps.build(self.layout)

    def decode(self, samples: Sequence[float]) -> DecodeResult | None:
        """Decode a 16-value sample vector."""
        return decode_samples(samples, self.rotation_maps, self.config.min_contrast)

    def sample(self, sampler: LuminanceSampler) -> list[float]:
        """Query a sampler at the canonical cell centroids."""
        return sample_cells(sampler, self.layout, self.config.sample_radius)

    def decode_sampler(self, sampler: LuminanceSampler) -> DecodeResult | None:
        """Sample the canonical image and decode it."""
        return self.decode(self.sample(sampler))

    def canonical_transform(self, vertices: Sequence[Sequence[float]]) -> np.ndarray:
        """Affine matrix taking a detected triangle's vertices into canonical space.

        The external warp applies this matrix before sampling.
        """
        return affine_to_canonical(vertices, self.layout)
