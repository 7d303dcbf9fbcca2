"""Per-frame pipeline: sample, decode, confirm.

One ``SigilScanner`` owns a decoder and a tracker. The host calls
``process_frame`` once per frame (for example once per display
refresh) after warping the detected triangle into canonical space.
Frames must be processed in order and never concurrently.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from .decoder import DecodeResult, DecoderConfig, SigilDecoder
from .extractor import LuminanceSampler
from .tracker import ConfirmationTracker, TrackerStatus

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class FrameReport:
    """Everything a display needs after one frame.

    Attributes:
        result: This frame's decode, or None.
        status: Confirmation status after applying the frame.
    """

    result: DecodeResult | None
    status: TrackerStatus

    @property
    def detected(self) -> bool:
        return self.result is not None


class SigilScanner:
    """Decode-and-confirm loop for a stream of frames."""

    def __init__(
        self,
        decoder: SigilDecoder | None = None,
        tracker: ConfirmationTracker | None = None,
        config: DecoderConfig | None = None,
    ):
        self.decoder = decoder or SigilDecoder(config)
        self.tracker = tracker or ConfirmationTracker()
        self.frames = 0

    def process_samples(self, samples: Sequence[float], now: float | None = None) -> FrameReport:
        """Run one frame from an already sampled 16-value vector."""
        result = self.decoder.decode(samples)
        return self._apply(result, now)

    def process_frame(self, sampler: LuminanceSampler, now: float | None = None) -> FrameReport:
        """Run one frame: sample the canonical image, decode, update the tracker."""
        result = self.decoder.decode_sampler(sampler)
        return self._apply(result, now)

    def process_miss(self, now: float | None = None) -> FrameReport:
        """Record a frame where no triangle was detected."""
        return self._apply(None, now)

    def _apply(self, result: DecodeResult | None, now: float | None) -> FrameReport:
        self.frames += 1
        status = self.tracker.update(result, now)
        if result is not None:
            logger.debug(
                "frame_decoded",
                frame=self.frames,
                sigil_id=result.sigil_id,
                rotation=result.rotation,
                status=status.status,
            )
        return FrameReport(result=result, status=status)
