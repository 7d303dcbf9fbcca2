"""Temporal confirmation of frame-by-frame decodes.

Turns a stream of per-frame results (possibly empty) into a stable
locked identifier:

- IDLE: nothing tracked
- CONFIRMING: an id has been seen in 1..N-1 consecutive accepted frames
- LOCKED: the id has been seen N or more times in a row

Frames without a result leave the streak untouched, so a sporadic
dropout does not force re-confirmation. Each qualifying frame while
locked pushes the unlock deadline forward; the lock expires only after
``unlock_after`` seconds without one. Seeing a different id while
locked drops the old lock immediately.

The deadline is a plain value checked on every ``update`` and ``tick``,
so there is never more than one pending.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from .decoder import DecodeResult

logger = structlog.get_logger(__name__)

CONFIRM_FRAMES = 3
UNLOCK_AFTER_SECONDS = 5.0

# Tracker states
STATE_IDLE = "idle"
STATE_CONFIRMING = "confirming"
STATE_LOCKED = "locked"

# Display statuses
STATUS_SCANNING = "scanning"
STATUS_CONFIRMING = "confirming"
STATUS_LOCKED = "locked"


@dataclass(frozen=True)
class TrackerStatus:
    """What the display should show after a frame.

    Attributes:
        status: scanning, confirming or locked.
        state: Internal tracker state (idle, confirming, locked).
        count: Consecutive matches of the tracked id.
        needed: Matches required to lock.
        tracked_id: Id currently being confirmed, or None.
        locked_id: Locked id, or None.
    """

    status: str
    state: str
    count: int
    needed: int
    tracked_id: int | None
    locked_id: int | None

    @property
    def label(self) -> str:
        """Short human-readable status line."""
        if self.status == STATUS_LOCKED:
            return f"LOCKED {self.locked_id}"
        if self.status == STATUS_CONFIRMING:
            return f"CONFIRMING {self.count}/{self.needed}"
        return "SCANNING"


class ConfirmationTracker:
    """Debounce decoded ids into a locked identity.

    Not thread-safe: feed frames from a single loop, one at a time.

    Args:
        required_frames: Consecutive matches needed to lock.
        unlock_after: Seconds without a qualifying frame before unlocking.
        clock: Monotonic time source in seconds.

    Raises:
        ValueError: If required_frames or unlock_after is not positive.
    """

    def __init__(
        self,
        required_frames: int = CONFIRM_FRAMES,
        unlock_after: float = UNLOCK_AFTER_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if required_frames < 1:
            raise ValueError(f"required_frames must be >= 1, got {required_frames}")
        if unlock_after <= 0:
            raise ValueError(f"unlock_after must be positive, got {unlock_after}")

        self.required_frames = required_frames
        self.unlock_after = unlock_after
        self._clock = clock

        self.tracked_id: int | None = None
        self.count = 0
        self.locked_id: int | None = None
        self.unlock_deadline: float | None = None

    @property
    def state(self) -> str:
        if self.locked_id is not None:
            return STATE_LOCKED
        if self.count > 0:
            return STATE_CONFIRMING
        return STATE_IDLE

    def reset(self) -> None:
        """Drop any tracked or locked id."""
        self.tracked_id = None
        self.count = 0
        self.locked_id = None
        self.unlock_deadline = None

    def tick(self, now: float | None = None) -> TrackerStatus:
        """Expire the lock if its deadline has passed.

        Hosts that stop feeding frames should call this periodically.
        """
        if now is None:
            now = self._clock()
        self._expire(now)
        return self._status(had_result=False)

    def update(self, result: DecodeResult | None, now: float | None = None) -> TrackerStatus:
        """Advance the state machine by one processed frame.

        Args:
            result: This frame's decode, or None if nothing was decoded.
            now: Current time; defaults to the tracker clock.

        Returns:
            TrackerStatus to display after this frame.
        """
        if now is None:
            now = self._clock()
        self._expire(now)

        if result is None:
            return self._status(had_result=False)

        sigil_id = result.sigil_id
        if sigil_id == self.tracked_id:
            self.count += 1
        else:
            if self.locked_id is not None and self.locked_id != sigil_id:
                logger.info("sigil_unlocked", sigil_id=self.locked_id, reason="id_changed")
                self.locked_id = None
                self.unlock_deadline = None
            self.tracked_id = sigil_id
            self.count = 1

        if self.count >= self.required_frames:
            if self.locked_id != sigil_id:
                logger.info("sigil_locked", sigil_id=sigil_id, count=self.count)
            self.locked_id = sigil_id
            self.unlock_deadline = now + self.unlock_after

        return self._status(had_result=True)

    def _expire(self, now: float) -> None:
        if self.unlock_deadline is not None and now >= self.unlock_deadline:
            logger.info("sigil_unlocked", sigil_id=self.locked_id, reason="timeout")
            self.reset()

    def _status(self, had_result: bool) -> TrackerStatus:
        if self.locked_id is not None:
            status = STATUS_LOCKED
        elif had_result and self.count > 0:
            status = STATUS_CONFIRMING
        else:
            status = STATUS_SCANNING

        return TrackerStatus(
            status=status,
            state=self.state,
            count=self.count,
            needed=self.required_frames,
            tracked_id=self.tracked_id,
            locked_id=self.locked_id,
        )
