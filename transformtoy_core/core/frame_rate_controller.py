from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Iterator

from .scheduler import PlaybackScheduler

LOGGER = logging.getLogger(__name__)


@dataclass
class FrameRateController:
    """Synthetic frame clock in milliseconds, with an optional slower present cadence."""

    target_fps: int = 60
    present_fps: int | None = None
    _next_present_at: float | None = None

    def __post_init__(self) -> None:
        if self.target_fps <= 0:
            raise ValueError("target_fps must be > 0")
        if self.present_fps is not None and self.present_fps <= 0:
            raise ValueError("present_fps must be > 0 when provided")
        if self.present_fps is not None and self.present_fps > self.target_fps:
            self.present_fps = self.target_fps

    @property
    def frame_ms(self) -> float:
        return 1000.0 / float(self.target_fps)

    @property
    def present_ms(self) -> float:
        fps = self.target_fps if self.present_fps is None else self.present_fps
        return 1000.0 / float(fps)

    def frame_times(self, start_ms: float = 0.0) -> Iterator[float]:
        frame = 0
        while True:
            yield start_ms + frame * self.frame_ms
            frame += 1

    def should_present(self, now_ms: float) -> bool:
        if self._next_present_at is None:
            self._next_present_at = now_ms
        if now_ms < self._next_present_at:
            return False
        while self._next_present_at <= now_ms:
            self._next_present_at += self.present_ms
        return True


def run_playback(
    scheduler: PlaybackScheduler,
    controller: FrameRateController,
    *,
    start_ms: float = 0.0,
    max_frames: int = 10_000,
    on_present: Callable[[int, float, float], None] | None = None,
) -> int:
    """Tick `scheduler` on the controller's clock until it goes idle.

    `on_present(frame, now_ms, value)` is called on frames selected by the
    present cadence. Returns the number of ticks.
    """

    if max_frames <= 0:
        raise ValueError("max_frames must be > 0")
    ticks = 0
    presented = 0
    for now in controller.frame_times(start_ms):
        if ticks >= max_frames:
            LOGGER.warning("playback stopped after %d frames", ticks)
            scheduler.cancel()
            break
        more = scheduler.tick(now)
        ticks += 1
        if on_present is not None and (controller.should_present(now) or not more):
            on_present(presented, now, scheduler.value)
            presented += 1
        if not more:
            break
    LOGGER.debug("playback finished: %d ticks, %d presented", ticks, presented)
    return ticks
