from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import math
from typing import Callable, Union

LOGGER = logging.getLogger(__name__)

DEFAULT_ANIMATION_DURATION_MS = 1000.0
_ON_INTEGER_TOLERANCE = 0.001


class Easing(str, Enum):
    LINEAR = "linear"
    CUBIC_IN_OUT = "cubic-in-out"
    CONSTANT_SPEED = "constant-speed"
    NONE = "none"


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Animating:
    target: float
    start_value: float
    start_time_ms: float | None
    duration_ms: float
    easing: Easing


SchedulerState = Union[Idle, Animating]

IDLE = Idle()


def ease(easing: Easing, progress: float) -> float:
    if easing == Easing.CUBIC_IN_OUT:
        if progress < 0.5:
            return 4.0 * progress * progress * progress
        return 1.0 - ((-2.0 * progress + 2.0) ** 3) / 2.0
    return progress


class PlaybackScheduler:
    """Drives a timeline position over time through `tick(now_ms)`.

    `on_value` is called with every new position; it is the render hook.
    Only one animation runs at a time and starting another replaces it.
    """

    def __init__(
        self,
        on_value: Callable[[float], None] | None = None,
        *,
        minimum: float = 0.0,
        maximum: float = 1.0,
        animation_duration_ms: float = DEFAULT_ANIMATION_DURATION_MS,
        step_duration_ms: float = DEFAULT_ANIMATION_DURATION_MS,
        reverse_right_to_left: bool = False,
        step_size: float | None = None,
    ) -> None:
        if maximum < minimum:
            raise ValueError("maximum must be >= minimum")
        if step_size is not None and (not math.isfinite(step_size) or step_size <= 0):
            raise ValueError("step_size must be > 0")
        self._on_value = on_value
        self.minimum = float(minimum)
        self.maximum = float(maximum)
        self.animation_duration_ms = float(animation_duration_ms)
        self.step_duration_ms = float(step_duration_ms)
        self.reverse_right_to_left = reverse_right_to_left
        self.step_size = None if step_size is None else float(step_size)
        self._value = self.minimum
        self._state: SchedulerState = IDLE

    @property
    def value(self) -> float:
        return self._value

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_animating(self) -> bool:
        return isinstance(self._state, Animating)

    def clamp(self, value: float) -> float:
        return max(self.minimum, min(float(value), self.maximum))

    def quantize(self, value: float) -> float:
        """Snap to the slider grid `minimum + k * step_size`; both range ends stay reachable."""

        value = self.clamp(value)
        if self.step_size is None or value in (self.minimum, self.maximum):
            return value
        steps = round((value - self.minimum) / self.step_size)
        return self.clamp(round(self.minimum + steps * self.step_size, 9))

    def cancel(self) -> None:
        if isinstance(self._state, Animating):
            LOGGER.debug("animation toward %.3f cancelled at %.3f", self._state.target, self._value)
        self._state = IDLE

    def set_value(self, value: float) -> None:
        self.cancel()
        self._render(self.clamp(value))

    def animate_to(
        self,
        target: float,
        duration_ms: float = DEFAULT_ANIMATION_DURATION_MS,
        easing: Easing | str = Easing.LINEAR,
        now_ms: float | None = None,
    ) -> None:
        self.cancel()
        easing = Easing(easing)
        target = self.clamp(target)
        duration = float(duration_ms)
        if not math.isfinite(duration) or duration <= 0 or easing == Easing.NONE:
            self.set_value(target)
            return
        if easing == Easing.CONSTANT_SPEED:
            duration = duration * abs(target - self._value)
            easing = Easing.LINEAR
            if duration <= 0:
                self.set_value(target)
                return
        self._state = Animating(
            target=target,
            start_value=self._value,
            start_time_ms=None if now_ms is None else float(now_ms),
            duration_ms=duration,
            easing=easing,
        )

    def tick(self, now_ms: float) -> bool:
        """Advance a running animation to `now_ms`; returns True while more frames are wanted."""

        state = self._state
        if not isinstance(state, Animating):
            return False
        if state.start_time_ms is None:
            state = Animating(state.target, state.start_value, float(now_ms), state.duration_ms, state.easing)
            self._state = state
        elapsed = max(0.0, float(now_ms) - state.start_time_ms)
        progress = min(elapsed / state.duration_ms, 1.0)
        value = state.start_value + (state.target - state.start_value) * ease(state.easing, progress)
        if progress >= 1.0:
            self._state = IDLE
            value = state.target
        try:
            self._render(value)
        except Exception:
            self._state = IDLE
            raise
        return isinstance(self._state, Animating)

    def play(self, backward: bool = False, now_ms: float | None = None) -> None:
        """Play to the end at constant speed, restarting from the far end when already there."""

        if backward and self.reverse_right_to_left:
            if self._value <= self.minimum:
                self.set_value(self.maximum)
            target = self.minimum
        else:
            if self._value >= self.maximum:
                self.set_value(self.minimum)
            target = self.maximum
        self.animate_to(target, self.animation_duration_ms, Easing.CONSTANT_SPEED, now_ms=now_ms)

    def pause(self) -> None:
        self.cancel()

    def step_forward(self, now_ms: float | None = None) -> None:
        current = self._value
        if abs(current - round(current)) < _ON_INTEGER_TOLERANCE:
            target = round(current) + 1.0
        else:
            target = float(math.ceil(current))
        self.animate_to(min(self.maximum, target), self.step_duration_ms, Easing.LINEAR, now_ms=now_ms)

    def step_backward(self, now_ms: float | None = None) -> None:
        current = self._value
        if abs(current - round(current)) < _ON_INTEGER_TOLERANCE:
            target = round(current) - 1.0
        else:
            target = float(math.floor(current))
        self.animate_to(max(self.minimum, target), self.step_duration_ms, Easing.LINEAR, now_ms=now_ms)

    def first(self) -> None:
        self.set_value(self.minimum)

    def last(self) -> None:
        self.set_value(self.maximum)

    def _render(self, value: float) -> None:
        previous = self._value
        value = self.quantize(value)
        self._value = value
        if self._on_value is None:
            return
        try:
            self._on_value(value)
        except Exception:
            # keep the last position that rendered
            self._value = previous
            raise
