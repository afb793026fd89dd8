from __future__ import annotations

from functools import partial
from typing import Any, Sequence

import numpy as np

from transformtoy_core.core.affine import IDENTITY, Affine2D
from transformtoy_core.core.compiler import CompiledTimeline, compile_program
from transformtoy_core.core.config import DEFAULT_CONFIG, ToyConfig
from transformtoy_core.core.evaluator import BACKWARD, FORWARD, check_direction, render
from transformtoy_core.core.scheduler import PlaybackScheduler
from transformtoy_core.core.trace import Trace
from transformtoy_core.core.validation import ValidationPolicy

from .frame_marker import draw_frame_marker
from .raster import RasterSurface
from .surface import DrawingSurface


class TimelineView:
    """One toy canvas: centers and scales the scene, draws the frames and renders the timeline.

    A `final_result` view always renders forward at the end of the program,
    while keeping the frame colors of the current direction.
    """

    def __init__(
        self,
        timeline: CompiledTimeline,
        config: ToyConfig = DEFAULT_CONFIG,
        *,
        surface: DrawingSurface | None = None,
        direction: int = FORWARD,
        final_result: bool = False,
    ) -> None:
        self.timeline = timeline
        self.config = config
        self.surface: DrawingSurface = surface or RasterSurface(config.canvas_size, config.canvas_size)
        self.final_result = final_result
        self._direction = check_direction(timeline, direction)
        self.last_trace = Trace()

    @classmethod
    def from_program(
        cls,
        raws: Sequence[Sequence[Any]],
        config: ToyConfig = DEFAULT_CONFIG,
        *,
        policy: ValidationPolicy = "skip",
        **kwargs: Any,
    ) -> "TimelineView":
        timeline = compile_program(
            raws, policy=policy, default_fill=config.default_fill, default_stroke=config.default_stroke
        )
        return cls(timeline, config, **kwargs)

    @property
    def direction(self) -> int:
        return self._direction

    @direction.setter
    def direction(self, value: int) -> None:
        self._direction = check_direction(self.timeline, value)

    @property
    def length(self) -> int:
        return len(self.timeline)

    def base_transform(self) -> Affine2D:
        half = self.config.canvas_size / 2.0
        scale = self.config.canvas_scale
        return IDENTITY.translate(half, half).scale(scale, scale)

    def draw(self, param: float) -> Trace:
        config = self.config
        backward_colors = self._direction == BACKWARD
        start_color = config.backward_start_frame_color if backward_colors else config.forward_start_frame_color
        current_color = (
            config.backward_current_frame_color if backward_colors else config.forward_current_frame_color
        )
        direction = FORWARD if self.final_result else self._direction

        surface = self.surface
        surface.clear()
        surface.set_transform(IDENTITY)
        surface.save()
        try:
            surface.set_transform(self.base_transform())
            if config.show_origin_frame:
                draw_frame_marker(surface, start_color)
            marker = partial(draw_frame_marker, color=current_color) if config.show_current_frame else None
            trace = render(
                self.timeline,
                param,
                direction,
                surface,
                reverse_right_to_left=config.reverse_right_to_left and not self.final_result,
                marker=marker,
            )
        finally:
            surface.restore()
        self.last_trace = trace
        return trace

    def draw_final(self) -> Trace:
        return self.draw(float(self.length))

    def make_scheduler(self) -> PlaybackScheduler:
        """Scheduler over `[0, N]` that redraws this view on every value."""

        return PlaybackScheduler(
            self.draw,
            minimum=0.0,
            maximum=float(self.length),
            animation_duration_ms=self.config.animation_duration_ms,
            step_duration_ms=self.config.step_duration_ms,
            reverse_right_to_left=self.config.reverse_right_to_left,
            step_size=self.config.play_step_size,
        )


def side_by_side(left: np.ndarray, right: np.ndarray, gap: int = 0) -> np.ndarray:
    """Join two RGBA canvases horizontally, padding the shorter one."""

    height = max(left.shape[0], right.shape[0])
    pieces = []
    for i, part in enumerate((left, right)):
        if part.shape[0] < height:
            pad = np.full((height - part.shape[0], part.shape[1], 4), 255, dtype=np.uint8)
            part = np.vstack((part, pad))
        pieces.append(part)
        if gap and i == 0:
            pieces.append(np.full((height, gap, 4), 255, dtype=np.uint8))
    return np.hstack(pieces)
