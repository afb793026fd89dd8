from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from .commands import FillArc, FillRect, FillTriangle, StrokeArc, StrokeRect, StrokeTriangle
from .colors import fade_alpha
from .compiler import CompiledStep, CompiledTimeline
from .errors import InvalidModeError
from .trace import Trace, build_trace

if TYPE_CHECKING:
    from transformtoy_core.render.surface import DrawingSurface

LOGGER = logging.getLogger(__name__)

FORWARD = 1
BACKWARD = -1

MarkerFn = Callable[["DrawingSurface"], None]


def clamp_param(param: float, length: int) -> float:
    return max(0.0, min(float(param), float(length)))


def effective_param(param: float, length: int, direction: int, reverse_right_to_left: bool = False) -> float:
    """Position actually evaluated, after clamping and the backward reverse convention."""

    p = clamp_param(param, length)
    if direction == BACKWARD and reverse_right_to_left:
        return length - p
    return p


def check_direction(timeline: CompiledTimeline, direction: int) -> int:
    if direction not in (FORWARD, BACKWARD):
        raise ValueError(f"direction must be {FORWARD} or {BACKWARD}, got {direction!r}")
    if direction == BACKWARD and timeline.has_stack_commands:
        raise InvalidModeError("backward playback is not available for programs containing save/restore")
    return direction


def render(
    timeline: CompiledTimeline,
    param: float,
    direction: int = FORWARD,
    surface: DrawingSurface | None = None,
    *,
    reverse_right_to_left: bool = False,
    marker: MarkerFn | None = None,
) -> Trace:
    """Render `timeline` at `param` and return the execution trace.

    Forward playback nests every step inside its own cumulative frame;
    backward playback accumulates partial transforms against one shared
    frame. With no surface only the trace is computed.
    """

    check_direction(timeline, direction)
    n = len(timeline)
    if n == 0:
        return Trace(position=0.0, direction=direction)

    position = effective_param(param, n, direction, reverse_right_to_left)
    trace = build_trace(timeline.steps, position, direction)
    if surface is None:
        return trace

    if direction == FORWARD:
        _render_nested(timeline, position, surface, marker)
    else:
        _render_flat(timeline, position, surface, marker)
    return trace


def _render_nested(
    timeline: CompiledTimeline,
    position: float,
    surface: DrawingSurface,
    marker: MarkerFn | None,
) -> None:
    last = timeline[0]
    last_amt = 0.0
    for step in timeline:
        i = step.index
        amt = 0.0 if i > position else min(1.0, position - i)
        if amt > 0:
            _draw_in_frame(surface, step, amt, lambda s, step=step, amt=amt: draw_step(s, step, amt))
            last = step
            last_amt = amt
    if marker is not None:
        _draw_in_frame(surface, last, last_amt, marker)


def _render_flat(
    timeline: CompiledTimeline,
    position: float,
    surface: DrawingSurface,
    marker: MarkerFn | None,
) -> None:
    surface.save()
    try:
        for step in timeline:
            i = step.index
            amt = 0.0 if (i + 1) < position else min(1.0, (i + 1) - position)
            if amt > 0:
                surface.set_transform(step.apply_transform(surface.get_transform(), amt))
                draw_step(surface, step, amt)
        if marker is not None:
            marker(surface)
    finally:
        surface.restore()


def _draw_in_frame(surface: DrawingSurface, step: CompiledStep, t: float, block: MarkerFn) -> None:
    surface.save()
    try:
        surface.set_transform(surface.get_transform().multiply(step.progress(t).matrix))
        block(surface)
    finally:
        surface.restore()


def draw_step(surface: DrawingSurface, step: CompiledStep, t: float) -> None:
    """Draw the shape of a drawing step with its color faded to `t`; other steps draw nothing."""

    command = step.command
    fill = fade_alpha(step.fill_color, t)
    stroke = fade_alpha(step.stroke_color, t)
    if isinstance(command, FillRect):
        surface.fill_rect(command.x, command.y, command.w, command.h, fill)
    elif isinstance(command, StrokeRect):
        surface.stroke_rect(command.x, command.y, command.w, command.h, stroke)
    elif isinstance(command, FillTriangle):
        surface.fill_triangle(command.x1, command.y1, command.x2, command.y2, command.x3, command.y3, fill)
    elif isinstance(command, StrokeTriangle):
        surface.stroke_triangle(command.x1, command.y1, command.x2, command.y2, command.x3, command.y3, stroke)
    elif isinstance(command, FillArc):
        surface.fill_arc(command.x, command.y, command.r, command.start_deg, command.end_deg, bool(command.ccw), fill)
    elif isinstance(command, StrokeArc):
        surface.stroke_arc(
            command.x, command.y, command.r, command.start_deg, command.end_deg, bool(command.ccw), stroke
        )
