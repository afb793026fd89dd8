from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .affine import lerp
from .commands import (
    FillArc,
    FillRect,
    FillTriangle,
    GenericAffine,
    InvalidCommand,
    Restore,
    Rotate,
    Save,
    Scale,
    SetFillColor,
    SetStrokeColor,
    Shear,
    StrokeArc,
    StrokeRect,
    StrokeTriangle,
    Translate,
)
from .compiler import CompiledStep

LineState = Literal["done", "active", "pending"]

CURSOR_LINE = "-" * 24


@dataclass(frozen=True)
class TraceLine:
    index: int
    texts: tuple[str, ...]
    state: LineState
    amount: float


@dataclass(frozen=True)
class Trace:
    """Execution trace of a timeline at one position."""

    lines: tuple[TraceLine, ...] = ()
    position: float = 0.0
    direction: int = 1

    @property
    def cursor(self) -> int | None:
        """Index the position cursor sits before, when the position is integral."""

        if not self.lines or not float(self.position).is_integer():
            return None
        return int(self.position)

    @property
    def active_index(self) -> int | None:
        for line in self.lines:
            if line.state == "active":
                return line.index
        return None

    def text(self) -> str:
        out: list[str] = []
        cursor = self.cursor
        for line in self.lines:
            if cursor == line.index:
                out.append(CURSOR_LINE)
            prefix = ">" if line.state == "active" else " "
            for text in line.texts:
                out.append(f"{prefix} {text}")
        if cursor is not None and cursor == len(self.lines):
            out.append(CURSOR_LINE)
        return "\n".join(out)


def build_trace(steps: tuple[CompiledStep, ...], position: float, direction: int) -> Trace:
    lines: list[TraceLine] = []
    for step in steps:
        i = step.index
        amt = 0.0 if i >= position else min(1.0, position - i)
        if i < position < i + 1:
            state: LineState = "active"
        elif amt >= 1.0:
            state = "done"
        else:
            state = "pending"
        shown = (1.0 - amt) if direction < 0 else amt
        lines.append(TraceLine(index=i, texts=describe_step(step, shown), state=state, amount=amt))
    return Trace(lines=tuple(lines), position=position, direction=direction)


def describe_step(step: CompiledStep, t: float) -> tuple[str, ...]:
    """Source-like description of a step with its parameters interpolated at `t`."""

    command = step.command
    if isinstance(command, Translate):
        return (f"translate({_f1(command.tx * t)},{_f1(command.ty * t)});",)
    if isinstance(command, Rotate):
        return (f"rotate({_f1(command.angle_deg * t)});",)
    if isinstance(command, Scale):
        return (f"scale({_f1(lerp(1.0, command.sx, t))},{_f1(lerp(1.0, command.sy, t))});",)
    if isinstance(command, Shear):
        return (f"shear({_f2(command.shx * t)},{_f2(command.shy * t)});",)
    if isinstance(command, GenericAffine):
        values = (
            lerp(1.0, command.a, t),
            lerp(0.0, command.b, t),
            lerp(0.0, command.c, t),
            lerp(1.0, command.d, t),
            lerp(0.0, command.e, t),
            lerp(0.0, command.f, t),
        )
        return (f"transform({','.join(_f2(v) for v in values)});",)
    if isinstance(command, Save):
        return ("save();",)
    if isinstance(command, Restore):
        return ("restore();",)
    if isinstance(command, SetFillColor):
        return (f'fillStyle = "{step.fill_style}";',)
    if isinstance(command, SetStrokeColor):
        return (f'strokeStyle = "{step.stroke_style}";',)
    if isinstance(command, (FillRect, StrokeRect)):
        call = f"{command.name}({_num(command.x)},{_num(command.y)},{_num(command.w)},{_num(command.h)});"
        return _with_style(step, isinstance(command, FillRect), call)
    if isinstance(command, (FillTriangle, StrokeTriangle)):
        coords = (command.x1, command.y1, command.x2, command.y2, command.x3, command.y3)
        call = f"{command.name}({','.join(_num(v) for v in coords)});"
        return _with_style(step, isinstance(command, FillTriangle), call)
    if isinstance(command, (FillArc, StrokeArc)):
        coords = (command.x, command.y, command.r, command.start_deg, command.end_deg)
        ccw = ",true" if command.ccw else ""
        call = f"{command.name}({','.join(_num(v) for v in coords)}{ccw});"
        return _with_style(step, isinstance(command, FillArc), call)
    if isinstance(command, InvalidCommand):
        return (f"// skipped: {command.reason}",)
    raise TypeError(f"unhandled command: {command!r}")


def _with_style(step: CompiledStep, is_fill: bool, call: str) -> tuple[str, ...]:
    if is_fill and step.show_fill_style:
        return (f'fillStyle = "{step.fill_style}";', call)
    if not is_fill and step.show_stroke_style:
        return (f'strokeStyle = "{step.stroke_style}";', call)
    return (call,)


def _f1(value: float) -> str:
    return f"{value + 0.0:.1f}"


def _f2(value: float) -> str:
    return f"{value + 0.0:.2f}"


def _num(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
