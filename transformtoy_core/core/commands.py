from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, ClassVar, Union


@dataclass(frozen=True)
class Translate:
    name: ClassVar[str] = "translate"
    tx: float
    ty: float


@dataclass(frozen=True)
class Rotate:
    name: ClassVar[str] = "rotate"
    angle_deg: float


@dataclass(frozen=True)
class Scale:
    name: ClassVar[str] = "scale"
    sx: float
    sy: float


@dataclass(frozen=True)
class Shear:
    name: ClassVar[str] = "shear"
    shx: float
    shy: float


@dataclass(frozen=True)
class GenericAffine:
    name: ClassVar[str] = "transform"
    a: float
    b: float
    c: float
    d: float
    e: float
    f: float


@dataclass(frozen=True)
class Save:
    name: ClassVar[str] = "save"


@dataclass(frozen=True)
class Restore:
    name: ClassVar[str] = "restore"


@dataclass(frozen=True)
class SetFillColor:
    name: ClassVar[str] = "fillStyle"
    color: str


@dataclass(frozen=True)
class SetStrokeColor:
    name: ClassVar[str] = "strokeStyle"
    color: str


@dataclass(frozen=True)
class FillRect:
    name: ClassVar[str] = "fillRect"
    x: float
    y: float
    w: float
    h: float
    color: str | None = None


@dataclass(frozen=True)
class StrokeRect:
    name: ClassVar[str] = "strokeRect"
    x: float
    y: float
    w: float
    h: float
    color: str | None = None


@dataclass(frozen=True)
class FillTriangle:
    name: ClassVar[str] = "fillTriangle"
    x1: float
    y1: float
    x2: float
    y2: float
    x3: float
    y3: float
    color: str | None = None


@dataclass(frozen=True)
class StrokeTriangle:
    name: ClassVar[str] = "strokeTriangle"
    x1: float
    y1: float
    x2: float
    y2: float
    x3: float
    y3: float
    color: str | None = None


@dataclass(frozen=True)
class FillArc:
    name: ClassVar[str] = "fillArc"
    x: float
    y: float
    r: float
    start_deg: float
    end_deg: float
    ccw: bool | None = None
    color: str | None = None


@dataclass(frozen=True)
class StrokeArc:
    name: ClassVar[str] = "strokeArc"
    x: float
    y: float
    r: float
    start_deg: float
    end_deg: float
    ccw: bool | None = None
    color: str | None = None


@dataclass(frozen=True)
class InvalidCommand:
    """Placeholder for an instruction that failed validation.

    Occupies a timeline slot but has no transform, style or drawing effect.
    """

    name: ClassVar[str] = "invalid"
    raw: tuple[Any, ...]
    reason: str


TransformCommand = Union[Translate, Rotate, Scale, Shear, GenericAffine]
StackCommand = Union[Save, Restore]
StyleCommand = Union[SetFillColor, SetStrokeColor]
FillCommand = Union[FillRect, FillTriangle, FillArc]
StrokeCommand = Union[StrokeRect, StrokeTriangle, StrokeArc]
DrawCommand = Union[FillCommand, StrokeCommand]
Command = Union[TransformCommand, StackCommand, StyleCommand, DrawCommand, InvalidCommand]

TRANSFORM_TYPES: tuple[type, ...] = (Translate, Rotate, Scale, Shear, GenericAffine)
STACK_TYPES: tuple[type, ...] = (Save, Restore)
STYLE_TYPES: tuple[type, ...] = (SetFillColor, SetStrokeColor)
FILL_TYPES: tuple[type, ...] = (FillRect, FillTriangle, FillArc)
STROKE_TYPES: tuple[type, ...] = (StrokeRect, StrokeTriangle, StrokeArc)
DRAW_TYPES: tuple[type, ...] = FILL_TYPES + STROKE_TYPES

COMMAND_TYPES: tuple[type, ...] = TRANSFORM_TYPES + STACK_TYPES + STYLE_TYPES + DRAW_TYPES
COMMANDS_BY_NAME: dict[str, type] = {cls.name: cls for cls in COMMAND_TYPES}


def command_args(command: Command) -> tuple[Any, ...]:
    """Positional wire arguments of a command, with trailing omitted optionals dropped."""

    if isinstance(command, InvalidCommand):
        return tuple(command.raw[1:])
    values = [getattr(command, f.name) for f in fields(command)]
    while values and values[-1] is None:
        values.pop()
    return tuple(values)


def is_stack_command(command: Command) -> bool:
    return isinstance(command, STACK_TYPES)
