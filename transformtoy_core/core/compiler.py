from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Iterator, Sequence

from .affine import IDENTITY, Affine2D, lerp
from .colors import DEFAULT_COLOR, RGBA, fade_alpha, parse_color
from .commands import (
    DRAW_TYPES,
    FILL_TYPES,
    STROKE_TYPES,
    Command,
    GenericAffine,
    InvalidCommand,
    Restore,
    Rotate,
    Save,
    Scale,
    SetFillColor,
    SetStrokeColor,
    Shear,
    Translate,
    is_stack_command,
)
from .errors import CommandValidationError
from .validation import ValidationPolicy, decode_command_list

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepEffect:
    """Partial effect of one step at a given progress `t`."""

    matrix: Affine2D
    fill: RGBA
    stroke: RGBA


@dataclass(frozen=True)
class StackWarning:
    index: int
    stack: str
    message: str


@dataclass(frozen=True)
class CompiledStep:
    index: int
    command: Command
    prev_matrix: Affine2D
    matrix: Affine2D
    fill_before: RGBA
    stroke_before: RGBA
    fill_after: RGBA
    stroke_after: RGBA
    fill_color: RGBA
    stroke_color: RGBA
    fill_style: str
    stroke_style: str
    show_fill_style: bool = False
    show_stroke_style: bool = False

    def partial(self, t: float) -> Affine2D:
        """Local transform contributed by this step at progress `t`."""

        t = _clamp01(t)
        command = self.command
        if isinstance(command, Translate):
            return Affine2D.translation(command.tx * t, command.ty * t)
        if isinstance(command, Rotate):
            return Affine2D.rotation(command.angle_deg * t)
        if isinstance(command, Scale):
            return Affine2D.scaling(lerp(1.0, command.sx, t), lerp(1.0, command.sy, t))
        if isinstance(command, Shear):
            return Affine2D.shearing(lerp(0.0, command.shx, t), lerp(0.0, command.shy, t))
        if isinstance(command, GenericAffine):
            return Affine2D(
                a=lerp(1.0, command.a, t),
                b=lerp(0.0, command.b, t),
                c=lerp(0.0, command.c, t),
                d=lerp(1.0, command.d, t),
                e=lerp(0.0, command.e, t),
                f=lerp(0.0, command.f, t),
            )
        # save/restore, style, drawing and invalid slots never move the frame mid-step
        return IDENTITY

    def apply_transform(self, matrix: Affine2D, t: float) -> Affine2D:
        return matrix.multiply(self.partial(t))

    def progress(self, t: float) -> StepEffect:
        t = _clamp01(t)
        command = self.command
        if isinstance(command, (Translate, Rotate, Scale, Shear, GenericAffine)):
            return StepEffect(self.apply_transform(self.prev_matrix, t), self.fill_after, self.stroke_after)
        if isinstance(command, (SetFillColor, SetStrokeColor)):
            return StepEffect(self.prev_matrix, self.fill_after, self.stroke_after)
        if isinstance(command, DRAW_TYPES):
            return StepEffect(self.prev_matrix, fade_alpha(self.fill_color, t), fade_alpha(self.stroke_color, t))
        if isinstance(command, (Save, Restore, InvalidCommand)):
            # stack changes land only once the step completes
            if t >= 1.0:
                return StepEffect(self.matrix, self.fill_after, self.stroke_after)
            return StepEffect(self.prev_matrix, self.fill_before, self.stroke_before)
        raise TypeError(f"unhandled command: {command!r}")


@dataclass(frozen=True)
class CompiledTimeline:
    steps: tuple[CompiledStep, ...] = ()
    warnings: tuple[StackWarning, ...] = ()
    errors: tuple[CommandValidationError, ...] = field(default=(), compare=False)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[CompiledStep]:
        return iter(self.steps)

    def __getitem__(self, index: int) -> CompiledStep:
        return self.steps[index]

    @property
    def commands(self) -> tuple[Command, ...]:
        return tuple(step.command for step in self.steps)

    @property
    def has_stack_commands(self) -> bool:
        return any(is_stack_command(step.command) for step in self.steps)

    @property
    def supports_backward(self) -> bool:
        return not self.has_stack_commands

    @property
    def final_matrix(self) -> Affine2D:
        if not self.steps:
            return IDENTITY
        return self.steps[-1].matrix


class _StylePass:
    """Fill/stroke tracking with independent save/restore stacks."""

    def __init__(self, default_fill: str, default_stroke: str) -> None:
        self.default_fill = default_fill
        self.default_stroke = default_stroke
        self.fill: str | None = None
        self.stroke: str | None = None
        self.fill_stack: list[str | None] = []
        self.stroke_stack: list[str | None] = []

    @property
    def resolved_fill(self) -> str:
        return self.fill or self.default_fill

    @property
    def resolved_stroke(self) -> str:
        return self.stroke or self.default_stroke

    def apply(self, command: Command, index: int, warnings: list[StackWarning]) -> None:
        if isinstance(command, SetFillColor):
            self.fill = command.color
        elif isinstance(command, SetStrokeColor):
            self.stroke = command.color
        elif isinstance(command, Save):
            self.fill_stack.append(self.fill)
            self.stroke_stack.append(self.stroke)
        elif isinstance(command, Restore):
            if self.fill_stack:
                self.fill = self.fill_stack.pop()
            else:
                warnings.append(_stack_warning(index, "fill"))
            if self.stroke_stack:
                self.stroke = self.stroke_stack.pop()
            else:
                warnings.append(_stack_warning(index, "stroke"))


class _MatrixPass:
    def __init__(self) -> None:
        self.current = IDENTITY
        self.stack: list[Affine2D] = []

    def apply(self, command: Command, index: int, warnings: list[StackWarning]) -> None:
        if isinstance(command, Translate):
            self.current = self.current.translate(command.tx, command.ty)
        elif isinstance(command, Rotate):
            self.current = self.current.rotate(command.angle_deg)
        elif isinstance(command, Scale):
            self.current = self.current.scale(command.sx, command.sy)
        elif isinstance(command, Shear):
            self.current = self.current.multiply(Affine2D.shearing(command.shx, command.shy))
        elif isinstance(command, GenericAffine):
            self.current = self.current.multiply(
                Affine2D(command.a, command.b, command.c, command.d, command.e, command.f)
            )
        elif isinstance(command, Save):
            self.stack.append(self.current)
        elif isinstance(command, Restore):
            if self.stack:
                self.current = self.stack.pop()
            else:
                warnings.append(_stack_warning(index, "matrix"))


def compile_commands(
    commands: Sequence[Command],
    *,
    default_fill: str = DEFAULT_COLOR,
    default_stroke: str = DEFAULT_COLOR,
    errors: Sequence[CommandValidationError] = (),
) -> CompiledTimeline:
    """Compile a command list into per-step cumulative state, in one left-to-right pass."""

    style = _StylePass(default_fill, default_stroke)
    matrices = _MatrixPass()
    warnings: list[StackWarning] = []
    steps: list[CompiledStep] = []
    prev_fill_style: str | None = None
    prev_stroke_style: str | None = None

    for index, command in enumerate(commands):
        fill_before = parse_color(style.resolved_fill)
        stroke_before = parse_color(style.resolved_stroke)
        style.apply(command, index, warnings)
        fill_style = style.resolved_fill
        stroke_style = style.resolved_stroke
        fill_after = parse_color(fill_style)
        stroke_after = parse_color(stroke_style)

        # explicit drawing colors override only their own index
        color = getattr(command, "color", None) if isinstance(command, DRAW_TYPES) else None
        if color is not None and isinstance(command, FILL_TYPES):
            fill_style = color
        if color is not None and isinstance(command, STROKE_TYPES):
            stroke_style = color

        if prev_fill_style is None:
            show_fill = fill_style != default_fill
            show_stroke = stroke_style != default_stroke
        else:
            show_fill = fill_style != prev_fill_style
            show_stroke = stroke_style != prev_stroke_style
        prev_fill_style = fill_style
        prev_stroke_style = stroke_style

        prev_matrix = matrices.current
        matrices.apply(command, index, warnings)

        steps.append(
            CompiledStep(
                index=index,
                command=command,
                prev_matrix=prev_matrix,
                matrix=matrices.current,
                fill_before=fill_before,
                stroke_before=stroke_before,
                fill_after=fill_after,
                stroke_after=stroke_after,
                fill_color=parse_color(fill_style),
                stroke_color=parse_color(stroke_style),
                fill_style=fill_style,
                stroke_style=stroke_style,
                show_fill_style=show_fill,
                show_stroke_style=show_stroke,
            )
        )

    for warning in warnings:
        LOGGER.warning("%s", warning.message)
    LOGGER.debug("compiled %d steps (%d warnings)", len(steps), len(warnings))
    return CompiledTimeline(steps=tuple(steps), warnings=tuple(warnings), errors=tuple(errors))


def compile_program(
    raws: Sequence[Sequence[Any]],
    *,
    policy: ValidationPolicy = "skip",
    default_fill: str = DEFAULT_COLOR,
    default_stroke: str = DEFAULT_COLOR,
) -> CompiledTimeline:
    """Decode raw `[name, *args]` instructions and compile them.

    Under `policy="strict"` a `ProgramValidationError` blocks compilation.
    """

    decoded = decode_command_list(raws, policy=policy)
    return compile_commands(
        decoded.commands,
        default_fill=default_fill,
        default_stroke=default_stroke,
        errors=decoded.report.errors,
    )


def _stack_warning(index: int, stack: str) -> StackWarning:
    return StackWarning(
        index=index,
        stack=stack,
        message=f"restore() at index {index} called with empty stack ({stack} tracking - mismatched save/restore)",
    )


def _clamp01(t: float) -> float:
    return min(1.0, max(0.0, float(t)))
