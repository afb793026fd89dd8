from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Any, Iterable, Literal, Sequence

from .colors import is_valid_color
from .commands import COMMANDS_BY_NAME, Command, InvalidCommand, command_args
from .errors import CommandValidationError, ProgramValidationError, UnrecognizedCommandError

LOGGER = logging.getLogger(__name__)

ValidationPolicy = Literal["skip", "strict"]

ArgKind = Literal["number", "color", "bool"]


@dataclass(frozen=True)
class ArgSpec:
    name: str
    kind: ArgKind
    required: bool = True


_EXPECTED: dict[str, str] = {
    "number": "finite number",
    "color": "color string",
    "bool": "boolean",
}


def _numbers(*names: str) -> tuple[ArgSpec, ...]:
    return tuple(ArgSpec(name, "number") for name in names)


_OPTIONAL_COLOR = ArgSpec("color", "color", required=False)
_OPTIONAL_CCW = ArgSpec("ccw", "bool", required=False)

COMMAND_SCHEMAS: dict[str, tuple[ArgSpec, ...]] = {
    "translate": _numbers("tx", "ty"),
    "rotate": _numbers("angle"),
    "scale": _numbers("sx", "sy"),
    "shear": _numbers("shx", "shy"),
    "transform": _numbers("a", "b", "c", "d", "e", "f"),
    "save": (),
    "restore": (),
    "fillStyle": (ArgSpec("color", "color"),),
    "strokeStyle": (ArgSpec("color", "color"),),
    "fillRect": _numbers("x", "y", "w", "h") + (_OPTIONAL_COLOR,),
    "strokeRect": _numbers("x", "y", "w", "h") + (_OPTIONAL_COLOR,),
    "fillTriangle": _numbers("x1", "y1", "x2", "y2", "x3", "y3") + (_OPTIONAL_COLOR,),
    "strokeTriangle": _numbers("x1", "y1", "x2", "y2", "x3", "y3") + (_OPTIONAL_COLOR,),
    "fillArc": _numbers("x", "y", "radius", "startAngle", "endAngle") + (_OPTIONAL_CCW, _OPTIONAL_COLOR),
    "strokeArc": _numbers("x", "y", "radius", "startAngle", "endAngle") + (_OPTIONAL_CCW, _OPTIONAL_COLOR),
}


@dataclass(frozen=True)
class ValidationReport:
    errors: tuple[CommandValidationError, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    def messages(self) -> tuple[str, ...]:
        return tuple(str(err) for err in self.errors)


@dataclass(frozen=True)
class DecodedProgram:
    commands: tuple[Command, ...]
    report: ValidationReport


def decode_command(raw: Sequence[Any], index: int | None = None) -> Command:
    """Decode one `[name, *args]` instruction into its typed command.

    Raises `UnrecognizedCommandError` for unknown names and
    `CommandValidationError` for any arity or argument-type violation.
    """

    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence) or len(raw) == 0:
        raise CommandValidationError(
            f"Empty or malformed instruction: {raw!r}",
            index=index,
            command=None,
            field="command",
            expected="non-empty [name, ...args] list",
            received=raw,
        )
    name = raw[0]
    if not isinstance(name, str) or not name:
        raise CommandValidationError(
            f"Invalid command type in instruction: {name!r}",
            index=index,
            command=name,
            field="command",
            expected="command name string",
            received=name,
        )
    schema = COMMAND_SCHEMAS.get(name)
    if schema is None:
        raise UnrecognizedCommandError(
            f"Unknown command: {name!r}. Supported: {', '.join(COMMAND_SCHEMAS)}",
            index=index,
            command=name,
            field="command",
            expected="known command name",
            received=name,
        )

    args = list(raw[1:])
    if len(args) > len(schema):
        raise CommandValidationError(
            f"{name} takes at most {len(schema)} parameter(s), got {len(args)}",
            index=index,
            command=name,
            field=None,
            expected=f"at most {len(schema)} arguments",
            received=len(args),
        )

    values: list[Any] = []
    for pos, spec in enumerate(schema):
        present = pos < len(args)
        value = args[pos] if present else None
        if value is None and not spec.required:
            values.append(None)
            continue
        if not present:
            raise CommandValidationError(
                f"Missing {spec.name} parameter for {name} (must be {_EXPECTED[spec.kind]})",
                index=index,
                command=name,
                field=spec.name,
                expected=_EXPECTED[spec.kind],
                received=None,
            )
        _check_arg(name, spec, value, index)
        values.append(value)

    cls = COMMANDS_BY_NAME[name]
    return cls(*values)


def _check_arg(command: str, spec: ArgSpec, value: Any, index: int | None) -> None:
    reason: str | None = None
    if spec.kind == "number":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            reason = "must be number"
        elif not math.isfinite(value):
            reason = "must be finite"
    elif spec.kind == "color":
        if not isinstance(value, str):
            reason = "must be string"
        elif not is_valid_color(value):
            reason = "not a valid color"
    elif spec.kind == "bool":
        if not isinstance(value, bool):
            reason = "must be boolean"
    if reason is not None:
        raise CommandValidationError(
            f"Invalid {spec.name} parameter for {command} ({reason}): {value!r}",
            index=index,
            command=command,
            field=spec.name,
            expected=_EXPECTED[spec.kind],
            received=value,
        )


def decode_command_list(
    raws: Iterable[Sequence[Any]],
    *,
    policy: ValidationPolicy = "skip",
) -> DecodedProgram:
    """Decode a whole program.

    With `policy="skip"` failed instructions keep their slot as
    `InvalidCommand`; with `policy="strict"` any failure raises
    `ProgramValidationError` listing every error.
    """

    if policy not in ("skip", "strict"):
        raise ValueError(f"unknown validation policy: {policy}")
    commands: list[Command] = []
    errors: list[CommandValidationError] = []
    warnings: list[str] = []
    for index, raw in enumerate(raws):
        try:
            commands.append(decode_command(raw, index=index))
        except CommandValidationError as exc:
            errors.append(exc)
            raw_tuple = tuple(raw) if isinstance(raw, (list, tuple)) else (raw,)
            commands.append(InvalidCommand(raw=raw_tuple, reason=exc.detail))
            if policy == "skip":
                message = f"skipping instruction {index}: {exc.detail}"
                warnings.append(message)
                LOGGER.warning("%s", message)
    if errors and policy == "strict":
        raise ProgramValidationError(errors)
    return DecodedProgram(
        commands=tuple(commands),
        report=ValidationReport(errors=tuple(errors), warnings=tuple(warnings)),
    )


def encode_command(command: Command) -> tuple[Any, ...]:
    if isinstance(command, InvalidCommand):
        return command.raw
    return (command.name,) + command_args(command)


def encode_command_list(commands: Iterable[Command]) -> list[list[Any]]:
    return [list(encode_command(command)) for command in commands]


def has_stack_commands(raws: Iterable[Sequence[Any]]) -> bool:
    """Pre-scan raw instructions for save/restore without full validation."""

    for raw in raws:
        if isinstance(raw, (list, tuple)) and raw and raw[0] in ("save", "restore"):
            return True
    return False
