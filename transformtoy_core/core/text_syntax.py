from __future__ import annotations

import re
from typing import Any

from .commands import Command, FillArc, InvalidCommand, SetFillColor, SetStrokeColor, StrokeArc, command_args
from .errors import CommandValidationError, ProgramValidationError
from .validation import decode_command

_ASSIGN = re.compile(r"^(fillStyle|strokeStyle)\s*=\s*(.+?);?$")
_CALL = re.compile(r"^(\w+)\s*\((.*)\)\s*;?$")
_ARC_NAMES = (FillArc.name, StrokeArc.name)
_STYLE_NAMES = (SetFillColor.name, SetStrokeColor.name)


def parse_command_line(line: str, line_number: int | None = None) -> tuple[Any, ...] | None:
    """Parse one authored line such as `translate(10, 20)` or `fillStyle = "red"`.

    Returns the raw wire tuple, or None for a blank line. The tuple is fully
    validated; errors carry the 1-based line number as their index.
    """

    text = line.strip()
    if not text or text.startswith("//") or text.startswith("#"):
        return None

    assign = _ASSIGN.match(text)
    if assign:
        name = assign.group(1)
        params = [_unquote(assign.group(2))]
    else:
        call = _CALL.match(text)
        if not call:
            raise CommandValidationError(
                f'Invalid syntax: "{text}". Expected format: command(params) or fillStyle/strokeStyle = "color"',
                index=line_number,
                field="command",
                expected="command(params)",
                received=text,
            )
        name = call.group(1)
        params = [_parse_param(name, token, line_number) for token in _split_params(call.group(2))]

    if name in _ARC_NAMES and len(params) >= 6 and not isinstance(params[5], (bool, str)):
        if params[5] not in (0, 1):
            raise CommandValidationError(
                f"{name} counterclockwise parameter must be 0 (false) or 1 (true), got {params[5]}",
                index=line_number,
                command=name,
                field="ccw",
                expected="0 or 1",
                received=params[5],
            )
        params[5] = params[5] == 1

    raw = (name, *params)
    decode_command(raw, index=line_number)
    return raw


def parse_program_text(text: str) -> list[tuple[Any, ...]]:
    """Parse a multi-line program; any error blocks the whole program."""

    raws: list[tuple[Any, ...]] = []
    errors: list[CommandValidationError] = []
    for number, line in enumerate(text.splitlines(), start=1):
        try:
            raw = parse_command_line(line, line_number=number)
        except CommandValidationError as exc:
            errors.append(exc)
            continue
        if raw is not None:
            raws.append(raw)
    if errors:
        raise ProgramValidationError(errors)
    return raws


def format_command_line(command: Command) -> str:
    if isinstance(command, InvalidCommand):
        return f"// invalid: {command.reason}"
    if isinstance(command, (SetFillColor, SetStrokeColor)):
        return f'{command.name} = "{command.color}"'
    args = list(command_args(command))
    if isinstance(command, (FillArc, StrokeArc)) and len(args) >= 6:
        args[5] = 1 if args[5] else 0
    return f"{command.name}({', '.join(_format_param(v) for v in args)})"


def format_program_text(commands: list[Command] | tuple[Command, ...]) -> str:
    return "\n".join(format_command_line(command) for command in commands)


def _split_params(raw: str) -> list[str]:
    tokens: list[str] = []
    current: list[str] = []
    depth = 0
    quote: str | None = None
    for ch in raw:
        if quote is not None:
            current.append(ch)
            if ch == quote:
                quote = None
            continue
        if ch in "\"'":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif ch == "," and depth == 0:
            tokens.append("".join(current).strip())
            current = []
            continue
        current.append(ch)
    tail = "".join(current).strip()
    if tail or tokens:
        tokens.append(tail)
    return tokens


def _parse_param(command: str, token: str, line_number: int | None) -> Any:
    if command in _STYLE_NAMES or token[:1] in ("'", '"'):
        return _unquote(token)
    if token in ("true", "false"):
        return token == "true"
    try:
        value = float(token)
    except ValueError:
        raise CommandValidationError(
            f'Invalid number: "{token}" in command: {command}',
            index=line_number,
            command=command,
            expected="finite number",
            received=token,
        ) from None
    return int(value) if value.is_integer() and "." not in token and "e" not in token.lower() else value


def _unquote(token: str) -> str:
    return re.sub(r"^[\"']|[\"']$", "", token.strip()).strip()


def _format_param(value: Any) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
