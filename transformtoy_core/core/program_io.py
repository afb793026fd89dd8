from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping

from .validation import ValidationPolicy, decode_command_list, encode_command_list

LOGGER = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled"


@dataclass(frozen=True)
class Program:
    """A titled command list in wire form."""

    title: str
    transformations: tuple[tuple[Any, ...], ...] = ()

    def __len__(self) -> int:
        return len(self.transformations)

    def to_dict(self) -> dict[str, object]:
        return {"title": self.title, "transformations": [list(raw) for raw in self.transformations]}


def program_from_dict(payload: Mapping[str, object], *, policy: ValidationPolicy | None = None) -> Program:
    """Build a program from `{"title", "transformations"}`.

    With a `policy`, instructions are validated: `strict` raises on the first
    bad program, `skip` keeps the raw list and logs a warning per bad slot.
    """

    raw_list = payload.get("transformations")
    if not isinstance(raw_list, list):
        raise TypeError("`transformations` must be a list")
    transformations: list[tuple[Any, ...]] = []
    for index, raw in enumerate(raw_list):
        if not isinstance(raw, list) or not raw:
            raise TypeError(f"transformation {index} must be a non-empty list")
        transformations.append(tuple(raw))
    title = str(payload.get("title") or DEFAULT_TITLE)
    if policy is not None:
        decode_command_list(transformations, policy=policy)
    return Program(title=title, transformations=tuple(transformations))


def load_program(path: str | Path, *, policy: ValidationPolicy | None = None) -> Program:
    program_path = Path(path)
    payload = json.loads(program_path.read_text(encoding="utf-8"))
    if not isinstance(payload, Mapping):
        raise TypeError("Program payload must be a JSON object")
    program = program_from_dict(payload, policy=policy)
    LOGGER.info("loaded %d commands from %s", len(program), program_path)
    return program


def save_program(path: str | Path, program: Program, *, validate: bool = True) -> Path:
    """Write `program` as indented JSON; with `validate`, refuses invalid or empty programs."""

    if validate:
        if not program.transformations:
            raise ValueError("No commands to save")
        decoded = decode_command_list(program.transformations, policy="strict")
        program = Program(title=program.title, transformations=tuple(map(tuple, encode_command_list(decoded.commands))))
    out = Path(path)
    out.write_text(json.dumps(program.to_dict(), indent=2) + "\n", encoding="utf-8")
    return out


def load_program_list(path: str | Path, *, policy: ValidationPolicy | None = None) -> tuple[Program, ...]:
    """Load a list of programs; a single program object is accepted as a one-item list."""

    list_path = Path(path)
    payload = json.loads(list_path.read_text(encoding="utf-8"))
    if isinstance(payload, Mapping):
        return (program_from_dict(payload, policy=policy),)
    if not isinstance(payload, list):
        raise TypeError("Program list payload must be a JSON array or object")
    programs: list[Program] = []
    for item in payload:
        if not isinstance(item, Mapping):
            raise TypeError("Each program must be a JSON object")
        programs.append(program_from_dict(item, policy=policy))
    return tuple(programs)


def find_program(programs: Iterable[Program], title: str | None) -> Program:
    programs = tuple(programs)
    if not programs:
        raise ValueError("program list is empty")
    if title is None:
        return programs[0]
    for program in programs:
        if program.title == title:
            return program
    raise KeyError(f"no program titled {title!r}")
