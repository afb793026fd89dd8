from __future__ import annotations

from typing import Any, Sequence


class CommandValidationError(ValueError):
    """A malformed instruction, localized to one argument where possible."""

    def __init__(
        self,
        message: str,
        *,
        index: int | None = None,
        command: Any = None,
        field: str | None = None,
        expected: str | None = None,
        received: Any = None,
    ) -> None:
        self.index = index
        self.command = command
        self.field = field
        self.expected = expected
        self.received = received
        self.detail = message
        prefix = f"command {index}: " if index is not None else ""
        super().__init__(f"{prefix}{message}")


class UnrecognizedCommandError(CommandValidationError):
    pass


class ProgramValidationError(ValueError):
    def __init__(self, errors: Sequence[CommandValidationError]) -> None:
        self.errors = tuple(errors)
        joined = "; ".join(str(err) for err in self.errors)
        super().__init__(f"Program validation failed: {joined}")


class InvalidModeError(ValueError):
    pass
