from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from transformtoy_core.core.affine import IDENTITY, Affine2D
from transformtoy_core.core.colors import RGBA


class DrawingSurface(Protocol):
    """Minimal 2D context the evaluator draws through.

    Coordinates passed to the primitives are local; the surface maps them
    through its current transform. `save`/`restore` push and pop that
    transform.
    """

    def clear(self) -> None:
        ...

    def get_transform(self) -> Affine2D:
        ...

    def set_transform(self, matrix: Affine2D) -> None:
        ...

    def save(self) -> None:
        ...

    def restore(self) -> None:
        ...

    def fill_rect(self, x: float, y: float, w: float, h: float, color: RGBA) -> None:
        ...

    def stroke_rect(self, x: float, y: float, w: float, h: float, color: RGBA, line_width: float = 1.0) -> None:
        ...

    def fill_triangle(
        self, x1: float, y1: float, x2: float, y2: float, x3: float, y3: float, color: RGBA
    ) -> None:
        ...

    def stroke_triangle(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        x3: float,
        y3: float,
        color: RGBA,
        line_width: float = 1.0,
    ) -> None:
        ...

    def fill_arc(
        self, x: float, y: float, r: float, start_deg: float, end_deg: float, ccw: bool, color: RGBA
    ) -> None:
        ...

    def stroke_arc(
        self,
        x: float,
        y: float,
        r: float,
        start_deg: float,
        end_deg: float,
        ccw: bool,
        color: RGBA,
        line_width: float = 1.0,
    ) -> None:
        ...

    def stroke_line(
        self, x0: float, y0: float, x1: float, y1: float, color: RGBA, line_width: float = 1.0
    ) -> None:
        ...


class TransformState:
    """Current transform plus its save/restore stack, shared by surface implementations."""

    def __init__(self, initial: Affine2D = IDENTITY) -> None:
        self._transform = initial
        self._stack: list[Affine2D] = []

    @property
    def depth(self) -> int:
        return len(self._stack)

    def get_transform(self) -> Affine2D:
        return self._transform

    def set_transform(self, matrix: Affine2D) -> None:
        self._transform = matrix

    def save(self) -> None:
        self._stack.append(self._transform)

    def restore(self) -> None:
        # unbalanced restore is a no-op, as on a canvas context
        if self._stack:
            self._transform = self._stack.pop()


@dataclass(frozen=True)
class DrawCall:
    op: str
    args: tuple[float | bool, ...]
    color: RGBA
    transform: Affine2D


class RecordingSurface(TransformState):
    """Surface that records primitive calls together with the active transform."""

    def __init__(self, initial: Affine2D = IDENTITY) -> None:
        super().__init__(initial)
        self.calls: list[DrawCall] = []

    def clear(self) -> None:
        self.calls.clear()

    def _record(self, op: str, args: tuple[float | bool, ...], color: RGBA) -> None:
        self.calls.append(DrawCall(op=op, args=args, color=color, transform=self.get_transform()))

    def fill_rect(self, x: float, y: float, w: float, h: float, color: RGBA) -> None:
        self._record("fill_rect", (x, y, w, h), color)

    def stroke_rect(self, x: float, y: float, w: float, h: float, color: RGBA, line_width: float = 1.0) -> None:
        self._record("stroke_rect", (x, y, w, h), color)

    def fill_triangle(
        self, x1: float, y1: float, x2: float, y2: float, x3: float, y3: float, color: RGBA
    ) -> None:
        self._record("fill_triangle", (x1, y1, x2, y2, x3, y3), color)

    def stroke_triangle(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        x3: float,
        y3: float,
        color: RGBA,
        line_width: float = 1.0,
    ) -> None:
        self._record("stroke_triangle", (x1, y1, x2, y2, x3, y3), color)

    def fill_arc(
        self, x: float, y: float, r: float, start_deg: float, end_deg: float, ccw: bool, color: RGBA
    ) -> None:
        self._record("fill_arc", (x, y, r, start_deg, end_deg, ccw), color)

    def stroke_arc(
        self,
        x: float,
        y: float,
        r: float,
        start_deg: float,
        end_deg: float,
        ccw: bool,
        color: RGBA,
        line_width: float = 1.0,
    ) -> None:
        self._record("stroke_arc", (x, y, r, start_deg, end_deg, ccw), color)

    def stroke_line(
        self, x0: float, y0: float, x1: float, y1: float, color: RGBA, line_width: float = 1.0
    ) -> None:
        self._record("stroke_line", (x0, y0, x1, y1), color)

    def shapes(self) -> list[DrawCall]:
        """Recorded calls other than `stroke_line`."""

        return [call for call in self.calls if call.op != "stroke_line"]
