from __future__ import annotations

import math
from pathlib import Path

import numpy as np
from PIL import Image

from transformtoy_core.core.affine import IDENTITY, Affine2D
from transformtoy_core.core.colors import RGBA

from .surface import TransformState

WHITE: RGBA = (255, 255, 255, 255)
ARC_SEGMENTS_PER_TURN = 96


def new_canvas(width: int, height: int, color: RGBA = WHITE) -> np.ndarray:
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def blend_mask(dst: np.ndarray, mask: np.ndarray, color: RGBA) -> None:
    """Source-over blend `color` into every pixel selected by `mask`."""

    if color[3] == 0 or not mask.any():
        return
    a = color[3] / 255.0
    region = dst[mask]
    src = np.asarray(color[0:3], dtype=np.float32)
    region[:, :3] = np.rint(src * a + region[:, :3].astype(np.float32) * (1.0 - a)).astype(np.uint8)
    region[:, 3] = np.maximum(region[:, 3], color[3])
    dst[mask] = region


def polygon_mask(height: int, width: int, points: np.ndarray) -> np.ndarray:
    """Even-odd fill of a closed polygon, sampled at pixel centers."""

    mask = np.zeros((height, width), dtype=bool)
    if points.shape[0] < 3 or not np.all(np.isfinite(points)):
        return mask
    x0 = max(0, int(math.floor(points[:, 0].min())))
    x1 = min(width, int(math.ceil(points[:, 0].max())) + 1)
    y0 = max(0, int(math.floor(points[:, 1].min())))
    y1 = min(height, int(math.ceil(points[:, 1].max())) + 1)
    if x0 >= x1 or y0 >= y1:
        return mask

    ys, xs = np.mgrid[y0:y1, x0:x1].astype(np.float64) + 0.5
    inside = np.zeros(ys.shape, dtype=bool)
    px = points[:, 0]
    py = points[:, 1]
    j = points.shape[0] - 1
    for i in range(points.shape[0]):
        crosses = (py[i] > ys) != (py[j] > ys)
        with np.errstate(divide="ignore", invalid="ignore"):
            x_at = (px[j] - px[i]) * (ys - py[i]) / (py[j] - py[i]) + px[i]
        inside ^= crosses & (xs < x_at)
        j = i
    mask[y0:y1, x0:x1] = inside
    return mask


def stroke_mask(height: int, width: int, points: np.ndarray, line_width: int, closed: bool) -> np.ndarray:
    mask = np.zeros((height, width), dtype=bool)
    if points.shape[0] < 2 or not np.all(np.isfinite(points)):
        return mask
    path = np.vstack((points, points[:1])) if closed else points
    for i in range(path.shape[0] - 1):
        _stamp_segment(mask, path[i], path[i + 1], line_width)
    return mask


def _stamp_segment(mask: np.ndarray, p0: np.ndarray, p1: np.ndarray, line_width: int) -> None:
    radius = max(0, line_width // 2)
    height, width = mask.shape
    clipped = _clip_segment(
        float(p0[0]), float(p0[1]), float(p1[0]), float(p1[1]),
        -radius - 1.0, -radius - 1.0, width + radius + 1.0, height + radius + 1.0,
    )
    if clipped is None:
        return
    x0, y0, x1, y1 = (int(math.floor(v)) for v in clipped)
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    while True:
        mask[max(0, y0 - radius) : max(0, y0 + radius + 1), max(0, x0 - radius) : max(0, x0 + radius + 1)] = True
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def _clip_segment(
    x0: float, y0: float, x1: float, y1: float, xmin: float, ymin: float, xmax: float, ymax: float
) -> tuple[float, float, float, float] | None:
    """Liang-Barsky clip of a segment to a rectangle."""

    dx = x1 - x0
    dy = y1 - y0
    t0, t1 = 0.0, 1.0
    for p, q in ((-dx, x0 - xmin), (dx, xmax - x0), (-dy, y0 - ymin), (dy, ymax - y0)):
        if p == 0:
            if q < 0:
                return None
            continue
        r = q / p
        if p < 0:
            t0 = max(t0, r)
        else:
            t1 = min(t1, r)
        if t0 > t1:
            return None
    return x0 + t0 * dx, y0 + t0 * dy, x0 + t1 * dx, y0 + t1 * dy


def arc_sweep(start_deg: float, end_deg: float, ccw: bool) -> float:
    """Signed sweep in radians following canvas `arc()` rules."""

    tau = 2.0 * math.pi
    start = math.radians(start_deg)
    end = math.radians(end_deg)
    if not ccw:
        if end - start >= tau:
            return tau
        return (end - start) % tau
    if start - end >= tau:
        return -tau
    return -((start - end) % tau)


def arc_points(x: float, y: float, r: float, start_deg: float, end_deg: float, ccw: bool) -> np.ndarray:
    sweep = arc_sweep(start_deg, end_deg, ccw)
    if sweep == 0 or r <= 0:
        return np.zeros((0, 2), dtype=np.float64)
    count = max(2, int(math.ceil(abs(sweep) / (2.0 * math.pi) * ARC_SEGMENTS_PER_TURN)) + 1)
    angles = math.radians(start_deg) + sweep * np.linspace(0.0, 1.0, count)
    return np.column_stack((x + r * np.cos(angles), y + r * np.sin(angles)))


class RasterSurface(TransformState):
    """Drawing surface backed by an RGBA numpy canvas."""

    def __init__(self, width: int, height: int, background: RGBA = WHITE, initial: Affine2D = IDENTITY) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be > 0")
        super().__init__(initial)
        self.width = width
        self.height = height
        self.background = background
        self.pixels = new_canvas(width, height, background)

    def clear(self, color: RGBA | None = None) -> None:
        self.pixels[:, :] = np.asarray(self.background if color is None else color, dtype=np.uint8)

    def _device(self, points: np.ndarray) -> np.ndarray:
        m = self.get_transform()
        xs = m.a * points[:, 0] + m.c * points[:, 1] + m.e
        ys = m.b * points[:, 0] + m.d * points[:, 1] + m.f
        return np.column_stack((xs, ys))

    def _device_width(self, line_width: float) -> int:
        scale = math.sqrt(abs(self.get_transform().determinant()))
        return max(1, int(round(line_width * scale)))

    def _fill(self, points: np.ndarray, color: RGBA) -> None:
        blend_mask(self.pixels, polygon_mask(self.height, self.width, self._device(points)), color)

    def _stroke(self, points: np.ndarray, color: RGBA, line_width: float, closed: bool) -> None:
        mask = stroke_mask(self.height, self.width, self._device(points), self._device_width(line_width), closed)
        blend_mask(self.pixels, mask, color)

    def fill_rect(self, x: float, y: float, w: float, h: float, color: RGBA) -> None:
        self._fill(_rect(x, y, w, h), color)

    def stroke_rect(self, x: float, y: float, w: float, h: float, color: RGBA, line_width: float = 1.0) -> None:
        self._stroke(_rect(x, y, w, h), color, line_width, closed=True)

    def fill_triangle(
        self, x1: float, y1: float, x2: float, y2: float, x3: float, y3: float, color: RGBA
    ) -> None:
        self._fill(np.array([[x1, y1], [x2, y2], [x3, y3]], dtype=np.float64), color)

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
        self._stroke(np.array([[x1, y1], [x2, y2], [x3, y3]], dtype=np.float64), color, line_width, closed=True)

    def fill_arc(
        self, x: float, y: float, r: float, start_deg: float, end_deg: float, ccw: bool, color: RGBA
    ) -> None:
        # the arc path is closed with a chord before filling
        self._fill(arc_points(x, y, r, start_deg, end_deg, ccw), color)

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
        self._stroke(arc_points(x, y, r, start_deg, end_deg, ccw), color, line_width, closed=False)

    def stroke_line(
        self, x0: float, y0: float, x1: float, y1: float, color: RGBA, line_width: float = 1.0
    ) -> None:
        self._stroke(np.array([[x0, y0], [x1, y1]], dtype=np.float64), color, line_width, closed=False)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels)

    def save_png(self, path: str | Path) -> Path:
        out = Path(path)
        self.to_image().save(out)
        return out


def _rect(x: float, y: float, w: float, h: float) -> np.ndarray:
    return np.array([[x, y], [x, y + h], [x + w, y + h], [x + w, y]], dtype=np.float64)
