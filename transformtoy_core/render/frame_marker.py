from __future__ import annotations

from transformtoy_core.core.colors import parse_color

from .surface import DrawingSurface

GRID_SIZE = 50.0
GRID_SPACING = 10.0
GRID_LINE_WIDTH = 0.5
AXIS_LINE_WIDTH = 3.0
ARROW_SIZE = 6.0
ARROW_HALF_WIDTH = 3.0


def draw_frame_marker(surface: DrawingSurface, color: str = "#7F0000") -> None:
    """Draw a coordinate frame (grid, bold axes, arrow heads) in the surface's current frame."""

    rgba = parse_color(color)
    steps = int(GRID_SIZE // GRID_SPACING)
    for i in range(-steps, steps + 1):
        pos = i * GRID_SPACING
        surface.stroke_line(pos, -GRID_SIZE, pos, GRID_SIZE, rgba, GRID_LINE_WIDTH)
        surface.stroke_line(-GRID_SIZE, pos, GRID_SIZE, pos, rgba, GRID_LINE_WIDTH)

    surface.stroke_line(0.0, -GRID_SIZE, 0.0, GRID_SIZE, rgba, AXIS_LINE_WIDTH)
    surface.stroke_line(-GRID_SIZE, 0.0, GRID_SIZE, 0.0, rgba, AXIS_LINE_WIDTH)

    # arrows point along +y and +x
    surface.fill_triangle(
        ARROW_HALF_WIDTH, GRID_SIZE, 0.0, GRID_SIZE + ARROW_SIZE, -ARROW_HALF_WIDTH, GRID_SIZE, rgba
    )
    surface.fill_triangle(
        GRID_SIZE, -ARROW_HALF_WIDTH, GRID_SIZE + ARROW_SIZE, 0.0, GRID_SIZE, ARROW_HALF_WIDTH, rgba
    )
