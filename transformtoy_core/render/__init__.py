from .frame_marker import draw_frame_marker
from .raster import RasterSurface, arc_points, new_canvas
from .surface import DrawCall, DrawingSurface, RecordingSurface
from .view import TimelineView, side_by_side

__all__ = [
    "DrawCall",
    "DrawingSurface",
    "RasterSurface",
    "RecordingSurface",
    "TimelineView",
    "arc_points",
    "draw_frame_marker",
    "new_canvas",
    "side_by_side",
]
