from __future__ import annotations

import numpy as np

from ..config import STROKE_COLOR, STROKE_WIDTH, parse_color
from ..layout import ChartLayout, PlacedMarker
from .canvas import fill_circle, fill_diamond, fill_rect, new_canvas, stroke_circle, stroke_diamond


def render_raster(layout: ChartLayout) -> np.ndarray:
    """Paint ``layout`` onto a fresh RGBA canvas in draw order."""
    canvas = new_canvas(layout.width, layout.height, parse_color(layout.background, label="background"))
    stroke = parse_color(STROKE_COLOR)
    for marker in layout.markers:
        _draw_marker(canvas, marker, stroke)
    return canvas


def _draw_marker(canvas: np.ndarray, marker: PlacedMarker, stroke: tuple[int, int, int, int]) -> None:
    fill = parse_color(marker.color, label=marker.kind)
    if marker.kind == "dot":
        fill_circle(canvas, marker.x, marker.cy, marker.size, fill)
        stroke_circle(canvas, marker.x, marker.cy, marker.size, stroke, width=STROKE_WIDTH)
    elif marker.kind == "diamond":
        fill_diamond(canvas, marker.x, marker.cy, marker.size, fill)
        stroke_diamond(canvas, marker.x, marker.cy, marker.size, stroke, width=STROKE_WIDTH)
    else:
        x, y, w, h = marker.rect()
        fill_rect(canvas, x, y, w, h, fill)
