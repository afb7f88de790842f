from __future__ import annotations

from xml.sax.saxutils import quoteattr

from ..config import STROKE_COLOR, STROKE_WIDTH
from ..layout import ChartLayout, PlacedMarker


SVG_MIME = "image/svg+xml"
SVG_NS = "http://www.w3.org/2000/svg"


def render_svg(layout: ChartLayout) -> str:
    """Serialize ``layout`` as a standalone SVG document.

    Elements follow the layout's draw order, so later elements paint over
    earlier ones exactly as on the raster canvas.
    """
    width = fmt_number(layout.width)
    height = fmt_number(layout.height)
    elements = [f"<rect width={_attr(width)} height={_attr(height)} fill={_attr(layout.background)}/>"]
    elements.extend(_marker_element(marker) for marker in layout.markers)
    body = "\n".join(elements)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<svg xmlns="{SVG_NS}" width="{width}" height="{height}" viewBox="0 0 {width} {height}">\n'
        f"{body}\n"
        "</svg>"
    )


def fmt_number(value: float) -> str:
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def _marker_element(marker: PlacedMarker) -> str:
    stroke = f"stroke={_attr(STROKE_COLOR)} stroke-width={_attr(fmt_number(STROKE_WIDTH))}"
    if marker.kind == "dot":
        return (
            f"<circle cx={_attr(fmt_number(marker.x))} cy={_attr(fmt_number(marker.cy))} "
            f"r={_attr(fmt_number(marker.size))} fill={_attr(marker.color)} {stroke}/>"
        )
    if marker.kind == "diamond":
        points = " ".join(f"{fmt_number(px)},{fmt_number(py)}" for px, py in marker.diamond_points())
        return f"<polygon points={_attr(points)} fill={_attr(marker.color)} {stroke}/>"
    x, y, w, h = marker.rect()
    return (
        f"<rect x={_attr(fmt_number(x))} y={_attr(fmt_number(y))} width={_attr(fmt_number(w))} "
        f"height={_attr(fmt_number(h))} fill={_attr(marker.color)}/>"
    )


def _attr(value: str) -> str:
    return quoteattr(str(value))
