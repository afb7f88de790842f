from .canvas import fill_circle, fill_diamond, fill_rect, new_canvas, stroke_circle, stroke_diamond
from .encode import JPEG_MIME, PNG_MIME, encode_jpeg, encode_png
from .renderer import render_raster

__all__ = [
    "JPEG_MIME",
    "PNG_MIME",
    "encode_jpeg",
    "encode_png",
    "fill_circle",
    "fill_diamond",
    "fill_rect",
    "new_canvas",
    "render_raster",
    "stroke_circle",
    "stroke_diamond",
]
