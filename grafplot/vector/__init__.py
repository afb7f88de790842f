from .svg import SVG_MIME, SVG_NS, fmt_number, render_svg

__all__ = [
    "SVG_MIME",
    "SVG_NS",
    "fmt_number",
    "render_svg",
]
