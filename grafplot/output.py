from __future__ import annotations

import base64
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Union

from .config import RenderRequest
from .errors import GrafplotConfigError
from .layout import ChartLayout, compute_layout
from .raster import JPEG_MIME, PNG_MIME, encode_jpeg, encode_png, render_raster
from .vector import render_svg

LOGGER = logging.getLogger(__name__)

OUTPUT_ALIASES = {
    "buffer": "buffer",
    "png": "buffer",
    "base64": "base64",
    "png-base64": "base64",
    "jpeg": "jpeg",
    "jpg": "jpeg",
    "jpeg-base64": "jpeg-base64",
    "jpg-base64": "jpeg-base64",
    "svg": "svg",
    "file": "file",
}


@dataclass(frozen=True)
class FileOutput:
    filename: str
    path: Path
    size: int
    width: int
    height: int
    format: str

    def as_dict(self) -> dict[str, object]:
        return {
            "filename": self.filename,
            "path": str(self.path),
            "size": self.size,
            "width": self.width,
            "height": self.height,
            "format": self.format,
        }


RenderResult = Union[bytes, str, FileOutput]


def resolve_output_kind(output: str) -> str:
    kind = OUTPUT_ALIASES.get(str(output).strip().lower())
    if kind is None:
        raise GrafplotConfigError(f"unknown output kind: {output}")
    return kind


def render_request(request: RenderRequest) -> RenderResult:
    kind = resolve_output_kind(request.output)
    if kind == "file" and request.file_path is None:
        raise GrafplotConfigError("file_path is required when output='file'")

    layout = compute_layout(request.chart, request.config)
    if kind == "svg":
        return render_svg(layout)
    if kind == "file":
        assert request.file_path is not None
        return write_file(layout, request.file_path, jpeg_quality=request.jpeg_quality)

    canvas = render_raster(layout)
    if kind == "buffer":
        return encode_png(canvas)
    if kind == "base64":
        return to_data_url(encode_png(canvas), PNG_MIME)
    if kind == "jpeg":
        return encode_jpeg(canvas, request.jpeg_quality)
    return to_data_url(encode_jpeg(canvas, request.jpeg_quality), JPEG_MIME)


def to_data_url(data: bytes, mime: str) -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def detect_file_format(path: str | Path) -> str:
    """Return ``svg``, ``jpeg`` or ``png`` for the encoding a path implies."""
    ext = Path(path).suffix.lower()
    if ext == ".svg":
        return "svg"
    if ext in (".jpg", ".jpeg"):
        return "jpeg"
    return "png"


def write_file(layout: ChartLayout, path: str | Path, *, jpeg_quality: float) -> FileOutput:
    file_path = Path(path)
    encoding = detect_file_format(file_path)
    if encoding == "svg":
        file_path.write_text(render_svg(layout), encoding="utf-8")
    elif encoding == "jpeg":
        file_path.write_bytes(encode_jpeg(render_raster(layout), jpeg_quality))
    else:
        file_path.write_bytes(encode_png(render_raster(layout)))

    size = file_path.stat().st_size
    LOGGER.info("wrote %s chart to %s (%d bytes)", encoding, file_path, size)
    return FileOutput(
        filename=file_path.name,
        path=file_path,
        size=size,
        width=layout.width,
        height=layout.height,
        format=file_path.suffix.lower().lstrip(".") or "png",
    )
