from __future__ import annotations

from typing import Any

from .config import RenderRequest
from .output import FileOutput, RenderResult, render_request


def grafplot(**options: Any) -> RenderResult:
    """Render an indicator chart.

    ``output`` selects the result: ``buffer``/``png`` (PNG bytes),
    ``base64``/``png-base64`` (PNG data URL), ``jpeg``/``jpg`` (JPEG bytes),
    ``jpeg-base64``/``jpg-base64`` (JPEG data URL), ``svg`` (markup) or
    ``file`` (writes ``file_path`` and returns a :class:`FileOutput`).
    """
    return render_request(RenderRequest.from_options(**options))


def to_buffer(**options: Any) -> bytes:
    return grafplot(**{**options, "output": "buffer"})  # type: ignore[return-value]


def to_base64(**options: Any) -> str:
    return grafplot(**{**options, "output": "base64"})  # type: ignore[return-value]


def to_jpeg(**options: Any) -> bytes:
    return grafplot(**{**options, "output": "jpeg"})  # type: ignore[return-value]


def to_jpeg_base64(**options: Any) -> str:
    return grafplot(**{**options, "output": "jpeg-base64"})  # type: ignore[return-value]


def to_svg(**options: Any) -> str:
    return grafplot(**{**options, "output": "svg"})  # type: ignore[return-value]


def to_file(**options: Any) -> FileOutput:
    return grafplot(**{**options, "output": "file"})  # type: ignore[return-value]
