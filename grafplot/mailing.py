from __future__ import annotations

from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any

from .config import RenderRequest
from .errors import GrafplotConfigError
from .layout import compute_layout
from .output import FileOutput, render_request, to_data_url
from .raster import PNG_MIME, encode_png, render_raster
from .vector import render_svg

LOGGER = logging.getLogger(__name__)

IMG_ALT_TEXT = "Graphique"


@dataclass(frozen=True)
class MailingChart:
    """One chart in every form a mail-merge template may want to embed."""

    base64: str
    svg: str
    buffer: bytes

    @property
    def img_tag(self) -> str:
        return f'<img src="{self.base64}" alt="{IMG_ALT_TEXT}" />'

    @property
    def svg_inline(self) -> str:
        return self.svg


@dataclass(frozen=True)
class BatchResult:
    name: str
    value: MailingChart | FileOutput | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def generate_for_mailing(data: Mapping[str, Any], defaults: Mapping[str, Any] | None = None) -> MailingChart:
    options = {**(defaults or {}), **data}
    options.pop("output", None)
    request = RenderRequest.from_options(**options)
    layout = compute_layout(request.chart, request.config)
    png = encode_png(render_raster(layout))
    return MailingChart(base64=to_data_url(png, PNG_MIME), svg=render_svg(layout), buffer=png)


def generate_batch(
    items: Iterable[Mapping[str, Any]],
    defaults: Mapping[str, Any] | None = None,
    *,
    max_workers: int | None = None,
) -> dict[str, BatchResult]:
    """Render every item concurrently; failures are captured per item.

    Items may carry an ``id``; unnamed items are keyed ``graph_<index>``.
    The returned mapping preserves input order.
    """
    named: list[tuple[str, dict[str, Any]]] = []
    for index, item in enumerate(items):
        data = dict(item)
        name = data.pop("id", None) or f"graph_{index}"
        named.append((str(name), data))

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = [(name, pool.submit(generate_for_mailing, data, defaults)) for name, data in named]
        results: dict[str, BatchResult] = {}
        for name, future in futures:
            results[name] = _collect(name, future)
    return results


def save_batch_to_files(
    items: Iterable[Mapping[str, Any]],
    output_dir: str | Path,
    defaults: Mapping[str, Any] | None = None,
) -> list[BatchResult]:
    root = Path(output_dir)
    root.mkdir(parents=True, exist_ok=True)
    results: list[BatchResult] = []
    for index, item in enumerate(items):
        data = dict(item)
        filename = data.pop("filename", None)
        name = str(filename or f"graph_{index}")
        try:
            if not filename:
                raise GrafplotConfigError(f"batch item {index} has no filename")
            options = {**(defaults or {}), **data, "output": "file", "file_path": root / str(filename)}
            results.append(BatchResult(name=name, value=render_request(RenderRequest.from_options(**options))))
        except Exception as exc:
            LOGGER.warning("batch item %s failed: %s", name, exc)
            results.append(BatchResult(name=name, error=exc))
    return results


def _collect(name: str, future) -> BatchResult:
    try:
        return BatchResult(name=name, value=future.result())
    except Exception as exc:
        LOGGER.warning("batch item %s failed: %s", name, exc)
        return BatchResult(name=name, error=exc)
