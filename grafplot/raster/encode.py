from __future__ import annotations

from io import BytesIO

import numpy as np
from PIL import Image

from ..config import DEFAULT_JPEG_QUALITY


PNG_MIME = "image/png"
JPEG_MIME = "image/jpeg"


def encode_png(canvas: np.ndarray) -> bytes:
    image = Image.fromarray(_as_rgba(canvas))
    out = BytesIO()
    image.save(out, format="PNG")
    return out.getvalue()


def encode_jpeg(canvas: np.ndarray, quality: float = DEFAULT_JPEG_QUALITY) -> bytes:
    """Encode as baseline JPEG; ``quality`` uses the 0-1 scale of browser canvases."""
    image = Image.fromarray(_as_rgba(canvas)).convert("RGB")
    out = BytesIO()
    image.save(out, format="JPEG", quality=jpeg_quality_percent(quality))
    return out.getvalue()


def jpeg_quality_percent(quality: float) -> int:
    return max(1, min(100, int(round(quality * 100))))


def _as_rgba(canvas: np.ndarray) -> np.ndarray:
    if canvas.ndim != 3 or canvas.shape[2] != 4:
        raise ValueError(f"canvas must have shape (H, W, 4), got {canvas.shape}")
    return np.ascontiguousarray(canvas, dtype=np.uint8)
