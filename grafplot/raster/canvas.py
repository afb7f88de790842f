from __future__ import annotations

from collections.abc import Callable

import numpy as np


RGBA = tuple[int, int, int, int]

# Samples per pixel along each axis when estimating shape coverage.
SUPERSAMPLE = 4

CoverageTest = Callable[[np.ndarray, np.ndarray], np.ndarray]


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    canvas[:, :, 0] = color[0]
    canvas[:, :, 1] = color[1]
    canvas[:, :, 2] = color[2]
    canvas[:, :, 3] = color[3]
    return canvas


def fill_rect(dst: np.ndarray, x: float, y: float, w: float, h: float, color: RGBA) -> None:
    if w <= 0 or h <= 0:
        return
    _paint(
        dst,
        (x, y, x + w, y + h),
        lambda sx, sy: (sx >= x) & (sx < x + w) & (sy >= y) & (sy < y + h),
        color,
    )


def fill_circle(dst: np.ndarray, cx: float, cy: float, radius: float, color: RGBA) -> None:
    if radius <= 0:
        return
    r2 = radius * radius
    _paint(
        dst,
        (cx - radius, cy - radius, cx + radius, cy + radius),
        lambda sx, sy: (sx - cx) ** 2 + (sy - cy) ** 2 <= r2,
        color,
    )


def stroke_circle(dst: np.ndarray, cx: float, cy: float, radius: float, color: RGBA, width: float = 1.0) -> None:
    if width <= 0:
        return
    half = width / 2
    reach = radius + half
    _paint(
        dst,
        (cx - reach, cy - reach, cx + reach, cy + reach),
        lambda sx, sy: np.abs(np.hypot(sx - cx, sy - cy) - radius) <= half,
        color,
    )


def fill_diamond(dst: np.ndarray, cx: float, cy: float, half_diagonal: float, color: RGBA) -> None:
    if half_diagonal <= 0:
        return
    _paint(
        dst,
        (cx - half_diagonal, cy - half_diagonal, cx + half_diagonal, cy + half_diagonal),
        lambda sx, sy: np.abs(sx - cx) + np.abs(sy - cy) <= half_diagonal,
        color,
    )


def stroke_diamond(
    dst: np.ndarray, cx: float, cy: float, half_diagonal: float, color: RGBA, width: float = 1.0
) -> None:
    if width <= 0:
        return
    # Edges sit at 45 degrees, so perpendicular distance is the L1 offset over sqrt(2).
    band = (width / 2) * np.sqrt(2.0)
    reach = half_diagonal + band
    _paint(
        dst,
        (cx - reach, cy - reach, cx + reach, cy + reach),
        lambda sx, sy: np.abs(np.abs(sx - cx) + np.abs(sy - cy) - half_diagonal) <= band,
        color,
    )


def _paint(
    dst: np.ndarray,
    bounds: tuple[float, float, float, float],
    inside: CoverageTest,
    color: RGBA,
) -> None:
    height, width = dst.shape[0], dst.shape[1]
    x0 = max(0, int(np.floor(bounds[0])) - 1)
    y0 = max(0, int(np.floor(bounds[1])) - 1)
    x1 = min(width, int(np.ceil(bounds[2])) + 1)
    y1 = min(height, int(np.ceil(bounds[3])) + 1)
    if x1 <= x0 or y1 <= y0:
        return

    offsets = (np.arange(SUPERSAMPLE, dtype=np.float64) + 0.5) / SUPERSAMPLE
    sample_x = (np.arange(x0, x1, dtype=np.float64)[:, None] + offsets[None, :]).reshape(-1)
    sample_y = (np.arange(y0, y1, dtype=np.float64)[:, None] + offsets[None, :]).reshape(-1)
    grid_x, grid_y = np.meshgrid(sample_x, sample_y)
    hits = inside(grid_x, grid_y).astype(np.float32)
    coverage = hits.reshape(y1 - y0, SUPERSAMPLE, x1 - x0, SUPERSAMPLE).mean(axis=(1, 3))
    _blend_coverage(dst[y0:y1, x0:x1], coverage, color)


def _blend_coverage(patch: np.ndarray, coverage: np.ndarray, color: RGBA) -> None:
    if not np.any(coverage > 0):
        return
    alpha = (color[3] / 255.0) * coverage[:, :, None]
    src_rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
    dst_rgb = patch[:, :, :3].astype(np.float32)
    out_rgb = src_rgb * alpha + dst_rgb * (1.0 - alpha)
    patch[:, :, :3] = np.clip(np.rint(out_rgb), 0, 255).astype(np.uint8)

    dst_alpha = patch[:, :, 3:4].astype(np.float32) / 255.0
    out_alpha = alpha + dst_alpha * (1.0 - alpha)
    patch[:, :, 3] = np.clip(np.rint(out_alpha[:, :, 0] * 255.0), 0, 255).astype(np.uint8)
