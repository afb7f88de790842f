from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Literal

from .config import DEFAULT_RANGE_MAX, DEFAULT_RANGE_MIN, ChartInput, RenderConfig
from .normalize import normalize_value

LOGGER = logging.getLogger(__name__)

MarkerKind = Literal["dot", "diamond", "bar1", "bar2"]


@dataclass(frozen=True)
class PlacedMarker:
    """One draw instruction, shared verbatim by the raster and vector backends.

    ``size`` is the radius for a dot, the half-diagonal for a diamond and the
    thickness for a bar. Bars occupy ``[top, top + span)`` vertically; dots
    and diamonds are centered on ``cy``.
    """

    kind: MarkerKind
    x: float
    priority: int
    color: str
    size: float
    cy: float = 0.0
    top: float = 0.0
    span: float = 0.0
    stacked: bool = False

    @property
    def is_bar(self) -> bool:
        return self.kind in ("bar1", "bar2")

    def rect(self) -> tuple[float, float, float, float]:
        if not self.is_bar:
            raise ValueError(f"{self.kind} marker has no rect geometry")
        return (self.x - self.size / 2, self.top, self.size, self.span)

    def diamond_points(self) -> tuple[tuple[float, float], ...]:
        if self.kind != "diamond":
            raise ValueError(f"{self.kind} marker has no diamond geometry")
        half = self.size
        return (
            (self.x, self.cy - half),
            (self.x + half, self.cy),
            (self.x, self.cy + half),
            (self.x - half, self.cy),
        )


@dataclass(frozen=True)
class ChartLayout:
    width: int
    height: int
    background: str
    range_min: float
    range_max: float
    markers: tuple[PlacedMarker, ...]

    def marker(self, kind: MarkerKind) -> PlacedMarker | None:
        for marker in self.markers:
            if marker.kind == kind:
                return marker
        return None


def resolve_range(raw_min: object, raw_max: object) -> tuple[float, float]:
    lo = normalize_value(raw_min)
    hi = normalize_value(raw_max)
    lo = DEFAULT_RANGE_MIN if lo is None else lo
    hi = DEFAULT_RANGE_MAX if hi is None else hi
    if lo >= hi:
        LOGGER.debug("invalid range [%s, %s]; falling back to [%s, %s]", lo, hi, DEFAULT_RANGE_MIN, DEFAULT_RANGE_MAX)
        return DEFAULT_RANGE_MIN, DEFAULT_RANGE_MAX
    return lo, hi


def value_to_pixel(value: float | None, range_min: float, range_max: float, width: int) -> int | None:
    """Map a value onto ``[0, width]``; values outside the range are excluded."""
    if value is None:
        return None
    if value < range_min or value > range_max:
        return None
    relative = (value - range_min) / (range_max - range_min)
    return round_half_up(width * relative)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_layout(chart: ChartInput, config: RenderConfig) -> ChartLayout:
    width = config.width
    height = config.height
    thickness = config.bar_thickness
    range_min, range_max = resolve_range(chart.range_min, chart.range_max)

    values = {
        "dot": normalize_value(chart.dot),
        "diamond": normalize_value(chart.diamond),
        "bar1": normalize_value(chart.bar1),
        "bar2": normalize_value(chart.bar2),
    }
    xs: dict[str, float | None] = {}
    for kind, value in values.items():
        xs[kind] = value_to_pixel(value, range_min, range_max, width)
        if value is not None and xs[kind] is None:
            LOGGER.debug("%s=%s outside [%s, %s]; excluded", kind, value, range_min, range_max)

    radius = height / 2 - 1
    half_diagonal = (height - 2) / 2
    stacked = values["bar1"] is not None and values["bar2"] is not None and values["bar1"] == values["bar2"]

    x_bar1, x_bar2 = _place_bars(xs["bar1"], xs["bar2"], thickness=thickness, width=width, stacked=stacked)
    x_dot = _clamp_optional(xs["dot"], radius, width - radius)
    x_diamond = _clamp_optional(xs["diamond"], half_diagonal, width - half_diagonal)

    palette = config.palette
    order = config.stack_order
    cy = height / 2
    markers: list[PlacedMarker] = []
    if x_dot is not None:
        markers.append(
            PlacedMarker(kind="dot", x=x_dot, priority=order.dot, color=palette.dot, size=radius, cy=cy)
        )
    if x_diamond is not None:
        markers.append(
            PlacedMarker(
                kind="diamond",
                x=x_diamond,
                priority=order.diamond,
                color=palette.diamond,
                size=half_diagonal,
                cy=cy,
            )
        )
    if stacked and x_bar1 is not None:
        half_height = height / 2
        markers.append(
            PlacedMarker(
                kind="bar1",
                x=x_bar1,
                priority=order.bar1,
                color=palette.bar1,
                size=thickness,
                top=0.0,
                span=half_height,
                stacked=True,
            )
        )
        markers.append(
            PlacedMarker(
                kind="bar2",
                x=x_bar1,
                priority=order.bar2,
                color=palette.bar2,
                size=thickness,
                top=half_height,
                span=half_height,
                stacked=True,
            )
        )
    else:
        if x_bar1 is not None:
            markers.append(
                PlacedMarker(kind="bar1", x=x_bar1, priority=order.bar1, color=palette.bar1, size=thickness, span=height)
            )
        if x_bar2 is not None:
            markers.append(
                PlacedMarker(kind="bar2", x=x_bar2, priority=order.bar2, color=palette.bar2, size=thickness, span=height)
            )

    markers.sort(key=lambda marker: marker.priority)
    return ChartLayout(
        width=width,
        height=height,
        background=palette.background,
        range_min=range_min,
        range_max=range_max,
        markers=tuple(markers),
    )


def _place_bars(
    x1: float | None,
    x2: float | None,
    *,
    thickness: float,
    width: int,
    stacked: bool,
) -> tuple[float | None, float | None]:
    lo = thickness / 2
    hi = width - thickness / 2
    if x1 is None or x2 is None or stacked or abs(x1 - x2) >= thickness:
        return _clamp_optional(x1, lo, hi), _clamp_optional(x2, lo, hi)

    center = (x1 + x2) / 2
    LOGGER.debug("bars at %s and %s collide; separating around %s", x1, x2, center)
    if x1 <= x2:
        x1, x2 = center - thickness / 2, center + thickness / 2
    else:
        x1, x2 = center + thickness / 2, center - thickness / 2

    # The pair moves as one block so the separation survives edge correction.
    group_min = min(x1, x2)
    group_max = max(x1, x2)
    if group_min < lo:
        shift = lo - group_min
        x1 += shift
        x2 += shift
    if group_max > hi:
        shift = group_max - hi
        x1 -= shift
        x2 -= shift
    return x1, x2


def _clamp_optional(x: float | None, lo: float, hi: float) -> float | None:
    if x is None:
        return None
    if x < lo:
        x = lo
    if x > hi:
        x = hi
    return x
