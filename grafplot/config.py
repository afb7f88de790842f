from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
import tomllib
from typing import Any

from PIL import ImageColor

from .errors import GrafplotConfigError


Color = tuple[int, int, int, int]

DEFAULT_WIDTH = 620
DEFAULT_HEIGHT = 28
DEFAULT_BAR_THICKNESS = 4
DEFAULT_RANGE_MIN = 0.0
DEFAULT_RANGE_MAX = 100.0
DEFAULT_JPEG_QUALITY = 0.9
DEFAULT_OUTPUT = "buffer"

STROKE_COLOR = "#808080"
STROKE_WIDTH = 1

MARKER_KINDS = ("dot", "diamond", "bar1", "bar2")


@dataclass(frozen=True)
class Palette:
    background: str = "#FFFFFF"
    dot: str = "#f7c948"
    bar1: str = "#3d6b3d"
    bar2: str = "#e74c3c"
    diamond: str = "#ff8c00"

    def color_for(self, kind: str) -> str:
        return getattr(self, kind)


@dataclass(frozen=True)
class StackOrder:
    dot: int = 1
    diamond: int = 2
    bar1: int = 3
    bar2: int = 4

    def priority_for(self, kind: str) -> int:
        return getattr(self, kind)


@dataclass(frozen=True)
class ChartInput:
    dot: Any = None
    bar1: Any = None
    bar2: Any = None
    diamond: Any = None
    range_min: Any = DEFAULT_RANGE_MIN
    range_max: Any = DEFAULT_RANGE_MAX


@dataclass(frozen=True)
class RenderConfig:
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    bar_thickness: float = DEFAULT_BAR_THICKNESS
    palette: Palette = field(default_factory=Palette)
    stack_order: StackOrder = field(default_factory=StackOrder)


@dataclass(frozen=True)
class RenderRequest:
    """Everything one render call needs, assembled once from keyword options."""

    chart: ChartInput
    config: RenderConfig
    output: str = DEFAULT_OUTPUT
    file_path: Path | None = None
    jpeg_quality: float = DEFAULT_JPEG_QUALITY

    @classmethod
    def from_options(cls, **options: Any) -> "RenderRequest":
        unknown = sorted(set(options) - set(OPTION_NAMES))
        if unknown:
            raise GrafplotConfigError(f"unknown option(s): {', '.join(unknown)}")

        chart = ChartInput(
            dot=options.get("dot"),
            bar1=options.get("bar1"),
            bar2=options.get("bar2"),
            diamond=options.get("diamond"),
            range_min=_or_default(options.get("range_min"), DEFAULT_RANGE_MIN),
            range_max=_or_default(options.get("range_max"), DEFAULT_RANGE_MAX),
        )
        width = _coerce_dimension(options.get("width"), DEFAULT_WIDTH, "width")
        height = _coerce_dimension(options.get("height"), DEFAULT_HEIGHT, "height")
        bar_thickness = _coerce_positive(options.get("bar_thickness"), DEFAULT_BAR_THICKNESS, "bar_thickness")
        config = RenderConfig(
            width=width,
            height=height,
            bar_thickness=bar_thickness,
            palette=merge_palette(options.get("palette")),
            stack_order=merge_stack_order(options.get("stack_order")),
        )

        jpeg_quality = _coerce_number(options.get("jpeg_quality"), DEFAULT_JPEG_QUALITY, "jpeg_quality")
        if not 0.0 <= jpeg_quality <= 1.0:
            raise GrafplotConfigError(f"jpeg_quality must be within [0, 1], got {jpeg_quality}")

        file_path = options.get("file_path")
        return cls(
            chart=chart,
            config=config,
            output=str(_or_default(options.get("output"), DEFAULT_OUTPUT)),
            file_path=Path(file_path) if file_path else None,
            jpeg_quality=jpeg_quality,
        )


OPTION_NAMES = (
    "dot",
    "bar1",
    "bar2",
    "diamond",
    "range_min",
    "range_max",
    "width",
    "height",
    "bar_thickness",
    "palette",
    "stack_order",
    "output",
    "file_path",
    "jpeg_quality",
)

_DEFAULTS_FILE_KEYS = frozenset(
    {"width", "height", "bar_thickness", "range_min", "range_max", "jpeg_quality", "palette", "stack_order"}
)


def merge_palette(overrides: Palette | Mapping[str, str] | None) -> Palette:
    if overrides is None:
        palette = Palette()
    elif isinstance(overrides, Palette):
        palette = overrides
    else:
        palette = replace(Palette(), **_checked_overrides(overrides, Palette, "palette"))
    for f in fields(palette):
        parse_color(getattr(palette, f.name), label=f"palette.{f.name}")
    return palette


def merge_stack_order(overrides: StackOrder | Mapping[str, int] | None) -> StackOrder:
    if overrides is None:
        return StackOrder()
    if isinstance(overrides, StackOrder):
        return overrides
    values = _checked_overrides(overrides, StackOrder, "stack_order")
    try:
        return replace(StackOrder(), **{name: int(value) for name, value in values.items()})
    except (TypeError, ValueError) as exc:
        raise GrafplotConfigError(f"stack_order priorities must be integers: {exc}") from exc


def parse_color(value: str, *, label: str = "color") -> Color:
    try:
        r, g, b, a = ImageColor.getcolor(str(value), "RGBA")
    except ValueError as exc:
        raise GrafplotConfigError(f"{label}: unrecognized color {value!r}") from exc
    return (r, g, b, a)


def load_defaults(path: str | Path) -> dict[str, Any]:
    """Read render defaults from a TOML file into an options mapping."""
    defaults_path = Path(path)
    with defaults_path.open("rb") as f:
        raw = tomllib.load(f)
    unknown = sorted(set(raw) - _DEFAULTS_FILE_KEYS)
    if unknown:
        raise GrafplotConfigError(f"{defaults_path}: unknown key(s): {', '.join(unknown)}")
    for table in ("palette", "stack_order"):
        if table in raw and not isinstance(raw[table], dict):
            raise GrafplotConfigError(f"{defaults_path}: [{table}] must be a table")
    return dict(raw)


def _checked_overrides(overrides: Mapping[str, Any], target: type, label: str) -> dict[str, Any]:
    if not isinstance(overrides, Mapping):
        raise GrafplotConfigError(f"{label} must be a mapping")
    known = {f.name for f in fields(target)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise GrafplotConfigError(f"unknown {label} key(s): {', '.join(unknown)}")
    return {name: value for name, value in overrides.items() if value is not None}


def _coerce_dimension(value: Any, default: int, label: str) -> int:
    if value is None:
        return default
    try:
        dim = int(value)
    except (TypeError, ValueError) as exc:
        raise GrafplotConfigError(f"{label} must be an integer, got {value!r}") from exc
    if dim <= 0:
        raise GrafplotConfigError(f"{label} must be > 0")
    return dim


def _coerce_positive(value: Any, default: float, label: str) -> float:
    number = _coerce_number(value, default, label)
    if number <= 0:
        raise GrafplotConfigError(f"{label} must be > 0")
    return number


def _coerce_number(value: Any, default: float, label: str) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise GrafplotConfigError(f"{label} must be a number, got {value!r}") from exc


def _or_default(value: Any, default: Any) -> Any:
    return default if value is None else value
