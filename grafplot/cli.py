from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import Any, Sequence

from grafplot.api import grafplot
from grafplot.config import MARKER_KINDS, load_defaults
from grafplot.mailing import save_batch_to_files
from grafplot.output import FileOutput

_STDOUT_OUTPUTS = {"png": "buffer", "jpeg": "jpeg", "svg": "svg"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="grafplot")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render one chart to a file or stdout.")
    for kind in MARKER_KINDS:
        render.add_argument(f"--{kind}", default=None, help=f"{kind} value (numeric text is accepted).")
    render.add_argument("--min", dest="range_min", default=None)
    render.add_argument("--max", dest="range_max", default=None)
    render.add_argument("--width", type=int, default=None)
    render.add_argument("--height", type=int, default=None)
    render.add_argument("--bar-thickness", type=float, default=None)
    for name in ("background",) + MARKER_KINDS:
        render.add_argument(f"--color-{name}", default=None, help=f"{name} color (hex, rgb() or CSS name).")
    for kind in MARKER_KINDS:
        render.add_argument(f"--z-{kind}", type=int, default=None, help=f"{kind} stacking priority.")
    render.add_argument(
        "--format",
        choices=sorted(_STDOUT_OUTPUTS),
        default="png",
        help="Encoding for stdout. With --out the file extension decides.",
    )
    render.add_argument("--quality", type=float, default=None, help="JPEG quality in [0, 1].")
    render.add_argument("--out", type=Path, default=None, help="Write to this path and print its metadata.")
    render.add_argument("--defaults", type=Path, default=None, help="TOML file with default render options.")

    batch = sub.add_parser("batch", help="Render a JSON list of charts into a directory.")
    batch.add_argument("manifest", type=Path, help="JSON list of objects, each with a `filename` key.")
    batch.add_argument("--out-dir", type=Path, required=True)
    batch.add_argument("--defaults", type=Path, default=None, help="TOML file with default render options.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "render":
        return _run_render(args)
    if args.command == "batch":
        return _run_batch(args)
    raise RuntimeError(f"unsupported command: {args.command}")


def _run_render(args: argparse.Namespace) -> int:
    options = _load_defaults(args.defaults)
    for key, value in _render_options(args).items():
        if key in ("palette", "stack_order"):
            options[key] = {**options.get(key, {}), **value}
        else:
            options[key] = value
    if args.out is not None:
        result = grafplot(**options, output="file", file_path=args.out)
        assert isinstance(result, FileOutput)
        print(json.dumps(result.as_dict(), indent=2, sort_keys=True))
        return 0

    result = grafplot(**options, output=_STDOUT_OUTPUTS[args.format])
    if isinstance(result, str):
        sys.stdout.write(result)
        sys.stdout.write("\n")
    else:
        sys.stdout.buffer.write(result)
        sys.stdout.buffer.flush()
    return 0


def _run_batch(args: argparse.Namespace) -> int:
    items = json.loads(args.manifest.read_text(encoding="utf-8"))
    if not isinstance(items, list):
        raise ValueError("batch manifest must be a JSON list")
    results = save_batch_to_files(items, args.out_dir, defaults=_load_defaults(args.defaults))
    summary = [
        {"name": r.name, "ok": r.ok, "error": None if r.ok else str(r.error), **_file_info(r.value)}
        for r in results
    ]
    print(json.dumps(summary, indent=2, sort_keys=True))
    return 0 if all(r.ok for r in results) else 1


def _render_options(args: argparse.Namespace) -> dict[str, Any]:
    options: dict[str, Any] = {}
    for name in MARKER_KINDS + ("range_min", "range_max", "width", "height", "bar_thickness"):
        value = getattr(args, name)
        if value is not None:
            options[name] = value
    if args.quality is not None:
        options["jpeg_quality"] = args.quality

    palette = {
        name: getattr(args, f"color_{name}")
        for name in ("background",) + MARKER_KINDS
        if getattr(args, f"color_{name}") is not None
    }
    if palette:
        options["palette"] = palette
    stack_order = {kind: getattr(args, f"z_{kind}") for kind in MARKER_KINDS if getattr(args, f"z_{kind}") is not None}
    if stack_order:
        options["stack_order"] = stack_order
    return options


def _load_defaults(path: Path | None) -> dict[str, Any]:
    if path is None:
        return {}
    return load_defaults(path)


def _file_info(value: object) -> dict[str, Any]:
    if isinstance(value, FileOutput):
        return value.as_dict()
    return {}


if __name__ == "__main__":
    raise SystemExit(main())
