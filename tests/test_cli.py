from __future__ import annotations

import contextlib
import io
import json
from pathlib import Path
import tempfile
import unittest

import grafplot
from grafplot.cli import main


class CliTests(unittest.TestCase):
    def test_render_to_file_prints_metadata(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out = Path(tmp) / "chart.png"
            stdout = io.StringIO()
            with contextlib.redirect_stdout(stdout):
                code = main(["render", "--dot", "45", "--bar1", "67,0", "--out", str(out)])
            self.assertEqual(code, 0)
            info = json.loads(stdout.getvalue())
            self.assertEqual(info["format"], "png")
            self.assertEqual(info["size"], out.stat().st_size)

    def test_render_svg_to_stdout_matches_api(self) -> None:
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            code = main(
                [
                    "render",
                    "--dot", "45",
                    "--bar2", "52",
                    "--min", "0",
                    "--max", "200",
                    "--color-dot", "#000000",
                    "--z-dot", "9",
                    "--format", "svg",
                ]
            )
        self.assertEqual(code, 0)
        expected = grafplot.to_svg(
            dot="45",
            bar2="52",
            range_min="0",
            range_max="200",
            palette={"dot": "#000000"},
            stack_order={"dot": 9},
        )
        self.assertEqual(stdout.getvalue(), expected + "\n")

    def test_render_merges_toml_defaults_with_flags(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            defaults = Path(tmp) / "grafplot.toml"
            defaults.write_text('width = 300\n[palette]\nbar1 = "#111111"\n', encoding="utf-8")
            stdout = io.StringIO()
            with contextlib.redirect_stdout(stdout):
                main(["render", "--bar1", "50", "--color-dot", "#222222", "--defaults", str(defaults), "--format", "svg"])
            markup = stdout.getvalue()
            self.assertIn('width="300"', markup)
            self.assertIn('fill="#111111"', markup)

    def test_batch_reports_failures_with_exit_code(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            manifest = Path(tmp) / "batch.json"
            manifest.write_text(
                json.dumps(
                    [
                        {"filename": "one.svg", "dot": 10},
                        {"filename": "two.png", "palette": {"dot": "nope"}},
                    ]
                ),
                encoding="utf-8",
            )
            out_dir = Path(tmp) / "charts"
            stdout = io.StringIO()
            with contextlib.redirect_stdout(stdout):
                code = main(["batch", str(manifest), "--out-dir", str(out_dir)])
            self.assertEqual(code, 1)
            summary = json.loads(stdout.getvalue())
            self.assertEqual([item["ok"] for item in summary], [True, False])
            self.assertTrue((out_dir / "one.svg").exists())
            self.assertFalse((out_dir / "two.png").exists())


if __name__ == "__main__":
    unittest.main()
