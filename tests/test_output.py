from __future__ import annotations

import base64
from io import BytesIO
from pathlib import Path
import tempfile
import unittest
from unittest import mock

from PIL import Image

import grafplot
from grafplot import FileOutput, GrafplotConfigError
from grafplot.config import Palette, RenderRequest, load_defaults
from grafplot.output import detect_file_format, resolve_output_kind

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
VALUES = {"dot": 45, "bar1": 67, "bar2": 52, "diamond": 80}


class OutputKindTests(unittest.TestCase):
    def test_aliases_resolve(self) -> None:
        self.assertEqual(resolve_output_kind("png"), "buffer")
        self.assertEqual(resolve_output_kind("PNG-Base64"), "base64")
        self.assertEqual(resolve_output_kind("jpg"), "jpeg")
        self.assertEqual(resolve_output_kind("jpg-base64"), "jpeg-base64")

    def test_unknown_kind_is_a_config_error(self) -> None:
        with self.assertRaises(GrafplotConfigError) as ctx:
            grafplot.grafplot(**VALUES, output="gif")
        self.assertIn("gif", str(ctx.exception))

    def test_default_output_is_png_bytes(self) -> None:
        data = grafplot.grafplot(**VALUES)
        self.assertTrue(data.startswith(PNG_SIGNATURE))
        self.assertEqual(data, grafplot.grafplot(**VALUES, output="png"))

    def test_png_data_url_wraps_png_bytes(self) -> None:
        url = grafplot.to_base64(**VALUES)
        prefix = "data:image/png;base64,"
        self.assertTrue(url.startswith(prefix))
        self.assertEqual(base64.b64decode(url[len(prefix):]), grafplot.to_buffer(**VALUES))

    def test_jpeg_outputs(self) -> None:
        self.assertTrue(grafplot.to_jpeg(**VALUES).startswith(b"\xff\xd8"))
        url = grafplot.to_jpeg_base64(**VALUES, jpeg_quality=0.5)
        self.assertTrue(url.startswith("data:image/jpeg;base64,"))

    def test_svg_output(self) -> None:
        markup = grafplot.to_svg(**VALUES)
        self.assertTrue(markup.startswith('<?xml version="1.0"'))
        self.assertEqual(markup, grafplot.grafplot(**VALUES, output="svg"))

    def test_raster_and_vector_outputs_are_repeatable(self) -> None:
        self.assertEqual(grafplot.to_buffer(**VALUES), grafplot.to_buffer(**VALUES))
        self.assertEqual(grafplot.to_svg(**VALUES), grafplot.to_svg(**VALUES))


class FileOutputTests(unittest.TestCase):
    def test_png_file_metadata(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "chart.png"
            result = grafplot.to_file(**VALUES, file_path=path)
            self.assertIsInstance(result, FileOutput)
            self.assertEqual(result.filename, "chart.png")
            self.assertEqual(result.path, path)
            self.assertEqual(result.format, "png")
            self.assertEqual((result.width, result.height), (620, 28))
            self.assertEqual(result.size, path.stat().st_size)
            with Image.open(path) as image:
                self.assertEqual(image.size, (620, 28))

    def test_svg_file_contains_markup(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "chart.svg"
            result = grafplot.grafplot(**VALUES, output="file", file_path=str(path))
            self.assertEqual(result.format, "svg")
            self.assertEqual(path.read_text(encoding="utf-8"), grafplot.to_svg(**VALUES))

    def test_jpeg_extension_selects_jpeg(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "chart.JPG"
            result = grafplot.to_file(**VALUES, file_path=path, width=400, height=40)
            self.assertEqual(result.format, "jpg")
            self.assertEqual((result.width, result.height), (400, 40))
            self.assertTrue(path.read_bytes().startswith(b"\xff\xd8"))

    def test_missing_extension_falls_back_to_png(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "chart"
            result = grafplot.to_file(**VALUES, file_path=path)
            self.assertEqual(result.format, "png")
            self.assertTrue(path.read_bytes().startswith(PNG_SIGNATURE))
            self.assertEqual(detect_file_format("x.gif"), "png")

    def test_file_output_requires_a_path(self) -> None:
        with mock.patch("grafplot.output.write_file") as write_file:
            with self.assertRaises(GrafplotConfigError):
                grafplot.grafplot(**VALUES, output="file")
            write_file.assert_not_called()

    def test_write_failures_propagate(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "missing" / "chart.png"
            with self.assertRaises(OSError):
                grafplot.to_file(**VALUES, file_path=path)

    def test_as_dict_is_json_friendly(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            result = grafplot.to_file(**VALUES, file_path=Path(tmp) / "c.svg")
            info = result.as_dict()
            self.assertEqual(info["filename"], "c.svg")
            self.assertIsInstance(info["path"], str)


class RenderRequestTests(unittest.TestCase):
    def test_partial_palette_overrides_keep_other_defaults(self) -> None:
        request = RenderRequest.from_options(palette={"dot": "red"})
        self.assertEqual(request.config.palette.dot, "red")
        self.assertEqual(request.config.palette.bar1, Palette().bar1)

    def test_partial_stack_order_overrides(self) -> None:
        request = RenderRequest.from_options(stack_order={"dot": "7"})
        self.assertEqual(request.config.stack_order.dot, 7)
        self.assertEqual(request.config.stack_order.bar2, 4)

    def test_defaults(self) -> None:
        request = RenderRequest.from_options()
        self.assertEqual((request.config.width, request.config.height, request.config.bar_thickness), (620, 28, 4))
        self.assertEqual(request.output, "buffer")
        self.assertEqual(request.jpeg_quality, 0.9)
        self.assertIsNone(request.file_path)

    def test_invalid_options_are_config_errors(self) -> None:
        bad_options = (
            {"colour": "red"},
            {"palette": {"dot": "not-a-color"}},
            {"palette": {"circle": "red"}},
            {"stack_order": {"dot": "high"}},
            {"width": 0},
            {"height": "tall"},
            {"bar_thickness": -1},
            {"jpeg_quality": 1.5},
        )
        for options in bad_options:
            with self.subTest(options=options):
                with self.assertRaises(GrafplotConfigError):
                    RenderRequest.from_options(**options)

    def test_load_defaults_from_toml(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "grafplot.toml"
            path.write_text('width = 400\n\n[palette]\ndot = "#000000"\n', encoding="utf-8")
            defaults = load_defaults(path)
            self.assertEqual(defaults, {"width": 400, "palette": {"dot": "#000000"}})
            request = RenderRequest.from_options(**defaults)
            self.assertEqual(request.config.width, 400)

    def test_load_defaults_rejects_unknown_keys(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "grafplot.toml"
            path.write_text("dot = 50\n", encoding="utf-8")
            with self.assertRaises(GrafplotConfigError):
                load_defaults(path)

    def test_data_url_png_decodes(self) -> None:
        url = grafplot.to_base64(dot=10)
        payload = base64.b64decode(url.split(",", 1)[1])
        with Image.open(BytesIO(payload)) as image:
            self.assertEqual(image.format, "PNG")


if __name__ == "__main__":
    unittest.main()
