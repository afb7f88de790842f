from grafplot.api import grafplot, to_base64, to_buffer, to_file, to_jpeg, to_jpeg_base64, to_svg
from grafplot.config import ChartInput, Palette, RenderConfig, RenderRequest, StackOrder, load_defaults
from grafplot.errors import GrafplotConfigError
from grafplot.layout import ChartLayout, PlacedMarker, compute_layout, value_to_pixel
from grafplot.mailing import BatchResult, MailingChart, generate_batch, generate_for_mailing, save_batch_to_files
from grafplot.normalize import normalize_value
from grafplot.output import FileOutput

__all__ = [
    "BatchResult",
    "ChartInput",
    "ChartLayout",
    "FileOutput",
    "GrafplotConfigError",
    "MailingChart",
    "Palette",
    "PlacedMarker",
    "RenderConfig",
    "RenderRequest",
    "StackOrder",
    "compute_layout",
    "generate_batch",
    "generate_for_mailing",
    "grafplot",
    "load_defaults",
    "normalize_value",
    "save_batch_to_files",
    "to_base64",
    "to_buffer",
    "to_file",
    "to_jpeg",
    "to_jpeg_base64",
    "to_svg",
    "value_to_pixel",
]
