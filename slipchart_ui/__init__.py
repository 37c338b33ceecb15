"""Renderers and exporters for schedule-change charts."""

from .ascii_renderer import CELL_FILL, AsciiRenderConfig, render_chart_ascii, render_chart_markdown
from .exporters import (
    OUTPUT_TYPES,
    ChartExportBundle,
    ImageRenderConfig,
    export_chart,
    export_chart_bundle,
    render_chart_image,
    resolve_output_type,
)
from .html_renderer import CELL_CLASSES, CELL_COLORS, HtmlRenderConfig, render_chart_html
from .validation import (
    ValidationReport,
    require_valid_chart,
    validate_chart_suite,
    validate_render_consistency,
    validate_timeline_integrity,
)

__all__ = [
    "AsciiRenderConfig",
    "CELL_CLASSES",
    "CELL_COLORS",
    "CELL_FILL",
    "ChartExportBundle",
    "HtmlRenderConfig",
    "ImageRenderConfig",
    "OUTPUT_TYPES",
    "ValidationReport",
    "export_chart",
    "export_chart_bundle",
    "render_chart_ascii",
    "render_chart_html",
    "render_chart_image",
    "render_chart_markdown",
    "require_valid_chart",
    "resolve_output_type",
    "validate_chart_suite",
    "validate_render_consistency",
    "validate_timeline_integrity",
]
