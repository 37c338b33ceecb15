from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from slipchart_core.schema import (
    ArrowDirection,
    ArrowLayout,
    CellKind,
    ScheduleChart,
    SegmentKind,
    SegmentSpan,
    format_month_day,
)

from .ascii_renderer import render_chart_ascii, render_chart_markdown
from .html_renderer import CELL_COLORS, LEGEND_LABELS, render_chart_html

LOGGER = logging.getLogger(__name__)

OUTPUT_TYPES: tuple[str, ...] = ("html", "png", "jpg", "jpeg", "txt", "md")

Color = tuple[int, int, int]


@dataclass(frozen=True)
class ImageRenderConfig:
    task_column_width: int = 240
    week_column_width: int = 64
    row_height: int = 40
    padding: int = 20
    jpeg_quality: int = 95
    background: Color = (255, 255, 255)
    header_fill: Color = (66, 153, 225)
    header_text: Color = (255, 255, 255)
    grid: Color = (203, 213, 224)
    text: Color = (26, 32, 44)
    stripe: Color = (240, 247, 255)
    arrow: Color = (45, 55, 72)

    def __post_init__(self) -> None:
        if self.week_column_width < 16 or self.row_height < 16:
            raise ValueError("week_column_width and row_height must be >= 16")
        if not 1 <= self.jpeg_quality <= 100:
            raise ValueError("jpeg_quality must be within 1..100")


@dataclass(frozen=True)
class ChartExportBundle:
    html: Path
    ascii: Path
    markdown: Path
    png: Path

    def as_dict(self) -> dict[str, str]:
        return {
            "html": str(self.html),
            "ascii": str(self.ascii),
            "markdown": str(self.markdown),
            "png": str(self.png),
        }


def resolve_output_type(out_path: str | Path, output_type: str | None = None) -> str:
    kind = (output_type or Path(out_path).suffix.lstrip(".")).lower()
    if kind not in OUTPUT_TYPES:
        raise ValueError(f"Unsupported output type: {kind or '(none)'}; expected one of {', '.join(OUTPUT_TYPES)}")
    return "jpg" if kind == "jpeg" else kind


def export_chart(chart: ScheduleChart, out_path: str | Path, output_type: str | None = None) -> Path:
    path = Path(out_path)
    kind = resolve_output_type(path, output_type)
    path.parent.mkdir(parents=True, exist_ok=True)
    if kind == "html":
        path.write_text(render_chart_html(chart), encoding="utf-8")
    elif kind == "txt":
        path.write_text(render_chart_ascii(chart), encoding="utf-8")
    elif kind == "md":
        path.write_text(render_chart_markdown(chart), encoding="utf-8")
    else:
        render_chart_image(chart, path, image_format="JPEG" if kind == "jpg" else "PNG")
    LOGGER.info("wrote %s chart to %s", kind, path)
    return path


def export_chart_bundle(chart: ScheduleChart, *, out_dir: str | Path, prefix: str = "chart") -> ChartExportBundle:
    root = Path(out_dir)
    root.mkdir(parents=True, exist_ok=True)
    return ChartExportBundle(
        html=export_chart(chart, root / f"{prefix}.html"),
        ascii=export_chart(chart, root / f"{prefix}.txt"),
        markdown=export_chart(chart, root / f"{prefix}.md"),
        png=export_chart(chart, root / f"{prefix}.png"),
    )


def render_chart_image(
    chart: ScheduleChart,
    out_path: str | Path,
    config: ImageRenderConfig | None = None,
    *,
    image_format: str = "PNG",
) -> Path:
    cfg = config or ImageRenderConfig()
    path = Path(out_path)
    font = ImageFont.load_default()

    pad = cfg.padding
    title_h = 48
    header_h = cfg.row_height
    legend_h = 40
    grid_left = pad + cfg.task_column_width
    grid_top = pad + title_h + header_h * 2
    week_count = len(chart.weeks)

    width = max(480, grid_left + week_count * cfg.week_column_width + pad)
    height = grid_top + len(chart.rows) * cfg.row_height + legend_h + pad
    image = Image.new("RGB", (width, height), color=cfg.background)
    draw = ImageDraw.Draw(image)

    date_range = chart.date_range()
    title = chart.options.title
    if date_range is not None:
        title = f"{title}  ({format_month_day(date_range[0])} - {format_month_day(date_range[1])})"
    _draw_centered(draw, (pad, pad, width - pad, pad + title_h), title, font, cfg.text)

    # month row, then week row
    month_top = pad + title_h
    week_top = month_top + header_h
    _draw_box(draw, (pad, month_top, grid_left, week_top), cfg.header_fill, cfg.grid)
    _draw_centered(draw, (pad, month_top, grid_left, week_top), "Task", font, cfg.header_text)
    _draw_box(draw, (pad, week_top, grid_left, grid_top), cfg.header_fill, cfg.grid)
    _draw_centered(draw, (pad, week_top, grid_left, grid_top), "Start - End", font, cfg.header_text)
    x = grid_left
    for month in chart.months:
        span = len(month.weeks) * cfg.week_column_width
        _draw_box(draw, (x, month_top, x + span, week_top), cfg.header_fill, cfg.grid)
        _draw_centered(draw, (x, month_top, x + span, week_top), month.label, font, cfg.header_text)
        x += span
    for index, week in enumerate(chart.weeks):
        left = grid_left + index * cfg.week_column_width
        box = (left, week_top, left + cfg.week_column_width, grid_top)
        _draw_box(draw, box, cfg.header_fill, cfg.grid)
        _draw_centered(draw, box, f"W{week.number} {format_month_day(week.start_date)}", font, cfg.header_text)

    for row_index, row in enumerate(chart.rows):
        top = grid_top + row_index * cfg.row_height
        bottom = top + cfg.row_height
        fill = cfg.stripe if row_index % 2 else cfg.background
        _draw_box(draw, (pad, top, grid_left, bottom), fill, cfg.grid)
        name = _fit_text(draw, row.task.name, font, cfg.task_column_width - 12)
        dates = f"{format_month_day(row.task.original_date)} - {format_month_day(row.task.completion_date)}"
        draw.text((pad + 6, top + 4), name, fill=cfg.text, font=font)
        draw.text((pad + 6, top + cfg.row_height // 2 + 2), dates, fill=cfg.text, font=font)
        for week_index, cell in enumerate(row.cells):
            left = grid_left + week_index * cfg.week_column_width
            _draw_box(draw, (left, top, left + cfg.week_column_width, bottom), fill, cfg.grid)
            if cell != CellKind.EMPTY:
                draw.rectangle(
                    (left + 4, top + 8, left + cfg.week_column_width - 4, bottom - 8),
                    fill=_hex_to_rgb(CELL_COLORS[cell]),
                )
        _draw_arrow(draw, row.arrow, top, cfg, font)

    legend_top = grid_top + len(chart.rows) * cfg.row_height + 12
    x = pad
    for kind, text in LEGEND_LABELS.items():
        draw.rectangle((x, legend_top, x + 14, legend_top + 14), fill=_hex_to_rgb(CELL_COLORS[kind]))
        draw.text((x + 20, legend_top + 1), text, fill=cfg.text, font=font)
        x += 20 + int(draw.textlength(text, font=font)) + 24

    if image_format.upper() == "JPEG":
        image.save(path, format="JPEG", quality=cfg.jpeg_quality)
    else:
        image.save(path, format="PNG")
    return path


def _draw_arrow(
    draw: ImageDraw.ImageDraw,
    arrow: ArrowLayout,
    row_top: int,
    cfg: ImageRenderConfig,
    font: ImageFont.ImageFont,
) -> None:
    cw = cfg.week_column_width
    grid_left = cfg.padding + cfg.task_column_width
    y = row_top + cfg.row_height // 2
    forward = arrow.direction == ArrowDirection.FORWARD
    for segment in arrow.segments:
        left = grid_left + segment.week_index * cw
        x0, x1 = left, left + cw
        if segment.span == SegmentSpan.HALF and segment.kind != SegmentKind.MIDDLE:
            faces_right = (segment.kind == SegmentKind.START) == forward
            x0, x1 = (left + cw // 2, left + cw) if faces_right else (left, left + cw // 2)
        draw.line((x0, y, x1, y), fill=cfg.arrow, width=2)
        if segment.arrowhead:
            tip = x1 if forward else x0
            back = -8 if forward else 8
            draw.polygon([(tip, y), (tip + back, y - 5), (tip + back, y + 5)], fill=cfg.arrow)

    label_left = grid_left + arrow.label_week_index * cw
    _draw_centered(draw, (label_left, row_top, label_left + cw, y), f"{arrow.day_count}d", font, cfg.text)


def _draw_box(
    draw: ImageDraw.ImageDraw,
    box: tuple[int, int, int, int],
    fill: Color,
    outline: Color,
) -> None:
    draw.rectangle(box, fill=fill, outline=outline)


def _draw_centered(
    draw: ImageDraw.ImageDraw,
    box: tuple[int, int, int, int],
    text: str,
    font: ImageFont.ImageFont,
    fill: Color,
) -> None:
    x0, y0, x1, y1 = draw.textbbox((0, 0), text, font=font)
    left, top, right, bottom = box
    x = left + max(0, ((right - left) - (x1 - x0)) // 2)
    y = top + max(0, ((bottom - top) - (y1 - y0)) // 2)
    draw.text((x, y), text, fill=fill, font=font)


def _fit_text(draw: ImageDraw.ImageDraw, text: str, font: ImageFont.ImageFont, max_width: int) -> str:
    if draw.textlength(text, font=font) <= max_width:
        return text
    trimmed = text
    while trimmed and draw.textlength(trimmed + "...", font=font) > max_width:
        trimmed = trimmed[:-1]
    return trimmed + "..."


def _hex_to_rgb(value: str) -> Color:
    raw = value.lstrip("#")
    return (int(raw[0:2], 16), int(raw[2:4], 16), int(raw[4:6], 16))
