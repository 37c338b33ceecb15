from __future__ import annotations

from dataclasses import dataclass
import html

from slipchart_core.schema import (
    ArrowDirection,
    ArrowLayout,
    ArrowSegment,
    CellKind,
    ScheduleChart,
    SegmentKind,
    SegmentSpan,
    TaskRow,
    format_full_date,
    format_month_day,
)

CELL_COLORS: dict[CellKind, str] = {
    CellKind.ORIGINAL: "#ECC94B",
    CellKind.COMPLETION: "#48BB78",
    CellKind.SAME_WEEK: "#9F7AEA",
    CellKind.PASSTHROUGH: "#BEE3F8",
}

CELL_CLASSES: dict[CellKind, str] = {
    CellKind.ORIGINAL: "bar-original",
    CellKind.COMPLETION: "bar-completion",
    CellKind.SAME_WEEK: "bar-same-week",
    CellKind.PASSTHROUGH: "bar-passthrough",
}

LEGEND_LABELS: dict[CellKind, str] = {
    CellKind.ORIGINAL: "Original Date",
    CellKind.COMPLETION: "Completion Date",
    CellKind.SAME_WEEK: "Same Week",
    CellKind.PASSTHROUGH: "In Between",
}


@dataclass(frozen=True)
class HtmlRenderConfig:
    slide_width_px: int = 1600
    slide_height_px: int = 900
    task_column_px: int = 200
    week_column_px: int = 64
    show_arrows: bool = True
    show_tooltips: bool = True

    def __post_init__(self) -> None:
        for name in ("slide_width_px", "slide_height_px", "task_column_px", "week_column_px"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be > 0")


def render_chart_html(chart: ScheduleChart, config: HtmlRenderConfig | None = None) -> str:
    cfg = config or HtmlRenderConfig()
    title = html.escape(chart.options.title)
    date_range = chart.date_range()
    subtitle = ""
    if date_range is not None:
        subtitle = f"{format_month_day(date_range[0])} - {format_month_day(date_range[1])}"

    parts: list[str] = []
    parts.append("<!DOCTYPE html>\n<html>\n<head>\n")
    parts.append('  <meta charset="UTF-8">\n')
    parts.append(f"  <title>{title}</title>\n")
    parts.append(f"  <style>\n{_stylesheet(cfg)}  </style>\n")
    parts.append("</head>\n<body>\n")
    parts.append('  <div class="slide-container">\n')
    parts.append(f"    <h1>{title}</h1>\n")
    parts.append(f'    <div class="subtitle">{html.escape(subtitle)}</div>\n')
    parts.append('    <div class="chart-container">\n      <table>\n        <thead>\n')

    parts.append('          <tr>\n            <th class="task-cell">Task</th>\n')
    for month in chart.months:
        parts.append(f'            <th colspan="{len(month.weeks)}">{html.escape(month.label)}</th>\n')
    parts.append("          </tr>\n")

    parts.append('          <tr>\n            <th class="task-cell">Start - End</th>\n')
    for week in chart.weeks:
        parts.append(
            f'            <th class="week-cell" title="{html.escape(week.label)}">'
            f"W{week.number}<br>{format_month_day(week.start_date)}</th>\n"
        )
    parts.append("          </tr>\n        </thead>\n        <tbody>\n")

    for row_index, row in enumerate(chart.rows):
        parts.append(_render_task_row(row, row_index, cfg))

    parts.append("        </tbody>\n      </table>\n")
    parts.append(_render_legend(chart))
    parts.append("    </div>\n  </div>\n</body>\n</html>\n")
    return "".join(parts)


def _render_task_row(row: TaskRow, row_index: int, cfg: HtmlRenderConfig) -> str:
    task = row.task
    name = html.escape(task.name)
    parts: list[str] = []
    parts.append(f'          <tr class="task-row" data-task-id="{row_index}">\n')
    parts.append(f'            <td class="task-cell" data-task-id="{row_index}">\n')
    parts.append(f'              <div title="{name}">{name}</div>\n')
    parts.append(
        f'              <div class="date-info">{format_month_day(task.original_date)} - '
        f"{format_month_day(task.completion_date)}</div>\n"
    )
    if cfg.show_tooltips:
        parts.append(
            '              <div class="tooltip">'
            f"<strong>{name}</strong><br>"
            f"Original Date: {format_full_date(task.original_date)}<br>"
            f"Completion Date: {format_full_date(task.completion_date)}<br>"
            f"Duration: {row.arrow.day_count} days</div>\n"
        )
    parts.append("            </td>\n")

    for week_index, cell in enumerate(row.cells):
        content = ""
        if cell != CellKind.EMPTY:
            content = f'<div class="bar {CELL_CLASSES[cell]}"></div>'
        if cfg.show_arrows:
            content += _render_arrow_fragment(row.arrow, week_index)
        parts.append(f'            <td class="week-cell">{content}</td>\n')
    parts.append("          </tr>\n")
    return "".join(parts)


def _render_arrow_fragment(arrow: ArrowLayout, week_index: int) -> str:
    label = ""
    if arrow.label_week_index == week_index:
        label = f'<span class="arrow-label">{arrow.day_count}d</span>'
    segment = arrow.segment_for(week_index)
    if segment is None:
        return label
    return _segment_markup(segment, arrow.direction) + label


def _segment_markup(segment: ArrowSegment, direction: ArrowDirection) -> str:
    forward = direction == ArrowDirection.FORWARD
    if segment.span == SegmentSpan.FULL or segment.kind == SegmentKind.MIDDLE:
        placement = "full"
    elif segment.kind == SegmentKind.START:
        placement = "half-right" if forward else "half-left"
    else:
        placement = "half-left" if forward else "half-right"
    markup = f'<div class="arrow-line {placement}"></div>'
    if segment.arrowhead:
        head = "&#9654;" if forward else "&#9664;"
        markup += f'<span class="arrow-head {direction.value} {placement}">{head}</span>'
    return markup


def _render_legend(chart: ScheduleChart) -> str:
    used = {cell for row in chart.rows for cell in row.cells}
    parts = ['      <div class="legend">\n']
    for kind, text in LEGEND_LABELS.items():
        if kind not in used and kind not in (CellKind.ORIGINAL, CellKind.COMPLETION):
            continue
        parts.append(
            '        <div class="legend-item">'
            f'<div class="legend-color {CELL_CLASSES[kind]}"></div>'
            f"<span>{text}</span></div>\n"
        )
    parts.append("      </div>\n")
    return "".join(parts)


def _stylesheet(cfg: HtmlRenderConfig) -> str:
    bar_rules = "".join(
        f"    .{CELL_CLASSES[kind]} {{ background-color: {color}; }}\n" for kind, color in CELL_COLORS.items()
    )
    return (
        "    body { font-family: Arial, sans-serif; margin: 0; padding: 0; background-color: white; }\n"
        f"    .slide-container {{ width: {cfg.slide_width_px}px; height: {cfg.slide_height_px}px; "
        "overflow: hidden; position: relative; padding: 20px; }\n"
        "    .chart-container { width: 100%; height: 100%; overflow: hidden; }\n"
        "    h1 { color: #2b6cb0; font-size: 36px; margin: 0 0 10px 0; text-align: center; }\n"
        "    .subtitle { color: #4a5568; font-size: 22px; margin: 0 0 20px 0; text-align: center; }\n"
        "    table { border-collapse: collapse; width: 100%; font-size: 16px; table-layout: fixed; }\n"
        "    th, td { border: 1px solid #cbd5e0; padding: 6px; text-align: center; }\n"
        "    th { background-color: #4299e1; color: white; font-weight: bold; }\n"
        f"    .task-cell {{ text-align: left; font-weight: 600; position: sticky; left: 0; "
        f"background: inherit; width: {cfg.task_column_px}px; max-width: {cfg.task_column_px}px; "
        "white-space: nowrap; overflow: hidden; text-overflow: ellipsis; }\n"
        f"    .week-cell {{ width: {cfg.week_column_px}px; position: relative; }}\n"
        "    tr:nth-child(even) { background-color: #f0f7ff; }\n"
        "    tr:nth-child(odd) { background-color: #ffffff; }\n"
        "    .task-row:hover { background-color: #e5f0ff !important; }\n"
        "    .bar { border-radius: 3px; height: 20px; width: 100%; }\n"
        + bar_rules
        + "    .arrow-line { position: absolute; top: 50%; height: 2px; background-color: #2d3748; }\n"
        "    .arrow-line.full { left: 0; right: 0; }\n"
        "    .arrow-line.half-left { left: 0; right: 50%; }\n"
        "    .arrow-line.half-right { left: 50%; right: 0; }\n"
        "    .arrow-head { position: absolute; top: calc(50% - 9px); font-size: 14px; color: #2d3748; }\n"
        "    .arrow-head.forward.full { right: -4px; }\n"
        "    .arrow-head.backward.full { left: -4px; }\n"
        "    .arrow-head.forward.half-left { left: calc(50% - 10px); }\n"
        "    .arrow-head.backward.half-right { left: calc(50% - 2px); }\n"
        "    .arrow-label { position: absolute; top: 2px; left: 0; right: 0; font-size: 11px; "
        "font-weight: bold; color: #1a202c; }\n"
        "    .tooltip { display: none; position: absolute; background-color: #fff; border: 1px solid #ddd; "
        "padding: 10px; border-radius: 5px; box-shadow: 0 2px 10px rgba(0,0,0,0.1); z-index: 100; "
        "max-width: 250px; }\n"
        "    .task-cell:hover .tooltip { display: block; }\n"
        "    .legend { display: flex; gap: 30px; justify-content: center; margin-top: 15px; }\n"
        "    .legend-item { display: flex; align-items: center; font-size: 18px; }\n"
        "    .legend-color { width: 20px; height: 20px; border-radius: 3px; margin-right: 8px; }\n"
        "    .date-info { font-size: 12px; color: #666; }\n"
    )
