from __future__ import annotations

from dataclasses import dataclass

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

CELL_FILL: dict[CellKind, str] = {
    CellKind.EMPTY: " ",
    CellKind.ORIGINAL: "o",
    CellKind.COMPLETION: "#",
    CellKind.SAME_WEEK: "*",
    CellKind.PASSTHROUGH: ".",
}

CELL_LEGEND: dict[CellKind, str] = {
    CellKind.ORIGINAL: "Original Date",
    CellKind.COMPLETION: "Completion Date",
    CellKind.SAME_WEEK: "Same Week",
    CellKind.PASSTHROUGH: "In Between",
}


@dataclass(frozen=True)
class AsciiRenderConfig:
    week_column_width: int = 6
    show_arrows: bool = True

    def __post_init__(self) -> None:
        if self.week_column_width < 3:
            raise ValueError("week_column_width must be >= 3")


def render_chart_ascii(chart: ScheduleChart, config: AsciiRenderConfig | None = None) -> str:
    cfg = config or AsciiRenderConfig()
    width = cfg.week_column_width
    label_width = max([len(row.task.name) for row in chart.rows] + [len("Task")])

    lines: list[str] = []
    lines.append(chart.options.title)
    date_range = chart.date_range()
    if date_range is not None:
        lines.append(
            f"Range: {format_month_day(date_range[0])} - {format_month_day(date_range[1])} "
            f"| weeks={len(chart.weeks)} | numbering={chart.options.week_numbering}"
        )
    lines.append("Legend: " + ", ".join(f"'{CELL_FILL[kind]}' {text}" for kind, text in CELL_LEGEND.items()))
    lines.append(_axis_row("Months:", _build_month_header(chart, width), label_width))
    lines.append(_axis_row("Weeks:", "".join(f"W{week.number:02d}".center(width) for week in chart.weeks), label_width))
    lines.append(
        _axis_row("Dates:", "".join(format_month_day(week.start_date).center(width) for week in chart.weeks), label_width)
    )

    for row in chart.rows:
        bar = "".join(CELL_FILL[cell] * width for cell in row.cells)
        lines.append(f"{row.task.name.ljust(label_width)} |{bar}| {_row_suffix(row)}")

    if cfg.show_arrows:
        lines.append("")
        lines.append("Arrows:")
        for row in chart.rows:
            cells = _render_arrow_cells(row.arrow, len(chart.weeks), width)
            lines.append(f"{row.task.name.ljust(label_width)} |{cells}| {row.arrow.direction.value} {row.arrow.mode}")

    return "\n".join(lines) + "\n"


def render_chart_markdown(chart: ScheduleChart, config: AsciiRenderConfig | None = None) -> str:
    grid = render_chart_ascii(chart, config)
    table = [
        "| Task | Original Date | Completion Date | Days | Direction |",
        "| --- | --- | --- | ---: | --- |",
    ]
    for row in chart.rows:
        name = row.task.name.replace("|", "\\|") or "(unnamed)"
        table.append(
            f"| {name} | {format_full_date(row.task.original_date)} | "
            f"{format_full_date(row.task.completion_date)} | {row.arrow.day_count} | {row.arrow.direction.value} |"
        )
    return (
        f"# {chart.options.title}\n\n"
        "## Timeline\n\n"
        "```text\n"
        f"{grid.rstrip()}\n"
        "```\n\n"
        "## Tasks\n\n"
        + "\n".join(table)
        + "\n"
    )


def _axis_row(title: str, cells: str, label_width: int) -> str:
    return f"{title.ljust(label_width)}  {cells}"


def _build_month_header(chart: ScheduleChart, width: int) -> str:
    parts: list[str] = []
    for month in chart.months:
        span = len(month.weeks) * width
        label = month.label
        if len(label) > span:
            label = f"{month.label[:3]} {month.year % 100:02d}"
        parts.append(label[:span].center(span, "-"))
    return "".join(parts)


def _row_suffix(row: TaskRow) -> str:
    task = row.task
    return (
        f"{format_full_date(task.original_date)} -> {format_full_date(task.completion_date)} "
        f"({row.arrow.day_count} days)"
    )


def _render_arrow_cells(arrow: ArrowLayout, week_count: int, width: int) -> str:
    cells = [" " * width for _ in range(week_count)]
    for segment in arrow.segments:
        cells[segment.week_index] = _arrow_cell(segment, arrow.direction, width)
    label = str(arrow.day_count)
    index = arrow.label_week_index
    if len(label) <= width:
        cell = cells[index]
        offset = (width - len(label)) // 2
        cells[index] = cell[:offset] + label + cell[offset + len(label):]
    return "".join(cells)


def _arrow_cell(segment: ArrowSegment, direction: ArrowDirection, width: int) -> str:
    half = width // 2
    forward = direction == ArrowDirection.FORWARD
    if segment.kind == SegmentKind.MIDDLE:
        return "-" * width
    if segment.kind == SegmentKind.START:
        if segment.span == SegmentSpan.FULL:
            return "-" * width
        # Source half faces the destination.
        return " " * half + "-" * (width - half) if forward else "-" * (width - half) + " " * half
    if segment.span == SegmentSpan.FULL:
        return "-" * (width - 1) + ">" if forward else "<" + "-" * (width - 1)
    if forward:
        return "-" * (half - 1) + ">" + " " * (width - half)
    return " " * (width - half) + "<" + "-" * (half - 1)
