from __future__ import annotations

import logging
from pathlib import Path

from .arrows import resolve_arrow
from .csv_parser import parse_tasks
from .diagnostics import DiagnosticsCollector
from .errors import EmptyResultError, SchemaError
from .placement import classify_row
from .schema import ChartOptions, ScheduleChart, TaskRow, format_full_date
from .timeline import build_timeline, group_weeks_by_month

LOGGER = logging.getLogger(__name__)


def build_schedule_chart(
    csv_text: str,
    options: ChartOptions | None = None,
    *,
    diagnostics: DiagnosticsCollector | None = None,
) -> ScheduleChart:
    opts = options or ChartOptions()
    diag = diagnostics if diagnostics is not None else DiagnosticsCollector()

    tasks = parse_tasks(csv_text, day_first=opts.day_first, diagnostics=diag)
    if not tasks:
        raise EmptyResultError("No valid tasks found in CSV input")
    if opts.sort_by_original_date:
        tasks = tuple(sorted(tasks, key=lambda task: task.original_date))

    weeks = build_timeline(
        tasks,
        padding_days=opts.padding_days,
        numbering=opts.week_numbering,
        align_to_months=opts.align_to_months,
    )
    months = group_weeks_by_month(weeks)

    rows: list[TaskRow] = []
    for task in tasks:
        if task.moved_earlier:
            diag.info(
                f'Task "{task.name}" moved earlier: {format_full_date(task.original_date)} '
                f"-> {format_full_date(task.completion_date)}"
            )
        rows.append(
            TaskRow(
                task=task,
                cells=classify_row(
                    task,
                    weeks,
                    same_week_highlighting=opts.same_week_highlighting,
                    show_passthrough=opts.show_passthrough,
                ),
                arrow=resolve_arrow(task, weeks, threshold_days=opts.short_arrow_threshold_days),
            )
        )

    diag.info(f"Parsed {len(tasks)} tasks; {len(weeks)} weeks across {len(months)} months")
    return ScheduleChart(
        tasks=tasks,
        weeks=weeks,
        months=months,
        rows=tuple(rows),
        options=opts,
        diagnostics=diag.entries,
    )


def build_schedule_chart_from_file(
    path: str | Path,
    options: ChartOptions | None = None,
    *,
    diagnostics: DiagnosticsCollector | None = None,
) -> ScheduleChart:
    csv_path = Path(path)
    LOGGER.info("reading CSV file: %s", csv_path)
    try:
        text = csv_path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        raise SchemaError(f"{csv_path} is not UTF-8 text ({exc.reason} at byte {exc.start})") from exc
    return build_schedule_chart(text, options, diagnostics=diagnostics)
