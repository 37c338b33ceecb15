from __future__ import annotations

from dataclasses import dataclass
import datetime as dt

from slipchart_core.schema import CellKind, ScheduleChart
from slipchart_core.timeline import week_index_of

from .ascii_renderer import render_chart_ascii
from .html_renderer import render_chart_html


@dataclass(frozen=True)
class ValidationReport:
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


def validate_timeline_integrity(chart: ScheduleChart) -> ValidationReport:
    errors: list[str] = []
    warnings: list[str] = []

    weeks = chart.weeks
    for index, week in enumerate(weeks):
        if week.start_date.weekday() != 6:
            errors.append(f"Week {index} does not start on a Sunday: {week.start_date.isoformat()}")
        if index and week.start_date - weeks[index - 1].start_date != dt.timedelta(days=7):
            errors.append(f"Weeks {index - 1} and {index} are not consecutive")

    if chart.options.week_numbering == "global":
        numbers = [week.number for week in weeks]
        if numbers != list(range(1, len(weeks) + 1)):
            errors.append("Global week numbers are not sequential from 1")

    grouped = [week for month in chart.months for week in month.weeks]
    if grouped != list(weeks):
        errors.append("Month groups do not cover every week exactly once in order")

    for row in chart.rows:
        task = row.task
        for label, day in (("original", task.original_date), ("completion", task.completion_date)):
            matches = sum(1 for week in weeks if week.contains(day))
            if matches != 1:
                errors.append(f'Task "{task.name}" {label} date falls in {matches} weeks')
        original_index = week_index_of(task.original_date, weeks)
        if original_index >= 0 and row.cells[original_index] in (CellKind.EMPTY, CellKind.PASSTHROUGH):
            errors.append(f'Task "{task.name}" original week is not highlighted')
        if task.moved_earlier:
            warnings.append(f'Task "{task.name}" moved earlier')

    return ValidationReport(errors=tuple(errors), warnings=tuple(warnings))


def validate_render_consistency(chart: ScheduleChart) -> ValidationReport:
    errors: list[str] = []

    ascii_once = render_chart_ascii(chart)
    ascii_twice = render_chart_ascii(chart)
    if ascii_once != ascii_twice:
        errors.append("ASCII renderer output is not deterministic across repeated calls")
    if "Weeks:" not in ascii_once or "Dates:" not in ascii_once:
        errors.append("ASCII renderer output missing required axis markers")

    html_once = render_chart_html(chart)
    html_twice = render_chart_html(chart)
    if html_once != html_twice:
        errors.append("HTML renderer output is not deterministic across repeated calls")
    if html_once.count('<tr class="task-row"') != len(chart.rows):
        errors.append("HTML renderer output does not contain one row per task")

    return ValidationReport(errors=tuple(errors))


def validate_chart_suite(chart: ScheduleChart) -> ValidationReport:
    integrity = validate_timeline_integrity(chart)
    render = validate_render_consistency(chart)
    return ValidationReport(
        errors=tuple(list(integrity.errors) + list(render.errors)),
        warnings=tuple(list(integrity.warnings) + list(render.warnings)),
    )


def require_valid_chart(chart: ScheduleChart) -> None:
    report = validate_chart_suite(chart)
    if report.errors:
        joined = "; ".join(report.errors)
        raise ValueError(f"Chart validation failed: {joined}")
