"""Schedule-change timeline model: CSV parsing, week timeline, cell placement and arrows."""

from .arrows import DEFAULT_SHORT_ARROW_THRESHOLD_DAYS, resolve_arrow
from .config import chart_options_from_dict, load_chart_options, options_with_overrides
from .csv_parser import (
    ColumnIndices,
    clean_value,
    locate_columns,
    parse_flexible_date,
    parse_row,
    parse_tasks,
    split_csv_line,
)
from .diagnostics import Diagnostic, DiagnosticsCollector, JsonlDiagnosticsSink
from .errors import (
    ChartInputError,
    DateRangeError,
    EmptyResultError,
    InternalInvariantError,
    InvalidDateError,
    MissingDateError,
    SchemaError,
)
from .pipeline import build_schedule_chart, build_schedule_chart_from_file
from .placement import classify_cell, classify_row, overlaps
from .schema import (
    ArrowDirection,
    ArrowLayout,
    ArrowSegment,
    CellKind,
    ChartOptions,
    MonthGroup,
    ScheduleChart,
    SegmentKind,
    SegmentSpan,
    Task,
    TaskRow,
    Week,
    format_full_date,
    format_month_day,
)
from .timeline import build_timeline, build_weeks, date_extent, group_weeks_by_month, week_index_of, week_start_for

__all__ = [
    "ArrowDirection",
    "ArrowLayout",
    "ArrowSegment",
    "CellKind",
    "ChartInputError",
    "ChartOptions",
    "ColumnIndices",
    "DEFAULT_SHORT_ARROW_THRESHOLD_DAYS",
    "DateRangeError",
    "Diagnostic",
    "DiagnosticsCollector",
    "EmptyResultError",
    "InternalInvariantError",
    "InvalidDateError",
    "JsonlDiagnosticsSink",
    "MissingDateError",
    "MonthGroup",
    "ScheduleChart",
    "SchemaError",
    "SegmentKind",
    "SegmentSpan",
    "Task",
    "TaskRow",
    "Week",
    "build_schedule_chart",
    "build_schedule_chart_from_file",
    "build_timeline",
    "build_weeks",
    "chart_options_from_dict",
    "classify_cell",
    "classify_row",
    "clean_value",
    "date_extent",
    "format_full_date",
    "format_month_day",
    "group_weeks_by_month",
    "load_chart_options",
    "locate_columns",
    "options_with_overrides",
    "overlaps",
    "parse_flexible_date",
    "parse_row",
    "parse_tasks",
    "resolve_arrow",
    "split_csv_line",
    "week_index_of",
    "week_start_for",
]
