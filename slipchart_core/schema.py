from __future__ import annotations

import calendar
import datetime as dt
from dataclasses import dataclass
from enum import Enum
from typing import Literal

from .diagnostics import Diagnostic

WeekNumbering = Literal["global", "per-month"]
ArrowMode = Literal["short", "long"]

WEEK_NUMBERING_MODES: tuple[str, ...] = ("global", "per-month")

# Saturday in date.weekday() terms (Monday == 0).
_SATURDAY = 5


class CellKind(str, Enum):
    EMPTY = "empty"
    ORIGINAL = "original"
    COMPLETION = "completion"
    SAME_WEEK = "same_week"
    PASSTHROUGH = "passthrough"


class ArrowDirection(str, Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


class SegmentKind(str, Enum):
    START = "start"
    MIDDLE = "middle"
    END = "end"


class SegmentSpan(str, Enum):
    FULL = "full"
    HALF = "half"


@dataclass(frozen=True)
class Task:
    name: str
    original_date: dt.date
    completion_date: dt.date

    def __post_init__(self) -> None:
        for field_name in ("original_date", "completion_date"):
            value = getattr(self, field_name)
            if not isinstance(value, dt.date) or isinstance(value, dt.datetime):
                raise ValueError(f"Task.{field_name} must be a datetime.date")

    @property
    def day_count(self) -> int:
        return abs((self.completion_date - self.original_date).days)

    @property
    def moved_earlier(self) -> bool:
        return self.completion_date < self.original_date

    def span(self) -> tuple[dt.date, dt.date]:
        if self.moved_earlier:
            return self.completion_date, self.original_date
        return self.original_date, self.completion_date


@dataclass(frozen=True)
class Week:
    number: int
    start_date: dt.date
    end_date: dt.date

    def __post_init__(self) -> None:
        if self.number < 1:
            raise ValueError("Week.number must be >= 1")
        if self.end_date - self.start_date != dt.timedelta(days=6):
            raise ValueError("Week must span exactly 7 days")
        if self.end_date.weekday() != _SATURDAY:
            raise ValueError("Week must run Sunday through Saturday")

    @property
    def month_key(self) -> tuple[int, int]:
        return (self.start_date.year, self.start_date.month)

    def contains(self, day: dt.date) -> bool:
        return self.start_date <= day <= self.end_date

    @property
    def label(self) -> str:
        return f"{format_month_day(self.start_date)}-{format_month_day(self.end_date)}"


@dataclass(frozen=True)
class MonthGroup:
    year: int
    month: int
    weeks: tuple[Week, ...]

    def __post_init__(self) -> None:
        if not self.weeks:
            raise ValueError("MonthGroup.weeks must not be empty")
        for week in self.weeks:
            if week.month_key != (self.year, self.month):
                raise ValueError(f"Week {week.number} does not start in {self.year}-{self.month:02d}")

    @property
    def label(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"

    @property
    def sort_key(self) -> int:
        return self.year * 12 + self.month


@dataclass(frozen=True)
class ArrowSegment:
    week_index: int
    kind: SegmentKind
    span: SegmentSpan
    arrowhead: bool = False
    label: bool = False


@dataclass(frozen=True)
class ArrowLayout:
    direction: ArrowDirection
    day_count: int
    mode: ArrowMode
    original_week_index: int
    completion_week_index: int
    label_week_index: int
    segments: tuple[ArrowSegment, ...] = ()

    @property
    def same_week(self) -> bool:
        return self.original_week_index == self.completion_week_index

    def segment_for(self, week_index: int) -> ArrowSegment | None:
        for segment in self.segments:
            if segment.week_index == week_index:
                return segment
        return None


@dataclass(frozen=True)
class TaskRow:
    task: Task
    cells: tuple[CellKind, ...]
    arrow: ArrowLayout


@dataclass(frozen=True)
class ChartOptions:
    week_numbering: WeekNumbering = "global"
    padding_days: int = 14
    short_arrow_threshold_days: int = 10
    same_week_highlighting: bool = True
    show_passthrough: bool = True
    align_to_months: bool = False
    day_first: bool = False
    sort_by_original_date: bool = True
    title: str = "Schedule Changes"

    def __post_init__(self) -> None:
        if self.week_numbering not in WEEK_NUMBERING_MODES:
            raise ValueError(f"Unsupported week numbering mode: {self.week_numbering}")
        if self.padding_days < 0:
            raise ValueError("ChartOptions.padding_days must be >= 0")
        if self.short_arrow_threshold_days < 0:
            raise ValueError("ChartOptions.short_arrow_threshold_days must be >= 0")


@dataclass(frozen=True)
class ScheduleChart:
    tasks: tuple[Task, ...]
    weeks: tuple[Week, ...]
    months: tuple[MonthGroup, ...]
    rows: tuple[TaskRow, ...]
    options: ChartOptions = ChartOptions()
    diagnostics: tuple[Diagnostic, ...] = ()

    def __post_init__(self) -> None:
        if len(self.rows) != len(self.tasks):
            raise ValueError("ScheduleChart.rows must have one row per task")
        for row in self.rows:
            if len(row.cells) != len(self.weeks):
                raise ValueError(f"Row for task `{row.task.name}` does not cover every week")

    def date_range(self) -> tuple[dt.date, dt.date] | None:
        if not self.tasks:
            return None
        days = [day for task in self.tasks for day in (task.original_date, task.completion_date)]
        return min(days), max(days)

    def as_dict(self) -> dict[str, object]:
        return {
            "title": self.options.title,
            "weeks": [
                {
                    "number": week.number,
                    "start": week.start_date.isoformat(),
                    "end": week.end_date.isoformat(),
                }
                for week in self.weeks
            ],
            "months": [
                {"label": month.label, "weeks": [week.number for week in month.weeks]}
                for month in self.months
            ],
            "rows": [
                {
                    "name": row.task.name,
                    "original_date": row.task.original_date.isoformat(),
                    "completion_date": row.task.completion_date.isoformat(),
                    "cells": [cell.value for cell in row.cells],
                    "arrow": {
                        "direction": row.arrow.direction.value,
                        "mode": row.arrow.mode,
                        "day_count": row.arrow.day_count,
                        "label_week_index": row.arrow.label_week_index,
                    },
                }
                for row in self.rows
            ],
            "diagnostics": [entry.as_dict() for entry in self.diagnostics],
        }


def format_month_day(day: dt.date) -> str:
    return f"{day.month}/{day.day}"


def format_full_date(day: dt.date) -> str:
    return f"{day.month}/{day.day}/{day.year}"
