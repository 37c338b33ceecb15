from __future__ import annotations

import calendar
import datetime as dt
from typing import Iterable

from .errors import DateRangeError, EmptyResultError
from .schema import MonthGroup, Task, Week, WEEK_NUMBERING_MODES, WeekNumbering

_ONE_WEEK = dt.timedelta(days=7)


def week_start_for(day: dt.date) -> dt.date:
    # weekday(): Monday == 0 ... Sunday == 6
    return day - dt.timedelta(days=(day.weekday() + 1) % 7)


def date_extent(tasks: Iterable[Task]) -> tuple[dt.date, dt.date]:
    days = [day for task in tasks for day in (task.original_date, task.completion_date)]
    if not days:
        raise EmptyResultError("No tasks to build a timeline from")
    return min(days), max(days)


def build_weeks(
    start: dt.date,
    end: dt.date,
    *,
    numbering: WeekNumbering = "global",
) -> tuple[Week, ...]:
    if start > end:
        raise ValueError("start must be on or before end")
    if numbering not in WEEK_NUMBERING_MODES:
        raise ValueError(f"Unsupported week numbering mode: {numbering}")

    weeks: list[Week] = []
    current = week_start_for(start)
    number = 0
    previous_month: tuple[int, int] | None = None
    while current <= end:
        month_key = (current.year, current.month)
        if numbering == "per-month" and month_key != previous_month:
            number = 0
        number += 1
        previous_month = month_key
        weeks.append(Week(number=number, start_date=current, end_date=current + dt.timedelta(days=6)))
        current += _ONE_WEEK
    return tuple(weeks)


def build_timeline(
    tasks: Iterable[Task],
    *,
    padding_days: int = 14,
    numbering: WeekNumbering = "global",
    align_to_months: bool = False,
) -> tuple[Week, ...]:
    if padding_days < 0:
        raise ValueError("padding_days must be >= 0")
    task_list = tuple(tasks)
    if not task_list:
        return ()

    min_date, max_date = date_extent(task_list)
    try:
        start = min_date - dt.timedelta(days=padding_days)
        end = max_date + dt.timedelta(days=padding_days)
        if align_to_months:
            start = start.replace(day=1)
            end = end.replace(day=calendar.monthrange(end.year, end.month)[1])
        return build_weeks(start, end, numbering=numbering)
    except OverflowError as exc:
        raise DateRangeError(
            f"Timeline {min_date.isoformat()}..{max_date.isoformat()} padded by {padding_days} days "
            "runs past the supported calendar range"
        ) from exc


def group_weeks_by_month(weeks: Iterable[Week]) -> tuple[MonthGroup, ...]:
    buckets: dict[tuple[int, int], list[Week]] = {}
    for week in weeks:
        buckets.setdefault(week.month_key, []).append(week)
    groups = [
        MonthGroup(year=year, month=month, weeks=tuple(members))
        for (year, month), members in buckets.items()
    ]
    return tuple(sorted(groups, key=lambda group: group.sort_key))


def week_index_of(day: dt.date, weeks: tuple[Week, ...]) -> int:
    if not weeks:
        return -1
    offset = (day - weeks[0].start_date).days
    if offset < 0:
        return -1
    index = offset // 7
    if index >= len(weeks) or not weeks[index].contains(day):
        return -1
    return index
