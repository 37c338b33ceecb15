from __future__ import annotations

from typing import Iterable

from .schema import CellKind, Task, Week


def overlaps(task: Task, week: Week) -> bool:
    lo, hi = task.span()
    return lo <= week.end_date and hi >= week.start_date


def classify_cell(
    task: Task,
    week: Week,
    *,
    same_week_highlighting: bool = True,
    show_passthrough: bool = True,
) -> CellKind:
    has_original = week.contains(task.original_date)
    has_completion = week.contains(task.completion_date)

    if has_original and has_completion:
        return CellKind.SAME_WEEK if same_week_highlighting else CellKind.ORIGINAL
    if has_original:
        return CellKind.ORIGINAL
    if has_completion:
        return CellKind.COMPLETION
    if overlaps(task, week):
        return CellKind.PASSTHROUGH if show_passthrough else CellKind.EMPTY
    return CellKind.EMPTY


def classify_row(
    task: Task,
    weeks: Iterable[Week],
    *,
    same_week_highlighting: bool = True,
    show_passthrough: bool = True,
) -> tuple[CellKind, ...]:
    return tuple(
        classify_cell(
            task,
            week,
            same_week_highlighting=same_week_highlighting,
            show_passthrough=show_passthrough,
        )
        for week in weeks
    )
