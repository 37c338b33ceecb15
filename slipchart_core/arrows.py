from __future__ import annotations

from .errors import InternalInvariantError
from .schema import (
    ArrowDirection,
    ArrowLayout,
    ArrowSegment,
    SegmentKind,
    SegmentSpan,
    Task,
    Week,
    format_full_date,
)
from .timeline import week_index_of

DEFAULT_SHORT_ARROW_THRESHOLD_DAYS = 10


def resolve_arrow(
    task: Task,
    weeks: tuple[Week, ...],
    *,
    threshold_days: int = DEFAULT_SHORT_ARROW_THRESHOLD_DAYS,
) -> ArrowLayout:
    """Lay out the arrow running from a task's original week to its completion week.

    Short arrows (day gap within ``threshold_days``) use half-width end
    segments so a one-week hop reads as a single arrow split across the cell
    border. Long arrows use full-width cells throughout. Segments are returned
    in ascending week order whatever the direction.
    """

    if threshold_days < 0:
        raise ValueError("threshold_days must be >= 0")
    original_index = _require_week_index(task, "original", weeks)
    completion_index = _require_week_index(task, "completion", weeks)
    direction = _direction(task, original_index, completion_index)
    day_count = task.day_count
    mode = "short" if day_count <= threshold_days else "long"

    if original_index == completion_index:
        return ArrowLayout(
            direction=direction,
            day_count=day_count,
            mode=mode,
            original_week_index=original_index,
            completion_week_index=completion_index,
            label_week_index=original_index,
        )

    distance = abs(completion_index - original_index)
    if mode == "short" and distance == 1:
        label_index = original_index
        end_span = SegmentSpan.HALF
    elif mode == "short":
        label_index = (original_index + completion_index) // 2
        end_span = SegmentSpan.HALF
    else:
        label_index = (original_index + completion_index) // 2
        end_span = SegmentSpan.FULL

    segments: list[ArrowSegment] = []
    for index in range(min(original_index, completion_index), max(original_index, completion_index) + 1):
        if index == original_index:
            kind, span, arrowhead = SegmentKind.START, end_span, False
        elif index == completion_index:
            kind, span, arrowhead = SegmentKind.END, end_span, True
        else:
            kind, span, arrowhead = SegmentKind.MIDDLE, SegmentSpan.FULL, False
        segments.append(
            ArrowSegment(
                week_index=index,
                kind=kind,
                span=span,
                arrowhead=arrowhead,
                label=index == label_index,
            )
        )

    return ArrowLayout(
        direction=direction,
        day_count=day_count,
        mode=mode,
        original_week_index=original_index,
        completion_week_index=completion_index,
        label_week_index=label_index,
        segments=tuple(segments),
    )


def _require_week_index(task: Task, which: str, weeks: tuple[Week, ...]) -> int:
    day = task.original_date if which == "original" else task.completion_date
    index = week_index_of(day, weeks)
    if index == -1:
        raise InternalInvariantError(
            f'{which.capitalize()} date {format_full_date(day)} of task "{task.name}" '
            "is not covered by the timeline"
        )
    return index


def _direction(task: Task, original_index: int, completion_index: int) -> ArrowDirection:
    if original_index < completion_index:
        return ArrowDirection.FORWARD
    if original_index > completion_index:
        return ArrowDirection.BACKWARD
    return ArrowDirection.BACKWARD if task.moved_earlier else ArrowDirection.FORWARD
