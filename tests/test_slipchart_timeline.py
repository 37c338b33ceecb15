from __future__ import annotations

import datetime as dt
import unittest

from slipchart_core.errors import DateRangeError, EmptyResultError
from slipchart_core.schema import MonthGroup, Task, Week
from slipchart_core.timeline import (
    build_timeline,
    build_weeks,
    date_extent,
    group_weeks_by_month,
    week_index_of,
    week_start_for,
)


def _task(name: str, original: dt.date, completion: dt.date) -> Task:
    return Task(name=name, original_date=original, completion_date=completion)


class WeekBoundaryTests(unittest.TestCase):
    def test_week_start_is_sunday_on_or_before(self) -> None:
        self.assertEqual(week_start_for(dt.date(2024, 1, 5)), dt.date(2023, 12, 31))
        self.assertEqual(week_start_for(dt.date(2024, 3, 3)), dt.date(2024, 3, 3))
        self.assertEqual(week_start_for(dt.date(2024, 3, 9)), dt.date(2024, 3, 3))

    def test_week_rejects_non_sunday_start(self) -> None:
        with self.assertRaises(ValueError):
            Week(number=1, start_date=dt.date(2024, 3, 4), end_date=dt.date(2024, 3, 10))
        with self.assertRaises(ValueError):
            Week(number=0, start_date=dt.date(2024, 3, 3), end_date=dt.date(2024, 3, 9))

    def test_week_label_and_containment(self) -> None:
        week = Week(number=4, start_date=dt.date(2024, 3, 3), end_date=dt.date(2024, 3, 9))
        self.assertEqual(week.label, "3/3-3/9")
        self.assertTrue(week.contains(dt.date(2024, 3, 3)))
        self.assertTrue(week.contains(dt.date(2024, 3, 9)))
        self.assertFalse(week.contains(dt.date(2024, 3, 10)))


class BuildWeeksTests(unittest.TestCase):
    def test_weeks_are_gapless_and_numbered_from_one(self) -> None:
        weeks = build_weeks(dt.date(2024, 1, 3), dt.date(2024, 2, 14))
        self.assertEqual(weeks[0].start_date, dt.date(2023, 12, 31))
        self.assertTrue(weeks[-1].contains(dt.date(2024, 2, 14)))
        self.assertEqual([week.number for week in weeks], list(range(1, len(weeks) + 1)))
        for previous, current in zip(weeks, weeks[1:]):
            self.assertEqual(current.start_date - previous.start_date, dt.timedelta(days=7))

    def test_single_day_range_yields_one_week(self) -> None:
        weeks = build_weeks(dt.date(2024, 3, 6), dt.date(2024, 3, 6))
        self.assertEqual(len(weeks), 1)
        self.assertEqual(weeks[0].start_date, dt.date(2024, 3, 3))

    def test_per_month_numbering_restarts_without_changing_weeks(self) -> None:
        start, end = dt.date(2024, 1, 28), dt.date(2024, 2, 24)
        global_weeks = build_weeks(start, end)
        monthly = build_weeks(start, end, numbering="per-month")
        self.assertEqual([week.number for week in monthly], [1, 1, 2, 3])
        self.assertEqual(
            [week.start_date for week in monthly],
            [week.start_date for week in global_weeks],
        )

    def test_invalid_arguments(self) -> None:
        with self.assertRaises(ValueError):
            build_weeks(dt.date(2024, 2, 1), dt.date(2024, 1, 1))
        with self.assertRaises(ValueError):
            build_weeks(dt.date(2024, 1, 1), dt.date(2024, 2, 1), numbering="fiscal")  # type: ignore[arg-type]


class BuildTimelineTests(unittest.TestCase):
    def test_padding_extends_both_sides(self) -> None:
        tasks = [_task("Design Review", dt.date(2024, 1, 5), dt.date(2024, 1, 20))]
        weeks = build_timeline(tasks)
        self.assertEqual(weeks[0].start_date, dt.date(2023, 12, 17))
        self.assertEqual(weeks[-1].start_date, dt.date(2024, 1, 28))
        self.assertEqual(len(weeks), 7)

    def test_reversed_task_is_covered(self) -> None:
        tasks = [_task("Pulled in", dt.date(2024, 6, 20), dt.date(2024, 6, 3))]
        weeks = build_timeline(tasks, padding_days=0)
        self.assertNotEqual(week_index_of(dt.date(2024, 6, 3), weeks), -1)
        self.assertNotEqual(week_index_of(dt.date(2024, 6, 20), weeks), -1)

    def test_align_to_months_widens_range(self) -> None:
        tasks = [_task("Mid January", dt.date(2024, 1, 15), dt.date(2024, 1, 20))]
        weeks = build_timeline(tasks, padding_days=0, align_to_months=True)
        self.assertEqual(weeks[0].start_date, dt.date(2023, 12, 31))
        self.assertTrue(weeks[-1].contains(dt.date(2024, 1, 31)))
        self.assertEqual(len(weeks), 5)

    def test_empty_input(self) -> None:
        self.assertEqual(build_timeline([]), ())
        with self.assertRaises(EmptyResultError):
            date_extent([])
        with self.assertRaises(ValueError):
            build_timeline([_task("x", dt.date(2024, 1, 1), dt.date(2024, 1, 2))], padding_days=-1)

    def test_padding_past_calendar_edges_raises_range_error(self) -> None:
        with self.assertRaisesRegex(DateRangeError, "0001-01-03"):
            build_timeline([_task("Early", dt.date(1, 1, 3), dt.date(1, 1, 20))])
        with self.assertRaises(DateRangeError):
            build_timeline([_task("Late", dt.date(9999, 12, 1), dt.date(9999, 12, 25))])
        with self.assertRaises(DateRangeError):
            build_timeline([_task("Huge", dt.date(2024, 1, 1), dt.date(2024, 1, 2))], padding_days=10**7)


class MonthGroupingTests(unittest.TestCase):
    def test_groups_by_start_month_across_year_boundary(self) -> None:
        weeks = build_weeks(dt.date(2023, 12, 17), dt.date(2024, 2, 3))
        months = group_weeks_by_month(weeks)
        self.assertEqual([month.label for month in months], ["December 2023", "January 2024"])
        self.assertEqual([len(month.weeks) for month in months], [3, 4])
        self.assertEqual([week for month in months for week in month.weeks], list(weeks))

    def test_month_group_rejects_foreign_week(self) -> None:
        week = Week(number=1, start_date=dt.date(2024, 3, 31), end_date=dt.date(2024, 4, 6))
        with self.assertRaises(ValueError):
            MonthGroup(year=2024, month=4, weeks=(week,))

    def test_week_index_of(self) -> None:
        weeks = build_weeks(dt.date(2024, 3, 3), dt.date(2024, 3, 23))
        self.assertEqual(week_index_of(dt.date(2024, 3, 3), weeks), 0)
        self.assertEqual(week_index_of(dt.date(2024, 3, 16), weeks), 1)
        self.assertEqual(week_index_of(dt.date(2024, 3, 2), weeks), -1)
        self.assertEqual(week_index_of(dt.date(2024, 3, 24), weeks), -1)
        self.assertEqual(week_index_of(dt.date(2024, 3, 3), ()), -1)


if __name__ == "__main__":
    unittest.main()
