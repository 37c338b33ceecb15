from __future__ import annotations

import datetime as dt
import unittest

from slipchart_core.csv_parser import (
    clean_value,
    locate_columns,
    parse_flexible_date,
    parse_tasks,
    split_csv_line,
)
from slipchart_core.diagnostics import DiagnosticsCollector
from slipchart_core.errors import InvalidDateError, MissingDateError, SchemaError

HEADER = "Task Name,Original Date,New Date"


class CsvTokenizerTests(unittest.TestCase):
    def test_quoted_field_keeps_embedded_comma(self) -> None:
        values = split_csv_line('"Design Review, Phase 1",01/05/2024,01/20/2024')
        self.assertEqual(values, ["Design Review, Phase 1", "01/05/2024", "01/20/2024"])

    def test_backslash_quote_is_data_not_toggle(self) -> None:
        values = split_csv_line('Say \\"hi\\",2024-01-01,2024-01-02')
        self.assertEqual(values[0], 'Say \\"hi\\"')
        self.assertEqual(len(values), 3)

    def test_trailing_empty_field_is_kept(self) -> None:
        self.assertEqual(split_csv_line("a,b,"), ["a", "b", ""])

    def test_clean_value_strips_one_quote_layer_and_whitespace(self) -> None:
        self.assertEqual(clean_value('  "Kickoff"  '), "Kickoff")
        self.assertEqual(clean_value('""x""'), '"x"')


class CsvHeaderTests(unittest.TestCase):
    def test_columns_match_case_insensitive_substrings(self) -> None:
        columns = locate_columns("ID,Task Name (short),ORIGINAL DATE,New Date (revised)")
        self.assertEqual((columns.task_name, columns.original_date, columns.new_date), (1, 2, 3))

    def test_missing_column_raises_schema_error(self) -> None:
        with self.assertRaisesRegex(SchemaError, "new date"):
            locate_columns("Task Name,Original Date,Owner")

    def test_empty_input_raises_schema_error(self) -> None:
        with self.assertRaises(SchemaError):
            parse_tasks("   \n  \n")


class FlexibleDateTests(unittest.TestCase):
    def test_iso_dates(self) -> None:
        self.assertEqual(parse_flexible_date("2024-01-05"), dt.date(2024, 1, 5))
        self.assertEqual(parse_flexible_date("2024-01-05T08:30:00"), dt.date(2024, 1, 5))

    def test_slashed_dates_are_month_first_by_default(self) -> None:
        self.assertEqual(parse_flexible_date("01/05/2024"), dt.date(2024, 1, 5))
        self.assertEqual(parse_flexible_date("01/05/2024", day_first=True), dt.date(2024, 5, 1))

    def test_written_month_names(self) -> None:
        self.assertEqual(parse_flexible_date("January 5, 2024"), dt.date(2024, 1, 5))
        self.assertEqual(parse_flexible_date("5 Jan 2024"), dt.date(2024, 1, 5))

    def test_slash_fallback_reads_leading_digits(self) -> None:
        self.assertEqual(parse_flexible_date("01/05/2024 tentative"), dt.date(2024, 1, 5))

    def test_incomplete_dates_are_rejected(self) -> None:
        with self.assertRaises(InvalidDateError):
            parse_flexible_date("March 2024")
        with self.assertRaises(InvalidDateError):
            parse_flexible_date("March 5")

    def test_impossible_and_garbage_dates_are_rejected(self) -> None:
        with self.assertRaises(InvalidDateError):
            parse_flexible_date("2/30/2024")
        with self.assertRaises(InvalidDateError):
            parse_flexible_date("not a date")
        with self.assertRaises(MissingDateError):
            parse_flexible_date("   ")


class ParseTasksTests(unittest.TestCase):
    def test_parses_rows_in_file_order(self) -> None:
        text = "\n".join(
            [
                HEADER,
                "Later,03/01/2024,03/10/2024",
                '"Design Review, Phase 1",01/05/2024,01/20/2024',
            ]
        )
        tasks = parse_tasks(text)
        self.assertEqual([task.name for task in tasks], ["Later", "Design Review, Phase 1"])
        self.assertEqual(tasks[1].original_date, dt.date(2024, 1, 5))
        self.assertEqual(tasks[1].completion_date, dt.date(2024, 1, 20))

    def test_bad_rows_are_skipped_with_warnings(self) -> None:
        text = "\r\n".join(
            [
                HEADER,
                "Good,2024-01-01,2024-01-03",
                "No new date,2024-01-01,",
                "",
                "Garbage,someday,2024-01-09",
                "Only a name",
            ]
        )
        diagnostics = DiagnosticsCollector()
        tasks = parse_tasks(text, diagnostics=diagnostics)
        self.assertEqual([task.name for task in tasks], ["Good"])
        warnings = [entry.message for entry in diagnostics.of_level("warning")]
        self.assertEqual(len(warnings), 3)
        self.assertIn("Skipping row 2", warnings[0])
        self.assertIn('Missing date for task "No new date"', warnings[0])
        self.assertIn("Skipping row 4", warnings[1])
        self.assertIn("Invalid date format", warnings[1])
        self.assertIn("Skipping row 5", warnings[2])

    def test_missing_name_defaults_to_empty_string(self) -> None:
        tasks = parse_tasks(f"{HEADER}\n,2024-02-01,2024-02-02\n")
        self.assertEqual(tasks[0].name, "")

    def test_byte_order_mark_and_reordered_columns(self) -> None:
        text = "\ufeffNew Date,Owner,Task Name,Original Date\n2024-04-10,sam,Ship,2024-04-01\n"
        tasks = parse_tasks(text)
        self.assertEqual(tasks[0].name, "Ship")
        self.assertEqual(tasks[0].original_date, dt.date(2024, 4, 1))
        self.assertEqual(tasks[0].completion_date, dt.date(2024, 4, 10))


if __name__ == "__main__":
    unittest.main()
