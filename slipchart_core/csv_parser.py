from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
import re

from dateutil import parser as date_parser

from .diagnostics import SKIPPED_ROW_PREFIX, DiagnosticsCollector
from .errors import InvalidDateError, MissingDateError, SchemaError
from .schema import Task

TASK_NAME_HEADER = "task name"
ORIGINAL_DATE_HEADER = "original date"
NEW_DATE_HEADER = "new date"

_ISO_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")
_LEADING_DIGITS = re.compile(r"^\s*(\d+)")

# Two unrelated defaults; a date string that fully names year, month and day
# parses to the same value under both.
_PROBE_DEFAULT_A = dt.datetime(2000, 1, 1)
_PROBE_DEFAULT_B = dt.datetime(2001, 2, 2)


@dataclass(frozen=True)
class ColumnIndices:
    task_name: int
    original_date: int
    new_date: int

    @property
    def widest(self) -> int:
        return max(self.task_name, self.original_date, self.new_date)


def split_csv_line(line: str) -> list[str]:
    """Split one CSV line on commas outside double quotes.

    A quote directly after a backslash is kept as data instead of toggling
    quoted mode.
    """

    values: list[str] = []
    current: list[str] = []
    in_quotes = False
    for index, char in enumerate(line):
        if char == '"' and (index == 0 or line[index - 1] != "\\"):
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            values.append("".join(current))
            current = []
        else:
            current.append(char)
    values.append("".join(current))
    return values


def clean_value(raw: str) -> str:
    text = raw.strip()
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    return text.strip()


def locate_columns(header_line: str) -> ColumnIndices:
    headers = [clean_value(value).lower() for value in split_csv_line(header_line)]
    found: dict[str, int] = {}
    missing: list[str] = []
    for key in (TASK_NAME_HEADER, ORIGINAL_DATE_HEADER, NEW_DATE_HEADER):
        index = next((i for i, header in enumerate(headers) if key in header), -1)
        if index == -1:
            missing.append(key)
        found[key] = index
    if missing:
        raise SchemaError(
            "CSV must have columns for Task Name, Original Date, and New Date "
            f"(missing: {', '.join(missing)})"
        )
    return ColumnIndices(
        task_name=found[TASK_NAME_HEADER],
        original_date=found[ORIGINAL_DATE_HEADER],
        new_date=found[NEW_DATE_HEADER],
    )


def parse_flexible_date(text: str, *, day_first: bool = False) -> dt.date:
    raw = text.strip()
    if not raw:
        raise MissingDateError("date is empty")

    parsed = _parse_iso(raw)
    if parsed is None:
        parsed = _parse_generic(raw, day_first=day_first)
    if parsed is None and "/" in raw:
        parsed = _parse_slashed(raw, day_first=day_first)
    if parsed is None:
        raise InvalidDateError(f"unrecognized date {raw!r}")
    return parsed


def parse_row(line: str, columns: ColumnIndices, *, day_first: bool = False) -> Task:
    values = split_csv_line(line)
    if len(values) <= columns.widest:
        values.extend([""] * (columns.widest + 1 - len(values)))

    name = clean_value(values[columns.task_name])
    original_raw = clean_value(values[columns.original_date])
    new_raw = clean_value(values[columns.new_date])

    if not original_raw or not new_raw:
        raise MissingDateError(f'Missing date for task "{name}"')
    try:
        original_date = parse_flexible_date(original_raw, day_first=day_first)
        completion_date = parse_flexible_date(new_raw, day_first=day_first)
    except InvalidDateError as exc:
        raise InvalidDateError(f'Invalid date format for task "{name}": {exc}') from exc
    return Task(name=name, original_date=original_date, completion_date=completion_date)


def parse_tasks(
    csv_text: str,
    *,
    day_first: bool = False,
    diagnostics: DiagnosticsCollector | None = None,
) -> tuple[Task, ...]:
    diag = diagnostics if diagnostics is not None else DiagnosticsCollector()
    lines = csv_text.lstrip("\ufeff").strip().splitlines()
    if not lines:
        raise SchemaError("CSV input is empty")

    columns = locate_columns(lines[0])
    tasks: list[Task] = []
    for row_number, raw_line in enumerate(lines[1:], start=1):
        line = raw_line.strip()
        if not line:
            continue
        try:
            tasks.append(parse_row(line, columns, day_first=day_first))
        except (MissingDateError, InvalidDateError) as exc:
            diag.warning(f"{SKIPPED_ROW_PREFIX} {row_number}: {exc}")
    return tuple(tasks)


def _parse_iso(raw: str) -> dt.date | None:
    if not _ISO_PREFIX.match(raw):
        return None
    try:
        return dt.date.fromisoformat(raw[:10])
    except ValueError:
        return None


def _parse_generic(raw: str, *, day_first: bool) -> dt.date | None:
    try:
        first = date_parser.parse(raw, dayfirst=day_first, default=_PROBE_DEFAULT_A)
        second = date_parser.parse(raw, dayfirst=day_first, default=_PROBE_DEFAULT_B)
    except (ValueError, OverflowError):
        return None
    if first.date() != second.date():
        return None
    return first.date()


def _parse_slashed(raw: str, *, day_first: bool) -> dt.date | None:
    parts = raw.split("/")
    if len(parts) < 3:
        return None
    numbers: list[int] = []
    for part in parts[:3]:
        match = _LEADING_DIGITS.match(part)
        if match is None:
            return None
        numbers.append(int(match.group(1)))
    first, second, year = numbers
    month, day = (second, first) if day_first else (first, second)
    if year < 100:
        year += 2000
    try:
        return dt.date(year, month, day)
    except ValueError:
        return None
