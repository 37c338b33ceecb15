from __future__ import annotations

import dataclasses
from pathlib import Path
import tomllib
from typing import Any, Mapping

from .schema import ChartOptions

_FIELD_TYPES: dict[str, type] = {
    "week_numbering": str,
    "padding_days": int,
    "short_arrow_threshold_days": int,
    "same_week_highlighting": bool,
    "show_passthrough": bool,
    "align_to_months": bool,
    "day_first": bool,
    "sort_by_original_date": bool,
    "title": str,
}


def chart_options_from_dict(raw: Mapping[str, Any], *, base: ChartOptions | None = None) -> ChartOptions:
    values: dict[str, Any] = {}
    for key, value in raw.items():
        normalized = key.replace("-", "_")
        expected = _FIELD_TYPES.get(normalized)
        if expected is None:
            raise ValueError(f"Unknown chart option: {key}")
        # bool is an int subclass; keep the two apart.
        if expected is int and isinstance(value, bool):
            raise ValueError(f"Chart option `{key}` must be an integer")
        if not isinstance(value, expected):
            raise ValueError(f"Chart option `{key}` must be of type {expected.__name__}")
        values[normalized] = value
    return dataclasses.replace(base or ChartOptions(), **values)


def load_chart_options(path: str | Path) -> ChartOptions:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"chart options file not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    section = raw.get("chart", raw)
    if not isinstance(section, Mapping):
        raise ValueError("`chart` must be a table")
    return chart_options_from_dict(section)


def options_with_overrides(options: ChartOptions, **overrides: Any) -> ChartOptions:
    """Apply command-line overrides; ``None`` means "not given"."""

    given = {key: value for key, value in overrides.items() if value is not None}
    return chart_options_from_dict(given, base=options)
