from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Literal

LOGGER = logging.getLogger(__name__)

DiagnosticLevel = Literal["info", "warning", "error"]

# Prefix of the warning the CSV parser records for each row it drops.
SKIPPED_ROW_PREFIX = "Skipping row"

_LOG_LEVELS: dict[str, int] = {
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass(frozen=True)
class Diagnostic:
    level: DiagnosticLevel
    message: str
    source: str = ""

    def as_dict(self) -> dict[str, str]:
        return {"level": self.level, "message": self.message, "source": self.source}


@dataclass
class DiagnosticsCollector:
    """Ordered record of what happened during one pipeline run.

    Entries are also mirrored to the module logger so command-line runs still
    see them on stderr.
    """

    source: str = ""
    _entries: list[Diagnostic] = field(default_factory=list)

    def info(self, message: str) -> None:
        self._record("info", message)

    def warning(self, message: str) -> None:
        self._record("warning", message)

    def error(self, message: str) -> None:
        self._record("error", message)

    @property
    def entries(self) -> tuple[Diagnostic, ...]:
        return tuple(self._entries)

    def of_level(self, level: DiagnosticLevel) -> tuple[Diagnostic, ...]:
        return tuple(entry for entry in self._entries if entry.level == level)

    def _record(self, level: DiagnosticLevel, message: str) -> None:
        self._entries.append(Diagnostic(level=level, message=message, source=self.source))
        if self.source:
            LOGGER.log(_LOG_LEVELS[level], "%s: %s", self.source, message)
        else:
            LOGGER.log(_LOG_LEVELS[level], "%s", message)


class JsonlDiagnosticsSink:
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def log(self, entry: Diagnostic | dict[str, Any]) -> None:
        payload = entry.as_dict() if isinstance(entry, Diagnostic) else dict(entry)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(_encode(payload))
            f.write("\n")

    def log_all(self, entries: Iterable[Diagnostic]) -> int:
        count = 0
        for entry in entries:
            self.log(entry)
            count += 1
        return count


    def summarize(self) -> dict[str, Any]:
        """Count logged entries by level and by source.

        ``skipped_rows`` counts parser row skips per CSV file and
        ``failed_sources`` lists the files that recorded at least one error.
        """

        rows, _ = self._read_rows()
        skipped = Counter(
            str(row.get("source", ""))
            for row in rows
            if row.get("level") == "warning" and str(row.get("message", "")).startswith(SKIPPED_ROW_PREFIX)
        )
        return {
            "total": len(rows),
            "by_level": dict(Counter(str(row.get("level", "")) for row in rows)),
            "by_source": dict(Counter(str(row.get("source", "")) for row in rows)),
            "skipped_rows": dict(skipped),
            "failed_sources": sorted({str(row.get("source", "")) for row in rows if row.get("level") == "error"}),
        }

    def prune(self, *, max_rows: int | None = None) -> int:
        """Keep the newest ``max_rows`` entries and drop malformed lines.

        Returns how many lines were removed.
        """

        if max_rows is None or max_rows <= 0:
            return 0
        rows, malformed = self._read_rows()
        overflow = max(0, len(rows) - max_rows)
        if not overflow and not malformed:
            return 0
        with self.path.open("w", encoding="utf-8") as f:
            for row in rows[overflow:]:
                f.write(_encode(row))
                f.write("\n")
        return overflow + malformed

    def _read_rows(self) -> tuple[list[dict[str, Any]], int]:
        if not self.path.exists():
            return [], 0
        rows: list[dict[str, Any]] = []
        malformed = 0
        with self.path.open("r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    row = json.loads(line)
                except json.JSONDecodeError:
                    malformed += 1
                    continue
                if not isinstance(row, dict):
                    malformed += 1
                    continue
                rows.append(row)
        if malformed:
            LOGGER.warning("skipped %d malformed diagnostics lines in %s", malformed, self.path)
        return rows, malformed


def _encode(payload: dict[str, Any]) -> str:
    return json.dumps(payload, separators=(",", ":"), sort_keys=True)
