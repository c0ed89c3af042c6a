"""
Import Logging — per-run log files and structured skip/error accounting.

Provides:
  - ImportLogger: manages a ``logs/import/<run_id>/`` directory with the run's
    log file and a ``summary.json``.
  - ImportReport: dataclass that captures what an import run did, what it
    skipped, and why.
  - RowIssue: one skipped or failed row with a category and reason.

Usage inside import_use_cases.py::

    from pipeline.logging import ImportLogger

    il = ImportLogger("logs/import")        # creates logs/import/<run_id>/
    report = il.start()                     # opens import.log handler
    ...                                      # importer writes to logging normally
    il.finish(report)                       # detaches handler, writes summary
    il.write_summary()                      # writes summary.json

Issue categories (for RowIssue.category):
    skipped     — required field (name or description) empty after trimming
    error       — unexpected exception while processing the row
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from utils.common import format_duration

# Per-row diagnostics printed in the console summary
MAX_CONSOLE_DETAILS = 20


# ── Data structures ───────────────────────────────────────────────────────────


@dataclass
class RowIssue:
    """One row that was not inserted, identified by its CSV row number."""

    row: int               # header is row 1, first data row is 2
    category: str          # "skipped" or "error"
    reason: str            # human-readable explanation

    def to_dict(self) -> dict[str, Any]:
        return {"row": self.row, "category": self.category, "reason": self.reason}

    def __str__(self) -> str:
        return f"Row {self.row}: {self.reason}"


@dataclass
class ImportReport:
    """Structured summary of one CSV import run."""

    source: str = ""
    status: str = "not_started"               # started | completed | failed
    elapsed_seconds: float = 0.0
    total_rows: int = 0
    inserted: int = 0
    skipped: int = 0
    duplicates: int = 0
    errors: int = 0
    url_warnings: int = 0
    issues: list[RowIssue] = field(default_factory=list)
    fatal: str = ""                            # set when the run aborted

    # ── helpers ───────────────────────────────────────────────────────────

    def add_skip(self, row: int, reason: str) -> None:
        self.issues.append(RowIssue(row=row, category="skipped", reason=reason))
        self.skipped += 1

    def add_error(self, row: int, reason: str) -> None:
        self.issues.append(RowIssue(row=row, category="error", reason=reason))
        self.errors += 1

    @property
    def ok(self) -> bool:
        """True when the run completed without fatal or per-row errors."""
        return not self.fatal and self.errors == 0

    def console_summary(self) -> str:
        """Multi-line summary suitable for the terminal."""
        lines = [
            "=" * 70,
            "IMPORT SUMMARY",
            "=" * 70,
            f"  Total rows processed:     {self.total_rows:,}",
            f"  Inserted:                 {self.inserted:,}",
            f"  Skipped (empty fields):   {self.skipped:,}",
            f"  Skipped (duplicates):     {self.duplicates:,}",
            f"  Errors:                   {self.errors:,}",
            f"  Duration:                 {format_duration(self.elapsed_seconds)}",
            "=" * 70,
        ]
        if self.url_warnings:
            lines.insert(-1, f"  URL warnings (kept):      {self.url_warnings:,}")
        if self.issues:
            lines.append("")
            if len(self.issues) > MAX_CONSOLE_DETAILS:
                lines.append(f"{len(self.issues)} rows were skipped or had errors "
                             f"(showing first {MAX_CONSOLE_DETAILS}):")
            else:
                lines.append("SKIPPED/ERROR DETAILS:")
            lines.append("-" * 70)
            lines.extend(f"  {issue}" for issue in self.issues[:MAX_CONSOLE_DETAILS])
        if self.fatal:
            lines.append("")
            lines.append(f"FATAL: {self.fatal}")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        d = {
            "source": self.source,
            "status": self.status,
            "elapsed_seconds": round(self.elapsed_seconds, 2),
            "total_rows": self.total_rows,
            "inserted": self.inserted,
            "skipped": self.skipped,
            "duplicates": self.duplicates,
            "errors": self.errors,
            "url_warnings": self.url_warnings,
        }
        if self.fatal:
            d["fatal"] = self.fatal
        if self.issues:
            d["issues"] = [i.to_dict() for i in self.issues]
        return d


# ── ImportLogger ──────────────────────────────────────────────────────────────


class ImportLogger:
    """Manages the per-run log directory for one import.

    Creates a directory like::

        logs/import/2026-02-22T14-30-00/
            import.log
            summary.json
    """

    def __init__(self, logs_dir: Path | str = "logs/import") -> None:
        self.logs_root = Path(logs_dir)
        self.run_id = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")
        self.run_dir = self.logs_root / self.run_id
        self.run_dir.mkdir(parents=True, exist_ok=True)

        self._handler: logging.FileHandler | None = None
        self._report: ImportReport | None = None
        self.started = time.monotonic()
        self.args_dict: dict[str, Any] = {}

    # ── run lifecycle ─────────────────────────────────────────────────────

    def start(self, source: str = "") -> ImportReport:
        """Open ``import.log`` and attach it to the root logger."""
        handler = logging.FileHandler(self.run_dir / "import.log", encoding="utf-8")
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s  %(levelname)-7s  %(name)s  %(message)s",
            datefmt="%H:%M:%S",
        ))
        logging.getLogger().addHandler(handler)
        self._handler = handler
        self.started = time.monotonic()

        self._report = ImportReport(source=source, status="started")
        return self._report

    def finish(self, report: ImportReport | None = None) -> None:
        """Detach the log handler and write the summary into the log file."""
        if report is None:
            report = self._report or ImportReport()
        if report.status == "started":
            report.status = "completed" if not report.fatal else "failed"
        self._report = report

        handler = self._handler
        self._handler = None
        if handler:
            handler.stream.write("\n" + report.console_summary() + "\n")
            if len(report.issues) > MAX_CONSOLE_DETAILS:
                # The console shows only the first few; the log keeps them all.
                handler.stream.write("ALL ISSUES:\n")
                for issue in report.issues:
                    handler.stream.write(f"  {issue}\n")
            handler.close()
            logging.getLogger().removeHandler(handler)

    # ── summary output ────────────────────────────────────────────────────

    def write_summary(self) -> Path:
        """Write a JSON summary of the run to the run directory."""
        summary = {
            "run_id": self.run_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "args": self.args_dict,
            "report": (self._report or ImportReport()).to_dict(),
        }
        path = self.summary_path
        with open(path, "w") as f:
            json.dump(summary, f, indent=2)
        return path

    @property
    def log_path(self) -> Path:
        return self.run_dir / "import.log"

    @property
    def summary_path(self) -> Path:
        return self.run_dir / "summary.json"
