"""
CSV importer for the use case library.

Reads a spreadsheet export with the headers listed in ``CsvColumns`` and
loads each row into the ``use_cases`` table, strictly one row at a time:

    1. trim every field (blank → NULL)
    2. skip rows whose name or description is empty
    3. warn (but keep the value) when the URL does not look like a URL
    4. insert unless a row with the same name exists (case-insensitive)

A row that raises, or a record the CSV parser rejects, is recorded as an
error and the run continues.  Problems with the file itself (missing,
undecodable, no usable header, required headers absent) raise
``CsvFormatError`` before any row is written.

Re-running over the same file inserts nothing; every previously loaded row
is counted as a duplicate.
"""

from __future__ import annotations

import csv
import logging
import sqlite3
import time
from pathlib import Path
from typing import Any, NamedTuple

from pipeline.logging import ImportReport
from utils.config import CsvColumns
from utils.database import insert_use_case
from utils.strings import is_valid_url, normalize_value, truncate

logger = logging.getLogger("use_case_import")


class CsvFormatError(Exception):
    """The source file cannot be imported at all."""


class CsvRecord(NamedTuple):
    """One data record; ``values`` is None when it could not be parsed."""

    row_number: int
    values: dict[str, Any] | None
    error: str = ""


def read_rows(csv_path: Path) -> list[CsvRecord]:
    """Parse *csv_path* into numbered records, header → value dicts.

    Tolerates a UTF-8 byte-order mark, blank lines and rows with too few or
    too many columns.  Header names are trimmed.  A malformed record (stray
    quote, unterminated field) comes back with ``values=None`` and the
    parser error; reading resumes on the next line.  Row numbers count the
    header as row 1.

    Raises:
        CsvFormatError: file missing, unreadable or not UTF-8, no header
            row or an unparseable one, or a required header absent.
    """
    csv_path = Path(csv_path)
    if not csv_path.is_file():
        raise CsvFormatError(f"CSV file not found: {csv_path}")

    records: list[CsvRecord] = []
    try:
        with open(csv_path, newline="", encoding="utf-8-sig") as f:
            reader = csv.DictReader(f, strict=True)
            try:
                fieldnames = reader.fieldnames
            except csv.Error as e:
                raise CsvFormatError(f"CSV header could not be parsed: {e}") from e
            if fieldnames is None:
                raise CsvFormatError(f"CSV file has no header row: {csv_path}")
            reader.fieldnames = [h.strip() for h in fieldnames]
            missing = [h for h in CsvColumns.REQUIRED if h not in reader.fieldnames]
            if missing:
                raise CsvFormatError(
                    "CSV file is missing required column(s): "
                    + ", ".join(f'"{h}"' for h in missing)
                )
            while True:
                row_number = len(records) + 2
                try:
                    raw = next(reader)
                except StopIteration:
                    break
                except csv.Error as e:
                    records.append(CsvRecord(
                        row_number, None,
                        f"Malformed CSV record near line {reader.line_num}: {e}",
                    ))
                    continue
                records.append(CsvRecord(row_number, raw))
    except UnicodeDecodeError as e:
        raise CsvFormatError(f"CSV file is not valid UTF-8: {e}") from e
    except OSError as e:
        raise CsvFormatError(f"Cannot read CSV file {csv_path}: {e}") from e
    return records


def normalize_row(raw: dict[str, Any]) -> dict[str, str | None]:
    """Map a raw CSV row to use_cases columns with trimmed values."""
    record: dict[str, str | None] = {}
    for header, column in CsvColumns.MAPPING.items():
        value = raw.get(header)
        record[column] = normalize_value(value) if isinstance(value, str) else None
    return record


def import_row(conn: sqlite3.Connection, row_number: int,
               raw: dict[str, Any], report: ImportReport) -> None:
    """Process one CSV row and update *report* (exceptions propagate)."""
    record = normalize_row(raw)

    if not record["use_case"]:
        report.add_skip(row_number, f'Empty "{CsvColumns.USE_CASE}" field')
        logger.info("Row %d: skipped, empty \"%s\" field", row_number, CsvColumns.USE_CASE)
        return
    if not record["concept_description"]:
        report.add_skip(row_number, f'Empty "{CsvColumns.CONCEPT_DESCRIPTION}" field')
        logger.info("Row %d: skipped, empty \"%s\" field",
                    row_number, CsvColumns.CONCEPT_DESCRIPTION)
        return

    url = record["url"]
    if url and not is_valid_url(url):
        report.url_warnings += 1
        logger.warning("Row %d: invalid URL format, storing as-is: %s", row_number, url)

    new_id = insert_use_case(conn, record)
    if new_id is None:
        report.duplicates += 1
        logger.info("Row %d: duplicate \"%s\"", row_number, truncate(record["use_case"]))
        return

    report.inserted += 1
    logger.info("Row %d: inserted id=%d \"%s\"", row_number, new_id, truncate(record["use_case"]))


def import_csv(csv_path: Path, conn: sqlite3.Connection,
               report: ImportReport | None = None) -> ImportReport:
    """Import every row of *csv_path* into the database behind *conn*.

    Args:
        csv_path: The CSV export to load.
        conn: Open connection (schema is created by utils.database.connect).
        report: Report to fill in; a new one is created when omitted.

    Returns:
        The filled-in ImportReport.

    Raises:
        CsvFormatError: the file cannot be imported (nothing was written).
    """
    if report is None:
        report = ImportReport(source=str(csv_path), status="started")
    start = time.monotonic()

    try:
        records = read_rows(csv_path)
    except CsvFormatError as e:
        report.fatal = str(e)
        report.status = "failed"
        report.elapsed_seconds = time.monotonic() - start
        raise

    report.total_rows = len(records)
    logger.info("Found %d rows in %s", report.total_rows, csv_path)

    for record in records:
        row_number = record.row_number
        if record.values is None:
            report.add_error(row_number, record.error)
            logger.error("Row %d: %s", row_number, record.error)
            continue
        try:
            import_row(conn, row_number, record.values, report)
        except Exception as e:
            if conn.in_transaction:
                conn.rollback()
            report.add_error(row_number, str(e) or type(e).__name__)
            logger.error("Row %d: error: %s", row_number, e)

    report.elapsed_seconds = time.monotonic() - start
    report.status = "completed"
    logger.info("Import complete: %d inserted, %d skipped, %d duplicates, %d errors in %.1fs",
                report.inserted, report.skipped, report.duplicates, report.errors,
                report.elapsed_seconds)
    return report
