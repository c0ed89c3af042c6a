"""
CSV import runner -- loads Use_Case_Library.csv into the use case database.

Each row is trimmed, rows without a name or description are skipped, and
rows whose name already exists (ignoring case) are counted as duplicates, so
running the import twice inserts nothing the second time.

Exit status:
  0  every row was inserted, skipped or recognised as a duplicate
  1  at least one row raised an error, or the file could not be imported

Usage:
    python import_use_cases.py                            # ./Use_Case_Library.csv
    python import_use_cases.py --csv exports/library.csv
    python import_use_cases.py --db /data/use_cases.sqlite
    python import_use_cases.py --log-dir logs/import      # keep import.log + summary.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from pipeline.importer import CsvFormatError, import_csv
from pipeline.logging import ImportLogger, ImportReport
from utils.config import DEFAULT_CSV_PATH, AppConfig
from utils.database import connect, get_table_count


HERE = Path(__file__).resolve().parent


def _banner(text: str) -> None:
    bar = "=" * 70
    print(f"\n{bar}\n{text}\n{bar}", flush=True)


# ── Argument parser ───────────────────────────────────────────────────────────


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Import the use case library CSV export into SQLite.",
    )
    p.add_argument(
        "--csv", type=Path, default=HERE / DEFAULT_CSV_PATH,
        help=f"CSV file to import (default: {DEFAULT_CSV_PATH} in the project root)",
    )
    p.add_argument(
        "--db", type=Path, default=None,
        help="Database path (default: APP_DB_PATH or use_cases.sqlite)",
    )
    p.add_argument(
        "--log-dir", type=Path, default=None,
        help="Write <run_id>/import.log and summary.json under this directory",
    )
    return p.parse_args(argv)


# ── Main ──────────────────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
        force=True,
    )

    db_path = args.db if args.db is not None else AppConfig.from_env().db_path

    _banner("USE CASE LIBRARY IMPORT")
    print(f"  CSV file : {args.csv}")
    print(f"  Database : {db_path}")
    print(f"  Started  : {datetime.now(timezone.utc).isoformat()}", flush=True)

    il: ImportLogger | None = None
    if args.log_dir is not None:
        il = ImportLogger(args.log_dir)
        il.args_dict = {k: str(v) for k, v in vars(args).items() if v is not None}
        report = il.start(source=str(args.csv))
    else:
        report = ImportReport(source=str(args.csv), status="started")

    conn = None
    try:
        conn = connect(db_path)
        import_csv(args.csv, conn, report)
    except CsvFormatError as e:
        print(f"\nERROR: {e}", file=sys.stderr, flush=True)
    except Exception as e:
        # Database could not be opened or created
        report.fatal = f"{type(e).__name__}: {e}"
        report.status = "failed"
        print(f"\nFATAL ERROR during import: {report.fatal}", file=sys.stderr, flush=True)
    finally:
        if conn is not None:
            rows_in_db = get_table_count(conn, "use_cases")
            conn.close()
        else:
            rows_in_db = None

    print("\n" + report.console_summary(), flush=True)
    if rows_in_db is not None:
        print(f"\n  Rows now in database: {rows_in_db:,}")

    if il is not None:
        il.finish(report)
        summary_path = il.write_summary()
        print(f"\n  Run logs : {il.run_dir}", flush=True)
        print(f"  Summary  : {summary_path}", flush=True)

    if report.ok:
        print("\nImport completed successfully.", flush=True)
        return 0
    if report.fatal:
        print("\nImport aborted.", flush=True)
    else:
        print("\nImport completed with errors. Please review the details above.", flush=True)
    return 1


if __name__ == "__main__":
    sys.exit(main())
