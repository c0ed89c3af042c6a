"""
Pipeline package -- Use Case Library CSV import.

Re-exports key entry points so callers can do::

    from pipeline import import_csv, ImportReport
"""

from pipeline.importer import CsvFormatError, import_csv
from pipeline.logging import ImportLogger, ImportReport

__all__ = [
    "CsvFormatError",
    "ImportLogger",
    "ImportReport",
    "import_csv",
]
