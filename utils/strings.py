"""String processing utilities for the Use Case Library.

Shared by the API create endpoint and the CSV importer so both apply the
same trimming and URL rules.
"""

from utils.patterns import LIKE_SPECIAL_CHARS, URL_SHAPE


def normalize_value(value: str | None) -> str | None:
    """Trim a raw field value; blank or missing values become ``None``.

    Example:
        "  Retail \\n" -> "Retail"
        "   "          -> None
    """
    if value is None:
        return None
    trimmed = str(value).strip()
    return trimmed or None


def is_valid_url(url: str) -> bool:
    """Return True if *url* looks like a URL.

    The check is deliberately loose: a bare domain such as ``example.com``
    passes, and callers treat a failure as a warning rather than a rejection.
    """
    return bool(URL_SHAPE.match(url))


def escape_like(term: str) -> str:
    """Escape ``%``, ``_`` and ``\\`` so *term* matches literally in LIKE.

    Use together with ``ESCAPE '\\'`` in the SQL.

    Example:
        "100%_done" -> "100\\%\\_done"
    """
    return LIKE_SPECIAL_CHARS.sub(r'\\\1', term)


def truncate(s: str, length: int = 50) -> str:
    """Shorten *s* to *length* characters, appending "..." when cut."""
    if len(s) <= length:
        return s
    return s[:length] + "..."
