"""Pre-compiled regex patterns for the Use Case Library.

All patterns are compiled once at module import.

Usage:
    from utils.patterns import URL_SHAPE

    if URL_SHAPE.match(text):
        ...
"""

import re

# Permissive URL shape: optional scheme, dotted host, short TLD, optional path.
# Matches: "https://example.com/path", "www.example.co.uk", "example.io"
URL_SHAPE = re.compile(
    r'^(https?://)?([\da-z.-]+)\.([a-z.]{2,6})[/\w .-]*/?$',
    re.IGNORECASE,
)

# Characters with special meaning inside a SQL LIKE pattern
LIKE_SPECIAL_CHARS = re.compile(r'([\\%_])')
