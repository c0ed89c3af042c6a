"""Common utility functions used across the Use Case Library tools."""


def format_duration(seconds: float) -> str:
    """Format a duration in seconds as a short human-readable string.

    Examples:
        0.25 -> 250ms, 42 -> 42s, 135 -> 2m 15s
    """
    if seconds < 1:
        return f"{int(seconds * 1000)}ms"
    secs = int(seconds)
    m, s = divmod(secs, 60)
    if m:
        return f"{m}m {s}s"
    return f"{s}s"
