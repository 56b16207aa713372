"""Size and time formatting for listing output."""

import math
from datetime import datetime

_SI_SUFFIXES = ("B", "kB", "MB", "GB", "TB", "PB", "EB")

TIME_FORMAT = "%d-%b-%Y %H:%M:%S"
TIME_FORMAT_SHORT = "%d-%b-%y"


def human_bytes(size: int) -> str:
    """Format a byte count with SI (base 1000) units, e.g. 1024 -> "1.0 kB"."""
    if size < 0:
        return "0 B"
    if size < 10:
        return f"{size} B"

    exponent = 0
    while exponent < len(_SI_SUFFIXES) - 1 and size >= 1000 ** (exponent + 1):
        exponent += 1
    value = math.floor(size / (1000 ** exponent) * 10 + 0.5) / 10
    if value < 10:
        return f"{value:.1f} {_SI_SUFFIXES[exponent]}"
    return f"{value:.0f} {_SI_SUFFIXES[exponent]}"


def format_time(value: datetime | None, short: bool = False) -> str:
    """Format a modification time for display; unset times render empty."""
    if value is None:
        return ""
    return value.strftime(TIME_FORMAT_SHORT if short else TIME_FORMAT)
