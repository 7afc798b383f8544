import re
from typing import Optional

_FIRST_INT = re.compile(r"\d+")


def _first_int(text: str) -> Optional[int]:
    match = _FIRST_INT.search(text)
    return int(match.group()) if match else None


def parse_duration_hours(duration: Optional[str]) -> float:
    """
    Convert a free-text session duration into hours.

    "1 hour" / "2 hours" -> first integer as hours (1 when no number is given).
    "30min" / "45 minutes" -> first integer / 60 (0.5 when no number is given).
    Anything else counts as zero.
    """
    if not duration:
        return 0.0
    text = duration.lower()
    if "hour" in text:
        hours = _first_int(text)
        return float(hours) if hours is not None else 1.0
    if "min" in text:
        minutes = _first_int(text)
        return minutes / 60 if minutes is not None else 0.5
    return 0.0
