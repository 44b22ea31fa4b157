"""
Shared utilities for the CSV scoring pipeline
app/pipelines/utils.py
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any, Optional

# Leading numeric prefix, mirrors how spreadsheet exports write "85%" or "12 cases"
_NUMBER_PREFIX = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

_DATE_FORMATS = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d-%b-%Y",
    "%d %b %Y",
    "%b %d, %Y",
    "%B %d, %Y",
)


def clean_nan(value: Any) -> Any:
    """Convert NaN-like values to None."""
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if str(value).strip() in ("nan", "NaN", "NaT", "None", "null", ""):
        return None
    return value


def parse_number(value: Any, decimal_comma: bool = False) -> Optional[float]:
    """
    Tolerant numeric parse.

    Numbers pass through, strings are read by their leading numeric prefix
    ("85%" -> 85.0, "4,5" -> 4.0). With `decimal_comma` a single comma in a
    string without a dot is the decimal separator ("4,5" -> 4.5), as written by
    semicolon-delimited exports. Returns None when nothing numeric can be read,
    including NaN and infinities.
    """
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None
    if value is None:
        return None
    text = str(value).strip()
    if decimal_comma and text.count(",") == 1 and "." not in text:
        text = text.replace(",", ".")
    match = _NUMBER_PREFIX.match(text)
    if not match:
        return None
    number = float(match.group(0))
    return number if math.isfinite(number) else None


def parse_float(value: Any, default: float = 0.0, decimal_comma: bool = False) -> float:
    number = parse_number(value, decimal_comma)
    return default if number is None else number


def parse_count(value: Any, default: int = 0, decimal_comma: bool = False) -> int:
    """Parse a non-negative integer count; fractions are truncated."""
    number = parse_number(value, decimal_comma)
    if number is None:
        return default
    return max(0, int(number))


def parse_bool(value: Any, default: bool = False) -> bool:
    """Read yes/no style flags ("1", "true", "Yes", "Y")."""
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    text = str(value).strip().lower()
    if not text:
        return default
    if text in ("1", "true", "yes", "y", "t"):
        return True
    if text in ("0", "false", "no", "n", "f"):
        return False
    number = parse_number(text)
    return default if number is None else number != 0


def parse_date(value: Any) -> Optional[date]:
    """Parse ISO dates/timestamps plus a handful of common export formats."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    value = clean_nan(value)
    if value is None:
        return None
    text = str(value).strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None
