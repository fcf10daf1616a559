# kinship_predict/prediction/date_utils.py
from __future__ import annotations

from datetime import date as _date, datetime
from typing import Any, Optional

DAYS_PER_YEAR = 365.25


def coerce_to_date(value: Any) -> Optional[_date]:
    """
    Convert a stored date value to datetime.date.

    Accepts date, datetime, ISO 'YYYY-MM-DD' strings and bare years.

    Args:
        value: Date-like value

    Returns:
        datetime.date if conversion successful, None otherwise
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, _date):
        return value
    if isinstance(value, int):
        return _date(value, 1, 1) if 1 <= value <= 9999 else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return _date.fromisoformat(text[:10])
        except ValueError:
            if text.isdigit():
                return coerce_to_date(int(text))
            return None
    return None


def age_gap_years(older_birth: Any, younger_birth: Any) -> Optional[float]:
    """
    Years from the first birth date to the second, as days / 365.25.

    Negative when the 'younger' person was actually born first.

    Returns:
        Gap in fractional years, or None if either date is unknown
    """
    a = coerce_to_date(older_birth)
    b = coerce_to_date(younger_birth)
    if a is None or b is None:
        return None
    return (b - a).days / DAYS_PER_YEAR


def within_window(value: Any, start: Any, end: Any = None) -> Optional[bool]:
    """
    Check whether a date falls inside [start, end], end open when None.

    Returns:
        True or False, or None if the value or start is unknown
    """
    d = coerce_to_date(value)
    s = coerce_to_date(start)
    if d is None or s is None:
        return None
    e = coerce_to_date(end)
    if d < s:
        return False
    if e is not None and d > e:
        return False
    return True
