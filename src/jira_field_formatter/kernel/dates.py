"""Date and datetime conversion for date fields.

Accepted inputs, in order:

- a spreadsheet serial day count (number or numeric string) in [1, 110000],
  anchored at 1900-01-01 UTC with the 1900 leap-year bug corrected
- an ISO ``YYYY-MM-DD`` date or ``YYYY-MM-DDTHH:MM:SS`` datetime string,
  returned as-is
- ``datetime.date`` / ``datetime.datetime`` objects
- any other string pandas can parse

Every path is checked against the [1900, 2200] year range. Conversion
failures return None rather than raising.
"""

import math
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

import pandas as pd


MIN_YEAR = 1900
MAX_YEAR = 2200

SERIAL_MIN = 1
SERIAL_MAX = 110000
# Serial 60 is the spreadsheet's fictitious 1900-02-29
LEAP_YEAR_BUG_SERIAL = 60

SERIAL_EPOCH = datetime(1900, 1, 1, tzinfo=timezone.utc)
MILLISECONDS_PER_DAY = 24 * 60 * 60 * 1000

_NUMERIC_STRING = re.compile(r"^\d+(\.\d*)?$")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_ISO_DATETIME_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}")
# Lenient input must carry a digit and no quarter/week period token, so clock
# keywords ("now", "today") and periods ("2023Q1", "2023-W01") never reach pandas
_HAS_DIGIT = re.compile(r"\d")
_PERIOD_TOKEN = re.compile(r"[qQwW]\d")


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return None if math.isnan(number) else number
    if isinstance(value, str) and _NUMERIC_STRING.match(value.strip()):
        return float(value.strip())
    return None


def serial_number(value: Any) -> Optional[float]:
    """Return value as a spreadsheet serial day count, or None if it is not one."""
    number = _as_number(value)
    if number is not None and SERIAL_MIN <= number <= SERIAL_MAX:
        return number
    return None


def serial_to_datetime(serial: float) -> datetime:
    """Convert a spreadsheet serial day count to a UTC datetime (millisecond precision)."""
    adjusted = serial - 1 if serial > LEAP_YEAR_BUG_SERIAL else serial
    millis = int((adjusted - 1) * MILLISECONDS_PER_DAY)
    return SERIAL_EPOCH + timedelta(milliseconds=millis)


def is_valid_year(year: int) -> bool:
    return MIN_YEAR <= year <= MAX_YEAR


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_lenient(text: str) -> Optional[datetime]:
    if not _HAS_DIGIT.search(text) or _PERIOD_TOKEN.search(text):
        return None
    try:
        ts = pd.to_datetime(text, utc=True, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def _resolve(value: Any) -> Optional[datetime]:
    """Shared serial / object / lenient-string resolution for both formats."""
    if isinstance(value, datetime):
        return _to_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    serial = serial_number(value)
    if serial is not None:
        return serial_to_datetime(serial)
    if _as_number(value) is not None:
        # Numeric, but outside the serial range
        return None

    return _parse_lenient(str(value).strip())


def format_iso_instant(value: datetime) -> str:
    """Render a datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    return _to_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_date_value(value: Any) -> Optional[str]:
    """Format a date field value as ``YYYY-MM-DD``; None when it cannot be converted."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None

    if isinstance(value, str) and _ISO_DATE.match(value.strip()):
        text = value.strip()
        return text if is_valid_year(int(text[:4])) else None

    resolved = _resolve(value)
    if resolved is None or not is_valid_year(resolved.year):
        return None
    return resolved.date().isoformat()


def format_datetime_value(value: Any) -> Optional[str]:
    """Format a datetime field value as an ISO-8601 instant; None when it cannot be converted."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None

    if isinstance(value, str) and _ISO_DATETIME_PREFIX.match(value.strip()):
        text = value.strip()
        return text if is_valid_year(int(text[:4])) else None

    resolved = _resolve(value)
    if resolved is None or not is_valid_year(resolved.year):
        return None
    return format_iso_instant(resolved)
