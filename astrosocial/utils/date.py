"""
Locale-aware timestamp formatting for display strings.
"""

import time
from datetime import date as date_type, datetime, timezone, tzinfo as tzinfo_type
from typing import Optional, Union

from babel import Locale
from babel.dates import format_datetime

FRENCH = "fr"
DEFAULT_LOCALE = "en"

# LDML patterns: French uses a 24-hour clock, everything else a 12-hour clock with AM/PM
FRENCH_PATTERN = "EEEE dd MMMM yyyy 'à' HH:mm"
DEFAULT_PATTERN = "EEEE dd MMMM yyyy, hh:mm a"

INVALID_DATE = "Invalid Date"

DateInput = Union[int, float, str, datetime, date_type]

def _to_datetime(value: DateInput) -> Optional[datetime]:
    """Coerce epoch milliseconds, ISO-8601 strings and date objects to an aware datetime."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date_type):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, bool):
        return None
    elif isinstance(value, (int, float)):
        try:
            dt = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_date(date: DateInput, language: Optional[str], tzinfo: tzinfo_type = timezone.utc) -> str:
    """
    Render ``date`` as e.g. "lundi 19 octobre 2026 à 14:30" for ``"fr"``
    or "Monday 19 October 2026, 02:30 PM" for any other language.

    French is the only translated rendering; every other code, known or
    not, is rendered in English. Dates that cannot be parsed render as
    "Invalid Date".
    """
    dt = _to_datetime(date)
    if dt is None:
        return INVALID_DATE

    if language == FRENCH:
        return format_datetime(dt, format=FRENCH_PATTERN, tzinfo=tzinfo, locale=Locale.parse(FRENCH))
    return format_datetime(dt, format=DEFAULT_PATTERN, tzinfo=tzinfo, locale=Locale.parse(DEFAULT_LOCALE))

def get_date() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)
