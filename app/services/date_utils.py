"""
Date helpers. The timezone is always passed in: callers use the user's
profile timezone, or settings.default_timezone.
"""

import logging
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DateLike = Union[str, date, datetime, None]


def resolve_timezone(timezone: Optional[str], default: str) -> ZoneInfo:
    """ZoneInfo for timezone, or for default when unset or unknown."""
    if timezone:
        try:
            return ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone %r, using %s", timezone, default)
    return ZoneInfo(default)


def format_currency(amount: Union[float, Decimal, None]) -> str:
    """1234.5 -> '$1,234.50'"""
    value = float(amount or 0)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def today_in_timezone(tz: ZoneInfo) -> str:
    """Today's date in tz, as YYYY-MM-DD."""
    return datetime.now(tz).date().isoformat()


def _parse(value: DateLike, tz: ZoneInfo) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=tz)
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=tz)
    return parsed.astimezone(tz)


def format_date_for_display(value: DateLike, tz: ZoneInfo) -> str:
    """'2024-01-15' -> 'Jan 15, 2024'. Unparseable input gives ''."""
    parsed = _parse(value, tz)
    if parsed is None:
        return ""
    return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}"


def format_date_for_input(value: DateLike, tz: ZoneInfo) -> str:
    """Date as YYYY-MM-DD in tz. Unparseable input gives ''."""
    parsed = _parse(value, tz)
    if parsed is None:
        return ""
    return parsed.date().isoformat()


def create_date_string(input_date: str, tz: ZoneInfo) -> str:
    """
    Midnight of a YYYY-MM-DD date in tz, as an ISO-8601 UTC timestamp.
    Empty or invalid input gives ''.
    """
    if not input_date:
        return ""
    try:
        day = date.fromisoformat(input_date)
    except ValueError:
        return ""
    local_midnight = datetime.combine(day, time.min, tzinfo=tz)
    return local_midnight.astimezone(ZoneInfo("UTC")).isoformat().replace("+00:00", "Z")
