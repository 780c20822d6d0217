import re
from typing import Annotated
from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

from pydantic import AfterValidator, BeforeValidator

from core.config import settings

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_datetime(value: str, tz: ZoneInfo | None = None) -> datetime:
    """Parse a local-or-zoned timestamp string into an aware datetime.

    Strings carrying ``Z`` or an explicit offset are taken as-is. Strings
    without one are interpreted in ``tz`` (the configured application
    timezone by default). A bare ``YYYY-MM-DD`` means local midnight.

    Raises:
        ValueError: if the string is not an ISO 8601 date or datetime.
    """
    tz = tz or settings.APP_TIMEZONE
    text = value.strip()
    if not text:
        raise ValueError("Empty timestamp")

    if _DATE_ONLY.match(text):
        return datetime.combine(date.fromisoformat(text), time.min, tzinfo=tz)

    if text[-1] in "zZ":
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def to_utc(value: datetime) -> datetime:
    """Convert to UTC, treating naive values as already UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_local(value: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Render a stored instant in the application timezone."""
    return to_utc(value).astimezone(tz or settings.APP_TIMEZONE)


def local_day_bounds(day: date, tz: ZoneInfo | None = None) -> tuple[datetime, datetime]:
    """Return the [start, end) UTC instants of a local calendar day."""
    tz = tz or settings.APP_TIMEZONE
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(date.fromordinal(day.toordinal() + 1), time.min, tzinfo=tz)
    return to_utc(start), to_utc(end)


def _parse_if_str(value):
    if isinstance(value, str):
        return parse_datetime(value)
    return value


# Request field type: ISO strings without an offset are read as local time
LocalDateTime = Annotated[datetime, BeforeValidator(_parse_if_str)]

# Response field type: stored instants rendered as aware UTC
UtcDateTime = Annotated[datetime, AfterValidator(to_utc)]
