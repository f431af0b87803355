"""Request validation for readings reported by the device.

The firmware sends ``{"temp": 23.5, "hum": 61, "timestamp": "2025-04-05 14:32:10"}``.
Presence is checked before types so that a numeric ``0`` is never reported as missing.
"""
import math
import re
from datetime import datetime, timedelta, timezone

from .errors import InvalidTimestampError, InvalidValueError, MissingFieldError
from .models import TelemetryIn, TelemetryReading

TIMESTAMP_RE = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"(?:[T ](?P<hour>\d{2}):(?P<minute>\d{2})"
    r"(?::(?P<second>\d{2})(?:\.(?P<fraction>\d{1,9}))?)?"
    r"(?P<offset>[Zz]|[+-]\d{2}:?\d{2})?)?",
    re.ASCII,
)

# one day of margin on each side so any display zone can render the instant
MIN_INSTANT = datetime(1, 1, 2, tzinfo=timezone.utc)
MAX_INSTANT = datetime(9999, 12, 30, tzinfo=timezone.utc)

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def _parse_offset(text):
    if text is None or text in ("Z", "z"):
        return timezone.utc
    digits = text[1:].replace(":", "")
    delta = timedelta(hours=int(digits[:2]), minutes=int(digits[2:]))
    return timezone(-delta if text[0] == "-" else delta)


def parse_timestamp(value) -> datetime:
    """Parse ``YYYY-MM-DD[( |T)HH:MM[:SS[.fff]][Z|±HH:MM]]`` into an aware UTC datetime.

    Strings without an offset are taken as UTC.
    """
    if not isinstance(value, str):
        raise InvalidTimestampError()
    m = TIMESTAMP_RE.fullmatch(value.strip())
    if m is None:
        raise InvalidTimestampError()
    fraction = (m["fraction"] or "").ljust(6, "0")[:6]
    try:
        parsed = datetime(
            int(m["year"]), int(m["month"]), int(m["day"]),
            int(m["hour"] or 0), int(m["minute"] or 0), int(m["second"] or 0),
            int(fraction), tzinfo=_parse_offset(m["offset"]),
        ).astimezone(timezone.utc)
    except (ValueError, OverflowError):
        raise InvalidTimestampError() from None
    if not MIN_INSTANT <= parsed <= MAX_INSTANT:
        raise InvalidTimestampError()
    return parsed


def _check_number(name: str, value):
    # bool is an int subclass, JSON true/false must not pass as 1/0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidValueError(f"El campo {name} debe ser numérico")
    if isinstance(value, int):
        # BSON stores at most a signed 64-bit integer
        if not INT64_MIN <= value <= INT64_MAX:
            raise InvalidValueError(f"El campo {name} está fuera de rango")
    elif not math.isfinite(value):
        raise InvalidValueError(f"El campo {name} debe ser un número finito")
    return value


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_reading(payload: TelemetryIn) -> TelemetryReading:
    if payload.temp is None or payload.hum is None or _is_blank(payload.timestamp):
        raise MissingFieldError()

    temp = _check_number("temp", payload.temp)
    hum = _check_number("hum", payload.hum)
    return TelemetryReading(temp=temp, hum=hum, timestamp=parse_timestamp(payload.timestamp))
