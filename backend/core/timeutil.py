# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Timestamp helpers.

Every datetime stored by this service is naive UTC.  Clients send and
receive ISO-8601 strings with a trailing ``Z``.
"""

from datetime import datetime, timezone

_WIRE_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def utcnow() -> datetime:
    """Current time as naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def format_date(dt: datetime) -> str:
    """Render *dt* as ``2021-01-31T12:00:00.000000Z``."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.strftime(_WIRE_FORMAT)


def parse_date(text: str) -> datetime:
    """
    Parse an ISO-8601-like client date into naive UTC.

    Accepts a trailing ``Z`` or an explicit offset; a value without either is
    taken to be UTC already.  Raises ``ValueError`` on anything else,
    including offsets that push the value outside the datetime range.
    """
    if not isinstance(text, str) or not text.strip():
        raise ValueError("Empty date")

    value = text.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"

    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        except OverflowError:
            raise ValueError(f"Date out of range: {text!r}")
    return parsed
