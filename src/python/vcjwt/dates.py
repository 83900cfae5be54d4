"""Conversion between JWT NumericDate claims and W3C ISO-8601 date strings."""

from datetime import datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def timestamp_to_iso(seconds) -> str | None:
    """Format seconds since the epoch as an ISO-8601 UTC string.

    The output has millisecond precision and a ``Z`` suffix, e.g.
    ``1234567890 -> "2009-02-13T23:31:30.000Z"``. Numeric strings are
    accepted.

    Returns:
        The formatted date, or None if ``seconds`` is not a usable number.
    """
    if isinstance(seconds, bool):
        return None
    try:
        millis = round(float(seconds) * 1000)
        moment = _EPOCH + timedelta(milliseconds=millis)
    except (TypeError, ValueError, OverflowError):
        return None
    return moment.strftime("%Y-%m-%dT%H:%M:%S") + f".{moment.microsecond // 1000:03d}Z"


def iso_to_timestamp(value) -> int | float | None:
    """Parse an ISO-8601 date string into seconds since the epoch.

    Values without an offset are read as UTC. Whole seconds come back as
    ``int``, anything else as ``float`` rounded to milliseconds.

    Returns:
        The timestamp, or None if ``value`` is not a parseable date string.
    """
    if not isinstance(value, str):
        return None
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    millis = (parsed - _EPOCH) // timedelta(milliseconds=1)
    if millis % 1000 == 0:
        return millis // 1000
    return millis / 1000
