"""Timezone helpers."""

from __future__ import annotations

import datetime as dt
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from renderhook.config import DEFAULT_TIMEZONE, settings


def load_timezone(name: str, fallback: str = DEFAULT_TIMEZONE) -> ZoneInfo:
    """Return a ``ZoneInfo`` for ``name``, or for ``fallback`` when it is unknown."""

    try:
        return ZoneInfo(name or fallback)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo(fallback)


TZ = load_timezone(settings.timezone)


def parse_timestamp(value: str | int | float | None) -> dt.datetime | None:
    """
    Parse a webhook timestamp into an aware datetime.

    ISO-8601 strings (``Z`` suffix or explicit offset) and epoch seconds are
    understood; naive values are taken as UTC. Returns ``None`` when the value
    cannot be parsed.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            return dt.datetime.fromtimestamp(value, tz=dt.timezone.utc)
        text = value.strip()
        if not text:
            return None
        if text.lstrip("-").replace(".", "", 1).isdigit():
            return dt.datetime.fromtimestamp(float(text), tz=dt.timezone.utc)
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = dt.datetime.fromisoformat(text)
    except (ValueError, OverflowError, OSError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    return parsed


def format_local(moment: dt.datetime, tz: ZoneInfo = TZ) -> str:
    """Render as ``17 Oct 2026, 14:05 BST`` in the configured timezone."""
    local = moment.astimezone(tz)
    # en-GB abbreviates September as "Sept".
    month = "Sept" if local.month == 9 else f"{local:%b}"
    return f"{local.day} {month} {local:%Y}, {local:%H:%M} {local:%Z}"


def format_timestamp(value: str | int | float, tz: ZoneInfo = TZ) -> str:
    """Human readable timestamp, or the raw value when it does not parse."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return str(value)
    return format_local(parsed, tz)
