"""Clock helpers pinning every timestamp to the configured timezone."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from notification_hub.config import get_settings

# "UTC+5", "GMT-03:30", "utc+0530"
_UTC_OFFSET = re.compile(r"(?:UTC|GMT)([+-])(\d{1,2})(?::?(\d{2}))?", re.IGNORECASE)


def parse_utc_offset(label: str) -> timezone | None:
    """Return a fixed-offset timezone for labels like ``UTC-05:00``."""

    match = _UTC_OFFSET.fullmatch(label.strip())
    if match is None:
        return None
    sign, hours, minutes = match.groups()
    offset = timedelta(hours=int(hours), minutes=int(minutes or 0))
    return timezone(-offset if sign == "-" else offset)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Timezone named by ``APP_TIMEZONE``; unknown names fall back to UTC."""

    label = (get_settings().app_timezone or "").strip()
    if not label:
        return timezone.utc
    try:
        return ZoneInfo(label)
    except (ZoneInfoNotFoundError, ValueError):
        return parse_utc_offset(label) or timezone.utc


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Convert ``value`` to the app timezone, reading naive values as UTC."""

    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(get_app_timezone())


def isoformat_or_none(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()
