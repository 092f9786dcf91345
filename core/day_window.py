"""Reporting-day window in a fixed-offset zone (GMT+7 by default), expressed in UTC."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

import config

LOCAL_TZ = timezone(
    timedelta(hours=config.LOCAL_UTC_OFFSET_HOURS), f"GMT{config.LOCAL_UTC_OFFSET_HOURS:+d}"
)
DATE_FORMAT = "%Y-%m-%d"
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class DayWindow:
    local_date: date
    start: datetime  # UTC
    end: datetime  # UTC, display only

    def start_iso(self) -> str:
        return to_rfc3339(self.start)

    def end_iso(self) -> str:
        return to_rfc3339(self.end)


def to_rfc3339(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_target_date(text: str) -> date:
    """Parse an operator-supplied ``YYYY-MM-DD`` date.

    Raises ``ValueError`` for anything that is not exactly a valid
    calendar date in that format.
    """

    s = (text or "").strip()
    if not _DATE_RE.match(s):
        raise ValueError(f"invalid date {text!r}, expected YYYY-MM-DD")
    return datetime.strptime(s, DATE_FORMAT).date()


def day_window(
    now: Optional[datetime] = None,
    target: Optional[date] = None,
    tz: timezone = LOCAL_TZ,
) -> DayWindow:
    if target is None:
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        target = now.astimezone(tz).date()
    start_local = datetime.combine(target, time(0, 0), tzinfo=tz)
    end_local = datetime.combine(target, time(23, 59, 59, 999999), tzinfo=tz)
    return DayWindow(
        local_date=target,
        start=start_local.astimezone(timezone.utc),
        end=end_local.astimezone(timezone.utc),
    )
