"""Per-day tallies of app events and the sheet rows built from them."""

from __future__ import annotations

from collections import defaultdict
from datetime import timezone
from typing import Any, Dict, Iterable, List

from .app_events import AppEvent, EventType
from .day_window import DATE_FORMAT, LOCAL_TZ
from .logging_utils import debug

DailyStats = Dict[str, Dict[EventType, int]]

SHEET_HEADER = ["Date"] + [kind.column_label for kind in EventType]


def local_date(event: AppEvent, tz: timezone = LOCAL_TZ) -> str:
    return event.occurred_at.astimezone(tz).strftime(DATE_FORMAT)


def build_daily_stats(events: Iterable[AppEvent], tz: timezone = LOCAL_TZ) -> DailyStats:
    """Count events per local calendar date and event type."""

    stats: Dict[str, Dict[EventType, int]] = defaultdict(lambda: defaultdict(int))
    for event in events:
        day = local_date(event, tz)
        debug(f"processing date: {day}, type: {event.kind.value}")
        stats[day][event.kind] += 1
    return {day: dict(counts) for day, counts in stats.items()}


def sorted_dates(stats: DailyStats) -> List[str]:
    # YYYY-MM-DD sorts chronologically as text
    return sorted(stats.keys())


def stat_row(day: str, counts: Dict[EventType, int]) -> List[Any]:
    return [day] + [counts.get(kind, 0) for kind in EventType]


def build_rows(stats: DailyStats) -> List[List[Any]]:
    return [stat_row(day, stats[day]) for day in sorted_dates(stats)]


def total_events(stats: DailyStats) -> int:
    return sum(sum(counts.values()) for counts in stats.values())


__all__ = [
    "DailyStats",
    "SHEET_HEADER",
    "build_daily_stats",
    "build_rows",
    "local_date",
    "sorted_dates",
    "stat_row",
    "total_events",
]
