"""Event records returned by the Partner API app event feed."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict


class UnknownEventTypeError(ValueError):
    """Raised for an event ``type`` outside the four relationship kinds."""


class EventType(Enum):
    """App relationship lifecycle events, in sheet column order."""

    INSTALLED = "RELATIONSHIP_INSTALLED"
    DEACTIVATED = "RELATIONSHIP_DEACTIVATED"
    REACTIVATED = "RELATIONSHIP_REACTIVATED"
    UNINSTALLED = "RELATIONSHIP_UNINSTALLED"

    @property
    def column_label(self) -> str:
        return COLUMN_LABELS[self]

    @classmethod
    def parse(cls, raw: Any) -> "EventType":
        try:
            return cls(raw)
        except ValueError:
            raise UnknownEventTypeError(f"Unknown app event type: {raw!r}") from None


COLUMN_LABELS = {
    EventType.INSTALLED: "Installs",
    EventType.DEACTIVATED: "Closed",
    EventType.REACTIVATED: "Reopened",
    EventType.UNINSTALLED: "Uninstalls",
}


@dataclass(frozen=True)
class AppEvent:
    """One edge of the ``events`` connection."""

    kind: EventType
    occurred_at: datetime
    cursor: str = ""


def parse_timestamp(raw: str) -> datetime:
    """Parse an ISO8601 timestamp and normalize it to UTC.

    Naive values are taken to be UTC already.
    """

    s = (raw or "").strip()
    if not s:
        raise ValueError("empty timestamp")
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def event_from_edge(edge: Dict[str, Any]) -> AppEvent:
    node = edge.get("node") or {}
    return AppEvent(
        kind=EventType.parse(node.get("type")),
        occurred_at=parse_timestamp(node.get("occurredAt", "")),
        cursor=edge.get("cursor") or "",
    )


__all__ = [
    "AppEvent",
    "COLUMN_LABELS",
    "EventType",
    "UnknownEventTypeError",
    "event_from_edge",
    "parse_timestamp",
]
