"""Chart-ready aggregates over an in-memory list of logs.

All functions are pure and cheap enough to recompute on every request.
"""
from __future__ import annotations

from collections import Counter
from datetime import date, timedelta
from typing import Iterable, Sequence
from zoneinfo import ZoneInfo

from pydantic import BaseModel

from periodlog.models.log import ApprovalStatus, LogEntry
from periodlog.services.calendar import creation_day


class TrendPoint(BaseModel):
    day: date
    label: str  # short weekday name, e.g. "Mon"
    count: int


class LeaderboardEntry(BaseModel):
    name: str
    count: int


def _key(value) -> str:
    return getattr(value, "value", value)


def count_by_activity(logs: Iterable[LogEntry]) -> dict[str, int]:
    return dict(Counter(_key(log.activity_type) for log in logs))


def count_by_status(logs: Iterable[LogEntry]) -> dict[str, int]:
    """Counts per status, zero-filled so every chart slice is present."""
    counts = {status.value: 0 for status in ApprovalStatus}
    for log in logs:
        status = _key(log.status)
        counts[status] = counts.get(status, 0) + 1
    return counts


def weekly_trend(
    logs: Iterable[LogEntry], *, today: date, tz: ZoneInfo, days: int = 7
) -> list[TrendPoint]:
    """One point per calendar day ending ``today``, oldest first.

    Buckets are absolute dates: two Mondays a week apart never merge.
    """
    window = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
    per_day = Counter(creation_day(log.timestamp, tz) for log in logs if log.timestamp is not None)
    return [TrendPoint(day=day, label=day.strftime("%a"), count=per_day.get(day, 0)) for day in window]


def leaderboard(logs: Iterable[LogEntry], size: int = 5) -> list[LeaderboardEntry]:
    """Most active authors by log count; ties keep first-seen order."""
    counts = Counter(log.author_name for log in logs)
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [LeaderboardEntry(name=name, count=count) for name, count in ranked[:size]]


def period_key(period: str) -> str:
    """First two tokens of a period label, e.g. "Period 1" or "Lunch Break"."""
    return " ".join((period or "").split()[:2])


def period_load(logs: Iterable[LogEntry]) -> dict[str, int]:
    return dict(Counter(period_key(log.period) for log in logs))


def dashboard_stats(
    logs: Sequence[LogEntry], *, today: date, tz: ZoneInfo, trend_days: int = 7, leaderboard_size: int = 5
) -> dict:
    todays = [log for log in logs if log.timestamp is not None and creation_day(log.timestamp, tz) == today]
    by_status = count_by_status(logs)
    return {
        "date": today.isoformat(),
        "totals": {
            "logs": len(logs),
            "today": len(todays),
            "pending": by_status[ApprovalStatus.PENDING.value],
        },
        "by_activity": count_by_activity(logs),
        "by_status": by_status,
        "trend": [point.model_dump(mode="json") for point in weekly_trend(logs, today=today, tz=tz, days=trend_days)],
        "leaderboard": [entry.model_dump() for entry in leaderboard(logs, size=leaderboard_size)],
        "period_load": period_load(logs),
    }
