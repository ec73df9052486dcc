"""Row <-> entity mapping for the ``users`` and ``logs`` tables.

Rows are plain dicts with the persisted column names. Mapping only renames
and coerces: numbers stored as text become ints, date-times collapse to their
calendar day and unknown enum text is kept as-is. A missing column comes
through as ``None``; nothing here rejects a row.
"""
from __future__ import annotations

import datetime
from enum import Enum
from typing import Any, Mapping, Optional, TypeVar

from periodlog.models.log import ActivityType, ApprovalStatus, LogEntry
from periodlog.models.user import User, UserRole

E = TypeVar("E", bound=Enum)

USER_COLUMNS = ("id", "name", "role", "email", "avatar", "subjects", "classes", "bio", "experience")


def _as_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except ValueError:
        return int(float(value))


def _calendar_day(value: Any) -> Optional[datetime.date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    # "2026-10-19" or "2026-10-19T08:15:00.000Z"
    return datetime.date.fromisoformat(str(value)[:10])


def _enum_or_raw(enum_cls: type[E], value: Any) -> Any:
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _value(member: Any) -> Any:
    return member.value if isinstance(member, Enum) else member


def log_from_row(row: Mapping[str, Any]) -> LogEntry:
    return LogEntry.model_construct(
        id=row.get("id"),
        author_id=row.get("teacher_id"),
        author_name=row.get("teacher_name"),
        date=_calendar_day(row.get("date")),
        period=row.get("period"),
        activity_type=_enum_or_raw(ActivityType, row.get("activity_type")),
        description=row.get("description"),
        status=_enum_or_raw(ApprovalStatus, row.get("status")),
        feedback=row.get("feedback"),
        timestamp=_as_int(row.get("timestamp")),
    )


def log_to_row(log: LogEntry) -> dict[str, Any]:
    return {
        "id": log.id,
        "teacher_id": log.author_id,
        "teacher_name": log.author_name,
        "date": log.date.isoformat() if log.date else None,
        "period": log.period,
        "activity_type": _value(log.activity_type),
        "description": log.description,
        "status": _value(log.status),
        "feedback": log.feedback,
        "timestamp": log.timestamp,
    }


def user_from_row(row: Mapping[str, Any]) -> User:
    return User.model_construct(
        id=row.get("id"),
        name=row.get("name"),
        role=_enum_or_raw(UserRole, row.get("role")),
        email=row.get("email"),
        avatar=row.get("avatar"),
        subjects=row.get("subjects"),
        classes=row.get("classes"),
        bio=row.get("bio"),
        experience=_as_int(row.get("experience")),
    )


def user_to_row(user: User) -> dict[str, Any]:
    row = {column: getattr(user, column) for column in USER_COLUMNS}
    row["role"] = _value(user.role)
    return row
