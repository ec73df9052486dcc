"""Log lifecycle: submission, review transitions and role-scoped listings.

A log starts PENDING; a reviewer moves it to APPROVED or REJECTED exactly
once. Terminal records can only go back to PENDING through ``reopen_log``.
Every change is written to the store first and only then returned, so a
failed write never shows up as a changed record.
"""
from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from typing import Iterable, Optional

from periodlog.exceptions import (
    InvalidInputError,
    InvalidTransitionError,
    LogNotFoundError,
    PermissionDeniedError,
)
from periodlog.models.log import (
    PERIODS,
    TERMINAL_STATUSES,
    ActivityType,
    ApprovalStatus,
    LogCreate,
    LogEntry,
)
from periodlog.models.user import User
from periodlog.rbac import has_permission
from periodlog.services.calendar import school_now, to_epoch_ms
from periodlog.services.mapping import log_from_row, log_to_row
from periodlog.services.store import LOGS, TableStore

logger = logging.getLogger(__name__)

REVIEW_STATUSES = frozenset({ApprovalStatus.APPROVED, ApprovalStatus.REJECTED})


def require_permission(user: User, action: str) -> None:
    if not has_permission(user.role, action):
        raise PermissionDeniedError(action)


def build_log(author: User, data: LogCreate, *, now: datetime) -> LogEntry:
    """Validate a submission and build its PENDING record (nothing is written).

    ``now`` should be aware and in the school zone; its date becomes the
    log's calendar day.
    """
    description = (data.description or "").strip()
    if not description:
        raise InvalidInputError("Description is required")
    if data.period not in PERIODS:
        raise InvalidInputError(f"Unknown period: {data.period!r}")
    try:
        activity_type = ActivityType(data.activity_type)
    except ValueError:
        raise InvalidInputError(f"Unknown activity type: {data.activity_type!r}") from None

    return LogEntry(
        id=str(uuid.uuid4()),
        author_id=author.id,
        author_name=author.name,
        date=now.date(),
        period=data.period,
        activity_type=activity_type,
        description=description,
        status=ApprovalStatus.PENDING,
        timestamp=to_epoch_ms(now),
    )


async def submit_log(
    store: TableStore, author: User, data: LogCreate, *, now: Optional[datetime] = None
) -> LogEntry:
    require_permission(author, "logs.submit")
    log = build_log(author, data, now=now or school_now())
    await store.insert(LOGS, log_to_row(log))
    logger.info(f"Log {log.id} submitted by {author.id} for {log.period}")
    return log


def check_transition(log: LogEntry, new_status: ApprovalStatus, feedback: Optional[str]) -> Optional[str]:
    """Validate a review decision; returns the cleaned feedback text."""
    try:
        new_status = ApprovalStatus(new_status)
    except ValueError:
        raise InvalidInputError(f"Unknown status: {new_status!r}") from None
    if new_status not in REVIEW_STATUSES:
        raise InvalidTransitionError(f"A log can only be approved or rejected, not set to {new_status.value}")

    feedback = (feedback or "").strip() or None
    if new_status == ApprovalStatus.REJECTED and not feedback:
        raise InvalidInputError("A reason is required to reject a log")

    if log.status != ApprovalStatus.PENDING:
        raise InvalidTransitionError(
            f"Log {log.id} is already {getattr(log.status, 'value', log.status)}; reopen it before reviewing again"
        )
    return feedback


async def get_log(store: TableStore, log_id: str) -> LogEntry:
    row = await store.select_one(LOGS, eq={"id": log_id})
    if not row:
        raise LogNotFoundError(log_id)
    return log_from_row(row)


async def review_log(
    store: TableStore,
    reviewer: User,
    log_id: str,
    new_status: ApprovalStatus,
    feedback: Optional[str] = None,
) -> LogEntry:
    require_permission(reviewer, "logs.review")
    log = await get_log(store, log_id)
    feedback = check_transition(log, new_status, feedback)

    values: dict[str, Optional[str]] = {"status": ApprovalStatus(new_status).value}
    if feedback is not None:
        values["feedback"] = feedback
    if not await store.update(LOGS, log_id, values):
        raise LogNotFoundError(log_id)

    logger.info(f"Log {log_id} {values['status']} by {reviewer.id}")
    return log.model_copy(
        update={
            "status": ApprovalStatus(new_status),
            "feedback": feedback if feedback is not None else log.feedback,
        }
    )


async def reopen_log(store: TableStore, reviewer: User, log_id: str) -> LogEntry:
    """Move an approved or rejected log back to PENDING, dropping its feedback."""
    require_permission(reviewer, "logs.reopen")
    log = await get_log(store, log_id)
    if log.status not in TERMINAL_STATUSES:
        raise InvalidTransitionError(f"Log {log_id} is still pending")

    if not await store.update(LOGS, log_id, {"status": ApprovalStatus.PENDING.value, "feedback": None}):
        raise LogNotFoundError(log_id)

    logger.info(f"Log {log_id} reopened by {reviewer.id}")
    return log.model_copy(update={"status": ApprovalStatus.PENDING, "feedback": None})


def sort_recent(logs: Iterable[LogEntry]) -> list[LogEntry]:
    """Newest first; equal timestamps keep their incoming order."""
    return sorted(logs, key=lambda log: log.timestamp or 0, reverse=True)


def filter_logs(
    logs: Iterable[LogEntry],
    *,
    status: Optional[ApprovalStatus] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> list[LogEntry]:
    """Status match and an inclusive calendar-day range on ``log.date``."""
    result = []
    for log in logs:
        if status is not None and log.status != status:
            continue
        if date_from is not None or date_to is not None:
            if log.date is None:
                continue
            if date_from is not None and log.date < date_from:
                continue
            if date_to is not None and log.date > date_to:
                continue
        result.append(log)
    return result


async def fetch_logs(store: TableStore, *, author_id: Optional[str] = None) -> list[LogEntry]:
    rows = await store.select(LOGS, eq={"teacher_id": author_id} if author_id else None)
    return sort_recent(log_from_row(row) for row in rows)


async def list_own_logs(store: TableStore, user: User) -> list[LogEntry]:
    require_permission(user, "logs.view_own")
    return await fetch_logs(store, author_id=user.id)


async def list_all_logs(
    store: TableStore,
    reviewer: User,
    *,
    status: Optional[ApprovalStatus] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> list[LogEntry]:
    require_permission(reviewer, "logs.view_all")
    if date_from and date_to and date_from > date_to:
        raise InvalidInputError("date_from must not be after date_to")
    logs = await fetch_logs(store)
    return filter_logs(logs, status=status, date_from=date_from, date_to=date_to)
