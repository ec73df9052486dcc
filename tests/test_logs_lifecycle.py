from datetime import date, datetime, timedelta

import pytest

from periodlog.exceptions import (
    InvalidInputError,
    InvalidTransitionError,
    LogNotFoundError,
    PermissionDeniedError,
    StoreError,
)
from periodlog.models.log import PERIODS, ApprovalStatus, LogCreate
from periodlog.services import logs as lifecycle
from periodlog.services.calendar import school_tz

from tests.conftest import run

NOW = datetime(2026, 10, 19, 9, 30, tzinfo=school_tz())


def _create(description="Taught chapter 4", period=PERIODS[0], activity="Class"):
    return LogCreate(period=period, activity_type=activity, description=description)


def _submit(store, author, now=NOW, **kwargs):
    return run(lifecycle.submit_log(store, author, _create(**kwargs), now=now))


def test_submit_creates_pending_log(store, teacher):
    log = _submit(store, teacher)

    assert log.status == ApprovalStatus.PENDING
    assert log.feedback is None
    assert log.author_id == teacher.id
    assert log.author_name == teacher.name
    assert log.date == date(2026, 10, 19)
    assert store.tables["logs"][log.id]["teacher_id"] == teacher.id


def test_submissions_get_unique_ids(store, teacher):
    ids = {_submit(store, teacher).id for _ in range(5)}
    assert len(ids) == 5


def test_description_is_trimmed(store, teacher):
    assert _submit(store, teacher, description="  Graded papers \n").description == "Graded papers"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"description": "   "},
        {"period": "Period 9"},
        {"activity": "Nap"},
    ],
)
def test_invalid_submission_is_rejected_without_writing(store, teacher, kwargs):
    with pytest.raises(InvalidInputError):
        _submit(store, teacher, **kwargs)
    assert store.tables["logs"] == {}


def test_principal_cannot_submit(store, principal):
    with pytest.raises(PermissionDeniedError):
        _submit(store, principal)


def test_approve_sets_status_and_optional_feedback(store, teacher, principal):
    log = _submit(store, teacher)
    reviewed = run(lifecycle.review_log(store, principal, log.id, ApprovalStatus.APPROVED))

    assert reviewed.status == ApprovalStatus.APPROVED
    assert reviewed.feedback is None
    assert store.tables["logs"][log.id]["status"] == "APPROVED"


def test_reject_requires_feedback(store, teacher, principal):
    log = _submit(store, teacher)
    with pytest.raises(InvalidInputError):
        run(lifecycle.review_log(store, principal, log.id, ApprovalStatus.REJECTED, "  "))
    assert store.tables["logs"][log.id]["status"] == "PENDING"


def test_reject_stores_feedback(store, teacher, principal):
    log = _submit(store, teacher)
    reviewed = run(lifecycle.review_log(store, principal, log.id, ApprovalStatus.REJECTED, "Missing detail"))

    assert reviewed.status == ApprovalStatus.REJECTED
    assert store.tables["logs"][log.id]["feedback"] == "Missing detail"


def test_terminal_log_cannot_be_reviewed_again(store, teacher, principal):
    log = _submit(store, teacher)
    run(lifecycle.review_log(store, principal, log.id, ApprovalStatus.APPROVED))

    with pytest.raises(InvalidTransitionError):
        run(lifecycle.review_log(store, principal, log.id, ApprovalStatus.REJECTED, "Changed my mind"))
    assert store.tables["logs"][log.id]["status"] == "APPROVED"


def test_review_cannot_set_pending(store, teacher, principal):
    log = _submit(store, teacher)
    with pytest.raises(InvalidTransitionError):
        run(lifecycle.review_log(store, principal, log.id, ApprovalStatus.PENDING))


def test_teacher_cannot_review(store, teacher):
    log = _submit(store, teacher)
    with pytest.raises(PermissionDeniedError):
        run(lifecycle.review_log(store, teacher, log.id, ApprovalStatus.APPROVED))


def test_review_unknown_log(store, principal):
    with pytest.raises(LogNotFoundError):
        run(lifecycle.review_log(store, principal, "missing", ApprovalStatus.APPROVED))


def test_reopen_returns_log_to_pending_and_clears_feedback(store, teacher, principal):
    log = _submit(store, teacher)
    run(lifecycle.review_log(store, principal, log.id, ApprovalStatus.REJECTED, "Missing detail"))

    reopened = run(lifecycle.reopen_log(store, principal, log.id))

    assert reopened.status == ApprovalStatus.PENDING
    assert reopened.feedback is None
    assert store.tables["logs"][log.id]["feedback"] is None
    again = run(lifecycle.review_log(store, principal, log.id, ApprovalStatus.APPROVED))
    assert again.status == ApprovalStatus.APPROVED


def test_reopen_pending_log_is_invalid(store, teacher, principal):
    log = _submit(store, teacher)
    with pytest.raises(InvalidTransitionError):
        run(lifecycle.reopen_log(store, principal, log.id))


def test_failed_write_leaves_log_unchanged(store, teacher, principal):
    log = _submit(store, teacher)
    store.fail_writes = True

    with pytest.raises(StoreError):
        run(lifecycle.review_log(store, principal, log.id, ApprovalStatus.APPROVED))

    store.fail_writes = False
    assert run(lifecycle.get_log(store, log.id)).status == ApprovalStatus.PENDING


def test_own_listing_is_scoped_and_newest_first(store, teacher, other_teacher):
    first = _submit(store, teacher, now=NOW)
    _submit(store, other_teacher, now=NOW + timedelta(minutes=1))
    second = _submit(store, teacher, now=NOW + timedelta(minutes=2))

    mine = run(lifecycle.list_own_logs(store, teacher))

    assert [log.id for log in mine] == [second.id, first.id]


def test_all_listing_filters_by_status_and_inclusive_dates(store, teacher, principal):
    old = _submit(store, teacher, now=NOW - timedelta(days=3))
    mid = _submit(store, teacher, now=NOW - timedelta(days=1))
    new = _submit(store, teacher, now=NOW)
    run(lifecycle.review_log(store, principal, mid.id, ApprovalStatus.APPROVED))

    pending = run(lifecycle.list_all_logs(store, principal, status=ApprovalStatus.PENDING))
    assert [log.id for log in pending] == [new.id, old.id]

    ranged = run(
        lifecycle.list_all_logs(store, principal, date_from=mid.date, date_to=new.date)
    )
    assert [log.id for log in ranged] == [new.id, mid.id]


def test_all_listing_rejects_inverted_range(store, principal):
    with pytest.raises(InvalidInputError):
        run(lifecycle.list_all_logs(store, principal, date_from=date(2026, 10, 20), date_to=date(2026, 10, 1)))


def test_teacher_cannot_list_all(store, teacher):
    with pytest.raises(PermissionDeniedError):
        run(lifecycle.list_all_logs(store, teacher))


def test_sort_recent_is_stable_for_equal_timestamps(store, teacher):
    a = _submit(store, teacher)
    b = _submit(store, teacher)
    assert lifecycle.sort_recent([a, b]) == [a, b]
    assert lifecycle.sort_recent([b, a]) == [b, a]
