"""Period logs: submission, review and export."""
import io
from datetime import date
from typing import Annotated, Literal, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from periodlog.api.deps import CurrentUser, Store, require_permission
from periodlog.models.log import ACTIVITY_HINTS, PERIODS, ApprovalStatus, LogCreate, LogEntry, LogReview, ReflectionRequest
from periodlog.models.user import User
from periodlog.services import logs as lifecycle
from periodlog.services.calendar import school_today, school_tz
from periodlog.services.export import export_filename, logs_to_csv, logs_to_excel
from periodlog.services.summary import generate_log_feedback

router = APIRouter()

Exporter = Annotated[User, Depends(require_permission("logs.export"))]
FeedbackSeeker = Annotated[User, Depends(require_permission("ai.feedback"))]


@router.get("/options")
async def log_options(user: CurrentUser):
    """Form choices for the submission screen."""
    return {
        "periods": PERIODS,
        "activity_types": [{"value": a.value, "hint": ACTIVITY_HINTS[a]} for a in ACTIVITY_HINTS],
        "statuses": [s.value for s in ApprovalStatus],
    }


@router.get("/mine", response_model=list[LogEntry])
async def list_my_logs(user: CurrentUser, store: Store):
    return await lifecycle.list_own_logs(store, user)


@router.post("/", status_code=201, response_model=LogEntry)
async def submit_log(data: LogCreate, user: CurrentUser, store: Store):
    return await lifecycle.submit_log(store, user, data)


@router.get("/", response_model=list[LogEntry])
async def list_logs(
    user: CurrentUser,
    store: Store,
    status: Optional[ApprovalStatus] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
):
    """All logs for reviewers, newest first; the date range is inclusive."""
    return await lifecycle.list_all_logs(store, user, status=status, date_from=date_from, date_to=date_to)


@router.post("/{log_id}/review", response_model=LogEntry)
async def review_log(log_id: str, data: LogReview, user: CurrentUser, store: Store):
    return await lifecycle.review_log(store, user, log_id, data.status, data.feedback)


@router.post("/{log_id}/reopen", response_model=LogEntry)
async def reopen_log(log_id: str, user: CurrentUser, store: Store):
    return await lifecycle.reopen_log(store, user, log_id)


@router.get("/export")
async def export_logs(
    user: Exporter,
    store: Store,
    format: Literal["csv", "excel"] = Query("csv"),
):
    """Download every log, newest first."""
    logs = await lifecycle.fetch_logs(store)
    tz = school_tz()
    today = school_today(tz)

    if format == "csv":
        return StreamingResponse(
            iter([logs_to_csv(logs, tz=tz)]),
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": f"attachment; filename={export_filename(today, 'csv')}"},
        )
    return StreamingResponse(
        io.BytesIO(logs_to_excel(logs, tz=tz)),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename={export_filename(today, 'xlsx')}"},
    )


@router.post("/reflection")
async def reflection_feedback(data: ReflectionRequest, user: FeedbackSeeker):
    """Short AI coaching note on one activity; always answers, even offline."""
    return {"feedback": await generate_log_feedback(data.activity_type, data.description, data.notes)}
