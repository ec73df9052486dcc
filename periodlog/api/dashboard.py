from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends

from periodlog.api.deps import Store, require_permission
from periodlog.config import settings
from periodlog.models.user import User
from periodlog.services.analytics import dashboard_stats
from periodlog.services.calendar import school_today, school_tz
from periodlog.services.logs import fetch_logs
from periodlog.services.summary import generate_daily_summary

router = APIRouter()

AnalyticsViewer = Annotated[User, Depends(require_permission("analytics.view"))]
SummaryViewer = Annotated[User, Depends(require_permission("ai.summary"))]


@router.get("/stats")
async def get_stats(user: AnalyticsViewer, store: Store) -> Dict[str, Any]:
    """Chart data for the principal dashboard."""
    logs = await fetch_logs(store)
    tz = school_tz()
    return dashboard_stats(
        logs,
        today=school_today(tz),
        tz=tz,
        trend_days=settings.trend_days,
        leaderboard_size=settings.leaderboard_size,
    )


@router.post("/summary")
async def get_summary(user: SummaryViewer, store: Store) -> Dict[str, str]:
    """AI synopsis of today's logs; falls back to a fixed message when unavailable."""
    logs = await fetch_logs(store)
    tz = school_tz()
    return {"summary": await generate_daily_summary(logs, today=school_today(tz), tz=tz)}
