"""Pydantic entities and request schemas."""
from periodlog.models.user import User, UserRole, UserCreate, UserProfileUpdate
from periodlog.models.log import (
    ACTIVITY_HINTS,
    PERIODS,
    TERMINAL_STATUSES,
    ActivityType,
    ApprovalStatus,
    LogCreate,
    LogEntry,
    LogReview,
    ReflectionRequest,
)

__all__ = [
    "User",
    "UserRole",
    "UserCreate",
    "UserProfileUpdate",
    "ACTIVITY_HINTS",
    "PERIODS",
    "TERMINAL_STATUSES",
    "ActivityType",
    "ApprovalStatus",
    "LogCreate",
    "LogEntry",
    "LogReview",
    "ReflectionRequest",
]
