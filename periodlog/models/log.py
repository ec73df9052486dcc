"""Per-period activity logs and their approval status."""
import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class ActivityType(str, Enum):
    CLASS = "Class"
    OFFICE_WORK = "Office Work"
    FREE_PERIOD = "Free Period (Not Used)"
    PROXY = "Proxy Class"
    OTHER = "Something Else"


class ApprovalStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


TERMINAL_STATUSES = frozenset({ApprovalStatus.APPROVED, ApprovalStatus.REJECTED})

PERIODS: list[str] = [
    "Period 1 (08:00 - 09:00)",
    "Period 2 (09:00 - 10:00)",
    "Period 3 (10:15 - 11:15)",
    "Period 4 (11:15 - 12:15)",
    "Lunch Break",
    "Period 5 (13:00 - 14:00)",
    "Period 6 (14:00 - 15:00)",
]

# Shown as the description placeholder for each activity type
ACTIVITY_HINTS: dict[ActivityType, str] = {
    ActivityType.CLASS: "E.g., Taught Chapter 4, Algebra basics. Students were engaged.",
    ActivityType.OFFICE_WORK: "E.g., Graded exam papers for Class 10B.",
    ActivityType.FREE_PERIOD: "E.g., Since I didn't take a class, I prepared lesson plans for tomorrow.",
    ActivityType.PROXY: "E.g., Covered Class 8A for an absent colleague, revised fractions.",
    ActivityType.OTHER: "E.g., Organized the science fair committee meeting.",
}


class LogEntry(BaseModel):
    """One activity record for one period.

    ``author_name`` is copied from the author's profile at submission time and
    is not re-synced if the profile name changes later.
    """

    id: str
    author_id: str
    author_name: str
    date: datetime.date
    period: str
    activity_type: ActivityType
    description: str
    status: ApprovalStatus = ApprovalStatus.PENDING
    feedback: Optional[str] = None
    timestamp: int  # epoch milliseconds


class LogCreate(BaseModel):
    period: str
    activity_type: str
    description: str


class LogReview(BaseModel):
    status: ApprovalStatus
    feedback: Optional[str] = None


class ReflectionRequest(BaseModel):
    activity_type: str
    description: str
    notes: str = ""
