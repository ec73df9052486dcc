"""Role permission registry and role display options."""
from __future__ import annotations

from typing import Literal

from periodlog.models.user import UserRole

Action = Literal[
    "logs.submit",
    "logs.view_own",
    "logs.view_all",
    "logs.review",
    "logs.reopen",
    "logs.export",
    "analytics.view",
    "ai.summary",
    "ai.feedback",
]

REVIEWER_ROLES: frozenset[UserRole] = frozenset({UserRole.PRINCIPAL})


def _staff_actions() -> frozenset[str]:
    return frozenset({"logs.submit", "logs.view_own", "ai.feedback"})


def _reviewer_actions() -> frozenset[str]:
    return frozenset(
        {"logs.view_all", "logs.review", "logs.reopen", "logs.export", "analytics.view", "ai.summary"}
    )


ROLE_PERMISSIONS: dict[UserRole, frozenset[str]] = {
    UserRole.TEACHER: _staff_actions(),
    UserRole.OFFICIAL: _staff_actions(),
    UserRole.OTHER: _staff_actions(),
    UserRole.PRINCIPAL: _reviewer_actions(),
}

ROLE_DISPLAY: dict[UserRole, dict[str, str]] = {
    UserRole.TEACHER: {"label": "Teacher", "dashboard": "TEACHER DASHBOARD", "icon": "graduation-cap", "color": "emerald"},
    UserRole.PRINCIPAL: {"label": "Principal", "dashboard": "PRINCIPAL DASHBOARD", "icon": "shield-check", "color": "orange"},
    UserRole.OFFICIAL: {"label": "Official", "dashboard": "OFFICIAL DASHBOARD", "icon": "briefcase", "color": "green"},
    UserRole.OTHER: {"label": "Other Staff", "dashboard": "STAFF DASHBOARD", "icon": "users", "color": "amber"},
}


def has_permission(role: UserRole | str | None, action: str) -> bool:
    if role is None:
        return False
    try:
        role = UserRole(role)
    except ValueError:
        return False
    return action in ROLE_PERMISSIONS.get(role, frozenset())


def role_options() -> list[dict[str, str]]:
    return [{"role": role.value, **ROLE_DISPLAY[role]} for role in UserRole]
