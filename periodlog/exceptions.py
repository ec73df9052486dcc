"""Application exceptions, converted to HTTP responses in the API layer."""
from typing import Optional


class PeriodLogError(Exception):
    """Base exception for all period log errors."""


class InvalidInputError(PeriodLogError):
    """Raised when caller input is rejected before any write happens."""


class PermissionDeniedError(PeriodLogError):
    """Raised when the acting user's role lacks a permission."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"Missing {action} permission")


class LogNotFoundError(PeriodLogError):
    """Raised when a log id does not exist in the store."""

    def __init__(self, log_id: str):
        self.log_id = log_id
        super().__init__(f"Log '{log_id}' not found")


class UserNotFoundError(PeriodLogError):
    """Raised when a user profile id does not exist in the store."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User '{user_id}' not found")


class InvalidTransitionError(PeriodLogError):
    """Raised when a status change is not allowed from the record's current status."""


class StoreError(PeriodLogError):
    """Raised when the remote table store fails or is unreachable."""


IDENTITY_ERROR_MESSAGES: dict[str, str] = {
    "INVALID_LOGIN_CREDENTIALS": "Password or Email Incorrect",
    "INVALID_PASSWORD": "Password or Email Incorrect",
    "EMAIL_NOT_FOUND": "No user found with this email address.",
    "EMAIL_EXISTS": "User already exists. Sign in ?",
    "INVALID_EMAIL": "Invalid email format.",
    "WEAK_PASSWORD": "Password should be at least 6 characters.",
    "USER_DISABLED": "This account has been disabled.",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts. Try again later.",
    "INVALID_ID_TOKEN": "Your session has expired. Please sign in again.",
    "EMAIL_NOT_VERIFIED": "Please verify your email before signing in.",
}
GENERIC_IDENTITY_MESSAGE = "Authentication failed. Please try again."


class IdentityError(PeriodLogError):
    """Raised by the identity provider; ``code`` is the provider's error code."""

    def __init__(self, code: str, detail: Optional[str] = None):
        self.code = code
        self.detail = detail
        super().__init__(detail or code)

    @property
    def user_message(self) -> str:
        return IDENTITY_ERROR_MESSAGES.get(self.code, GENERIC_IDENTITY_MESSAGE)
