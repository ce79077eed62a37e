"""Error taxonomy shared by the services and the HTTP layer.

Every error carries the HTTP status it maps to and the message sent to the
client as ``{"error": message}``.
"""

from typing import Optional


class ExpenseTrackerError(Exception):
    """Base class for errors reported to API clients."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ExpenseTrackerError):
    """Missing or malformed input."""

    status_code = 400
    default_message = "Invalid input"


class UsernameTakenError(ValidationError):
    default_message = "Username already taken"


class UnauthenticatedError(ExpenseTrackerError):
    """No credential was presented."""

    status_code = 401
    default_message = "Access denied"


class InvalidTokenError(ExpenseTrackerError):
    """Bearer token is malformed, expired or signed with another key."""

    status_code = 400
    default_message = "Invalid token"


class InvalidCredentialsError(ExpenseTrackerError):
    status_code = 400
    default_message = "Invalid password"


class AccountNotFoundError(InvalidCredentialsError):
    default_message = "User not found"


class NotFoundError(ExpenseTrackerError):
    """Record is absent or owned by another account."""

    status_code = 404
    default_message = "Expense not found"


class InternalError(ExpenseTrackerError):
    """Storage or unexpected failure. The message never carries storage detail."""

    status_code = 500
