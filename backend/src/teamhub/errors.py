"""Error taxonomy shared by services and the API boundary.

Every failure a service can report is an ``ApiError`` subclass. The public
``error_code`` is what the API returns to clients; the message and the
wrapped ``original_error`` only ever reach the server log.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Stable error codes returned by the API."""
    INTERNAL_SERVER_ERROR = "internal_server_error"
    INCORRECT_DATA = "incorrect_data"  # Corrupted data or a tampered request
    INCORRECT_USER_ID = "incorrect_user_id"
    INCORRECT_TEAM_ID = "incorrect_team_id"
    INCORRECT_TODO_ID = "incorrect_todo_id"
    INCORRECT_MEMBER_ID = "incorrect_member_id"
    NOT_MEMBER = "not_member"
    ALREADY_MEMBER = "already_member"
    INCORRECT_PERMISSION = "incorrect_permission"
    INCORRECT_CODE = "incorrect_code"  # Invitation verification code
    INCORRECT_STRIPE_SIGNATURE = "incorrect_stripe_signature"
    INCORRECT_STRIPE_EVENT = "incorrect_stripe_event"
    INCORRECT_STRIPE_RESULT = "incorrect_stripe_result"


class ApiError(Exception):
    """Base error for everything the API reports.

    Args:
        message: Internal message, logged but never returned to the client
        original_error: Wrapped exception when re-raising a lower level error
    """

    error_code: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR
    status_code: int = 500

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    @property
    def is_internal(self) -> bool:
        return self.status_code >= 500


# ─── Integrity faults ────────────────────────────────────────────────────────

class UnknownUser(ApiError):
    """The upstream-verified user has no record."""
    error_code = ErrorCode.INCORRECT_USER_ID
    status_code = 500


class UnknownTeam(ApiError):
    error_code = ErrorCode.INCORRECT_TEAM_ID
    status_code = 404


class UnknownMember(ApiError):
    error_code = ErrorCode.INCORRECT_MEMBER_ID
    status_code = 404


class UnknownTodo(ApiError):
    error_code = ErrorCode.INCORRECT_TODO_ID
    status_code = 404


class EmptyMembership(ApiError):
    """A deleted team had no membership left to cascade."""
    error_code = ErrorCode.INCORRECT_DATA
    status_code = 500


# ─── Authorization denials ───────────────────────────────────────────────────

class NotMember(ApiError):
    error_code = ErrorCode.NOT_MEMBER
    status_code = 403


class InsufficientPermission(ApiError):
    error_code = ErrorCode.INCORRECT_PERMISSION
    status_code = 403


# ─── Invitation and request faults ───────────────────────────────────────────

class AlreadyMember(ApiError):
    error_code = ErrorCode.ALREADY_MEMBER
    status_code = 409


class InvalidCode(ApiError):
    error_code = ErrorCode.INCORRECT_CODE
    status_code = 400


class InvalidData(ApiError):
    error_code = ErrorCode.INCORRECT_DATA
    status_code = 400


class InvalidInvite(InvalidData):
    """Invitation with a role that cannot be invited."""


# ─── Billing boundary ────────────────────────────────────────────────────────

class InvalidSignature(ApiError):
    error_code = ErrorCode.INCORRECT_STRIPE_SIGNATURE
    status_code = 400


class UnrecognizedEvent(ApiError):
    error_code = ErrorCode.INCORRECT_STRIPE_EVENT
    status_code = 400


class MalformedResult(ApiError):
    error_code = ErrorCode.INCORRECT_STRIPE_RESULT
    status_code = 500
