# nurse_roster/core/errors.py

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    """Recoverable failure kinds surfaced to callers."""
    AUTH_ERROR = "AUTH_ERROR"
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    INSUFFICIENT_RANK = "INSUFFICIENT_RANK"
    DUPLICATE_USERNAME = "DUPLICATE_USERNAME"
    NO_APPROVER = "NO_APPROVER"
    SELF_APPROVAL_FORBIDDEN = "SELF_APPROVAL_FORBIDDEN"
    ALREADY_RESOLVED = "ALREADY_RESOLVED"
    NOT_FOUND = "NOT_FOUND"
    INVALID_INPUT = "INVALID_INPUT"


# Default human-readable messages (UI shows these when no detail is given)
DEFAULT_MESSAGES = {
    ErrorKind.AUTH_ERROR: "Invalid username or password.",
    ErrorKind.NOT_AUTHENTICATED: "Please login to continue.",
    ErrorKind.INSUFFICIENT_RANK: "Your role does not allow this action.",
    ErrorKind.DUPLICATE_USERNAME: "Username already exists. Choose another.",
    ErrorKind.NO_APPROVER: "No higher approver role available for this user.",
    ErrorKind.SELF_APPROVAL_FORBIDDEN: "You cannot act on a request you created.",
    ErrorKind.ALREADY_RESOLVED: "This request has already been resolved.",
    ErrorKind.NOT_FOUND: "Record not found.",
    ErrorKind.INVALID_INPUT: "Invalid input.",
}


# ==================================================
# EXCEPTIONS (raised inside the core only)
# ==================================================

class RosterError(Exception):
    """Base class for every recoverable core failure."""

    kind: ErrorKind = ErrorKind.INVALID_INPUT

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or DEFAULT_MESSAGES[self.kind])


class AuthError(RosterError):
    """Raised when credentials do not match any nurse."""
    kind = ErrorKind.AUTH_ERROR


class NotAuthenticated(RosterError):
    """Raised when an action needs a logged-in actor."""
    kind = ErrorKind.NOT_AUTHENTICATED


class InsufficientRank(RosterError):
    """Raised when the actor's role is not high enough (or not the approver role)."""
    kind = ErrorKind.INSUFFICIENT_RANK


class DuplicateUsername(RosterError):
    kind = ErrorKind.DUPLICATE_USERNAME


class NoApprover(RosterError):
    """Raised when the apex role tries to raise a self-service request."""
    kind = ErrorKind.NO_APPROVER


class SelfApprovalForbidden(RosterError):
    kind = ErrorKind.SELF_APPROVAL_FORBIDDEN


class AlreadyResolved(RosterError):
    kind = ErrorKind.ALREADY_RESOLVED


class NotFound(RosterError):
    kind = ErrorKind.NOT_FOUND


class InvalidInput(RosterError):
    kind = ErrorKind.INVALID_INPUT


_EXCEPTION_BY_KIND = {
    cls.kind: cls
    for cls in (
        AuthError,
        NotAuthenticated,
        InsufficientRank,
        DuplicateUsername,
        NoApprover,
        SelfApprovalForbidden,
        AlreadyResolved,
        NotFound,
        InvalidInput,
    )
}


def error_for(kind: ErrorKind, message: Optional[str] = None) -> RosterError:
    """Build the exception matching a policy denial reason."""
    return _EXCEPTION_BY_KIND[kind](message)


# ==================================================
# TYPED OUTCOME (returned across the service boundary)
# ==================================================

@dataclass(frozen=True)
class Outcome:
    """
    Result of a service command.

    Exactly one of `value` / `error` is meaningful:
    ok=True carries the value, ok=False carries the error kind and message.
    """
    ok: bool
    value: Any = None
    error: Optional[ErrorKind] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, value: Any = None) -> "Outcome":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, exc: RosterError) -> "Outcome":
        return cls(ok=False, error=exc.kind, message=str(exc))
