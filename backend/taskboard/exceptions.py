"""Custom exceptions for the taskboard backend.

Each exception carries a machine-readable code from
``taskboard.constants.error_codes``; the user-facing text is resolved from
that catalog in the configured locale when the error is rendered.
"""

from typing import Any

from taskboard.constants.error_codes import get_error_message, is_retryable


class TaskboardError(Exception):
    """Base exception for all taskboard application errors."""

    code: str = "INTERNAL_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        status_code: int | None = None,
        **params: Any,
    ):
        if code:
            self.code = code
        if status_code:
            self.status_code = status_code
        self.params = params
        self._message = message
        super().__init__(message or self.code)

    def get_message(self, locale: str = "en") -> str:
        """Explicit message if one was given, else the catalog text."""
        if self._message:
            return self._message
        return get_error_message(self.code, locale, **self.params)

    @property
    def message(self) -> str:
        return self.get_message()

    def to_response(self, locale: str = "en") -> dict[str, Any]:
        return {
            "detail": self.get_message(locale),
            "code": self.code,
            "retryable": is_retryable(self.code),
        }


# =============================================================================
# Authorization Errors (401/403/404)
# =============================================================================


class UnauthorizedError(TaskboardError):
    code = "UNAUTHORIZED"
    status_code = 401


class ProjectAccessError(TaskboardError):
    """Project missing or caller is not a member.

    Both cases share one response so that non-members cannot probe which
    project ids exist.
    """

    code = "PROJECT_ACCESS_DENIED"
    status_code = 404


class PermissionDeniedError(TaskboardError):
    """Caller is a member but their role is too low for the action."""

    code = "PERMISSION_DENIED"
    status_code = 403


class OwnerOnlyError(PermissionDeniedError):
    code = "OWNER_ONLY"


class OwnerRoleImmutableError(PermissionDeniedError):
    code = "OWNER_ROLE_IMMUTABLE"


class OwnerCannotBeRemovedError(PermissionDeniedError):
    code = "OWNER_CANNOT_BE_REMOVED"


class AdminCannotRemoveAdminError(PermissionDeniedError):
    code = "ADMIN_CANNOT_REMOVE_ADMIN"


# =============================================================================
# Resource Not Found Errors (404)
# =============================================================================


class ResourceNotFoundError(TaskboardError):
    """Base class for resource not found errors."""

    code = "NOT_FOUND"
    status_code = 404


class TaskNotFoundError(ResourceNotFoundError):
    code = "TASK_NOT_FOUND"


class MemberNotFoundError(ResourceNotFoundError):
    code = "MEMBER_NOT_FOUND"


class InvitationNotFoundError(ResourceNotFoundError):
    code = "INVITATION_NOT_FOUND"


# =============================================================================
# Validation Errors (400)
# =============================================================================


class ValidationError(TaskboardError):
    """Base class for validation errors."""

    code = "VALIDATION_ERROR"
    status_code = 400


class AssigneeNotMemberError(ValidationError):
    code = "ASSIGNEE_NOT_MEMBER"


class InvalidRoleError(ValidationError):
    code = "INVALID_ROLE"


class InvitationExpiredError(ValidationError):
    code = "INVITATION_EXPIRED"


class InvitationEmailMismatchError(ValidationError):
    code = "INVITATION_EMAIL_MISMATCH"


class PublicInvitationNotDeclinableError(ValidationError):
    code = "PUBLIC_INVITATION_NOT_DECLINABLE"


class CannotInviteSelfError(ValidationError):
    code = "CANNOT_INVITE_SELF"


# =============================================================================
# Conflict Errors (409)
# =============================================================================


class ConflictError(TaskboardError):
    """Base class for conflict errors."""

    code = "CONFLICT"
    status_code = 409


class AlreadyMemberError(ConflictError):
    code = "ALREADY_MEMBER"


class InvitationAlreadySentError(ConflictError):
    code = "INVITATION_ALREADY_SENT"


class InvitationAlreadyUsedError(ConflictError):
    code = "INVITATION_ALREADY_USED"


# =============================================================================
# Rate limiting / upstream errors (429/502/503)
# =============================================================================


class RateLimitedError(TaskboardError):
    code = "RATE_LIMITED"
    status_code = 429

    def __init__(self, reset_in: int):
        self.reset_in = reset_in
        super().__init__(reset_in=reset_in)


class AIServiceError(TaskboardError):
    """Upstream LLM call failed.

    ``upstream_status`` is the provider's HTTP status (or 500 for a
    malformed reply) and selects the user-facing message.
    """

    status_code = 502

    def __init__(self, upstream_status: int, details: str):
        self.upstream_status = upstream_status
        self.details = details
        super().__init__(code=self._code_for(upstream_status))

    @staticmethod
    def _code_for(upstream_status: int) -> str:
        if upstream_status == 429:
            return "AI_RATE_LIMITED"
        if upstream_status == 401:
            return "AI_AUTH_ERROR"
        if upstream_status == 500:
            return "AI_SERVER_ERROR"
        return "AI_GENERATION_ERROR"

    def __str__(self) -> str:
        return f"AI Error ({self.upstream_status}): {self.details}"


class AIInvalidResponseError(TaskboardError):
    code = "AI_INVALID_RESPONSE"
    status_code = 502


class ServiceUnavailableError(TaskboardError):
    """Transient backend failure."""

    code = "SERVICE_UNAVAILABLE"
    status_code = 503
