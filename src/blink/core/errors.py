"""Error handling module for blink.

This module defines error codes, exception classes, and response models.

Error Response Format:
{
    "code": "ACCESS_DENIED",
    "message": "Operation not allowed on resource '/workspaces/abc'."
}

Usage:
    from blink.core.errors import AccessDeniedError, BlinkNotFoundError

    # Raise with the resource path
    raise AccessDeniedError(f"/workspaces/{workspace_id}")

    # Raise with the missing id
    raise BlinkNotFoundError(blink_id)
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Error codes."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    ACCESS_DENIED = "ACCESS_DENIED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    REDIRECT_ID_GENERATION_EXHAUSTED = "REDIRECT_ID_GENERATION_EXHAUSTED"
    UNKNOWN = "UNKNOWN"


class ValidationIssue(BaseModel):
    """Single input validation problem."""

    loc: list[str | int]
    type: str
    message: str


class ErrorResponse(BaseModel):
    """Error response format."""

    code: str
    message: str
    issues: list[ValidationIssue] | None = None


class BlinkError(Exception):
    """Base exception for blink.

    All blink specific exceptions should inherit from this class.
    This enables centralized exception handling in FastAPI.

    Attributes:
        code: The error code from ErrorCode enum
        message: Human-readable error message
        status_code: HTTP status code to return
    """

    def __init__(self, code: ErrorCode, message: str, status_code: int) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert exception to ErrorResponse model."""
        return ErrorResponse(code=self.code.value, message=self.message)


# =============================================================================
# 400
# =============================================================================


class ValidationFailedError(BlinkError):
    """400 Bad Request - Input shape rejected."""

    def __init__(
        self,
        message: str = "Validation failed",
        issues: list[ValidationIssue] | None = None,
    ) -> None:
        self.issues = issues or []
        super().__init__(ErrorCode.VALIDATION_FAILED, message, 400)

    @classmethod
    def from_pydantic(cls, errors: list[dict[str, Any]]) -> "ValidationFailedError":
        """Build from pydantic/FastAPI error dicts."""
        issues = [
            ValidationIssue(
                loc=list(error.get("loc", ())),
                type=error.get("type", "value_error"),
                message=error.get("msg", ""),
            )
            for error in errors
        ]
        return cls(issues=issues)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            code=self.code.value, message=self.message, issues=self.issues
        )


class RedirectIdReservedError(ValidationFailedError):
    """400 - Redirect id collides with one of the app's own top-level routes."""

    def __init__(self, redirect_id: str) -> None:
        message = f"Blink redirect '{redirect_id}' is reserved."
        super().__init__(
            message,
            issues=[
                ValidationIssue(
                    loc=["body", "redirectId"], type="value_error", message=message
                )
            ],
        )


# =============================================================================
# 401 / 403
# =============================================================================


class AuthenticationRequiredError(BlinkError):
    """401 Unauthorized - No credential presented."""

    def __init__(
        self, message: str = "Authentication is required to access this resource."
    ) -> None:
        super().__init__(ErrorCode.AUTHENTICATION_REQUIRED, message, 401)


class InvalidCredentialsError(BlinkError):
    """401 Unauthorized - Credential presented but wrong, expired or forged.

    The message is the same for every sub-case.
    """

    def __init__(self, message: str = "Authentication credentials are not valid.") -> None:
        super().__init__(ErrorCode.INVALID_CREDENTIALS, message, 401)


class AccessDeniedError(BlinkError):
    """403 Forbidden - Authenticated but not allowed.

    Also raised for resources that do not exist, so callers cannot tell
    the two cases apart.
    """

    def __init__(self, resource: str) -> None:
        self.resource = resource
        super().__init__(
            ErrorCode.ACCESS_DENIED,
            f"Operation not allowed on resource '{resource}'.",
            403,
        )


# =============================================================================
# 404
# =============================================================================


class NotFoundError(BlinkError):
    """404 Not Found - Addressed entity absent."""

    def __init__(self, message: str = "Resource not found.") -> None:
        super().__init__(ErrorCode.NOT_FOUND, message, 404)


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str) -> None:
        super().__init__(f"User '{user_id}' not found.")


class WorkspaceNotFoundError(NotFoundError):
    def __init__(self, workspace_id: str) -> None:
        super().__init__(f"Workspace '{workspace_id}' not found.")


class WorkspaceMemberNotFoundError(NotFoundError):
    def __init__(self, member_id: str) -> None:
        super().__init__(f"Workspace member '{member_id}' not found.")


class BlinkNotFoundError(NotFoundError):
    def __init__(self, blink_id: str) -> None:
        super().__init__(f"Blink '{blink_id}' not found.")


class RedirectNotFoundError(NotFoundError):
    def __init__(self, redirect_id: str) -> None:
        super().__init__(f"Blink with redirect '{redirect_id}' not found.")


# =============================================================================
# 409
# =============================================================================


class ConflictError(BlinkError):
    """409 Conflict - Uniqueness or membership invariant violated."""

    def __init__(self, message: str = "Conflict.") -> None:
        super().__init__(ErrorCode.CONFLICT, message, 409)


class EmailAlreadyInUseError(ConflictError):
    def __init__(self, email: str) -> None:
        super().__init__(f"Email '{email}' is already in use.")


class RedirectIdConflictError(ConflictError):
    """Redirect ids are unique across all workspaces."""

    def __init__(self, redirect_id: str) -> None:
        super().__init__(f"Blink redirect '{redirect_id}' already exists.")


class WorkspaceMemberAlreadyExistsError(ConflictError):
    def __init__(self, user_id: str) -> None:
        super().__init__(f"User '{user_id}' is already a member of the workspace.")


class WorkspaceLastMemberError(ConflictError):
    def __init__(self, member_id: str) -> None:
        super().__init__(
            f"Workspace member '{member_id}' is the last member of the workspace."
        )


class WorkspaceLastAdministratorError(ConflictError):
    def __init__(self, member_id: str) -> None:
        super().__init__(
            f"Workspace member '{member_id}' is the last administrator of the workspace."
        )


# =============================================================================
# 500
# =============================================================================


class RedirectIdGenerationExhaustedError(BlinkError):
    """500 - Every generated candidate collided.

    Means the id length or retry bound needs tuning, not a client error.
    """

    def __init__(self, message: str = "Could not generate a unique blink redirect.") -> None:
        super().__init__(ErrorCode.REDIRECT_ID_GENERATION_EXHAUSTED, message, 500)


class InternalError(BlinkError):
    """500 - Catch-all for unexpected failures."""

    def __init__(self, message: str = "An unexpected error occurred.") -> None:
        super().__init__(ErrorCode.UNKNOWN, message, 500)
