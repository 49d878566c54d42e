"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes surfaced to callers."""

    # Identity
    AUTH_REQUIRED = "AUTH_REQUIRED"
    FORBIDDEN = "FORBIDDEN"

    # Input
    VALIDATION_FAILED = "VALIDATION_FAILED"

    # Lookups
    NOT_FOUND = "NOT_FOUND"
    GROUP_NOT_FOUND = "GROUP_NOT_FOUND"
    POST_NOT_FOUND = "POST_NOT_FOUND"
    COMMENT_NOT_FOUND = "COMMENT_NOT_FOUND"

    # Membership
    CREATOR_CANNOT_JOIN = "CREATOR_CANNOT_JOIN"

    # Backend / transport
    SERVICE_ERROR = "SERVICE_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.details = details
        super().__init__(self.message)


class AuthRequiredError(AppException):
    """No current-user identity for an operation that needs one."""

    def __init__(self, message: str = "You must be signed in") -> None:
        super().__init__(
            error_code=ErrorCode.AUTH_REQUIRED,
            message=message,
        )


class ForbiddenError(AppException):
    """The requester does not own the record."""

    def __init__(self, message: str = "You do not have permission to change this") -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
        )


class ValidationFailedError(AppException):
    """Input violates one or more validation rules."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(
            error_code=ErrorCode.VALIDATION_FAILED,
            message="; ".join(self.errors) or "Invalid input",
            details={"errors": self.errors},
        )


class NotFoundError(AppException):
    """Single-entity fetch found nothing."""

    def __init__(
        self,
        message: str = "Not found",
        error_code: ErrorCode = ErrorCode.NOT_FOUND,
        details: Any | None = None,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            details=details,
        )


class GroupNotFoundError(NotFoundError):
    """Group not found."""

    def __init__(self, group_id: str) -> None:
        super().__init__(
            message=f"Group not found: {group_id}",
            error_code=ErrorCode.GROUP_NOT_FOUND,
            details={"group_id": group_id},
        )


class PostNotFoundError(NotFoundError):
    """Post not found."""

    def __init__(self, post_id: str) -> None:
        super().__init__(
            message=f"Post not found: {post_id}",
            error_code=ErrorCode.POST_NOT_FOUND,
            details={"post_id": post_id},
        )


class CommentNotFoundError(NotFoundError):
    """Comment not found, or not written by the requester."""

    def __init__(self, comment_id: str) -> None:
        super().__init__(
            message=f"Comment not found: {comment_id}",
            error_code=ErrorCode.COMMENT_NOT_FOUND,
            details={"comment_id": comment_id},
        )


class CreatorCannotJoinError(AppException):
    """The creator of a group cannot also join it as a member."""

    def __init__(self, group_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.CREATOR_CANNOT_JOIN,
            message="You created this group, so you cannot join it",
            details={"group_id": group_id},
        )


class ServiceError(AppException):
    """Backend or network failure. The message is for display only."""

    def __init__(self, message: str = "The service is unavailable", details: Any | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.SERVICE_ERROR,
            message=message,
            details=details,
        )
