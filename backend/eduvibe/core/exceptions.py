# backend/eduvibe/core/exceptions.py
"""
Domain-specific exceptions for the EduVibe mentoring platform.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.
The four failure families of the scheduling core map onto them:

- validation errors -> ValidationException
- conflict errors   -> ConflictException / SessionConflictException
- state errors      -> BusinessRuleException / InvalidSessionTransitionException
- not-found errors  -> NotFoundException
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        """Convert to an HTTPException carrying the structured error body."""
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when business validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    status_code = HTTP_422_UNPROCESSABLE


class ForbiddenException(DomainException):
    """Raised when the caller lacks permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details if self.details else {},
            },
        )


# Specific business exceptions


class SessionConflictException(ConflictException):
    """Raised when a requested session overlaps the mentor's existing sessions."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "Mentor is not available at the selected time",
            code="SESSION_CONFLICT",
            details=details or {},
        )


class InvalidSessionTransitionException(BusinessRuleException):
    """Raised when a lifecycle event is not legal from the session's current status."""

    def __init__(
        self,
        message: str,
        *,
        current_status: Optional[str] = None,
        event: Optional[str] = None,
    ):
        details: Dict[str, Any] = {}
        if current_status is not None:
            details["current_status"] = current_status
        if event is not None:
            details["event"] = event
        super().__init__(message=message, code="INVALID_SESSION_TRANSITION", details=details)


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
