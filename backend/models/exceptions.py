"""
Custom domain exceptions for the application.

These exceptions are raised by the service layer and left for the calling
layer to translate, keeping services independent of any transport.

Each carries a correlation ID for Sentry and user error reporting.
"""

from core.correlation import generate_correlation_id, get_correlation_id


class DomainException(Exception):
    """
    Base class for all domain exceptions.

    Attributes:
        message: Human-readable error message.
        correlation_id: Unique ID for error tracking (auto-generated if not provided).
    """

    def __init__(self, message: str, correlation_id: str | None = None):
        self.message = message
        # Use the operation's correlation ID if available, otherwise generate one
        self.correlation_id = (
            correlation_id or get_correlation_id() or generate_correlation_id()
        )
        super().__init__(self.message)


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    pass


class PermissionDeniedException(DomainException):
    """Raised when user lacks required permissions."""

    pass


class ValidationException(DomainException):
    """Raised when input validation fails."""

    pass


class ConflictException(DomainException):
    """Raised when operation conflicts with existing data."""

    pass


# Specific exceptions for domain entities


class UserNotFoundException(NotFoundException):
    """User not found."""

    pass


class InsufficientPermissionsException(PermissionDeniedException):
    """User doesn't have sufficient permissions."""

    pass


# Moderation report exceptions


class ModerationReportException(DomainException):
    """Base exception for moderation report operations."""

    pass


class ReportValidationException(ValidationException, ModerationReportException):
    """Raised when a report fails field validation."""

    pass


class InvalidReportTargetException(ReportValidationException):
    """Raised when the reported content type is not reportable."""

    def __init__(self, model_type: object):
        super().__init__(f"Model type '{model_type}' is not reportable")
        self.model_type = model_type


class DuplicateModerationReportException(ConflictException, ReportValidationException):
    """Raised when a user reports the same content twice."""

    def __init__(self, message: str = "You have already reported this message."):
        super().__init__(message)


class ModerationReportNotFoundException(NotFoundException, ModerationReportException):
    """Raised when a report does not exist."""

    def __init__(self, report_id: int):
        super().__init__(f"Moderation report with ID {report_id} not found")
        self.report_id = report_id


class ReportedContentNotFoundException(NotFoundException, ModerationReportException):
    """Raised when the reported dmail, comment or forum post does not exist."""

    def __init__(self, model_type: str, model_id: int):
        super().__init__(f"{model_type} with ID {model_id} not found")
        self.model_type = model_type
        self.model_id = model_id


class UnsupportedReportTargetError(RuntimeError):
    """
    A report target reached content resolution with a type that has no lookup.

    This is an internal invariant violation, not a user-facing condition.
    """

    def __init__(self, model_type: object):
        super().__init__(f"No content lookup registered for model type {model_type!r}")
        self.model_type = model_type
