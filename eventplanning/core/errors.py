"""Domain error codes and exceptions raised by the service layer."""

from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    BUSINESS_RULE_VIOLATION = "BUSINESS_RULE_VIOLATION"
    INSUFFICIENT_CAPACITY = "INSUFFICIENT_CAPACITY"
    DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
    INVALID_STATE = "INVALID_STATE"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    status_code = 409
    default_code = ErrorCode.BUSINESS_RULE_VIOLATION

    def __init__(self, message: str, code: ErrorCode = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def __str__(self) -> str:
        return self.message


class ValidationError(DomainError):
    """Raised when input is well-formed JSON but semantically invalid."""

    status_code = 400
    default_code = ErrorCode.VALIDATION_ERROR


class AuthenticationError(DomainError):
    """Raised when credentials or tokens are invalid."""

    status_code = 401
    default_code = ErrorCode.AUTHENTICATION_FAILED


class AuthorizationError(DomainError):
    """Raised when the principal may not perform an action."""

    status_code = 403
    default_code = ErrorCode.FORBIDDEN


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""

    status_code = 404
    default_code = ErrorCode.NOT_FOUND


class BusinessRuleViolation(DomainError):
    """Raised when a request conflicts with the current state."""

    status_code = 409
    default_code = ErrorCode.BUSINESS_RULE_VIOLATION
