"""Custom exceptions for prismatf."""

from typing import Optional


class PrismaTfError(Exception):
    """Base exception for all prismatf errors."""

    pass


class InvalidConfigurationError(PrismaTfError):
    """Raised when a retry policy or runtime setting is invalid."""

    pass


class MalformedIdentifierError(PrismaTfError, ValueError):
    """Raised when a resource identifier was not produced by the ID codec."""

    def __init__(self, token: str, reason: str):
        self.token = token
        self.reason = reason
        super().__init__(f"Malformed identifier {token!r}: {reason}")


class ApiError(PrismaTfError):
    """Raised when an upstream API call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ObjectNotFoundError(ApiError):
    """Raised by API clients when the requested object does not exist (yet)."""

    def __init__(self, message: str = "Object not found"):
        super().__init__(message, status_code=404)


class ValidationError(PrismaTfError):
    """Raised when resource or data source input is invalid."""

    pass
