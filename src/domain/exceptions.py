"""
domain.exceptions - Custom exception hierarchy for the inventory assistant.

All domain-level errors inherit from DomainError so callers can catch
broad or specific exceptions as needed.
"""


class DomainError(Exception):
    """Base exception for all domain-level errors."""


class InvalidIdentifierError(DomainError):
    """Raised when an identifier is not a well-formed UUID."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class InsufficientStockError(DomainError):
    """Raised when a stock change would leave the stock negative."""


class InvalidReportTypeError(DomainError):
    """Raised for a report type outside the supported set."""


class InvalidActionError(DomainError):
    """Raised when a tool or action is called with unsupported arguments."""


class UnauthorizedError(DomainError):
    """Raised when a request carries no valid session identity."""


class UpstreamFailureError(DomainError):
    """Raised when the reasoning capability or the store is failing."""


class RepositoryError(DomainError):
    """Raised when a database operation fails."""


# Errors the end user can fix by rephrasing or searching first.
USER_CORRECTABLE = (
    InvalidIdentifierError,
    NotFoundError,
    InsufficientStockError,
    InvalidReportTypeError,
    InvalidActionError,
)
