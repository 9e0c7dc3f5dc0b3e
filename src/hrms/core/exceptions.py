class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidTimeFormat(ValidationError):
    """Raised when a time of day cannot be parsed."""


class DuplicateShiftError(DomainError):
    """Raised when a timesheet entry already exists for the employee and date."""


class NoOpenShiftError(DomainError):
    """Raised on clock-out when there is no open shift to close."""


class OrderError(DomainError):
    """Raised when clock-out is not after clock-in."""


class ZeroDurationError(DomainError):
    """Raised when the break consumes the whole shift."""


class NotFoundError(DomainError):
    """Raised when a record expected by an update does not exist."""


class PersistenceError(DomainError):
    """Raised when the database cannot be reached or a query fails."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
