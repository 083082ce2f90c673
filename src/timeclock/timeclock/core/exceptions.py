class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when an employee id does not resolve to a record."""


class InvalidTransitionError(DomainError):
    """Raised when a punch is not allowed from the current clock state."""


class ConflictError(DomainError):
    """Raised when a mutation clashes with existing data (history, PIN)."""


class AuthenticationError(DomainError):
    """Raised when a PIN does not identify an active employee."""


class AuthorizationError(DomainError):
    """Raised when a session lacks permission for an action."""
