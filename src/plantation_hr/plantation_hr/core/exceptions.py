class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class InvalidStateError(DomainError):
    """Raised when an operation is not allowed from the entity's current state."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class DependencyFailure(DomainError):
    """Raised when the persistence layer itself fails (network/store fault).

    For two-step operations this may leave side effects incomplete, e.g. an
    approved leave without attendance rows; re-run materialization for it.
    """
