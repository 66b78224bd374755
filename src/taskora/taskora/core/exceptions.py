class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid or the session expired."""


AuthError = AuthenticationError


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ConflictError(DomainError):
    """Raised when a uniqueness constraint of the data store is hit."""


class ServiceError(DomainError):
    """Raised when a remote call (database, storage, language model) fails."""


class SignupClosedError(ValidationError):
    """Raised when a workspace already has its super admin."""
