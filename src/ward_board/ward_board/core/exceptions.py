class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when an identity lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a directory or document lookup misses."""


class StoreError(DomainError):
    """Raised when the backing document store fails to read or write."""


class EmptyIdentifierError(ValidationError):
    """Raised when a scanned clock identifier is blank."""


class UnauthorizedVerifierError(AuthorizationError):
    """Raised when the session identity may not verify clock events."""


class UnknownStaffError(NotFoundError):
    """Raised when a clock identifier is not in the staff directory."""
