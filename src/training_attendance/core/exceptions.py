class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400
    error = "Bad Request"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class HierarchyMismatch(ValidationError):
    """Raised when a batch/domain or user/session pairing does not line up."""


class InvalidCode(ValidationError):
    """Raised when no session carries the submitted attendance code."""


class CodeExpired(ValidationError):
    """Raised when the attendance code was redeemed after its expiry."""


class AlreadyMarked(ValidationError):
    """Raised when attendance already exists for the (user, session) pair."""


class NotFound(DomainError):
    """Raised when a referenced entity does not exist."""

    status_code = 404
    error = "Not Found"


class UserNotFound(NotFound):
    pass


class DomainNotFound(NotFound):
    pass


class BatchNotFound(NotFound):
    pass


class AuthenticationError(DomainError):
    """Raised when the bearer token is missing or invalid."""

    status_code = 401
    error = "Unauthorized"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403
    error = "Forbidden"


class StoreError(DomainError):
    """Raised when the database or identity backend fails."""

    status_code = 500
    error = "Internal Server Error"


class CodeGenerationError(StoreError):
    """Raised when no free attendance code could be drawn."""
