class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "DomainError"
    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is missing, malformed or violates domain rules."""

    kind = "ValidationError"
    status_code = 400


class NotFoundError(DomainError):
    """Raised when a referenced employee, attendance or payroll record does not exist."""

    kind = "NotFoundError"
    status_code = 404


class ConflictError(DomainError):
    """Raised when a write would break a uniqueness rule (e.g. duplicate payroll)."""

    kind = "ConflictError"
    status_code = 409


class InternalError(DomainError):
    """Raised when a dependent lookup fails unexpectedly."""

    kind = "InternalError"
    status_code = 500
