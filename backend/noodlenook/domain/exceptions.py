class DomainError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 500
    kind = "DomainError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    status_code = 400
    kind = "ValidationError"


class InvariantViolation(ValidationError):
    kind = "InvariantViolation"


class AuthenticationError(DomainError):
    status_code = 401
    kind = "AuthenticationError"


class AuthorizationError(DomainError):
    status_code = 403
    kind = "AuthorizationError"


class NotFoundError(DomainError):
    status_code = 404
    kind = "NotFoundError"


class ConflictError(DomainError):
    status_code = 409
    kind = "ConflictError"


class ExternalDependencyError(DomainError):
    """SMTP / webhook failure. Reported inline, never fails an invitation."""

    status_code = 400
    kind = "ExternalDependencyError"
