"""Domain errors raised by the auth core, guard and issue store.

Each error carries the HTTP status it maps to and a stable machine-readable
code; app.api.errors turns them into JSON responses.
"""


class AppError(Exception):
    """Base class for errors that surface to API clients as-is."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidRequestError(AppError):
    """Input failed validation (missing field, bad email, short password, empty text)."""

    status_code = 400
    code = "validation_error"


class ConflictError(AppError):
    """A unique value (e.g. email) is already taken."""

    status_code = 409
    code = "conflict"


class InvalidCredentialsError(AppError):
    """Login failed. Deliberately does not say whether the email exists."""

    status_code = 401
    code = "invalid_credentials"

    def __init__(self, message: str = "Invalid credentials.") -> None:
        super().__init__(message)


class UnauthenticatedError(AppError):
    """Credential missing, invalid, expired or revoked."""

    status_code = 401
    code = "unauthenticated"


class MissingTokenError(UnauthenticatedError):
    code = "missing_token"

    def __init__(self, message: str = "Access denied. No token provided.") -> None:
        super().__init__(message)


class TokenExpiredError(UnauthenticatedError):
    """Signature is valid but the token is past its exp claim."""

    code = "token_expired"

    def __init__(self, message: str = "Token expired.") -> None:
        super().__init__(message)


class TokenInvalidError(UnauthenticatedError):
    """Bad signature, wrong secret, wrong token type or malformed claims."""

    code = "token_invalid"

    def __init__(self, message: str = "Invalid token.") -> None:
        super().__init__(message)


class ForbiddenError(AppError):
    status_code = 403
    code = "forbidden"


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"
