"""Domain errors raised by the services and mapped to HTTP responses in main."""

from fastapi import status


class TodoAppError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Request could not be processed"

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class ValidationError(TodoAppError):
    """Bad input from the caller."""


class PasswordMismatch(ValidationError):
    detail = "Passwords did not match"


class UsernameTaken(ValidationError):
    status_code = status.HTTP_409_CONFLICT
    detail = "Username already taken"


class AuthError(TodoAppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Not authenticated"


class InvalidCredentials(AuthError):
    detail = "Incorrect username or password"


class NotAuthenticated(AuthError):
    detail = "Login required"


class NotFoundError(TodoAppError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Not found"


class StorageError(TodoAppError):
    """The store is unavailable or a query failed; the cause is chained, not shown."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "The server could not complete the request, please retry"
