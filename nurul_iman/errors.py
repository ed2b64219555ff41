"""
Error kinds raised by services and the auth layer.
Clients only see the static message and the HTTP status; the kind stays distinguishable
for logging and tests.
"""
from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, data=None):
        super().__init__(message)
        self.message = message
        self.data = data


class ValidationError(AppError):
    """Malformed or missing input that passed form binding (size, extension, duplicates)."""


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppError):
    """Authenticated, but the role is not allowed to perform the action."""


class NotFoundError(AppError):
    pass


class StorageError(AppError):
    pass


class PersistenceError(AppError):
    pass
