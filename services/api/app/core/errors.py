"""Error taxonomy shared by the stores and the HTTP layer.

Every route converts failures into one of these; the handlers registered in
``app.api.errors`` turn them into plain-text responses.
"""

from __future__ import annotations


class AppError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(AppError):
    """Unknown identity or bad credential."""

    status_code = 401
    default_message = "Authentication failed"


class AuthorizationError(AppError):
    """Authenticated, but the role does not allow the operation."""

    status_code = 403
    default_message = "Permission denied"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"

    def __init__(self, resource: str, identifier: object | None = None):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found")


class StorageError(AppError):
    """The database or the blob store rejected a read or a write."""

    status_code = 500
    default_message = "Storage failure"


class StorageWriteError(StorageError):
    default_message = "Storage write rejected"
