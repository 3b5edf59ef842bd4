"""
Application error taxonomy.

Services raise these; `main.py` turns them into
`{"success": false, "message": ...}` responses with the matching status code.
"""

from __future__ import annotations


class AppError(RuntimeError):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Malformed or missing required input."""

    status_code = 400


class UploadError(AppError):
    """The media host rejected a file or could not be reached."""


class PersistenceError(AppError):
    """The database could not be reached or rejected a statement."""


class NotFoundError(AppError):
    status_code = 404


class AuthError(AppError):
    status_code = 401
