from typing import List, Optional


class AppError(Exception):
    """Base error rendered as a failure envelope by the API."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[str]] = None):
        self.message = message or self.message
        self.errors = errors
        super().__init__(self.message)


class InvalidInput(AppError):
    status_code = 400
    message = "Validation error"


class NotFound(AppError):
    status_code = 404
    message = "Not found"


class Conflict(AppError):
    status_code = 400
    message = "Already exists"


class Unauthenticated(AppError):
    status_code = 401
    message = "Not authorized, token missing or invalid"


class Internal(AppError):
    status_code = 500
    message = "Internal server error"
