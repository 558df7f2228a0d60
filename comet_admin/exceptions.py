"""
Application errors.

Every error carries the HTTP status and the client-facing message used in the
``{"success": false, "message": ...}`` envelope. Internal detail never goes
into ``message``.
"""
from typing import Optional

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    message: str = "Request failed"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class BadRequest(AppError):
    pass


class InvalidCredentials(AppError):
    # Same message for unknown username and wrong password
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


class Invalid2FACode(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid 2FA code"


class TwoFactorNotEnabled(AppError):
    message = "2FA is not enabled"


class InvalidCurrentPassword(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Current password is incorrect"


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid or expired token"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Admin access required"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    message = "Already exists"
