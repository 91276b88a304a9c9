"""
Error taxonomy.

Every error the API reports on purpose is a TaskManagerError. Each class
carries the HTTP status it maps to and a client-safe default message, so the
exception handlers in taskmanager.api.errors never need to inspect the type.
"""

from __future__ import annotations


class TaskManagerError(Exception):
    """Base class for all expected application errors."""
    
    status_code: int = 500
    message: str = "Internal server error"
    
    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


# 400 ------------------------------------------------------------------------

class ValidationError(TaskManagerError):
    """Request data failed validation."""
    status_code = 400
    message = "Invalid request data"


class DuplicateEmailError(TaskManagerError):
    status_code = 400
    message = "Email already registered"


class InvalidCredentialsError(TaskManagerError):
    """Login failed. Deliberately silent about which field was wrong."""
    status_code = 400
    message = "Invalid email or password"


class InvalidRoleError(TaskManagerError):
    status_code = 400
    message = "Role must be either 'user' or 'admin'"


# 401 ------------------------------------------------------------------------

class AuthenticationError(TaskManagerError):
    """Missing, invalid or expired credentials."""
    status_code = 401
    message = "Not authenticated"


class TokenError(AuthenticationError):
    """Base exception for token errors."""
    message = "Invalid token"


class TokenExpiredError(TokenError):
    """Token has expired."""
    message = "Token has expired"


class TokenInvalidError(TokenError):
    """Token is invalid or malformed."""
    message = "Invalid token"


class UserNotFoundError(AuthenticationError):
    """The user a token was issued to no longer exists."""
    message = "User no longer exists"


# 403 / 404 / 500 ------------------------------------------------------------

class ForbiddenError(TaskManagerError):
    status_code = 403
    message = "Forbidden: insufficient permissions"


class NotFoundError(TaskManagerError):
    status_code = 404
    message = "Resource not found"


class InternalError(TaskManagerError):
    status_code = 500
    message = "Internal server error"
