"""
Core module - data models, errors and shared utilities.
"""

from taskmanager.core.errors import (
    TaskManagerError,
    ValidationError,
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidRoleError,
    AuthenticationError,
    TokenError,
    TokenExpiredError,
    TokenInvalidError,
    UserNotFoundError,
    ForbiddenError,
    NotFoundError,
    InternalError,
)
from taskmanager.core.models import (
    ApiModel,
    Role,
    TaskStatus,
    TaskPriority,
    User,
    UserResponse,
    Task,
    TaskStats,
    PriorityBreakdown,
)
from taskmanager.core.utils import generate_id, utc_now

__all__ = [
    # Errors
    "TaskManagerError",
    "ValidationError",
    "DuplicateEmailError",
    "InvalidCredentialsError",
    "InvalidRoleError",
    "AuthenticationError",
    "TokenError",
    "TokenExpiredError",
    "TokenInvalidError",
    "UserNotFoundError",
    "ForbiddenError",
    "NotFoundError",
    "InternalError",
    # Models
    "ApiModel",
    "Role",
    "TaskStatus",
    "TaskPriority",
    "User",
    "UserResponse",
    "Task",
    "TaskStats",
    "PriorityBreakdown",
    # Utils
    "generate_id",
    "utc_now",
]
