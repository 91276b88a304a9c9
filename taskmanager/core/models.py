"""
Core data models: users and tasks.

Stored entities and their public projections. Everything serialises with
camelCase keys on the wire (``createdBy``, ``dueDate``) while Python code
keeps snake_case attributes.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from taskmanager.core.utils import generate_id, utc_now


class ApiModel(BaseModel):
    """Base model: camelCase aliases, snake_case accepted on input too."""
    
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Enums
# =============================================================================


class Role(str, Enum):
    """Platform-wide role of a user."""
    
    USER = "user"
    ADMIN = "admin"


class TaskStatus(str, Enum):
    """Task status. No transition graph is enforced between values."""
    
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# =============================================================================
# Users
# =============================================================================


class User(ApiModel):
    """User as stored in the credential store. Never returned to clients."""
    
    id: str = Field(default_factory=lambda: generate_id("user"))
    name: str
    email: str
    password_hash: str
    role: Role = Role.USER
    created_at: datetime = Field(default_factory=utc_now)
    
    def to_public(self) -> UserResponse:
        """Strip the password hash."""
        return UserResponse(
            id=self.id,
            name=self.name,
            email=self.email,
            role=self.role,
        )


class UserResponse(ApiModel):
    """User data returned to client (no sensitive fields)."""
    
    id: str
    name: str
    email: str
    role: Role


# =============================================================================
# Tasks
# =============================================================================


class Task(ApiModel):
    """A task owned by its creator and optionally delegated to an assignee."""
    
    id: str = Field(default_factory=lambda: generate_id("task"))
    title: str = Field(min_length=1)
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None
    assignee: str | None = None
    created_by: str
    created_at: datetime = Field(default_factory=utc_now)
    
    def apply(self, changes: dict[str, Any]) -> Task:
        """Return a copy with ``changes`` applied (keys are attribute names)."""
        return self.model_copy(update=changes)


class PriorityBreakdown(ApiModel):
    low: int = 0
    medium: int = 0
    high: int = 0


class TaskStats(ApiModel):
    """
    Aggregate counts over a scope.
    
    Each figure is an independent count, so ``completed + pending`` need not
    equal ``total``.
    """
    
    total: int = 0
    completed: int = 0
    pending: int = 0
    in_progress: int = 0
    by_priority: PriorityBreakdown = Field(default_factory=PriorityBreakdown)
