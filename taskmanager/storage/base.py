"""
Storage abstraction layer.

All persistence goes through these interfaces. This allows swapping
implementations (in-memory → MongoDB, PostgreSQL, etc.) without changing
application code.

Stores hand out copies: mutating a returned model does nothing until it is
passed back through ``save``. There is no optimistic concurrency check, so
two concurrent saves of the same record are last-write-wins.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace

from pydantic import BaseModel

from taskmanager.core.models import Task, TaskPriority, TaskStatus, User


# =============================================================================
# Query Filters
# =============================================================================


@dataclass(frozen=True)
class TaskFilter:
    """
    Conjunctive task filter. ``None`` fields do not constrain the query.
    
    ``search`` is a case-insensitive substring match on the title.
    """
    
    created_by: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    search: str | None = None
    
    def narrow(self, **criteria) -> TaskFilter:
        """Return a copy with extra criteria ANDed in."""
        return replace(self, **criteria)
    
    def matches(self, task: Task) -> bool:
        if self.created_by is not None and task.created_by != self.created_by:
            return False
        if self.status is not None and task.status != self.status:
            return False
        if self.priority is not None and task.priority != self.priority:
            return False
        if self.search and self.search.casefold() not in task.title.casefold():
            return False
        return True


# =============================================================================
# Storage Interfaces
# =============================================================================


class UserStore(ABC):
    """
    Credential store. Email addresses are unique (case-insensitive).
    """
    
    @abstractmethod
    async def get_by_id(self, user_id: str) -> User | None:
        pass
    
    @abstractmethod
    async def get_by_email(self, email: str) -> User | None:
        pass
    
    @abstractmethod
    async def create(self, user: User) -> User:
        """Insert a new user. Raises DuplicateEmailError if the email is taken."""
        pass
    
    @abstractmethod
    async def save(self, user: User) -> User:
        """Persist changes to an existing user."""
        pass
    
    @abstractmethod
    async def delete(self, user_id: str) -> bool:
        pass
    
    @abstractmethod
    async def list_all(self) -> list[User]:
        pass


class TaskStore(ABC):
    """Task store."""
    
    @abstractmethod
    async def find(self, task_filter: TaskFilter) -> list[Task]:
        """Tasks matching the filter, newest first."""
        pass
    
    @abstractmethod
    async def get(self, task_id: str) -> Task | None:
        pass
    
    @abstractmethod
    async def create(self, task: Task) -> Task:
        pass
    
    @abstractmethod
    async def save(self, task: Task) -> Task:
        pass
    
    @abstractmethod
    async def delete(self, task_id: str) -> bool:
        pass
    
    @abstractmethod
    async def count(self, task_filter: TaskFilter) -> int:
        pass


# =============================================================================
# Storage Provider (dependency injection container)
# =============================================================================


class StorageProvider(BaseModel):
    """
    Container for all storage backends.
    
    Initialize once at app startup with appropriate implementations.
    Services receive this and use the interfaces without knowing
    the underlying implementation.
    """
    
    model_config = {"arbitrary_types_allowed": True}
    
    users: UserStore
    tasks: TaskStore
