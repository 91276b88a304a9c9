"""
In-memory storage implementations for development and tests.
"""

from __future__ import annotations

from taskmanager.core.errors import DuplicateEmailError
from taskmanager.core.models import Task, User
from taskmanager.storage.base import (
    StorageProvider,
    TaskFilter,
    TaskStore,
    UserStore,
)


# =============================================================================
# In-Memory User Storage
# =============================================================================


class InMemoryUserStore(UserStore):
    """In-memory credential store."""
    
    def __init__(self):
        self._users: dict[str, User] = {}
        self._by_email: dict[str, str] = {}  # lower-cased email -> user_id
    
    async def get_by_id(self, user_id: str) -> User | None:
        user = self._users.get(user_id)
        return user.model_copy(deep=True) if user else None
    
    async def get_by_email(self, email: str) -> User | None:
        user_id = self._by_email.get(email.lower())
        return await self.get_by_id(user_id) if user_id else None
    
    async def create(self, user: User) -> User:
        key = user.email.lower()
        if key in self._by_email:
            raise DuplicateEmailError()
        self._users[user.id] = user.model_copy(deep=True)
        self._by_email[key] = user.id
        return user
    
    async def save(self, user: User) -> User:
        previous = self._users.get(user.id)
        if previous and previous.email.lower() != user.email.lower():
            owner = self._by_email.get(user.email.lower())
            if owner and owner != user.id:
                raise DuplicateEmailError()
            del self._by_email[previous.email.lower()]
        self._users[user.id] = user.model_copy(deep=True)
        self._by_email[user.email.lower()] = user.id
        return user
    
    async def delete(self, user_id: str) -> bool:
        user = self._users.pop(user_id, None)
        if user is None:
            return False
        self._by_email.pop(user.email.lower(), None)
        return True
    
    async def list_all(self) -> list[User]:
        return [u.model_copy(deep=True) for u in self._users.values()]


# =============================================================================
# In-Memory Task Storage
# =============================================================================


class InMemoryTaskStore(TaskStore):
    """In-memory task store."""
    
    def __init__(self):
        self._tasks: dict[str, Task] = {}
    
    async def find(self, task_filter: TaskFilter) -> list[Task]:
        results = [
            t.model_copy(deep=True)
            for t in self._tasks.values()
            if task_filter.matches(t)
        ]
        results.sort(key=lambda t: t.created_at, reverse=True)
        return results
    
    async def get(self, task_id: str) -> Task | None:
        task = self._tasks.get(task_id)
        return task.model_copy(deep=True) if task else None
    
    async def create(self, task: Task) -> Task:
        self._tasks[task.id] = task.model_copy(deep=True)
        return task
    
    async def save(self, task: Task) -> Task:
        self._tasks[task.id] = task.model_copy(deep=True)
        return task
    
    async def delete(self, task_id: str) -> bool:
        return self._tasks.pop(task_id, None) is not None
    
    async def count(self, task_filter: TaskFilter) -> int:
        return sum(1 for t in self._tasks.values() if task_filter.matches(t))


# =============================================================================
# Factory
# =============================================================================


def create_local_storage() -> StorageProvider:
    """Create a StorageProvider with in-memory implementations."""
    return StorageProvider(
        users=InMemoryUserStore(),
        tasks=InMemoryTaskStore(),
    )
