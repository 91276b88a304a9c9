"""
Storage abstractions.

- UserStore → credential records (users)
- TaskStore → task records
"""

from taskmanager.storage.base import (
    UserStore,
    TaskStore,
    TaskFilter,
    StorageProvider,
)
from taskmanager.storage.local import (
    InMemoryUserStore,
    InMemoryTaskStore,
    create_local_storage,
)

__all__ = [
    "UserStore",
    "TaskStore",
    "TaskFilter",
    "StorageProvider",
    "InMemoryUserStore",
    "InMemoryTaskStore",
    "create_local_storage",
]
