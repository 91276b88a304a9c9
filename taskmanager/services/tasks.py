"""
Task workflows.

Each operation follows the same order: look the task up (404), ask the
permission layer (403), then write. Nothing is written before every check
has passed.
"""

from __future__ import annotations

import logging
from typing import Any

from taskmanager.auth.context import Principal
from taskmanager.auth.permissions import (
    can_delete_task,
    can_read_task,
    can_update_task,
    permitted_changes,
    task_owner,
    task_scope,
)
from taskmanager.core.errors import NotFoundError
from taskmanager.core.models import (
    PriorityBreakdown,
    Task,
    TaskPriority,
    TaskStats,
    TaskStatus,
)
from taskmanager.storage.base import TaskStore

logger = logging.getLogger(__name__)


class TaskService:
    """CRUD and stats over the task store, gated by the permission layer."""
    
    def __init__(self, tasks: TaskStore):
        self.tasks = tasks
    
    async def create(self, principal: Principal, fields: dict[str, Any]) -> Task:
        """Create a task. ``created_by`` is always the caller."""
        data = permitted_changes(fields)
        task = Task(**data, created_by=task_owner(principal))
        await self.tasks.create(task)
        logger.info(f"Task {task.id} created by {principal.id}")
        return task
    
    async def list_tasks(
        self,
        principal: Principal,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        search: str | None = None,
    ) -> list[Task]:
        return await self.tasks.find(task_scope(principal, status, priority, search))
    
    async def get(self, principal: Principal, task_id: str) -> Task:
        task = await self._load(task_id)
        can_read_task(principal, task).enforce()
        return task
    
    async def update(
        self,
        principal: Principal,
        task_id: str,
        changes: dict[str, Any],
    ) -> Task:
        """
        Partial update. ``changes`` holds every key the client sent.
        
        Omitted fields stay as they are. Concurrent updates to the same
        task are last-write-wins.
        """
        task = await self._load(task_id)
        can_update_task(principal, task, changes.keys()).enforce()
        
        updated = task.apply(permitted_changes(changes))
        await self.tasks.save(updated)
        return updated
    
    async def delete(self, principal: Principal, task_id: str) -> None:
        task = await self._load(task_id)
        can_delete_task(principal, task).enforce()
        await self.tasks.delete(task_id)
        logger.info(f"Task {task_id} deleted by {principal.id}")
    
    async def stats(self, principal: Principal) -> TaskStats:
        """Independent counts over the caller's scope."""
        scope = task_scope(principal)
        count = self.tasks.count
        return TaskStats(
            total=await count(scope),
            completed=await count(scope.narrow(status=TaskStatus.COMPLETED)),
            pending=await count(scope.narrow(status=TaskStatus.PENDING)),
            in_progress=await count(scope.narrow(status=TaskStatus.IN_PROGRESS)),
            by_priority=PriorityBreakdown(
                low=await count(scope.narrow(priority=TaskPriority.LOW)),
                medium=await count(scope.narrow(priority=TaskPriority.MEDIUM)),
                high=await count(scope.narrow(priority=TaskPriority.HIGH)),
            ),
        )
    
    async def _load(self, task_id: str) -> Task:
        task = await self.tasks.get(task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task
