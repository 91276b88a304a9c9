# =============================================================================
# Task API Routes
# =============================================================================
#
# All routes require an access token.
#
#   POST   /tasks          - Create a task (createdBy = caller)
#   GET    /tasks          - List tasks in the caller's scope
#   GET    /tasks/stats    - Counts over the caller's scope
#   GET    /tasks/{id}     - Read one task
#   PUT    /tasks/{id}     - Partial update
#   DELETE /tasks/{id}     - Delete
#
# =============================================================================

from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import ConfigDict, Field, field_validator, model_validator

from taskmanager.api.dependencies import get_task_service
from taskmanager.api.schemas import ApiResponse, MessageResponse
from taskmanager.auth.capabilities import Capability
from taskmanager.auth.context import Principal
from taskmanager.auth.policies import get_principal, require
from taskmanager.core.models import (
    ApiModel,
    Task,
    TaskPriority,
    TaskStats,
    TaskStatus,
)
from taskmanager.services import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


# =============================================================================
# Request/Response Models
# =============================================================================

class TaskCreate(ApiModel):
    """New task. Any client-supplied createdBy is ignored."""
    title: str | None = Field(default=None, validate_default=True)
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None
    assignee: str | None = None
    
    @field_validator("title")
    @classmethod
    def title_required(cls, value: str | None) -> str:
        if value is None or not value.strip():
            raise ValueError("Title is required")
        return value.strip()


class TaskUpdate(ApiModel):
    """
    Partial update. Only keys present in the body are applied.
    
    Unknown keys are kept (not applied) so the permission check sees the
    full set of keys the client sent.
    """
    model_config = ConfigDict(extra="allow")
    
    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None
    assignee: str | None = None
    
    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("Title cannot be empty")
        return value.strip() if value is not None else None
    
    @model_validator(mode="after")
    def required_fields_not_null(self) -> TaskUpdate:
        for name in ("title", "status", "priority"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self
    
    def changes(self) -> dict[str, Any]:
        """Every key the client sent, declared fields by attribute name."""
        declared = type(self).model_fields
        data = {
            name: getattr(self, name)
            for name in self.model_fields_set
            if name in declared
        }
        data.update(self.model_extra or {})
        return data


class TaskEnvelope(ApiResponse):
    task: Task


class TaskMessageEnvelope(TaskEnvelope):
    message: str


class TaskListResponse(ApiResponse):
    count: int
    tasks: list[Task]


class TaskStatsResponse(ApiResponse):
    stats: TaskStats


# =============================================================================
# Endpoints
# =============================================================================

@router.post("", response_model=TaskMessageEnvelope, status_code=201)
async def create_task(
    data: TaskCreate,
    principal: Principal = Depends(require(Capability.TASKS_CREATE)),
    tasks: TaskService = Depends(get_task_service),
):
    task = await tasks.create(principal, data.model_dump())
    return TaskMessageEnvelope(message="Task created successfully", task=task)


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    status: TaskStatus | None = None,
    priority: TaskPriority | None = None,
    search: str | None = None,
    principal: Principal = Depends(get_principal),
    tasks: TaskService = Depends(get_task_service),
):
    """Admins see every task, everyone else only the tasks they created."""
    results = await tasks.list_tasks(principal, status, priority, search)
    return TaskListResponse(count=len(results), tasks=results)


@router.get("/stats", response_model=TaskStatsResponse)
async def task_stats(
    principal: Principal = Depends(get_principal),
    tasks: TaskService = Depends(get_task_service),
):
    return TaskStatsResponse(stats=await tasks.stats(principal))


@router.get("/{task_id}", response_model=TaskEnvelope)
async def get_task(
    task_id: str,
    principal: Principal = Depends(get_principal),
    tasks: TaskService = Depends(get_task_service),
):
    return TaskEnvelope(task=await tasks.get(principal, task_id))


@router.put("/{task_id}", response_model=TaskMessageEnvelope)
async def update_task(
    task_id: str,
    data: TaskUpdate,
    principal: Principal = Depends(get_principal),
    tasks: TaskService = Depends(get_task_service),
):
    task = await tasks.update(principal, task_id, data.changes())
    return TaskMessageEnvelope(message="Task updated successfully", task=task)


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: str,
    principal: Principal = Depends(get_principal),
    tasks: TaskService = Depends(get_task_service),
):
    await tasks.delete(principal, task_id)
    return MessageResponse(message="Task deleted successfully")
