"""
Permission decisions - who may do what to which resource.

Every function here is pure: it looks only at the principal and the
resource it is given and returns a Decision. Nothing touches storage, so the
callers decide when to look things up (existence first, then permission)
and can check before they mutate anything.

    decision = can_update_task(principal, task, changes.keys())
    decision.enforce()  # raises ForbiddenError if denied
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, NamedTuple

from taskmanager.auth.capabilities import Capability
from taskmanager.auth.context import Principal
from taskmanager.core.errors import (
    ForbiddenError,
    InvalidRoleError,
    TaskManagerError,
)
from taskmanager.core.models import Role, Task, TaskPriority, TaskStatus
from taskmanager.storage.base import TaskFilter


# Fields a creator or admin may change. createdBy/createdAt/id never change.
MUTABLE_TASK_FIELDS = frozenset({
    "title",
    "description",
    "status",
    "priority",
    "due_date",
    "assignee",
})

# Fields an assignee (who is not also creator or admin) may change
ASSIGNEE_FIELDS = frozenset({"status"})


# =============================================================================
# Decision
# =============================================================================


class Decision(NamedTuple):
    """Outcome of a permission check: (allowed, error)."""
    
    allowed: bool
    error: TaskManagerError | None = None
    
    @classmethod
    def allow(cls) -> Decision:
        return cls(True)
    
    @classmethod
    def deny(cls, error: TaskManagerError) -> Decision:
        return cls(False, error)
    
    def enforce(self) -> None:
        """Raise the carried error if the decision is a denial."""
        if not self.allowed:
            raise self.error or ForbiddenError()


# =============================================================================
# User Administration
# =============================================================================


def check_capability(principal: Principal, capability: Capability) -> Decision:
    """
    Role gate. User administration (list, change role, delete) is granted
    to admins only.
    """
    if principal.can(capability):
        return Decision.allow()
    return Decision.deny(ForbiddenError())


def check_role_value(value: Any) -> Decision:
    """A role change must name one of the known roles."""
    if isinstance(value, str) and value in {r.value for r in Role}:
        return Decision.allow()
    return Decision.deny(InvalidRoleError())


# =============================================================================
# Tasks
# =============================================================================


@dataclass(frozen=True)
class TaskRelationship:
    """How a principal relates to one task."""
    
    is_admin: bool
    is_creator: bool
    is_assignee: bool
    
    @classmethod
    def of(cls, principal: Principal, task: Task) -> TaskRelationship:
        return cls(
            is_admin=principal.can(Capability.TASKS_UPDATE_ANY),
            is_creator=principal.id == task.created_by,
            is_assignee=task.assignee is not None and principal.id == task.assignee,
        )
    
    @property
    def is_related(self) -> bool:
        return self.is_admin or self.is_creator or self.is_assignee
    
    @property
    def is_assignee_only(self) -> bool:
        return self.is_assignee and not (self.is_admin or self.is_creator)


def task_owner(principal: Principal) -> str:
    """The createdBy value for a new task: always the caller."""
    return principal.id


def task_scope(
    principal: Principal,
    status: TaskStatus | None = None,
    priority: TaskPriority | None = None,
    search: str | None = None,
) -> TaskFilter:
    """
    Filter for list and stats queries.
    
    Non-admins only ever see tasks they created. The optional filters are
    ANDed on top of that and mean the same thing for every role.
    """
    base = TaskFilter()
    if not principal.can(Capability.TASKS_READ_ANY):
        base = base.narrow(created_by=principal.id)
    return base.narrow(
        status=status,
        priority=priority,
        search=search or None,
    )


def can_read_task(principal: Principal, task: Task) -> Decision:
    """Admin, creator or assignee may read."""
    if principal.can(Capability.TASKS_READ_ANY):
        return Decision.allow()
    if principal.id == task.created_by:
        return Decision.allow()
    if task.assignee is not None and principal.id == task.assignee:
        return Decision.allow()
    return Decision.deny(ForbiddenError("Not authorized to view this task"))


def can_update_task(
    principal: Principal,
    task: Task,
    fields: Iterable[str],
) -> Decision:
    """
    Field-level update check.
    
    ``fields`` is every key present in the request body, including keys that
    are not mutable. An assignee-only principal may send exactly one key and
    it must be ``status``.
    """
    relationship = TaskRelationship.of(principal, task)
    
    if not relationship.is_related:
        return Decision.deny(ForbiddenError("Not authorized to update this task"))
    
    if relationship.is_assignee_only:
        fields = set(fields)
        if len(fields) != 1 or not fields <= ASSIGNEE_FIELDS:
            return Decision.deny(ForbiddenError("Assignee can update only status"))
    
    return Decision.allow()


def permitted_changes(changes: dict[str, Any]) -> dict[str, Any]:
    """Drop immutable and unknown keys from an update body."""
    return {k: v for k, v in changes.items() if k in MUTABLE_TASK_FIELDS}


def can_delete_task(principal: Principal, task: Task) -> Decision:
    """Admin or creator only. Assignees cannot delete."""
    if principal.can(Capability.TASKS_DELETE_ANY) or principal.id == task.created_by:
        return Decision.allow()
    return Decision.deny(ForbiddenError("Not authorized to delete this task"))
