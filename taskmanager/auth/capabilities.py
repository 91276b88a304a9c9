"""
Capabilities and role mappings.

This defines WHAT each role can do, not HOW we check it.
The actual decisions happen in permissions.py.
"""

from __future__ import annotations

from enum import Enum

from taskmanager.core.models import Role


class Capability(str, Enum):
    """
    Role-granted capabilities.
    
    Ownership-based rights (a creator editing their own task, an assignee
    updating status) are not capabilities: they come from the relationship
    between principal and task and are resolved in permissions.py.
    """
    
    # Tasks
    TASKS_CREATE = "tasks.create"
    TASKS_READ_ANY = "tasks.read_any"      # Bypass ownership on read/list/stats
    TASKS_UPDATE_ANY = "tasks.update_any"
    TASKS_DELETE_ANY = "tasks.delete_any"
    
    # User administration
    USERS_LIST = "users.list"
    USERS_CHANGE_ROLE = "users.change_role"
    USERS_DELETE = "users.delete"


ROLE_CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.USER: frozenset({
        Capability.TASKS_CREATE,
    }),
    Role.ADMIN: frozenset(Capability),
}


def get_capabilities(role: Role) -> frozenset[Capability]:
    """All capabilities granted by a role."""
    return ROLE_CAPABILITIES.get(role, frozenset())


def has_capability(capability: Capability | str, role: Role) -> bool:
    """Check if a role grants a specific capability."""
    if isinstance(capability, str):
        try:
            capability = Capability(capability)
        except ValueError:
            return False
    return capability in get_capabilities(role)
