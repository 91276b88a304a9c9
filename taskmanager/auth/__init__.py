"""
Authentication and authorization.

- capabilities: what each role may do
- context: the Principal resolved for each request
- jwt: password hashing and the TokenService
- permissions: pure allow/deny decisions over principals and resources
- policies: FastAPI dependencies that resolve and gate the Principal
- routes: the /auth router (imported directly by the app)
"""

from taskmanager.auth.capabilities import Capability, get_capabilities, has_capability
from taskmanager.auth.context import Principal
from taskmanager.auth.jwt import (
    TokenPair,
    TokenService,
    hash_password,
    verify_password,
)
from taskmanager.auth.permissions import (
    Decision,
    TaskRelationship,
    check_capability,
    check_role_value,
    task_owner,
    task_scope,
    can_read_task,
    can_update_task,
    can_delete_task,
    permitted_changes,
)
from taskmanager.auth.policies import get_principal, require

__all__ = [
    # Main interface
    "require",
    "get_principal",
    "Principal",
    # Types
    "Capability",
    "get_capabilities",
    "has_capability",
    "Decision",
    "TaskRelationship",
    # Decisions
    "check_capability",
    "check_role_value",
    "task_owner",
    "task_scope",
    "can_read_task",
    "can_update_task",
    "can_delete_task",
    "permitted_changes",
    # JWT
    "TokenPair",
    "TokenService",
    "hash_password",
    "verify_password",
]
