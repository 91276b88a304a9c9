"""
Principal - the "who" of each authenticated request.

Rebuilt from a verified access token on every request and never stored.
It carries everything the permission checks need about the caller.
"""

from __future__ import annotations

from dataclasses import dataclass

from taskmanager.auth.capabilities import Capability, has_capability
from taskmanager.core.models import Role


@dataclass(frozen=True)
class Principal:
    """
    Authenticated identity.
    
    Usage in routes:
        async def my_route(principal: Principal = Depends(get_principal)):
            if principal.can(Capability.TASKS_READ_ANY):
                ...
    """
    
    id: str
    role: Role = Role.USER
    
    def can(self, capability: Capability | str) -> bool:
        return has_capability(capability, self.role)
