# =============================================================================
# Admin API Routes
# =============================================================================
#
# All routes require an admin access token.
#
#   GET    /admin/users           - List all users
#   PUT    /admin/users/{id}/role - Change a user's role
#   DELETE /admin/users/{id}      - Delete a user
#
# =============================================================================

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from taskmanager.api.dependencies import get_user_service
from taskmanager.api.schemas import ApiResponse, MessageResponse
from taskmanager.auth.capabilities import Capability
from taskmanager.auth.context import Principal
from taskmanager.auth.policies import require
from taskmanager.core.models import ApiModel, UserResponse
from taskmanager.services import UserService

router = APIRouter(prefix="/admin", tags=["admin"])


class RoleUpdateRequest(ApiModel):
    # Validated by the permission layer so any bad value gets InvalidRoleError
    role: Any = None


class UserListResponse(ApiResponse):
    count: int
    users: list[UserResponse]


class RoleUpdateResponse(ApiResponse):
    message: str
    user: UserResponse


@router.get("/users", response_model=UserListResponse)
async def list_users(
    principal: Principal = Depends(require(Capability.USERS_LIST)),
    users: UserService = Depends(get_user_service),
):
    all_users = await users.list_users()
    return UserListResponse(
        count=len(all_users),
        users=[u.to_public() for u in all_users],
    )


@router.put("/users/{user_id}/role", response_model=RoleUpdateResponse)
async def update_user_role(
    user_id: str,
    data: RoleUpdateRequest | None = None,
    principal: Principal = Depends(require(Capability.USERS_CHANGE_ROLE)),
    users: UserService = Depends(get_user_service),
):
    """
    Change a user's role.
    
    Takes effect on that user's next refresh or login. Access tokens already
    issued keep their old role until they expire.
    """
    role = data.role if data else None
    user = await users.change_role(user_id, role)
    return RoleUpdateResponse(
        message="User role updated successfully",
        user=user.to_public(),
    )


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    principal: Principal = Depends(require(Capability.USERS_DELETE)),
    users: UserService = Depends(get_user_service),
):
    await users.delete_user(user_id)
    return MessageResponse(message="User deleted successfully")
