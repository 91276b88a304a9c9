# =============================================================================
# Auth API Routes
# =============================================================================
#
# Endpoints:
#   POST /auth/register     - Create account
#   POST /auth/login        - Get tokens
#   POST /auth/refresh      - New access token from a refresh token
#   GET  /auth/me           - Get current user
#
# =============================================================================

from __future__ import annotations

import re
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import EmailStr, Field, field_validator

from taskmanager.api.dependencies import get_user_service
from taskmanager.api.schemas import ApiResponse
from taskmanager.auth.context import Principal
from taskmanager.auth.policies import get_principal
from taskmanager.core.errors import AuthenticationError
from taskmanager.core.models import ApiModel, UserResponse
from taskmanager.services import UserService

router = APIRouter(prefix="/auth", tags=["auth"])

PASSWORD_COMPLEXITY = re.compile(r"(?=.*[a-z])(?=.*[A-Z])(?=.*[0-9])", re.DOTALL)


# =============================================================================
# Request/Response Models
# =============================================================================

class RegisterRequest(ApiModel):
    """User registration data. Fields are checked in declaration order."""
    name: str = Field(min_length=2)
    email: EmailStr
    password: str = Field(min_length=8)
    
    @field_validator("password")
    @classmethod
    def password_complexity(cls, value: str) -> str:
        if not PASSWORD_COMPLEXITY.search(value):
            raise ValueError(
                "Password must contain at least one lowercase letter, "
                "one uppercase letter and one digit"
            )
        return value


class LoginRequest(ApiModel):
    # Plain str: a malformed email gets the same answer as an unknown one
    email: str
    password: str


class RefreshRequest(ApiModel):
    # Any: a non-string token is treated as missing
    refresh_token: Any = None


class UserEnvelope(ApiResponse):
    user: UserResponse


class RegisterResponse(UserEnvelope):
    message: str


class LoginResponse(UserEnvelope):
    message: str
    access_token: str
    refresh_token: str
    token_type: str
    expires_in: int


class RefreshResponse(ApiResponse):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


# =============================================================================
# Public Endpoints
# =============================================================================

@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    data: RegisterRequest,
    users: UserService = Depends(get_user_service),
):
    """Create a new account. Does not log the user in."""
    user = await users.register(data.name, data.email, data.password)
    return RegisterResponse(
        message="User registered successfully",
        user=user.to_public(),
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    users: UserService = Depends(get_user_service),
):
    """Authenticate and get tokens."""
    user, tokens = await users.login(data.email, data.password)
    return LoginResponse(
        message="Login successful",
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        token_type=tokens.token_type,
        expires_in=tokens.expires_in,
        user=user.to_public(),
    )


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(
    data: RefreshRequest | None = None,
    users: UserService = Depends(get_user_service),
):
    """
    Use refresh token to get new access token.
    
    The new token carries the user's current role.
    """
    if data is None or not isinstance(data.refresh_token, str) or not data.refresh_token:
        raise AuthenticationError("Refresh token required")
    
    access_token = await users.refresh(data.refresh_token)
    return RefreshResponse(
        access_token=access_token,
        expires_in=int(users.tokens.access_ttl.total_seconds()),
    )


# =============================================================================
# Protected Endpoints
# =============================================================================

@router.get("/me", response_model=UserEnvelope)
async def get_current_user(
    principal: Principal = Depends(get_principal),
    users: UserService = Depends(get_user_service),
):
    """Get the current authenticated user."""
    user = await users.get(principal.id)
    return UserEnvelope(user=user.to_public())
