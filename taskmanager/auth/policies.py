"""
Policies - the FastAPI side of authorization.

Route handlers declare what they need and get a Principal back:

    principal: Principal = Depends(get_principal)
    principal: Principal = Depends(require(Capability.USERS_LIST))

- A missing or invalid bearer token raises AuthenticationError (401)
  before any handler logic runs.
- A missing capability raises ForbiddenError (403) before the store is
  touched.
"""

from __future__ import annotations

import logging
from typing import Callable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from taskmanager.auth.capabilities import Capability
from taskmanager.auth.context import Principal
from taskmanager.auth.jwt import TokenService
from taskmanager.auth.permissions import check_capability
from taskmanager.core.errors import AuthenticationError, TokenError

logger = logging.getLogger(__name__)


# Optional bearer (we raise our own 401 instead of FastAPI's 403)
optional_bearer = HTTPBearer(auto_error=False)


# =============================================================================
# App State Dependencies
# =============================================================================


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


# =============================================================================
# Principal Resolution
# =============================================================================


async def get_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_bearer),
    tokens: TokenService = Depends(get_token_service),
) -> Principal:
    """Resolve the caller from the bearer access token."""
    if not credentials:
        raise AuthenticationError("Not authorized, no token")
    
    try:
        return tokens.verify_access_token(credentials.credentials)
    except TokenError as e:
        logger.info(f"Rejected access token: {e.message}")
        raise


def require(capability: Capability) -> Callable:
    """
    Require a role-granted capability to access a route.
    
    Usage:
        @router.get("/users")
        async def list_users(
            principal: Principal = Depends(require(Capability.USERS_LIST)),
        ):
            ...
    """
    
    async def dependency(principal: Principal = Depends(get_principal)) -> Principal:
        check_capability(principal, capability).enforce()
        return principal
    
    return dependency
