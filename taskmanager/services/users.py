"""
Account workflows: registration, login and user administration.

Capability checks for the admin operations happen at the route boundary
(``require(...)``), so by the time a method here runs the caller is allowed
to perform it.
"""

from __future__ import annotations

import logging

from taskmanager.auth.jwt import TokenPair, TokenService, hash_password, verify_password
from taskmanager.auth.permissions import check_role_value
from taskmanager.core.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    NotFoundError,
)
from taskmanager.core.models import Role, User
from taskmanager.storage.base import UserStore

logger = logging.getLogger(__name__)


class UserService:
    """Orchestrates the credential store and the token service."""
    
    def __init__(self, users: UserStore, tokens: TokenService):
        self.users = users
        self.tokens = tokens
    
    # =========================================================================
    # Registration & Login
    # =========================================================================
    
    async def register(self, name: str, email: str, password: str) -> User:
        """
        Create a new account with role ``user``.
        
        Input is expected to be validated already. The plaintext password
        is hashed before it reaches the store and is never kept.
        """
        email = email.lower()
        if await self.users.get_by_email(email):
            raise DuplicateEmailError()
        
        user = User(
            name=name,
            email=email,
            password_hash=hash_password(password),
        )
        await self.users.create(user)
        logger.info(f"Registered user {user.id}")
        return user
    
    async def authenticate(self, email: str, password: str) -> User:
        """Same error for unknown email and wrong password."""
        user = await self.users.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()
        return user
    
    async def login(self, email: str, password: str) -> tuple[User, TokenPair]:
        user = await self.authenticate(email, password)
        return user, self.tokens.issue_token_pair(user)
    
    async def refresh(self, refresh_token: str) -> str:
        return await self.tokens.refresh(refresh_token, self.users)
    
    # =========================================================================
    # Lookup & Administration
    # =========================================================================
    
    async def get(self, user_id: str) -> User:
        user = await self.users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user
    
    async def list_users(self) -> list[User]:
        return await self.users.list_all()
    
    async def change_role(self, user_id: str, role: str | None) -> User:
        """The role is validated before the user is looked up."""
        check_role_value(role).enforce()
        
        user = await self.get(user_id)
        user.role = Role(role)
        await self.users.save(user)
        logger.info(f"User {user_id} role set to {user.role.value}")
        return user
    
    async def delete_user(self, user_id: str) -> None:
        if not await self.users.delete(user_id):
            raise NotFoundError("User not found")
        logger.info(f"Deleted user {user_id}")
    
    async def ensure_admin(self, email: str, password: str, name: str) -> User:
        """
        Make sure an admin account exists for ``email``.
        
        An existing account is promoted and keeps its password.
        """
        user = await self.users.get_by_email(email)
        if user is None:
            user = await self.register(name, email, password)
        if user.role != Role.ADMIN:
            user.role = Role.ADMIN
            await self.users.save(user)
            logger.info(f"Bootstrapped admin account {user.id}")
        return user
