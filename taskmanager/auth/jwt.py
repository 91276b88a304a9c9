# =============================================================================
# JWT Authentication Implementation
# =============================================================================
#
# This module provides:
#   - Password hashing
#   - Token creation (access + refresh, separate secrets)
#   - Token validation
#   - The refresh flow
#
# Tokens are stateless bearer credentials. There is no server-side registry,
# so expiry is the only way a token stops working.
#
# =============================================================================

from __future__ import annotations

from datetime import datetime, timedelta
import hashlib
import logging
import secrets

import jwt

from taskmanager.auth.context import Principal
from taskmanager.config import Settings
from taskmanager.core.errors import (
    TokenExpiredError,
    TokenInvalidError,
    UserNotFoundError,
)
from taskmanager.core.models import ApiModel, Role, User
from taskmanager.core.utils import utc_now
from taskmanager.storage.base import UserStore

logger = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"


# =============================================================================
# Password Hashing
# =============================================================================

PBKDF2_ITERATIONS = 100_000


def hash_password(password: str) -> str:
    """
    Hash a password using salted PBKDF2-SHA256.
    
    Returns: ``pbkdf2_sha256$<iterations>$<salt>$<hash>``
    """
    salt = secrets.token_hex(16)
    hash_bytes = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        iterations=PBKDF2_ITERATIONS,
    )
    return f"pbkdf2_sha256${PBKDF2_ITERATIONS}${salt}${hash_bytes.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash."""
    try:
        algorithm, iterations, salt, stored_hash = password_hash.split("$")
        if algorithm != "pbkdf2_sha256":
            return False
        hash_bytes = hashlib.pbkdf2_hmac(
            "sha256",
            password.encode("utf-8"),
            salt.encode("utf-8"),
            iterations=int(iterations),
        )
        return secrets.compare_digest(hash_bytes.hex(), stored_hash)
    except (ValueError, AttributeError):
        return False


# =============================================================================
# Models
# =============================================================================

class TokenPair(ApiModel):
    """Access and refresh token pair."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds until access token expires


# =============================================================================
# Token Service
# =============================================================================

class TokenService:
    """
    Issues and verifies signed access/refresh tokens.
    
    Access tokens carry ``{id, role}``. Refresh tokens carry ``{id}`` only,
    so the role is always re-read from the user store when refreshing and a
    demoted admin cannot mint admin access tokens from an old refresh token.
    """
    
    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
    ):
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh tokens must use different secrets")
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
    
    @classmethod
    def from_settings(cls, settings: Settings) -> TokenService:
        return cls(
            access_secret=settings.jwt_access_secret,
            refresh_secret=settings.jwt_refresh_secret,
            algorithm=settings.jwt_algorithm,
            access_ttl=timedelta(minutes=settings.jwt_access_token_expire_minutes),
            refresh_ttl=timedelta(days=settings.jwt_refresh_token_expire_days),
        )
    
    # -------------------------------------------------------------------------
    # Issuing
    # -------------------------------------------------------------------------
    
    def issue_access_token(self, user: User, now: datetime | None = None) -> str:
        """Create a short-lived access token bound to the user's role."""
        claims = {"id": user.id, "role": user.role.value}
        return self._encode(claims, ACCESS, self.access_secret, self.access_ttl, now)
    
    def issue_refresh_token(self, user: User, now: datetime | None = None) -> str:
        """Create a long-lived refresh token. Carries no role."""
        claims = {"id": user.id}
        return self._encode(claims, REFRESH, self.refresh_secret, self.refresh_ttl, now)
    
    def issue_token_pair(self, user: User) -> TokenPair:
        """Create both access and refresh tokens."""
        now = utc_now()
        return TokenPair(
            access_token=self.issue_access_token(user, now),
            refresh_token=self.issue_refresh_token(user, now),
            expires_in=int(self.access_ttl.total_seconds()),
        )
    
    def _encode(
        self,
        claims: dict,
        token_type: str,
        secret: str,
        ttl: timedelta,
        now: datetime | None,
    ) -> str:
        now = now or utc_now()
        payload = {
            **claims,
            "type": token_type,
            "iat": now,
            "exp": now + ttl,
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)
    
    # -------------------------------------------------------------------------
    # Verification
    # -------------------------------------------------------------------------
    
    def verify_access_token(self, token: str) -> Principal:
        """
        Decode an access token into a Principal.
        
        Raises:
            TokenExpiredError: Token has expired
            TokenInvalidError: Bad signature, wrong secret, wrong type or claims
        """
        payload = self._decode(token, self.access_secret, ACCESS)
        try:
            return Principal(id=str(payload["id"]), role=Role(payload["role"]))
        except (KeyError, ValueError):
            raise TokenInvalidError("Invalid token: missing or unknown claims")
    
    def verify_refresh_token(self, token: str) -> str:
        """Decode a refresh token and return the user id it was issued to."""
        payload = self._decode(token, self.refresh_secret, REFRESH)
        if "id" not in payload:
            raise TokenInvalidError("Invalid token: missing subject")
        return str(payload["id"])
    
    def _decode(self, token: str, secret: str, expected_type: str) -> dict:
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.debug(f"Rejected {expected_type} token: {e}")
            raise TokenInvalidError("Invalid token")
        
        if payload.get("type") != expected_type:
            raise TokenInvalidError(f"Expected {expected_type} token")
        
        return payload
    
    # -------------------------------------------------------------------------
    # Refresh
    # -------------------------------------------------------------------------
    
    async def refresh(self, refresh_token: str, users: UserStore) -> str:
        """
        Exchange a refresh token for a new access token.
        
        The role in the new token is whatever the store says now, never what
        it was when the refresh token was issued.
        """
        user_id = self.verify_refresh_token(refresh_token)
        
        user = await users.get_by_id(user_id)
        if user is None:
            logger.info(f"Refresh rejected: user {user_id} no longer exists")
            raise UserNotFoundError()
        
        return self.issue_access_token(user)
