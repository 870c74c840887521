"""
FastAPI dependencies for authentication, access control, and database access.
Supports both Supabase JWT tokens and internal JWT tokens.
"""

import base64
import json
import logging
import uuid
from typing import Annotated, Optional
from zoneinfo import ZoneInfo

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwk, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.database import get_db
from app.models.user import Profile
from app.services.date_utils import resolve_timezone
from app.services.scoping import get_agent_id_for_user

logger = logging.getLogger(__name__)

settings = get_settings()
security = HTTPBearer(auto_error=False)

# Cache for JWKS keys
_jwks_cache: dict = {}


def get_jwks_keys(supabase_url: str) -> dict:
    """
    Fetch JWKS keys from Supabase.
    Keys are cached to avoid repeated HTTP requests.
    """
    global _jwks_cache

    if not _jwks_cache:
        try:
            jwks_url = f"{supabase_url}/auth/v1/.well-known/jwks.json"
            response = httpx.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            _jwks_cache = response.json()
        except httpx.HTTPError as e:
            logger.error("Error fetching JWKS keys: %s", e)
            return {}

    return _jwks_cache


def _token_header(token: str) -> dict:
    header_segment = token.split(".")[0]
    padding = 4 - len(header_segment) % 4
    if padding != 4:
        header_segment += "=" * padding
    return json.loads(base64.urlsafe_b64decode(header_segment))


def decode_token(token: str) -> Optional[dict]:
    """
    Decode a Supabase or internal JWT and return its payload.
    Supports ES256 (Supabase JWKS), HS256 (Supabase secret) and the internal secret.
    Returns None when no key validates the token.
    """
    try:
        header = _token_header(token)
        alg = header.get("alg", "HS256")
        kid = header.get("kid")
    except (ValueError, IndexError) as e:
        logger.debug("Unreadable JWT header: %s", e)
        alg, kid = "HS256", None

    if alg == "ES256":
        jwks = get_jwks_keys(settings.supabase_url)
        keys = jwks.get("keys", []) if jwks else []
        key_data = next((k for k in keys if kid and k.get("kid") == kid), None)
        if key_data is None and keys:
            key_data = keys[0]
        if key_data is not None:
            try:
                return jwt.decode(
                    token,
                    jwk.construct(key_data),
                    algorithms=["ES256"],
                    options={"verify_aud": False},
                )
            except JWTError as e:
                logger.debug("ES256 decode error: %s", e)

    if settings.supabase_jwt_secret:
        try:
            return jwt.decode(
                token,
                settings.supabase_jwt_secret,
                algorithms=["HS256"],
                options={"verify_aud": False},
            )
        except JWTError as e:
            logger.debug("HS256 decode error: %s", e)

    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        logger.debug("Internal token decode error: %s", e)

    return None


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Profile:
    """
    Dependency to get the current authenticated user's profile from the JWT.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not credentials:
        raise credentials_exception

    payload = decode_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise credentials_exception

    try:
        user_id = uuid.UUID(str(payload["sub"]))
    except ValueError:
        raise credentials_exception

    result = await db.execute(select(Profile).where(Profile.id == user_id))
    profile = result.scalar_one_or_none()

    if profile is None:
        raise credentials_exception

    return profile


def require_role(*allowed_roles: str):
    """
    Dependency factory to require specific user roles.

    Usage:
        @router.delete("/{id}")
        async def delete(user: Profile = Depends(require_role("admin"))):
            ...
    """
    async def role_checker(
        user: Annotated[Profile, Depends(get_current_user)],
    ) -> Profile:
        if user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required: {', '.join(allowed_roles)}",
            )
        return user

    return role_checker


async def get_own_agent_id(
    user: Annotated[Profile, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Optional[uuid.UUID]:
    """Agent row linked to the current user (agents only)."""
    if user.is_admin:
        return None
    return await get_agent_id_for_user(db, user.id)


async def get_user_timezone(
    user: Annotated[Profile, Depends(get_current_user)],
) -> ZoneInfo:
    """Profile timezone, or the configured default."""
    return resolve_timezone(user.timezone, settings.default_timezone)


# Type aliases for cleaner dependency injection
CurrentUser = Annotated[Profile, Depends(get_current_user)]
AdminUser = Annotated[Profile, Depends(require_role("admin"))]
OwnAgentId = Annotated[Optional[uuid.UUID], Depends(get_own_agent_id)]
UserTimezone = Annotated[ZoneInfo, Depends(get_user_timezone)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
