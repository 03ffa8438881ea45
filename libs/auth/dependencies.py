import uuid
from typing import Annotated, Callable, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError

from libs.auth.models import ADMIN_ROLES, STAFF_ROLES, AuthUser, Role
from libs.common.config import get_settings

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_token(token: str) -> AuthUser:
    """Decode a bearer token into an AuthUser, raising 401 on any failure."""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM]
        )
    except ExpiredSignatureError:
        raise _unauthorized("Token expired")
    except JWTError:
        raise _unauthorized("Invalid token")

    try:
        return AuthUser(**payload)
    except ValidationError:
        raise _unauthorized("Invalid token")


async def get_current_user(
    request: Request,
    token: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> AuthUser:
    """
    Validate the bearer JWT and return the authenticated user.

    The user is also stored on ``request.state`` so the rate limiter can key
    on it.
    """
    if token is None:
        raise _unauthorized("Not authorized, no token")

    user = decode_token(token.credentials)
    request.state.user = user
    return user


def require_roles(*roles: Role) -> Callable:
    """Build a dependency that only lets the given roles through."""
    allowed = frozenset(roles)

    async def _dependency(
        current_user: Annotated[AuthUser, Depends(get_current_user)]
    ) -> AuthUser:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{current_user.role.value}' is not authorized to access this resource",
            )
        return current_user

    return _dependency


def exclude_roles(*roles: Role) -> Callable:
    """Build a dependency that rejects the given roles."""
    blocked = frozenset(roles)

    async def _dependency(
        current_user: Annotated[AuthUser, Depends(get_current_user)]
    ) -> AuthUser:
        if current_user.role in blocked:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{current_user.role.value}' is not authorized to access this resource",
            )
        return current_user

    return _dependency


require_admin = require_roles(*ADMIN_ROLES)
require_staff = require_roles(*STAFF_ROLES)
require_super_admin = require_roles(Role.SUPER_ADMIN)
require_reward_participant = exclude_roles(Role.STUDENT)


def tenant_scope(
    user: AuthUser, requested: Optional[uuid.UUID] = None
) -> Optional[uuid.UUID]:
    """
    Return the tenant id a query must be filtered by.

    Super admins may pick a tenant or pass nothing to query across tenants
    (``None``). Everyone else is pinned to their own tenant.
    """
    if user.is_super_admin:
        return requested
    if user.tenant_id is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No tenant associated with this account",
        )
    return user.tenant_id


def tenant_for_write(
    user: AuthUser, requested: Optional[uuid.UUID] = None
) -> uuid.UUID:
    """Like ``tenant_scope`` but a concrete tenant is mandatory."""
    tenant_id = tenant_scope(user, requested)
    if tenant_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="tenant_id is required",
        )
    return tenant_id
