"""Bearer-token auth dependencies.

Protected routes depend on :func:`get_current_context`; routes readable by
anonymous users for public trips depend on :func:`get_optional_context`.
"""

import logging
from typing import Annotated

import jwt
from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from tripplanner.config import Settings
from tripplanner.db.context import RequestContext
from tripplanner.db.engine import get_session
from tripplanner.db.users import get_user
from tripplanner.security import decode_access_token

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def context_from_token(token: str, settings: Settings) -> RequestContext:
    """Build a request context from a signed token.

    Raises:
        HTTPException: 401 if the token is invalid or expired
    """
    try:
        payload = decode_access_token(token, settings)
        return RequestContext(
            user_id=int(payload["sub"]),
            email=str(payload.get("email", "")),
            is_admin=bool(payload.get("is_admin", False)),
        )
    except jwt.ExpiredSignatureError as e:
        raise _unauthorized("Token expired") from e
    except (jwt.InvalidTokenError, KeyError, ValueError) as e:
        raise _unauthorized("Invalid token") from e


async def get_current_context(
    settings: Annotated[Settings, Depends(get_app_settings)],
    authorization: Annotated[str | None, Header()] = None,
) -> RequestContext:
    """Extract request context from the authorization header.

    Args:
        settings: Application settings (JWT secret and algorithm)
        authorization: Authorization header (e.g., "Bearer <token>")

    Returns:
        RequestContext with user_id and admin flag

    Raises:
        HTTPException: 401 if the header is missing or the token is invalid
    """
    if not authorization:
        raise _unauthorized("Access token required")

    if not authorization.startswith("Bearer "):
        raise _unauthorized("Invalid authorization header format")

    return context_from_token(authorization[7:], settings)


async def get_optional_context(
    settings: Annotated[Settings, Depends(get_app_settings)],
    authorization: Annotated[str | None, Header()] = None,
) -> RequestContext | None:
    """Like :func:`get_current_context`, but anonymous requests yield None.

    An unusable token is treated as anonymous rather than rejected.
    """
    if not authorization or not authorization.startswith("Bearer "):
        return None

    try:
        return context_from_token(authorization[7:], settings)
    except HTTPException:
        logger.info("Ignoring invalid token on optional-auth route")
        return None


async def require_admin(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> RequestContext:
    """Allow only admin users.

    The admin flag is re-read from the database so a revoked admin loses
    access before their token expires.

    Raises:
        HTTPException: 403 for non-admin users
    """
    user = await get_user(session, ctx.user_id)
    if user is None or not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return ctx


CurrentContext = Annotated[RequestContext, Depends(get_current_context)]
OptionalContext = Annotated[RequestContext | None, Depends(get_optional_context)]
AdminContext = Annotated[RequestContext, Depends(require_admin)]
