"""Account endpoints - register, login and profile."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tripplanner.api.auth import CurrentContext, get_app_settings
from tripplanner.config import Settings
from tripplanner.db.engine import get_session
from tripplanner.db.users import create_user, get_user, get_user_by_email, update_user
from tripplanner.middleware.ratelimit import auth_rate_limit
from tripplanner.models.users import (
    AuthResponse,
    LoginRequest,
    ProfileUpdate,
    ProfileUpdateResponse,
    RegisterRequest,
    UserOut,
    UserResponse,
)
from tripplanner.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _user_exists() -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(auth_rate_limit)],
)
async def register(
    request: RegisterRequest,
    settings: Annotated[Settings, Depends(get_app_settings)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AuthResponse:
    """Create an account and return a signed token for it.

    Raises:
        HTTPException: 400 if the email is already registered
    """
    if await get_user_by_email(session, request.email) is not None:
        raise _user_exists()

    password_hash = await run_in_threadpool(
        hash_password, request.password, settings.password_hash_iterations
    )
    try:
        user = await create_user(session, request, password_hash)
        await session.commit()
    except IntegrityError:
        # A concurrent registration claimed the email after the check above
        await session.rollback()
        raise _user_exists() from None

    logger.info("User registered", extra={"structured": {"user_id": user.id}})

    token = create_access_token(user.id, user.email, user.is_admin, settings)
    return AuthResponse(
        message="User created successfully", token=token, user=UserOut.model_validate(user)
    )


@router.post("/login", response_model=AuthResponse, dependencies=[Depends(auth_rate_limit)])
async def login(
    request: LoginRequest,
    settings: Annotated[Settings, Depends(get_app_settings)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AuthResponse:
    """Exchange email and password for a signed token.

    Unknown email and wrong password produce the same 401.
    """
    user = await get_user_by_email(session, request.email)
    if user is None or not await run_in_threadpool(
        verify_password, request.password, user.password_hash
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
        )

    token = create_access_token(user.id, user.email, user.is_admin, settings)
    return AuthResponse(message="Login successful", token=token, user=UserOut.model_validate(user))


@router.get("/profile", response_model=UserResponse)
async def get_profile(
    ctx: CurrentContext,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> UserResponse:
    user = await get_user(session, ctx.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserResponse(user=UserOut.model_validate(user))


@router.put("/profile", response_model=ProfileUpdateResponse)
async def update_profile(
    request: ProfileUpdate,
    ctx: CurrentContext,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ProfileUpdateResponse:
    user = await get_user(session, ctx.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    user = await update_user(session, user, request)
    await session.commit()
    return ProfileUpdateResponse(
        message="Profile updated successfully", user=UserOut.model_validate(user)
    )
