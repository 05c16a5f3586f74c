"""Admin endpoints - dashboard reporting and user management."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from tripplanner.api.auth import AdminContext
from tripplanner.api.params import PathId
from tripplanner.db.engine import get_session
from tripplanner.db.reports import dashboard_stats, growth_trends, popular_activities
from tripplanner.db.users import get_user, get_user_by_email, list_users, update_user
from tripplanner.models.admin import (
    AdminStats,
    AdminUserListResponse,
    AdminUserUpdate,
    PopularActivitiesResponse,
    TrendsResponse,
)
from tripplanner.models.users import ProfileUpdateResponse, UserOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

SessionDep = Annotated[AsyncSession, Depends(get_session)]


@router.get("/stats", response_model=AdminStats)
async def stats(ctx: AdminContext, session: SessionDep) -> AdminStats:
    """Dashboard counters: users, trips, active trips and total planned spend."""
    return await dashboard_stats(session)


@router.get("/users", response_model=AdminUserListResponse)
async def users(ctx: AdminContext, session: SessionDep) -> AdminUserListResponse:
    accounts = await list_users(session)
    return AdminUserListResponse(users=[UserOut.model_validate(user) for user in accounts])


@router.put("/users/{user_id}", response_model=ProfileUpdateResponse)
async def update_user_route(
    user_id: PathId, request: AdminUserUpdate, ctx: AdminContext, session: SessionDep
) -> ProfileUpdateResponse:
    """Edit another user's profile, email or admin flag.

    Raises:
        HTTPException: 404 if the user does not exist, 400 if the new email
            belongs to a different account
    """
    user = await get_user(session, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    if request.email:
        existing = await get_user_by_email(session, request.email)
        if existing is not None and existing.id != user.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Email already in use"
            )

    user = await update_user(session, user, request)
    await session.commit()

    logger.info(
        "User updated by admin",
        extra={"structured": {"user_id": user.id, "admin_id": ctx.user_id}},
    )
    return ProfileUpdateResponse(
        message="User updated successfully", user=UserOut.model_validate(user)
    )


@router.get("/trends", response_model=TrendsResponse)
async def trends(ctx: AdminContext, session: SessionDep) -> TrendsResponse:
    """Monthly sign-ups and trips over the last six months, oldest first."""
    return TrendsResponse(trends=await growth_trends(session))


@router.get("/activities/popular", response_model=PopularActivitiesResponse)
async def popular(ctx: AdminContext, session: SessionDep) -> PopularActivitiesResponse:
    return PopularActivitiesResponse(activities=await popular_activities(session))
