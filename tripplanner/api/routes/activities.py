"""Activity reference-data endpoints."""

from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tripplanner.api.auth import CurrentContext
from tripplanner.api.params import PathId, QueryId
from tripplanner.db.engine import get_session
from tripplanner.db.reference import (
    get_activity_with_city,
    list_activities,
    list_categories,
    list_city_activities,
)
from tripplanner.models.reference import (
    ActivityListResponse,
    ActivityOut,
    ActivityResponse,
    ActivitySort,
    CategoryListResponse,
    CityActivityListResponse,
)

router = APIRouter(prefix="/activities", tags=["activities"])

SessionDep = Annotated[AsyncSession, Depends(get_session)]


@router.get("", response_model=ActivityListResponse)
async def list_activities_route(
    ctx: CurrentContext,
    session: SessionDep,
    search: str | None = None,
    city_id: QueryId = None,
    category: str | None = None,
    min_cost: Annotated[Decimal | None, Query(ge=0)] = None,
    max_cost: Annotated[Decimal | None, Query(ge=0)] = None,
    sort_by: ActivitySort | None = None,
) -> ActivityListResponse:
    """Search activities.

    Args:
        ctx: Request context
        session: Database session
        search: Substring matched against name and description
        city_id: Restrict to one city
        category: Restrict to one category
        min_cost: Inclusive lower cost bound
        max_cost: Inclusive upper cost bound
        sort_by: One of cost_low, cost_high, duration, name

    Returns:
        Matching activities with their city name and country
    """
    params = {
        "search": search,
        "city_id": city_id,
        "category": category,
        "min_cost": min_cost,
        "max_cost": max_cost,
    }
    activities = await list_activities(
        session, params, sort_by.value if sort_by is not None else None
    )
    return ActivityListResponse(activities=activities)


@router.get("/categories", response_model=CategoryListResponse)
async def categories(ctx: CurrentContext, session: SessionDep) -> CategoryListResponse:
    return CategoryListResponse(categories=await list_categories(session))


@router.get("/city/{city_id}", response_model=CityActivityListResponse)
async def city_activities(
    city_id: PathId,
    ctx: CurrentContext,
    session: SessionDep,
    category: str | None = None,
) -> CityActivityListResponse:
    activities = await list_city_activities(session, city_id, category)
    return CityActivityListResponse(
        activities=[ActivityOut.model_validate(activity) for activity in activities]
    )


@router.get("/{activity_id}", response_model=ActivityResponse)
async def get_activity_route(
    activity_id: PathId, ctx: CurrentContext, session: SessionDep
) -> ActivityResponse:
    activity = await get_activity_with_city(session, activity_id)
    if activity is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Activity not found")
    return ActivityResponse(activity=activity)
