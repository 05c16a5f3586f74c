"""City and activity reference-data queries."""

from collections.abc import Mapping
from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from tripplanner.db.filters import ACTIVITY_FILTERS, CITY_FILTERS
from tripplanner.db.models import Activity, City
from tripplanner.models.reference import ActivityOut, ActivityWithCity, CityDetail, CityOut


async def list_cities(
    session: AsyncSession, params: Mapping[str, Any], sort_by: str | None = None
) -> list[City]:
    """List cities matching the optional search/country/region filters."""
    query = CITY_FILTERS.apply(select(City), params, sort_by)
    result = await session.execute(query)
    return list(result.scalars().all())


async def list_popular_cities(session: AsyncSession, limit: int = 10) -> list[City]:
    result = await session.execute(
        select(City).order_by(City.popularity_score.desc(), City.id.asc()).limit(limit)
    )
    return list(result.scalars().all())


async def list_countries(session: AsyncSession) -> list[str]:
    result = await session.execute(select(City.country).distinct().order_by(City.country))
    return list(result.scalars().all())


async def get_city_detail(session: AsyncSession, city_id: int) -> CityDetail | None:
    """Get a city with its activities ordered by category, then name."""
    city = (await session.execute(select(City).where(City.id == city_id))).scalar_one_or_none()
    if city is None:
        return None

    activities = await list_city_activities(session, city_id)
    return CityDetail(
        **CityOut.model_validate(city).model_dump(),
        activities=[ActivityOut.model_validate(activity) for activity in activities],
    )


def _select_activities_with_city() -> Select:
    return select(Activity, City.name, City.country).join(City, Activity.city_id == City.id)


def _with_city(activity: Activity, city_name: str, country: str) -> ActivityWithCity:
    return ActivityWithCity(
        **ActivityOut.model_validate(activity).model_dump(), city_name=city_name, country=country
    )


async def list_activities(
    session: AsyncSession, params: Mapping[str, Any], sort_by: str | None = None
) -> list[ActivityWithCity]:
    """List activities matching the optional filters, with their city."""
    query = ACTIVITY_FILTERS.apply(_select_activities_with_city(), params, sort_by)
    result = await session.execute(query)
    return [_with_city(activity, city_name, country) for activity, city_name, country in result]


async def get_activity_with_city(
    session: AsyncSession, activity_id: int
) -> ActivityWithCity | None:
    result = await session.execute(
        _select_activities_with_city().where(Activity.id == activity_id)
    )
    row = result.first()
    if row is None:
        return None
    activity, city_name, country = row
    return _with_city(activity, city_name, country)


async def list_categories(session: AsyncSession) -> list[str]:
    result = await session.execute(
        select(Activity.category).distinct().order_by(Activity.category)
    )
    return list(result.scalars().all())


async def list_city_activities(
    session: AsyncSession, city_id: int, category: str | None = None
) -> list[Activity]:
    """List a city's activities, optionally narrowed to one category."""
    query = select(Activity).where(Activity.city_id == city_id)
    if category:
        query = query.where(Activity.category == category)
    query = query.order_by(Activity.category, Activity.name, Activity.id)

    result = await session.execute(query)
    return list(result.scalars().all())
