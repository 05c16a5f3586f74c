"""City reference-data endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tripplanner.api.auth import CurrentContext
from tripplanner.api.params import PathId
from tripplanner.db.engine import get_session
from tripplanner.db.reference import (
    get_city_detail,
    list_cities,
    list_countries,
    list_popular_cities,
)
from tripplanner.models.reference import (
    CityListResponse,
    CityOut,
    CityResponse,
    CitySort,
    CountryListResponse,
)

router = APIRouter(prefix="/cities", tags=["cities"])

SessionDep = Annotated[AsyncSession, Depends(get_session)]


@router.get("", response_model=CityListResponse)
async def list_cities_route(
    ctx: CurrentContext,
    session: SessionDep,
    search: str | None = None,
    country: str | None = None,
    region: str | None = None,
    sort_by: CitySort | None = None,
) -> CityListResponse:
    """List cities, optionally filtered by a name/country search, country or region."""
    cities = await list_cities(
        session,
        {"search": search, "country": country, "region": region},
        sort_by.value if sort_by is not None else None,
    )
    return CityListResponse(cities=[CityOut.model_validate(city) for city in cities])


@router.get("/popular", response_model=CityListResponse)
async def popular_cities(
    ctx: CurrentContext,
    session: SessionDep,
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
) -> CityListResponse:
    cities = await list_popular_cities(session, limit)
    return CityListResponse(cities=[CityOut.model_validate(city) for city in cities])


@router.get("/countries", response_model=CountryListResponse)
async def countries(ctx: CurrentContext, session: SessionDep) -> CountryListResponse:
    return CountryListResponse(countries=await list_countries(session))


@router.get("/{city_id}", response_model=CityResponse)
async def get_city(city_id: PathId, ctx: CurrentContext, session: SessionDep) -> CityResponse:
    """Get a city with its activities."""
    city = await get_city_detail(session, city_id)
    if city is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="City not found")
    return CityResponse(city=city)
