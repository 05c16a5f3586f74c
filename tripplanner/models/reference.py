"""City and activity reference-data models."""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from tripplanner.models.common import Cents, ORMModel


class CitySort(str, Enum):
    popularity = "popularity"
    cost_low = "cost_low"
    cost_high = "cost_high"
    name = "name"


class ActivitySort(str, Enum):
    cost_low = "cost_low"
    cost_high = "cost_high"
    duration = "duration"
    name = "name"


class ActivityOut(ORMModel):
    """Activity reference row."""

    id: int
    city_id: int
    name: str
    description: str | None = None
    category: str
    cost: Cents
    duration: int | None = None
    rating: float | None = None
    image_url: str | None = None


class ActivityWithCity(ActivityOut):
    """Activity with the name and country of its city."""

    city_name: str
    country: str


class CityOut(ORMModel):
    """City reference row."""

    id: int
    name: str
    country: str
    region: str | None = None
    cost_index: Decimal | None = None
    popularity_score: int
    description: str | None = None
    image_url: str | None = None


class CityDetail(CityOut):
    activities: list[ActivityOut] = Field(default_factory=list)


class CityListResponse(BaseModel):
    cities: list[CityOut]


class CityResponse(BaseModel):
    city: CityDetail


class CountryListResponse(BaseModel):
    countries: list[str]


class ActivityListResponse(BaseModel):
    activities: list[ActivityWithCity]


class CityActivityListResponse(BaseModel):
    activities: list[ActivityOut]


class ActivityResponse(BaseModel):
    activity: ActivityWithCity


class CategoryListResponse(BaseModel):
    categories: list[str]
