"""Admin reporting and user-management models."""

from pydantic import BaseModel, Field

from tripplanner.models.common import CamelModel, Cents
from tripplanner.models.users import EMAIL_PATTERN, UserOut


class AdminStats(CamelModel):
    """Dashboard counters."""

    total_users: int
    total_trips: int
    active_trips: int
    revenue: Cents


class AdminUserUpdate(BaseModel):
    """Request body for PUT /admin/users/{id}."""

    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    email: str | None = Field(None, pattern=EMAIL_PATTERN, max_length=255)
    city: str | None = Field(None, max_length=100)
    country: str | None = Field(None, max_length=100)
    is_admin: bool | None = None


class TrendPoint(BaseModel):
    """Sign-ups and trips created in one calendar month."""

    month: str
    users: int
    trips: int


class PopularActivity(BaseModel):
    """Activity ranked by how often it was scheduled."""

    name: str
    category: str
    value: int


class AdminUserListResponse(BaseModel):
    users: list[UserOut]


class TrendsResponse(BaseModel):
    trends: list[TrendPoint]


class PopularActivitiesResponse(BaseModel):
    activities: list[PopularActivity]
