"""Trip, stop, stop-activity and expense models."""

from datetime import date, datetime, time
from typing import Self

from pydantic import BaseModel, Field, model_validator

from tripplanner.models.common import MAX_DB_ID, Amount, Cents, DbId, ORMModel, TripStatus


def _check_date_range(start: date | None, end: date | None) -> None:
    if start is not None and end is not None and end < start:
        raise ValueError("end_date must not be before start_date")


class TripCreate(BaseModel):
    """Request body for POST /trips."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    start_date: date
    end_date: date
    cover_photo: str | None = None
    is_public: bool = False

    @model_validator(mode="after")
    def check_dates(self) -> Self:
        _check_date_range(self.start_date, self.end_date)
        return self


class TripUpdate(BaseModel):
    """Request body for PUT /trips/{id}; omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    cover_photo: str | None = None
    is_public: bool | None = None
    status: TripStatus | None = None

    @model_validator(mode="after")
    def check_dates(self) -> Self:
        _check_date_range(self.start_date, self.end_date)
        return self


class TripOut(ORMModel):
    """Trip header fields."""

    id: int
    user_id: int
    name: str
    description: str | None
    start_date: date
    end_date: date
    cover_photo: str | None
    is_public: bool
    status: TripStatus
    created_at: datetime
    updated_at: datetime | None = None


class TripSummary(TripOut):
    """Trip list entry annotated with stop count and computed total cost."""

    stop_count: int
    total_cost: Cents


class StopCreate(BaseModel):
    """Request body for POST /trips/{id}/stops."""

    city_id: DbId | None = None
    name: str | None = Field(None, max_length=255)
    start_date: date | None = None
    end_date: date | None = None
    order_index: int | None = Field(None, ge=0, le=MAX_DB_ID)
    budget: Amount | None = None
    notes: str | None = None

    @model_validator(mode="after")
    def check_dates(self) -> Self:
        _check_date_range(self.start_date, self.end_date)
        return self


class StopUpdate(StopCreate):
    """Request body for PUT /trips/{id}/stops/{stop_id}."""


class StopOut(ORMModel):
    """Stop row."""

    id: int
    trip_id: int
    city_id: int | None
    name: str | None
    start_date: date | None
    end_date: date | None
    order_index: int
    budget: Cents
    notes: str | None


class StopActivityCreate(BaseModel):
    """Request body for POST /trips/{id}/stops/{stop_id}/activities."""

    activity_id: DbId
    scheduled_date: date | None = None
    scheduled_time: time | None = None
    cost: Amount | None = None
    notes: str | None = None


class StopActivityUpdate(BaseModel):
    """Request body for PUT on a scheduled activity."""

    scheduled_date: date | None = None
    scheduled_time: time | None = None
    cost: Amount | None = None
    notes: str | None = None


class StopActivityOut(ORMModel):
    """Stop-activity join row with its cost snapshot."""

    id: int
    stop_id: int
    activity_id: int
    scheduled_date: date | None
    scheduled_time: time | None
    cost: Cents
    notes: str | None


class ItineraryActivity(StopActivityOut):
    """Scheduled activity enriched with reference activity details."""

    name: str
    category: str
    description: str | None = None
    image_url: str | None = None
    duration: int | None = None
    rating: float | None = None


class ItineraryStop(StopOut):
    """Stop with its city details and ordered activities."""

    city_name: str | None = None
    country: str | None = None
    city_image: str | None = None
    activities: list[ItineraryActivity] = Field(default_factory=list)


class TripDetail(TripOut):
    """Assembled itinerary: trip header plus ordered stops."""

    stops: list[ItineraryStop] = Field(default_factory=list)


class ExpenseCreate(BaseModel):
    """Request body for POST /trips/{id}/expenses."""

    category: str = Field(..., min_length=1, max_length=100)
    amount: Amount
    description: str | None = None
    expense_date: date | None = None


class ExpenseOut(ORMModel):
    """Expense row."""

    id: int
    trip_id: int
    category: str
    amount: Cents
    description: str | None
    expense_date: date | None
    created_at: datetime


class TripListResponse(BaseModel):
    trips: list[TripSummary]


class TripResponse(BaseModel):
    trip: TripDetail


class TripMutationResponse(BaseModel):
    message: str
    trip: TripOut


class StopMutationResponse(BaseModel):
    message: str
    stop: StopOut


class StopActivityMutationResponse(BaseModel):
    message: str
    activity: StopActivityOut


class ExpenseListResponse(BaseModel):
    expenses: list[ExpenseOut]


class ExpenseMutationResponse(BaseModel):
    message: str
    expense: ExpenseOut
