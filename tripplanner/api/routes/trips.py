"""Trip endpoints - trips, stops, scheduled activities, expenses and budget.

Every mutation loads the trip through an owner-scoped query first; a trip
that is missing or owned by someone else is reported as 404 either way.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tripplanner.api.auth import CurrentContext, OptionalContext
from tripplanner.api.params import PathId
from tripplanner.db.context import RequestContext
from tripplanner.db.engine import get_session
from tripplanner.db.models import Trip, TripStop
from tripplanner.db.trips import (
    add_expense,
    add_stop,
    add_stop_activity,
    assemble_itinerary,
    city_exists,
    compute_trip_budget,
    create_trip,
    delete_expense,
    delete_stop,
    delete_stop_activity,
    delete_trip,
    get_activity,
    get_expense,
    get_owned_trip,
    get_stop,
    get_stop_activity,
    get_visible_trip,
    list_expenses,
    list_trip_summaries,
    update_stop,
    update_stop_activity,
    update_trip,
)
from tripplanner.models.budget import BudgetResponse
from tripplanner.models.common import MessageResponse, TripStatus
from tripplanner.models.trips import (
    ExpenseCreate,
    ExpenseListResponse,
    ExpenseMutationResponse,
    ExpenseOut,
    StopActivityCreate,
    StopActivityMutationResponse,
    StopActivityOut,
    StopActivityUpdate,
    StopCreate,
    StopMutationResponse,
    StopOut,
    StopUpdate,
    TripCreate,
    TripListResponse,
    TripMutationResponse,
    TripOut,
    TripResponse,
    TripUpdate,
)
from tripplanner.utils.metrics import request_metrics

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips", tags=["trips"])

SessionDep = Annotated[AsyncSession, Depends(get_session)]

TRIP_NOT_FOUND = "Trip not found"


def _not_found(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


async def _owned_trip(session: AsyncSession, trip_id: int, ctx: RequestContext) -> Trip:
    trip = await get_owned_trip(session, trip_id, ctx)
    if trip is None:
        raise _not_found(TRIP_NOT_FOUND)
    return trip


async def _visible_trip(session: AsyncSession, trip_id: int, ctx: RequestContext | None) -> Trip:
    trip = await get_visible_trip(session, trip_id, ctx)
    if trip is None:
        raise _not_found(TRIP_NOT_FOUND)
    return trip


async def _owned_stop(
    session: AsyncSession, trip_id: int, stop_id: int, ctx: RequestContext
) -> TripStop:
    trip = await _owned_trip(session, trip_id, ctx)
    stop = await get_stop(session, trip.id, stop_id)
    if stop is None:
        raise _not_found("Stop not found")
    return stop


async def _check_city(session: AsyncSession, city_id: int | None) -> None:
    if city_id is not None and not await city_exists(session, city_id):
        raise _bad_request("City not found")


# --- Trips -----------------------------------------------------------------


@router.get("", response_model=TripListResponse)
async def list_trips(
    ctx: CurrentContext,
    session: SessionDep,
    trip_status: Annotated[TripStatus | None, Query(alias="status")] = None,
) -> TripListResponse:
    """List the requester's trips with stop counts and total cost."""
    trips = await list_trip_summaries(
        session, ctx, trip_status.value if trip_status is not None else None
    )
    return TripListResponse(trips=trips)


@router.post("", response_model=TripMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_trip_route(
    request: TripCreate, ctx: CurrentContext, session: SessionDep
) -> TripMutationResponse:
    trip = await create_trip(session, ctx, request)
    await session.commit()

    logger.info(
        "Trip created", extra={"structured": {"trip_id": trip.id, "user_id": ctx.user_id}}
    )
    return TripMutationResponse(
        message="Trip created successfully", trip=TripOut.model_validate(trip)
    )


@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip(trip_id: PathId, ctx: OptionalContext, session: SessionDep) -> TripResponse:
    """Get a trip with its ordered stops and activities.

    Anonymous callers and non-owners only see public trips.
    """
    trip = await _visible_trip(session, trip_id, ctx)
    return TripResponse(trip=await assemble_itinerary(session, trip))


@router.put("/{trip_id}", response_model=TripMutationResponse)
async def update_trip_route(
    trip_id: PathId, request: TripUpdate, ctx: CurrentContext, session: SessionDep
) -> TripMutationResponse:
    trip = await _owned_trip(session, trip_id, ctx)
    try:
        trip = await update_trip(session, trip, request)
    except ValueError as e:
        raise _bad_request(str(e)) from e
    await session.commit()
    return TripMutationResponse(
        message="Trip updated successfully", trip=TripOut.model_validate(trip)
    )


@router.delete("/{trip_id}", response_model=MessageResponse)
async def delete_trip_route(
    trip_id: PathId, ctx: CurrentContext, session: SessionDep
) -> MessageResponse:
    """Delete a trip along with its stops, scheduled activities and expenses."""
    trip = await _owned_trip(session, trip_id, ctx)
    await delete_trip(session, trip)
    await session.commit()
    return MessageResponse(message="Trip deleted successfully")


# --- Budget ----------------------------------------------------------------


@router.get("/{trip_id}/budget", response_model=BudgetResponse)
async def get_trip_budget(
    trip_id: PathId, ctx: OptionalContext, session: SessionDep
) -> BudgetResponse:
    """Get the trip's budget breakdown.

    A stop with a positive budget counts that budget instead of its
    activities; expenses are always added.
    """
    trip = await _visible_trip(session, trip_id, ctx)
    budget = await compute_trip_budget(session, trip)
    request_metrics.inc_budget("trip")
    return BudgetResponse(budget=budget)


# --- Stops -----------------------------------------------------------------


@router.post(
    "/{trip_id}/stops", response_model=StopMutationResponse, status_code=status.HTTP_201_CREATED
)
async def add_stop_route(
    trip_id: PathId, request: StopCreate, ctx: CurrentContext, session: SessionDep
) -> StopMutationResponse:
    """Add a stop; without ``order_index`` it is appended after existing stops."""
    trip = await _owned_trip(session, trip_id, ctx)
    await _check_city(session, request.city_id)

    stop = await add_stop(session, trip, request)
    await session.commit()
    return StopMutationResponse(
        message="Stop added successfully", stop=StopOut.model_validate(stop)
    )


@router.put("/{trip_id}/stops/{stop_id}", response_model=StopMutationResponse)
async def update_stop_route(
    trip_id: PathId,
    stop_id: PathId,
    request: StopUpdate,
    ctx: CurrentContext,
    session: SessionDep,
) -> StopMutationResponse:
    stop = await _owned_stop(session, trip_id, stop_id, ctx)
    if "city_id" in request.model_fields_set:
        await _check_city(session, request.city_id)

    try:
        stop = await update_stop(session, stop, request)
    except ValueError as e:
        raise _bad_request(str(e)) from e
    await session.commit()
    return StopMutationResponse(
        message="Stop updated successfully", stop=StopOut.model_validate(stop)
    )


@router.delete("/{trip_id}/stops/{stop_id}", response_model=MessageResponse)
async def delete_stop_route(
    trip_id: PathId, stop_id: PathId, ctx: CurrentContext, session: SessionDep
) -> MessageResponse:
    stop = await _owned_stop(session, trip_id, stop_id, ctx)
    await delete_stop(session, stop)
    await session.commit()
    return MessageResponse(message="Stop deleted successfully")


# --- Stop activities -------------------------------------------------------


@router.post(
    "/{trip_id}/stops/{stop_id}/activities",
    response_model=StopActivityMutationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_stop_activity_route(
    trip_id: PathId,
    stop_id: PathId,
    request: StopActivityCreate,
    ctx: CurrentContext,
    session: SessionDep,
) -> StopActivityMutationResponse:
    """Schedule an activity at a stop, snapshotting its cost when none is given."""
    stop = await _owned_stop(session, trip_id, stop_id, ctx)
    activity = await get_activity(session, request.activity_id)
    if activity is None:
        raise _not_found("Activity not found")

    stop_activity = await add_stop_activity(session, stop, activity, request)
    await session.commit()
    return StopActivityMutationResponse(
        message="Activity added successfully",
        activity=StopActivityOut.model_validate(stop_activity),
    )


@router.put(
    "/{trip_id}/stops/{stop_id}/activities/{stop_activity_id}",
    response_model=StopActivityMutationResponse,
)
async def update_stop_activity_route(
    trip_id: PathId,
    stop_id: PathId,
    stop_activity_id: PathId,
    request: StopActivityUpdate,
    ctx: CurrentContext,
    session: SessionDep,
) -> StopActivityMutationResponse:
    stop = await _owned_stop(session, trip_id, stop_id, ctx)
    stop_activity = await get_stop_activity(session, stop.id, stop_activity_id)
    if stop_activity is None:
        raise _not_found("Activity not found")

    stop_activity = await update_stop_activity(session, stop_activity, request)
    await session.commit()
    return StopActivityMutationResponse(
        message="Activity updated successfully",
        activity=StopActivityOut.model_validate(stop_activity),
    )


@router.delete(
    "/{trip_id}/stops/{stop_id}/activities/{stop_activity_id}", response_model=MessageResponse
)
async def delete_stop_activity_route(
    trip_id: PathId,
    stop_id: PathId,
    stop_activity_id: PathId,
    ctx: CurrentContext,
    session: SessionDep,
) -> MessageResponse:
    stop = await _owned_stop(session, trip_id, stop_id, ctx)
    stop_activity = await get_stop_activity(session, stop.id, stop_activity_id)
    if stop_activity is None:
        raise _not_found("Activity not found")

    await delete_stop_activity(session, stop_activity)
    await session.commit()
    return MessageResponse(message="Activity removed successfully")


# --- Expenses --------------------------------------------------------------


@router.get("/{trip_id}/expenses", response_model=ExpenseListResponse)
async def list_expenses_route(
    trip_id: PathId, ctx: CurrentContext, session: SessionDep
) -> ExpenseListResponse:
    trip = await _owned_trip(session, trip_id, ctx)
    expenses = await list_expenses(session, trip.id)
    return ExpenseListResponse(expenses=[ExpenseOut.model_validate(e) for e in expenses])


@router.post(
    "/{trip_id}/expenses",
    response_model=ExpenseMutationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_expense_route(
    trip_id: PathId, request: ExpenseCreate, ctx: CurrentContext, session: SessionDep
) -> ExpenseMutationResponse:
    trip = await _owned_trip(session, trip_id, ctx)
    expense = await add_expense(session, trip, request)
    await session.commit()
    return ExpenseMutationResponse(
        message="Expense added successfully", expense=ExpenseOut.model_validate(expense)
    )


@router.delete("/{trip_id}/expenses/{expense_id}", response_model=MessageResponse)
async def delete_expense_route(
    trip_id: PathId, expense_id: PathId, ctx: CurrentContext, session: SessionDep
) -> MessageResponse:
    trip = await _owned_trip(session, trip_id, ctx)
    expense = await get_expense(session, trip.id, expense_id)
    if expense is None:
        raise _not_found("Expense not found")

    await delete_expense(session, expense)
    await session.commit()
    return MessageResponse(message="Expense deleted successfully")
