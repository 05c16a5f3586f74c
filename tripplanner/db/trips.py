"""Trip, stop, stop-activity and expense database operations.

Helpers flush but never commit; the calling handler owns the transaction.
"""

import logging
from collections import defaultdict
from collections.abc import Collection
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tripplanner.db.context import RequestContext
from tripplanner.db.models import Activity, City, Expense, StopActivity, Trip, TripStop
from tripplanner.db.queries import (
    apply_changes,
    select_itinerary_rows,
    select_owned_trip,
    select_owned_trips,
    select_stop_costs,
    select_visible_trip,
)
from tripplanner.models.budget import TripBudget
from tripplanner.models.common import TripStatus
from tripplanner.models.trips import (
    ExpenseCreate,
    ItineraryActivity,
    ItineraryStop,
    StopActivityCreate,
    StopActivityOut,
    StopActivityUpdate,
    StopCreate,
    StopOut,
    StopUpdate,
    TripCreate,
    TripDetail,
    TripOut,
    TripSummary,
    TripUpdate,
)
from tripplanner.services.budget import StopCosts, summarize_budget, trip_total
from tripplanner.services.itinerary import assemble_stops, stop_costs

logger = logging.getLogger(__name__)


# --- Trips -----------------------------------------------------------------


async def get_visible_trip(
    session: AsyncSession, trip_id: int, ctx: RequestContext | None
) -> Trip | None:
    """Get a trip that is public or owned by the requester."""
    result = await session.execute(select_visible_trip(trip_id, ctx))
    return result.scalar_one_or_none()


async def get_owned_trip(session: AsyncSession, trip_id: int, ctx: RequestContext) -> Trip | None:
    """Get a trip only if the requester owns it."""
    result = await session.execute(select_owned_trip(trip_id, ctx))
    return result.scalar_one_or_none()


async def list_trip_summaries(
    session: AsyncSession, ctx: RequestContext, status: str | None = None
) -> list[TripSummary]:
    """List the requester's trips, newest first, with stop counts and totals.

    Args:
        session: Database session
        ctx: Request context (only the requester's trips are listed)
        status: Optional trip status filter

    Returns:
        Trip summaries
    """
    query = select_owned_trips(ctx)
    if status:
        query = query.where(Trip.status == status)
    query = query.order_by(Trip.created_at.desc(), Trip.id.desc())

    trips = list((await session.execute(query)).scalars().all())
    if not trips:
        return []

    trip_ids = [trip.id for trip in trips]
    costs_by_trip = await collect_stop_costs(session, trip_ids)
    expenses_by_trip = await collect_expense_amounts(session, trip_ids)

    return [
        TripSummary(
            **TripOut.model_validate(trip).model_dump(),
            stop_count=len(costs_by_trip.get(trip.id, [])),
            total_cost=trip_total(
                costs_by_trip.get(trip.id, []), expenses_by_trip.get(trip.id, [])
            ),
        )
        for trip in trips
    ]


async def collect_stop_costs(
    session: AsyncSession, trip_ids: Collection[int] | None = None
) -> dict[int, list[StopCosts]]:
    """Load budget inputs for every stop of the given trips (all trips if None)."""
    result = await session.execute(select_stop_costs(trip_ids))

    stops: dict[int, dict[int, tuple[str | None, Decimal, list[Decimal]]]] = defaultdict(dict)
    for trip_id, stop_id, name, budget, cost in result:
        entry = stops[trip_id].setdefault(stop_id, (name, budget, []))
        if cost is not None:
            entry[2].append(cost)

    return {
        trip_id: [
            StopCosts(stop_id=stop_id, name=name, budget=budget, activity_costs=tuple(costs))
            for stop_id, (name, budget, costs) in by_stop.items()
        ]
        for trip_id, by_stop in stops.items()
    }


async def collect_expense_amounts(
    session: AsyncSession, trip_ids: Collection[int] | None = None
) -> dict[int, list[Decimal]]:
    """Load expense amounts grouped by trip id (all trips if None)."""
    query = select(Expense.trip_id, Expense.amount)
    if trip_ids is not None:
        query = query.where(Expense.trip_id.in_(trip_ids))

    amounts: dict[int, list[Decimal]] = defaultdict(list)
    for trip_id, amount in await session.execute(query):
        amounts[trip_id].append(amount)
    return amounts


async def create_trip(session: AsyncSession, ctx: RequestContext, data: TripCreate) -> Trip:
    """Create a trip owned by the requester in the planning state."""
    trip = Trip(user_id=ctx.user_id, status="planning", **data.model_dump())
    session.add(trip)
    await session.flush()
    return trip


async def update_trip(session: AsyncSession, trip: Trip, data: TripUpdate) -> Trip:
    """Apply a partial update to a trip."""
    changes = data.model_dump(exclude_unset=True, mode="python")
    if changes.get("status") is not None:
        changes["status"] = TripStatus(changes["status"]).value
    apply_changes(trip, changes, required=("name", "start_date", "end_date", "is_public", "status"))

    if trip.end_date < trip.start_date:
        raise ValueError("end_date must not be before start_date")

    trip.updated_at = datetime.now(UTC)
    await session.flush()
    return trip


async def delete_trip(session: AsyncSession, trip: Trip) -> None:
    """Delete a trip together with its stops, scheduled activities and expenses.

    Children are deleted explicitly rather than relying on the database's
    foreign-key cascade, which SQLite only honours when enabled.
    """
    trip_id, user_id = trip.id, trip.user_id
    stop_ids = select(TripStop.id).where(TripStop.trip_id == trip_id)

    await session.execute(delete(StopActivity).where(StopActivity.stop_id.in_(stop_ids)))
    await session.execute(delete(TripStop).where(TripStop.trip_id == trip_id))
    await session.execute(delete(Expense).where(Expense.trip_id == trip_id))
    await session.execute(delete(Trip).where(Trip.id == trip_id))

    logger.info("Trip deleted", extra={"structured": {"trip_id": trip_id, "user_id": user_id}})


# --- Itinerary & budget ----------------------------------------------------


async def load_itinerary_stops(session: AsyncSession, trip_id: int) -> list[ItineraryStop]:
    """Load a trip's stops and their activities in one round trip."""
    result = await session.execute(select_itinerary_rows([trip_id]))

    rows: list[tuple[ItineraryStop, ItineraryActivity | None]] = []
    for stop, city_name, country, city_image, stop_activity, activity in result:
        itinerary_stop = ItineraryStop(
            **StopOut.model_validate(stop).model_dump(),
            city_name=city_name,
            country=country,
            city_image=city_image,
        )
        itinerary_activity = None
        if stop_activity is not None and activity is not None:
            itinerary_activity = ItineraryActivity(
                **StopActivityOut.model_validate(stop_activity).model_dump(),
                name=activity.name,
                category=activity.category,
                description=activity.description,
                image_url=activity.image_url,
                duration=activity.duration,
                rating=activity.rating,
            )
        rows.append((itinerary_stop, itinerary_activity))

    return assemble_stops(rows)


async def assemble_itinerary(session: AsyncSession, trip: Trip) -> TripDetail:
    """Compose trip header, ordered stops and ordered activities."""
    stops = await load_itinerary_stops(session, trip.id)
    return TripDetail(**TripOut.model_validate(trip).model_dump(), stops=stops)


async def compute_trip_budget(session: AsyncSession, trip: Trip) -> TripBudget:
    """Aggregate stop contributions and expenses for a trip."""
    stops = await load_itinerary_stops(session, trip.id)

    result = await session.execute(
        select(Expense.category, Expense.amount).where(Expense.trip_id == trip.id)
    )
    expenses = [(category, amount) for category, amount in result]

    return summarize_budget(stop_costs(stops), expenses)


# --- Stops -----------------------------------------------------------------


async def count_stops(session: AsyncSession, trip_id: int) -> int:
    result = await session.execute(
        select(func.count()).select_from(TripStop).where(TripStop.trip_id == trip_id)
    )
    return int(result.scalar_one())


async def city_exists(session: AsyncSession, city_id: int) -> bool:
    result = await session.execute(select(City.id).where(City.id == city_id))
    return result.scalar_one_or_none() is not None


async def add_stop(session: AsyncSession, trip: Trip, data: StopCreate) -> TripStop:
    """Append a stop to a trip.

    When ``order_index`` is omitted the stop goes after all existing stops
    (index == current stop count).
    """
    values = data.model_dump()
    if values["order_index"] is None:
        values["order_index"] = await count_stops(session, trip.id)
    if values["budget"] is None:
        values["budget"] = Decimal("0")

    stop = TripStop(trip_id=trip.id, **values)
    session.add(stop)
    await session.flush()
    return stop


async def get_stop(session: AsyncSession, trip_id: int, stop_id: int) -> TripStop | None:
    """Get a stop scoped to its parent trip."""
    result = await session.execute(
        select(TripStop).where(TripStop.id == stop_id, TripStop.trip_id == trip_id)
    )
    return result.scalar_one_or_none()


async def update_stop(session: AsyncSession, stop: TripStop, data: StopUpdate) -> TripStop:
    """Apply a partial update to a stop."""
    changes = data.model_dump(exclude_unset=True)
    apply_changes(stop, changes, required=("order_index", "budget"))

    if stop.start_date and stop.end_date and stop.end_date < stop.start_date:
        raise ValueError("end_date must not be before start_date")

    await session.flush()
    return stop


async def delete_stop(session: AsyncSession, stop: TripStop) -> None:
    """Delete a stop and its scheduled activities. Other stops keep their indexes."""
    await session.execute(delete(StopActivity).where(StopActivity.stop_id == stop.id))
    await session.execute(delete(TripStop).where(TripStop.id == stop.id))


# --- Stop activities -------------------------------------------------------


async def get_activity(session: AsyncSession, activity_id: int) -> Activity | None:
    result = await session.execute(select(Activity).where(Activity.id == activity_id))
    return result.scalar_one_or_none()


async def add_stop_activity(
    session: AsyncSession, stop: TripStop, activity: Activity, data: StopActivityCreate
) -> StopActivity:
    """Schedule an activity at a stop.

    The activity's current cost is snapshotted when no cost is supplied.
    """
    values = data.model_dump()
    if values["cost"] is None:
        values["cost"] = activity.cost

    stop_activity = StopActivity(stop_id=stop.id, **values)
    session.add(stop_activity)
    await session.flush()
    return stop_activity


async def get_stop_activity(
    session: AsyncSession, stop_id: int, stop_activity_id: int
) -> StopActivity | None:
    """Get a scheduled activity scoped to its stop."""
    result = await session.execute(
        select(StopActivity).where(
            StopActivity.id == stop_activity_id, StopActivity.stop_id == stop_id
        )
    )
    return result.scalar_one_or_none()


async def update_stop_activity(
    session: AsyncSession, stop_activity: StopActivity, data: StopActivityUpdate
) -> StopActivity:
    apply_changes(stop_activity, data.model_dump(exclude_unset=True), required=("cost",))
    await session.flush()
    return stop_activity


async def delete_stop_activity(session: AsyncSession, stop_activity: StopActivity) -> None:
    await session.execute(delete(StopActivity).where(StopActivity.id == stop_activity.id))


# --- Expenses --------------------------------------------------------------


async def list_expenses(session: AsyncSession, trip_id: int) -> list[Expense]:
    result = await session.execute(
        select(Expense)
        .where(Expense.trip_id == trip_id)
        .order_by(Expense.category.asc(), Expense.id.asc())
    )
    return list(result.scalars().all())


async def add_expense(session: AsyncSession, trip: Trip, data: ExpenseCreate) -> Expense:
    expense = Expense(trip_id=trip.id, **data.model_dump())
    session.add(expense)
    await session.flush()
    return expense


async def get_expense(session: AsyncSession, trip_id: int, expense_id: int) -> Expense | None:
    result = await session.execute(
        select(Expense).where(Expense.id == expense_id, Expense.trip_id == trip_id)
    )
    return result.scalar_one_or_none()


async def delete_expense(session: AsyncSession, expense: Expense) -> None:
    await session.execute(delete(Expense).where(Expense.id == expense.id))
