"""Ownership-safe query helpers."""

from collections.abc import Collection, Mapping
from typing import Any

from sqlalchemy import Select, false, or_, select

from tripplanner.db.context import RequestContext
from tripplanner.db.models import Activity, City, StopActivity, Trip, TripStop


def select_owned_trips(ctx: RequestContext) -> Select:
    """Select trips owned by the requester.

    Args:
        ctx: Request context with user_id

    Returns:
        Select filtered by user_id
    """
    return select(Trip).where(Trip.user_id == ctx.user_id)


def select_owned_trip(trip_id: int, ctx: RequestContext) -> Select:
    """Select a single trip only if the requester owns it."""
    return select_owned_trips(ctx).where(Trip.id == trip_id)


def select_visible_trip(trip_id: int, ctx: RequestContext | None) -> Select:
    """Select a single trip if it is public or owned by the requester.

    Args:
        trip_id: Trip ID
        ctx: Request context, or None for anonymous requests

    Returns:
        Select that yields no row when the trip is absent or inaccessible
    """
    owner_clause = Trip.user_id == ctx.user_id if ctx is not None else false()
    return select(Trip).where(Trip.id == trip_id, or_(Trip.is_public.is_(True), owner_clause))


def select_itinerary_rows(trip_ids: Collection[int]) -> Select:
    """Select every stop of the given trips with its city and scheduled activities.

    Outer joins keep stops without a city and stops without activities.
    """
    return (
        select(
            TripStop,
            City.name.label("city_name"),
            City.country.label("country"),
            City.image_url.label("city_image"),
            StopActivity,
            Activity,
        )
        .outerjoin(City, TripStop.city_id == City.id)
        .outerjoin(StopActivity, StopActivity.stop_id == TripStop.id)
        .outerjoin(Activity, StopActivity.activity_id == Activity.id)
        .where(TripStop.trip_id.in_(trip_ids))
    )


def select_stop_costs(trip_ids: Collection[int] | None = None) -> Select:
    """Select (trip_id, stop_id, stop name, budget, activity cost) rows for cost totals."""
    stmt = select(
        TripStop.trip_id,
        TripStop.id,
        TripStop.name,
        TripStop.budget,
        StopActivity.cost,
    ).outerjoin(StopActivity, StopActivity.stop_id == TripStop.id)
    if trip_ids is not None:
        stmt = stmt.where(TripStop.trip_id.in_(trip_ids))
    return stmt


def apply_changes(
    obj: Any, changes: Mapping[str, Any], required: Collection[str] = ()
) -> None:
    """Copy supplied fields onto an ORM object.

    Explicit nulls clear nullable columns; for ``required`` columns a null
    leaves the current value in place.
    """
    for name, value in changes.items():
        if value is None and name in required:
            continue
        setattr(obj, name, value)
