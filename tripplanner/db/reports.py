"""Read-only reporting queries for the admin dashboard."""

from collections import Counter
from datetime import UTC, date, datetime

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from tripplanner.db.models import Activity, Base, StopActivity, Trip, User
from tripplanner.db.trips import collect_expense_amounts, collect_stop_costs
from tripplanner.models.admin import AdminStats, PopularActivity, TrendPoint
from tripplanner.services.budget import ZERO, trip_total

TREND_MONTHS = 6
POPULAR_ACTIVITY_LIMIT = 5


async def _count(session: AsyncSession, model: type[Base], *clauses: ColumnElement[bool]) -> int:
    query = select(func.count()).select_from(model)
    if clauses:
        query = query.where(*clauses)
    return int((await session.execute(query)).scalar_one())


async def dashboard_stats(session: AsyncSession, today: date | None = None) -> AdminStats:
    """Totals for users and trips, trips not yet finished, and planned spend.

    Revenue is the sum of every trip's grand total, computed with the same
    stop-budget override rule as the trip budget endpoint.
    """
    today = today or datetime.now(UTC).date()

    costs_by_trip = await collect_stop_costs(session)
    expenses_by_trip = await collect_expense_amounts(session)
    trip_ids = set(costs_by_trip) | set(expenses_by_trip)
    revenue = sum(
        (
            trip_total(costs_by_trip.get(trip_id, []), expenses_by_trip.get(trip_id, []))
            for trip_id in trip_ids
        ),
        ZERO,
    )

    return AdminStats(
        total_users=await _count(session, User),
        total_trips=await _count(session, Trip),
        active_trips=await _count(session, Trip, Trip.end_date >= today),
        revenue=revenue,
    )


def month_window(today: date, months: int = TREND_MONTHS) -> list[tuple[int, int]]:
    """Return (year, month) pairs for the last ``months`` months, oldest first."""
    window: list[tuple[int, int]] = []
    year, month = today.year, today.month
    for _ in range(months):
        window.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(window))


async def _created_months(
    session: AsyncSession, column: InstrumentedAttribute[datetime], since: datetime
) -> Counter[tuple[int, int]]:
    result = await session.execute(select(column).where(column >= since))
    return Counter((created.year, created.month) for created in result.scalars())


async def growth_trends(session: AsyncSession, today: date | None = None) -> list[TrendPoint]:
    """Sign-ups and trips created per month over the trailing window.

    Months without activity are reported with zero counts.
    """
    today = today or datetime.now(UTC).date()
    window = month_window(today)
    first_year, first_month = window[0]
    since = datetime(first_year, first_month, 1, tzinfo=UTC)

    users = await _created_months(session, User.created_at, since)
    trips = await _created_months(session, Trip.created_at, since)

    return [
        TrendPoint(
            month=date(year, month, 1).strftime("%b"),
            users=users[(year, month)],
            trips=trips[(year, month)],
        )
        for year, month in window
    ]


async def popular_activities(
    session: AsyncSession, limit: int = POPULAR_ACTIVITY_LIMIT
) -> list[PopularActivity]:
    """Activities ranked by how many times they have been scheduled."""
    value = func.count(StopActivity.id).label("value")
    result = await session.execute(
        select(Activity.name, Activity.category, value)
        .join(StopActivity, StopActivity.activity_id == Activity.id)
        .group_by(Activity.id, Activity.name, Activity.category)
        .order_by(value.desc(), Activity.id.asc())
        .limit(limit)
    )
    return [
        PopularActivity(name=name, category=category, value=int(count))
        for name, category, count in result
    ]
