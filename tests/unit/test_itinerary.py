"""Unit tests for itinerary grouping and ordering."""

from datetime import date, time
from decimal import Decimal

from tripplanner.models.trips import ItineraryActivity, ItineraryStop
from tripplanner.services.itinerary import assemble_stops, stop_costs


def make_stop(stop_id: int, order_index: int, budget: str = "0") -> ItineraryStop:
    return ItineraryStop(
        id=stop_id,
        trip_id=1,
        city_id=None,
        name=f"Stop {stop_id}",
        start_date=None,
        end_date=None,
        order_index=order_index,
        budget=Decimal(budget),
        notes=None,
    )


def make_activity(
    activity_id: int,
    stop_id: int,
    scheduled_date: date | None = None,
    scheduled_time: time | None = None,
    cost: str = "10",
) -> ItineraryActivity:
    return ItineraryActivity(
        id=activity_id,
        stop_id=stop_id,
        activity_id=100 + activity_id,
        scheduled_date=scheduled_date,
        scheduled_time=scheduled_time,
        cost=Decimal(cost),
        notes=None,
        name=f"Activity {activity_id}",
        category="Culture",
    )


def rows_for(*pairs: tuple[int, int, ItineraryActivity | None]) -> list:
    """Build outer-join rows; each row gets a fresh stop object like the driver would."""
    return [(make_stop(stop_id, order_index), activity) for stop_id, order_index, activity in pairs]


def test_stops_ordered_by_order_index_with_gaps() -> None:
    rows = rows_for((1, 5, None), (2, 0, None), (3, 2, None))

    stops = assemble_stops(rows)

    assert [stop.id for stop in stops] == [2, 3, 1]


def test_equal_order_index_ties_broken_by_id() -> None:
    rows = rows_for((9, 1, None), (4, 1, None))

    assert [stop.id for stop in assemble_stops(rows)] == [4, 9]


def test_activities_grouped_under_their_stop() -> None:
    rows = rows_for(
        (1, 0, make_activity(10, 1)),
        (2, 1, make_activity(20, 2)),
        (1, 0, make_activity(11, 1)),
    )

    stops = assemble_stops(rows)

    assert [a.id for a in stops[0].activities] == [10, 11]
    assert [a.id for a in stops[1].activities] == [20]


def test_stop_without_activities_has_empty_list() -> None:
    stops = assemble_stops(rows_for((1, 0, None)))

    assert len(stops) == 1
    assert stops[0].activities == []


def test_activities_ordered_by_date_then_time_unscheduled_last() -> None:
    rows = rows_for(
        (1, 0, make_activity(1, 1)),
        (1, 0, make_activity(2, 1, date(2026, 6, 2), time(9, 0))),
        (1, 0, make_activity(3, 1, date(2026, 6, 1), time(18, 0))),
        (1, 0, make_activity(4, 1, date(2026, 6, 1), time(8, 30))),
        (1, 0, make_activity(5, 1, date(2026, 6, 1))),
    )

    activities = assemble_stops(rows)[0].activities

    assert [a.id for a in activities] == [4, 3, 5, 2, 1]


def test_stop_costs_projects_budget_inputs() -> None:
    stop = make_stop(1, 0, budget="50")
    rows = [
        (stop, make_activity(1, 1, cost="20")),
        (make_stop(1, 0, budget="50"), make_activity(2, 1, cost="5")),
    ]

    (costs,) = stop_costs(assemble_stops(rows))

    assert costs.stop_id == 1
    assert costs.budget == Decimal("50.00")
    assert costs.activities_total == Decimal("25.00")
    assert costs.has_override is True
