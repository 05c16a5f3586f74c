"""Itinerary assembly from a batched stop/activity join."""

from collections.abc import Iterable
from datetime import date, time

from tripplanner.models.trips import ItineraryActivity, ItineraryStop
from tripplanner.services.budget import StopCosts


def activity_sort_key(activity: ItineraryActivity) -> tuple:
    """Order by scheduled date, then time; unscheduled entries go last."""
    return (
        activity.scheduled_date is None,
        activity.scheduled_date or date.min,
        activity.scheduled_time is None,
        activity.scheduled_time or time.min,
        activity.id,
    )


def stop_sort_key(stop: ItineraryStop) -> tuple[int, int]:
    # order_index may have gaps after deletes
    return (stop.order_index, stop.id)


def assemble_stops(
    rows: Iterable[tuple[ItineraryStop, ItineraryActivity | None]],
) -> list[ItineraryStop]:
    """Group outer-join rows by stop id into ordered stops with ordered activities.

    Each row pairs a stop with one of its activities, or with ``None`` for a
    stop that has no activities.
    """
    stops: dict[int, ItineraryStop] = {}

    for stop, activity in rows:
        current = stops.setdefault(stop.id, stop)
        if activity is not None:
            current.activities.append(activity)

    ordered = sorted(stops.values(), key=stop_sort_key)
    for stop in ordered:
        stop.activities.sort(key=activity_sort_key)

    return ordered


def stop_costs(stops: Iterable[ItineraryStop]) -> list[StopCosts]:
    """Project assembled stops onto budget inputs."""
    return [
        StopCosts(
            stop_id=stop.id,
            name=stop.name,
            budget=stop.budget,
            activity_costs=tuple(activity.cost for activity in stop.activities),
        )
        for stop in stops
    ]
