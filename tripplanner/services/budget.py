"""Trip budget aggregation.

Per stop, a manual budget greater than zero is authoritative and the costs of
the activities scheduled under it are not added on top. A stop without a
budget contributes the sum of its activity cost snapshots. Expenses are
grouped by category and always added.

All arithmetic is done on ``Decimal`` values.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from tripplanner.models.budget import CategoryTotal, StopBudget, TripBudget
from tripplanner.models.common import quantize_cents

ZERO = Decimal("0")


def to_decimal(value: Decimal | int | float | str | None) -> Decimal:
    """Coerce a stored or computed amount to ``Decimal``.

    Floats go through ``str`` so the shortest repr is used, not the binary
    expansion.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class StopCosts:
    """Cost inputs for a single stop."""

    stop_id: int
    name: str | None = None
    budget: Decimal = ZERO
    activity_costs: Sequence[Decimal] = field(default_factory=tuple)

    @property
    def activities_total(self) -> Decimal:
        return sum((to_decimal(cost) for cost in self.activity_costs), ZERO)

    @property
    def has_override(self) -> bool:
        return to_decimal(self.budget) > ZERO


def stop_contribution(stop: StopCosts) -> Decimal:
    """Amount a stop adds to the trip total."""
    if stop.has_override:
        return to_decimal(stop.budget)
    return stop.activities_total


def group_expenses(expenses: Iterable[tuple[str, Decimal]]) -> list[CategoryTotal]:
    """Sum expense amounts per category, ordered by category name."""
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for category, amount in expenses:
        totals[category] += to_decimal(amount)
    return [CategoryTotal(category=category, total=totals[category]) for category in sorted(totals)]


def summarize_budget(
    stops: Iterable[StopCosts], expenses: Iterable[tuple[str, Decimal]]
) -> TripBudget:
    """Compute stop contributions, expense totals and the grand total."""
    stop_rows: list[StopBudget] = []
    stops_total = ZERO

    for stop in stops:
        contribution = stop_contribution(stop)
        stops_total += contribution
        stop_rows.append(
            StopBudget(
                stop_id=stop.stop_id,
                name=stop.name,
                budget=to_decimal(stop.budget),
                activities_total=stop.activities_total,
                contribution=contribution,
                budget_override=stop.has_override,
            )
        )

    by_category = group_expenses(expenses)
    expenses_total = sum((row.total for row in by_category), ZERO)

    return TripBudget(
        stops_total=stops_total,
        expenses_by_category=by_category,
        expenses_total=expenses_total,
        grand_total=quantize_cents(stops_total) + quantize_cents(expenses_total),
        stops=stop_rows,
    )


def trip_total(stops: Iterable[StopCosts], expenses: Iterable[Decimal]) -> Decimal:
    """Grand total without the breakdown, for list views and reports."""
    total = sum((stop_contribution(stop) for stop in stops), ZERO)
    total += sum((to_decimal(amount) for amount in expenses), ZERO)
    return quantize_cents(total)
