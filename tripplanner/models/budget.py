"""Budget breakdown models."""

from pydantic import Field

from tripplanner.models.common import CamelModel, Cents


class CategoryTotal(CamelModel):
    """Expenses summed for one category."""

    category: str
    total: Cents


class StopBudget(CamelModel):
    """Contribution of a single stop to the trip total."""

    stop_id: int
    name: str | None
    budget: Cents
    activities_total: Cents
    contribution: Cents
    budget_override: bool


class TripBudget(CamelModel):
    """Budget aggregation for a trip.

    ``grand_total`` is always ``stops_total + expenses_total``.
    """

    stops_total: Cents
    expenses_by_category: list[CategoryTotal] = Field(default_factory=list)
    expenses_total: Cents
    grand_total: Cents
    stops: list[StopBudget] = Field(default_factory=list)


class BudgetResponse(CamelModel):
    budget: TripBudget
