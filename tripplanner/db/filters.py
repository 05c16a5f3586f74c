"""Composable query filters for reference-data listings.

A :class:`FilterBuilder` owns a fixed, enumerated set of optional predicates
and sort orders. Request parameters outside that set are ignored, and values
are always bound as parameters, never spliced into SQL text.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import ColumnElement, Select, or_

from tripplanner.db.models import Activity, City

PredicateFactory = Callable[[Any], ColumnElement[bool]]


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains(value: str) -> str:
    return f"%{escape_like(value)}%"


@dataclass(frozen=True)
class FilterBuilder:
    """Builds WHERE and ORDER BY clauses from an enumerated parameter list."""

    predicates: Mapping[str, PredicateFactory]
    sorts: Mapping[str, tuple[ColumnElement[Any], ...]]
    default_sort: tuple[ColumnElement[Any], ...] = field(default_factory=tuple)

    @property
    def parameters(self) -> list[str]:
        return list(self.predicates)

    def clauses(self, params: Mapping[str, Any]) -> list[ColumnElement[bool]]:
        """Return one clause per supplied, non-empty known parameter."""
        clauses: list[ColumnElement[bool]] = []
        for name, factory in self.predicates.items():
            value = params.get(name)
            if value is None or value == "":
                continue
            clauses.append(factory(value))
        return clauses

    def order_by(self, sort_by: str | None) -> tuple[ColumnElement[Any], ...]:
        if sort_by and sort_by in self.sorts:
            return self.sorts[sort_by]
        return self.default_sort

    def apply(self, stmt: Select, params: Mapping[str, Any], sort_by: str | None = None) -> Select:
        """Apply filters and ordering to a select statement."""
        clauses = self.clauses(params)
        if clauses:
            stmt = stmt.where(*clauses)
        return stmt.order_by(*self.order_by(sort_by))


CITY_FILTERS = FilterBuilder(
    predicates={
        "search": lambda v: or_(
            City.name.ilike(contains(v), escape="\\"),
            City.country.ilike(contains(v), escape="\\"),
        ),
        "country": lambda v: City.country == v,
        "region": lambda v: City.region == v,
    },
    sorts={
        "popularity": (City.popularity_score.desc(), City.id.asc()),
        "cost_low": (City.cost_index.asc(), City.id.asc()),
        "cost_high": (City.cost_index.desc(), City.id.asc()),
        "name": (City.name.asc(), City.id.asc()),
    },
    default_sort=(City.name.asc(), City.id.asc()),
)

ACTIVITY_FILTERS = FilterBuilder(
    predicates={
        "search": lambda v: or_(
            Activity.name.ilike(contains(v), escape="\\"),
            Activity.description.ilike(contains(v), escape="\\"),
        ),
        "city_id": lambda v: Activity.city_id == v,
        "category": lambda v: Activity.category == v,
        "min_cost": lambda v: Activity.cost >= v,
        "max_cost": lambda v: Activity.cost <= v,
    },
    sorts={
        "cost_low": (Activity.cost.asc(), Activity.id.asc()),
        "cost_high": (Activity.cost.desc(), Activity.id.asc()),
        "duration": (Activity.duration.asc(), Activity.id.asc()),
        "name": (Activity.name.asc(), Activity.id.asc()),
    },
    default_sort=(Activity.name.asc(), Activity.id.asc()),
)
