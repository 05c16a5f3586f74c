"""Unit tests for the reference-data filter builder."""

from sqlalchemy import select
from sqlalchemy.dialects import sqlite

from tripplanner.db.filters import ACTIVITY_FILTERS, CITY_FILTERS, contains, escape_like
from tripplanner.db.models import Activity, City


def compile_sql(stmt) -> str:  # type: ignore[no-untyped-def]
    return str(stmt.compile(dialect=sqlite.dialect()))


def test_escape_like_escapes_wildcards() -> None:
    assert escape_like("100%_off\\") == "100\\%\\_off\\\\"
    assert contains("new") == "%new%"


def test_missing_and_empty_params_produce_no_clauses() -> None:
    assert CITY_FILTERS.clauses({}) == []
    assert CITY_FILTERS.clauses({"search": "", "country": None}) == []


def test_unknown_params_are_ignored() -> None:
    assert CITY_FILTERS.clauses({"name; DROP TABLE cities": "x", "popularity_score": 5}) == []


def test_one_clause_per_supplied_param() -> None:
    clauses = ACTIVITY_FILTERS.clauses({"category": "Food", "min_cost": 10, "max_cost": 50})

    assert len(clauses) == 3


def test_values_are_bound_not_inlined() -> None:
    stmt = CITY_FILTERS.apply(select(City), {"search": "Par'is"}, None)
    sql = compile_sql(stmt)

    assert "Par'is" not in sql
    assert "LIKE" in sql
    assert "?" in sql


def test_known_sort_is_applied() -> None:
    sql = compile_sql(CITY_FILTERS.apply(select(City), {}, "popularity"))

    assert "ORDER BY cities.popularity_score DESC, cities.id ASC" in sql


def test_unknown_sort_falls_back_to_default() -> None:
    sql = compile_sql(ACTIVITY_FILTERS.apply(select(Activity), {}, "random()"))

    assert "ORDER BY activities.name ASC, activities.id ASC" in sql


def test_parameters_lists_supported_filters() -> None:
    assert ACTIVITY_FILTERS.parameters == ["search", "city_id", "category", "min_cost", "max_cost"]
