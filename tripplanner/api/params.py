"""Shared request parameter types."""

from typing import Annotated

from fastapi import Path, Query

from tripplanner.models.common import MAX_DB_ID

# Row ids in the URL; out-of-range values are rejected before any query runs
PathId = Annotated[int, Path(ge=1, le=MAX_DB_ID)]

QueryId = Annotated[int | None, Query(ge=1, le=MAX_DB_ID)]
