"""Common types and enums shared across all models."""

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

CENT = Decimal("0.01")


def quantize_cents(value: Decimal) -> Decimal:
    """Round a currency value to whole cents."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


# Largest value an Integer column holds on every supported database
MAX_DB_ID = 2**31 - 1

# Reference to an existing row supplied in a request body
DbId = Annotated[int, Field(ge=1, le=MAX_DB_ID)]

# Currency amount supplied by a client: non-negative, at most two decimals
Amount = Annotated[
    Decimal, Field(ge=0, max_digits=10, decimal_places=2), AfterValidator(quantize_cents)
]

# Currency amount read back from storage or computed
Cents = Annotated[Decimal, AfterValidator(quantize_cents)]


class TripStatus(str, Enum):
    """Trip lifecycle status."""

    planning = "planning"
    ongoing = "ongoing"
    completed = "completed"
    cancelled = "cancelled"


class ORMModel(BaseModel):
    """Response model populated from ORM rows."""

    model_config = ConfigDict(from_attributes=True)


class CamelModel(BaseModel):
    """Response model rendered with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
