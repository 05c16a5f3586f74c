"""Models package - re-exports for convenience."""

from tripplanner.models.admin import AdminStats, AdminUserUpdate, PopularActivity, TrendPoint
from tripplanner.models.budget import CategoryTotal, StopBudget, TripBudget
from tripplanner.models.common import Amount, CamelModel, Cents, ORMModel, TripStatus
from tripplanner.models.reference import ActivityOut, ActivityWithCity, CityDetail, CityOut
from tripplanner.models.trips import (
    ExpenseCreate,
    ExpenseOut,
    ItineraryActivity,
    ItineraryStop,
    StopActivityCreate,
    StopActivityOut,
    StopActivityUpdate,
    StopCreate,
    StopOut,
    StopUpdate,
    TripCreate,
    TripDetail,
    TripOut,
    TripSummary,
    TripUpdate,
)
from tripplanner.models.users import LoginRequest, ProfileUpdate, RegisterRequest, UserOut

__all__ = [
    # Common
    "Amount",
    "Cents",
    "TripStatus",
    "ORMModel",
    "CamelModel",
    # Users
    "RegisterRequest",
    "LoginRequest",
    "ProfileUpdate",
    "UserOut",
    # Trips
    "TripCreate",
    "TripUpdate",
    "TripOut",
    "TripSummary",
    "TripDetail",
    # Stops
    "StopCreate",
    "StopUpdate",
    "StopOut",
    "ItineraryStop",
    # Stop activities
    "StopActivityCreate",
    "StopActivityUpdate",
    "StopActivityOut",
    "ItineraryActivity",
    # Expenses
    "ExpenseCreate",
    "ExpenseOut",
    # Budget
    "CategoryTotal",
    "StopBudget",
    "TripBudget",
    # Reference data
    "CityOut",
    "CityDetail",
    "ActivityOut",
    "ActivityWithCity",
    # Admin
    "AdminStats",
    "AdminUserUpdate",
    "TrendPoint",
    "PopularActivity",
]
