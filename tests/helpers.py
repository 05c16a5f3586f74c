"""Test helpers shared by the integration suites."""

from dataclasses import dataclass
from decimal import Decimal

from httpx import AsyncClient

TEST_PASSWORD = "secret123"


@dataclass
class ReferenceData:
    """Ids of the seeded cities and activities, keyed by name."""

    cities: dict[str, int]
    activities: dict[str, int]
    activity_costs: dict[str, Decimal]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def register(
    client: AsyncClient, email: str, first_name: str = "Test", password: str = TEST_PASSWORD
) -> str:
    """Register through the API and return the issued token."""
    response = await client.post(
        "/auth/register",
        json={
            "email": email,
            "password": password,
            "first_name": first_name,
            "last_name": "User",
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["token"]
