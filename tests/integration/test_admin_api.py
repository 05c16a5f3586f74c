"""Integration tests for admin reporting and user management."""

from datetime import UTC, datetime

import pytest
from httpx import AsyncClient

from tests.helpers import ReferenceData, bearer

PAST_TRIP = {"name": "Past", "start_date": "2020-01-01", "end_date": "2020-01-05"}
FUTURE_TRIP = {"name": "Future", "start_date": "2099-01-01", "end_date": "2099-01-05"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path",
    ["/admin/stats", "/admin/users", "/admin/trends", "/admin/activities/popular"],
)
async def test_admin_routes_forbidden_for_regular_users(
    client: AsyncClient, user_token: str, path: str
) -> None:
    response = await client.get(path, headers=bearer(user_token))

    assert response.status_code == 403
    assert response.json() == {"error": "Admin access required"}


@pytest.mark.asyncio
async def test_admin_routes_require_auth(client: AsyncClient) -> None:
    assert (await client.get("/admin/stats")).status_code == 401


@pytest.mark.asyncio
async def test_stats(
    client: AsyncClient, admin_token: str, user_token: str, reference_data: ReferenceData
) -> None:
    headers = bearer(user_token)
    await client.post("/trips", json=PAST_TRIP, headers=headers)
    future = (await client.post("/trips", json=FUTURE_TRIP, headers=headers)).json()["trip"]
    await client.post(f"/trips/{future['id']}/stops", json={"budget": "100"}, headers=headers)
    await client.post(
        f"/trips/{future['id']}/expenses",
        json={"category": "food", "amount": "25"},
        headers=headers,
    )

    response = await client.get("/admin/stats", headers=bearer(admin_token))

    assert response.status_code == 200
    assert response.json() == {
        "totalUsers": 2,
        "totalTrips": 2,
        "activeTrips": 1,
        "revenue": "125.00",
    }


@pytest.mark.asyncio
async def test_list_users(client: AsyncClient, admin_token: str, user_token: str) -> None:
    response = await client.get("/admin/users", headers=bearer(admin_token))

    emails = {u["email"] for u in response.json()["users"]}
    assert emails == {"admin@example.com", "alice@example.com"}
    assert all("password_hash" not in u for u in response.json()["users"])


@pytest.mark.asyncio
async def test_admin_updates_user(client: AsyncClient, admin_token: str, user_token: str) -> None:
    users = (await client.get("/admin/users", headers=bearer(admin_token))).json()["users"]
    alice = next(u for u in users if u["email"] == "alice@example.com")

    response = await client.put(
        f"/admin/users/{alice['id']}",
        json={"is_admin": True, "country": "Portugal"},
        headers=bearer(admin_token),
    )

    assert response.status_code == 200
    assert response.json()["user"]["is_admin"] is True
    assert response.json()["user"]["country"] == "Portugal"
    # The flag is read from the database, so Alice's existing token now works
    assert (await client.get("/admin/stats", headers=bearer(user_token))).status_code == 200


@pytest.mark.asyncio
async def test_admin_update_email_conflict(
    client: AsyncClient, admin_token: str, user_token: str, other_token: str
) -> None:
    users = (await client.get("/admin/users", headers=bearer(admin_token))).json()["users"]
    bob = next(u for u in users if u["email"] == "bob@example.com")

    response = await client.put(
        f"/admin/users/{bob['id']}",
        json={"email": "alice@example.com"},
        headers=bearer(admin_token),
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Email already in use"}


@pytest.mark.asyncio
async def test_admin_update_missing_user(client: AsyncClient, admin_token: str) -> None:
    response = await client.put(
        "/admin/users/999", json={"city": "Nowhere"}, headers=bearer(admin_token)
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_trends_cover_six_months(
    client: AsyncClient, admin_token: str, user_token: str
) -> None:
    await client.post("/trips", json=FUTURE_TRIP, headers=bearer(user_token))

    response = await client.get("/admin/trends", headers=bearer(admin_token))

    trends = response.json()["trends"]
    assert len(trends) == 6
    current = trends[-1]
    assert current["month"] == datetime.now(UTC).strftime("%b")
    assert current["users"] == 2
    assert current["trips"] == 1
    assert all(point["users"] == 0 for point in trends[:-1])


@pytest.mark.asyncio
async def test_popular_activities(
    client: AsyncClient, admin_token: str, user_token: str, reference_data: ReferenceData
) -> None:
    headers = bearer(user_token)
    trip = (await client.post("/trips", json=FUTURE_TRIP, headers=headers)).json()["trip"]
    stop = (await client.post(f"/trips/{trip['id']}/stops", json={}, headers=headers)).json()[
        "stop"
    ]
    for name in ("Louvre Museum", "Louvre Museum", "Tapas Crawl"):
        await client.post(
            f"/trips/{trip['id']}/stops/{stop['id']}/activities",
            json={"activity_id": reference_data.activities[name]},
            headers=headers,
        )

    response = await client.get("/admin/activities/popular", headers=bearer(admin_token))

    assert response.json()["activities"] == [
        {"name": "Louvre Museum", "category": "Culture", "value": 2},
        {"name": "Tapas Crawl", "category": "Food", "value": 1},
    ]
