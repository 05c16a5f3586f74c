"""Integration tests for trip CRUD and visibility."""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tests.helpers import ReferenceData, bearer
from tripplanner.db.models import Expense, StopActivity, TripStop

TRIP = {"name": "Summer in Europe", "start_date": "2026-06-01", "end_date": "2026-06-14"}


async def create_trip(client: AsyncClient, token: str, **overrides: object) -> dict:
    response = await client.post("/trips", json={**TRIP, **overrides}, headers=bearer(token))
    assert response.status_code == 201, response.text
    return response.json()["trip"]


@pytest.mark.asyncio
async def test_create_trip(client: AsyncClient, user_token: str) -> None:
    response = await client.post("/trips", json=TRIP, headers=bearer(user_token))

    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "Trip created successfully"
    assert data["trip"]["name"] == "Summer in Europe"
    assert data["trip"]["status"] == "planning"
    assert data["trip"]["is_public"] is False


@pytest.mark.asyncio
async def test_create_trip_requires_auth(client: AsyncClient) -> None:
    response = await client.post("/trips", json=TRIP)

    assert response.status_code == 401
    assert response.json() == {"error": "Access token required"}


@pytest.mark.asyncio
async def test_create_trip_rejects_inverted_dates(client: AsyncClient, user_token: str) -> None:
    response = await client.post(
        "/trips",
        json={**TRIP, "start_date": "2026-06-14", "end_date": "2026-06-01"},
        headers=bearer(user_token),
    )

    assert response.status_code == 400
    assert "end_date must not be before start_date" in response.json()["error"]


@pytest.mark.asyncio
async def test_create_trip_missing_name(client: AsyncClient, user_token: str) -> None:
    response = await client.post(
        "/trips",
        json={"start_date": "2026-06-01", "end_date": "2026-06-02"},
        headers=bearer(user_token),
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("name:")


@pytest.mark.asyncio
async def test_list_trips_only_own_newest_first(
    client: AsyncClient, user_token: str, other_token: str
) -> None:
    first = await create_trip(client, user_token, name="First")
    second = await create_trip(client, user_token, name="Second")
    await create_trip(client, other_token, name="Not mine")

    response = await client.get("/trips", headers=bearer(user_token))

    assert response.status_code == 200
    trips = response.json()["trips"]
    assert [t["id"] for t in trips] == [second["id"], first["id"]]
    assert trips[0]["stop_count"] == 0
    assert trips[0]["total_cost"] == "0.00"


@pytest.mark.asyncio
async def test_list_trips_filtered_by_status(client: AsyncClient, user_token: str) -> None:
    trip = await create_trip(client, user_token)
    await create_trip(client, user_token, name="Still planning")
    headers = bearer(user_token)
    await client.put(f"/trips/{trip['id']}", json={"status": "completed"}, headers=headers)

    response = await client.get("/trips", params={"status": "completed"}, headers=headers)

    assert [t["id"] for t in response.json()["trips"]] == [trip["id"]]


@pytest.mark.asyncio
async def test_list_trips_rejects_unknown_status(client: AsyncClient, user_token: str) -> None:
    response = await client.get("/trips", params={"status": "lost"}, headers=bearer(user_token))

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_trips_annotates_stop_count_and_total(
    client: AsyncClient, user_token: str, reference_data: ReferenceData
) -> None:
    trip = await create_trip(client, user_token)
    headers = bearer(user_token)
    await client.post(f"/trips/{trip['id']}/stops", json={"budget": "100"}, headers=headers)
    await client.post(f"/trips/{trip['id']}/stops", json={"name": "No budget"}, headers=headers)
    await client.post(
        f"/trips/{trip['id']}/expenses", json={"category": "food", "amount": "30"}, headers=headers
    )

    response = await client.get("/trips", headers=headers)

    (summary,) = response.json()["trips"]
    assert summary["stop_count"] == 2
    assert summary["total_cost"] == "130.00"


@pytest.mark.asyncio
async def test_owner_can_read_private_trip(client: AsyncClient, user_token: str) -> None:
    trip = await create_trip(client, user_token)

    response = await client.get(f"/trips/{trip['id']}", headers=bearer(user_token))

    assert response.status_code == 200
    assert response.json()["trip"]["stops"] == []


@pytest.mark.asyncio
async def test_private_trip_hidden_from_others_and_anonymous(
    client: AsyncClient, user_token: str, other_token: str
) -> None:
    trip = await create_trip(client, user_token)

    anonymous = await client.get(f"/trips/{trip['id']}")
    other = await client.get(f"/trips/{trip['id']}", headers=bearer(other_token))
    bad_token = await client.get(f"/trips/{trip['id']}", headers=bearer("garbage"))

    for response in (anonymous, other, bad_token):
        assert response.status_code == 404
        assert response.json() == {"error": "Trip not found"}


@pytest.mark.asyncio
async def test_public_trip_readable_by_anyone(
    client: AsyncClient, user_token: str, other_token: str
) -> None:
    trip = await create_trip(client, user_token, is_public=True)

    anonymous = await client.get(f"/trips/{trip['id']}")
    other = await client.get(f"/trips/{trip['id']}", headers=bearer(other_token))

    assert anonymous.status_code == 200
    assert other.status_code == 200
    assert anonymous.json()["trip"]["id"] == trip["id"]


@pytest.mark.asyncio
async def test_missing_trip_is_404(client: AsyncClient, user_token: str) -> None:
    response = await client.get("/trips/9999", headers=bearer(user_token))

    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("trip_id", ["99999999999999999999", str(2**31), "0"])
async def test_trip_id_outside_column_range_is_400(
    client: AsyncClient, user_token: str, trip_id: str
) -> None:
    response = await client.get(f"/trips/{trip_id}", headers=bearer(user_token))

    assert response.status_code == 400
    assert response.json()["error"].startswith("trip_id:")


@pytest.mark.asyncio
async def test_partial_update_keeps_other_fields(client: AsyncClient, user_token: str) -> None:
    trip = await create_trip(client, user_token, description="Interrail")

    response = await client.put(
        f"/trips/{trip['id']}",
        json={"name": "Renamed", "is_public": True},
        headers=bearer(user_token),
    )

    assert response.status_code == 200
    updated = response.json()["trip"]
    assert updated["name"] == "Renamed"
    assert updated["is_public"] is True
    assert updated["description"] == "Interrail"
    assert updated["start_date"] == "2026-06-01"
    assert updated["updated_at"] is not None


@pytest.mark.asyncio
async def test_update_rejects_end_before_existing_start(
    client: AsyncClient, user_token: str
) -> None:
    trip = await create_trip(client, user_token)

    response = await client.put(
        f"/trips/{trip['id']}", json={"end_date": "2026-05-01"}, headers=bearer(user_token)
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_non_owner_cannot_update_or_delete(
    client: AsyncClient, user_token: str, other_token: str
) -> None:
    trip = await create_trip(client, user_token, is_public=True)

    update = await client.put(
        f"/trips/{trip['id']}", json={"name": "Hijacked"}, headers=bearer(other_token)
    )
    delete = await client.delete(f"/trips/{trip['id']}", headers=bearer(other_token))

    assert update.status_code == 404
    assert delete.status_code == 404
    still_there = await client.get(f"/trips/{trip['id']}", headers=bearer(user_token))
    assert still_there.json()["trip"]["name"] == "Summer in Europe"


@pytest.mark.asyncio
async def test_delete_trip_cascades(
    client: AsyncClient,
    user_token: str,
    reference_data: ReferenceData,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    headers = bearer(user_token)
    trip = await create_trip(client, user_token)
    stop = (
        await client.post(
            f"/trips/{trip['id']}/stops",
            json={"city_id": reference_data.cities["Paris"]},
            headers=headers,
        )
    ).json()["stop"]
    await client.post(
        f"/trips/{trip['id']}/stops/{stop['id']}/activities",
        json={"activity_id": reference_data.activities["Louvre Museum"]},
        headers=headers,
    )
    await client.post(
        f"/trips/{trip['id']}/expenses", json={"category": "food", "amount": "12"}, headers=headers
    )

    response = await client.delete(f"/trips/{trip['id']}", headers=headers)

    assert response.status_code == 200
    assert response.json() == {"message": "Trip deleted successfully"}
    assert (await client.get(f"/trips/{trip['id']}", headers=headers)).status_code == 404

    async with session_factory() as session:
        for model in (TripStop, StopActivity, Expense):
            count = await session.scalar(select(func.count()).select_from(model))
            assert count == 0, model.__name__
