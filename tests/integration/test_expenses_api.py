"""Integration tests for trip expenses."""

import pytest
from httpx import AsyncClient

from tests.helpers import bearer

TRIP = {"name": "Expense trip", "start_date": "2026-08-01", "end_date": "2026-08-05"}


@pytest.mark.asyncio
async def test_add_list_delete_expense(client: AsyncClient, user_token: str) -> None:
    headers = bearer(user_token)
    trip_id = (await client.post("/trips", json=TRIP, headers=headers)).json()["trip"]["id"]

    created = await client.post(
        f"/trips/{trip_id}/expenses",
        json={"category": "transport", "amount": "42.5", "description": "Train"},
        headers=headers,
    )
    await client.post(
        f"/trips/{trip_id}/expenses", json={"category": "food", "amount": "10"}, headers=headers
    )

    assert created.status_code == 201
    expense = created.json()["expense"]
    assert expense["amount"] == "42.50"

    listed = (await client.get(f"/trips/{trip_id}/expenses", headers=headers)).json()["expenses"]
    assert [e["category"] for e in listed] == ["food", "transport"]

    deleted = await client.delete(f"/trips/{trip_id}/expenses/{expense['id']}", headers=headers)
    assert deleted.status_code == 200
    listed = (await client.get(f"/trips/{trip_id}/expenses", headers=headers)).json()["expenses"]
    assert [e["category"] for e in listed] == ["food"]


@pytest.mark.asyncio
async def test_negative_expense_rejected(client: AsyncClient, user_token: str) -> None:
    headers = bearer(user_token)
    trip_id = (await client.post("/trips", json=TRIP, headers=headers)).json()["trip"]["id"]

    response = await client.post(
        f"/trips/{trip_id}/expenses", json={"category": "food", "amount": "-5"}, headers=headers
    )

    assert response.status_code == 400
    assert "amount" in response.json()["error"]


@pytest.mark.asyncio
async def test_expenses_private_to_owner(
    client: AsyncClient, user_token: str, other_token: str
) -> None:
    trip_id = (
        await client.post("/trips", json={**TRIP, "is_public": True}, headers=bearer(user_token))
    ).json()["trip"]["id"]

    listed = await client.get(f"/trips/{trip_id}/expenses", headers=bearer(other_token))
    added = await client.post(
        f"/trips/{trip_id}/expenses",
        json={"category": "food", "amount": "1"},
        headers=bearer(other_token),
    )

    assert listed.status_code == 404
    assert added.status_code == 404


@pytest.mark.asyncio
async def test_delete_missing_expense_is_404(client: AsyncClient, user_token: str) -> None:
    headers = bearer(user_token)
    trip_id = (await client.post("/trips", json=TRIP, headers=headers)).json()["trip"]["id"]

    response = await client.delete(f"/trips/{trip_id}/expenses/77", headers=headers)

    assert response.status_code == 404
    assert response.json() == {"error": "Expense not found"}
