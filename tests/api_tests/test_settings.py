"""API тесты для настроек"""
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_default_settings(async_client: AsyncClient, api_headers: dict, member):
    response = await async_client.get(f"/settings/member/{member.id}", headers=api_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["unit"] == "kg"
    assert data["theme"] == "light"
    assert data["daily_reminder"] is True
    assert data["reminder_time"] == "08:00"
    assert data["goal_achievement_alert"] is True


@pytest.mark.asyncio
async def test_update_only_given_fields(async_client: AsyncClient, api_headers: dict, member):
    response = await async_client.patch(
        f"/settings/member/{member.id}",
        json={"daily_reminder": False, "reminder_time": "21:30", "theme": "dark"},
        headers=api_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["daily_reminder"] is False
    assert data["reminder_time"] == "21:30"
    assert data["theme"] == "dark"
    assert data["unit"] == "kg"

    response = await async_client.get(f"/settings/member/{member.id}", headers=api_headers)
    assert response.json()["reminder_time"] == "21:30"


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"reminder_time": "25:00"},
    {"reminder_time": "8:00"},
    {"unit": "stone"},
    {"theme": "blue"},
])
async def test_invalid_settings(async_client: AsyncClient, api_headers: dict, member, body):
    response = await async_client.patch(f"/settings/member/{member.id}", json=body, headers=api_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_settings_for_unknown_member(async_client: AsyncClient, api_headers: dict):
    response = await async_client.get("/settings/member/999", headers=api_headers)
    assert response.status_code == 404
