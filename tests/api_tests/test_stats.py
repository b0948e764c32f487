"""API тесты для статистики, календаря и главного экрана"""
from datetime import date

import pytest
from httpx import AsyncClient

TODAY = "2024-07-25"


@pytest.mark.asyncio
async def test_trend_and_progress_scenario(async_client: AsyncClient, api_headers: dict, member, add_weights, add_goal):
    """Два измерения за 30 дней и активная цель"""
    await add_weights(member.id, [(date(2024, 7, 1), 60.2), (date(2024, 7, 25), 58.5)])
    await add_goal(member.id, 60.2, 57.0)

    response = await async_client.get(
        f"/stats/member/{member.id}/trend", params={"today": TODAY, "period_days": 30}, headers=api_headers
    )
    assert response.status_code == 200
    assert response.json() == {
        "trend": "decreasing",
        "change": -1.7,
        "period_days": 30,
        "record_count": 2,
    }

    response = await async_client.get(f"/stats/member/{member.id}/progress", headers=api_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["progress_percentage"] == 53.1
    assert data["remaining_weight"] == -1.5
    assert data["current_weight"] == 58.5
    assert data["goal_type"] == "lose"


@pytest.mark.asyncio
async def test_trend_ignores_records_outside_window(async_client: AsyncClient, api_headers: dict, member, add_weights):
    await add_weights(member.id, [(date(2024, 5, 1), 70.0), (date(2024, 7, 20), 60.0)])

    response = await async_client.get(
        f"/stats/member/{member.id}/trend", params={"today": TODAY}, headers=api_headers
    )

    assert response.json()["trend"] == "insufficient_data"
    assert response.json()["change"] == 0
    assert response.json()["record_count"] == 1


@pytest.mark.asyncio
async def test_progress_without_goal_is_null(async_client: AsyncClient, api_headers: dict, member, add_weights):
    await add_weights(member.id, [(date(2024, 7, 25), 58.5)])

    response = await async_client.get(f"/stats/member/{member.id}/progress", headers=api_headers)

    assert response.status_code == 200
    assert response.json() is None


@pytest.mark.asyncio
async def test_summary(async_client: AsyncClient, api_headers: dict, member, add_weights):
    await add_weights(member.id, [(date(2024, 7, 1), 60.2), (date(2024, 7, 10), 59.9), (date(2024, 7, 25), 58.5)])

    response = await async_client.get(
        f"/stats/member/{member.id}/summary", params={"today": TODAY}, headers=api_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["average"] == 59.5
    assert data["min"] == 58.5
    assert data["max"] == 60.2
    assert data["change"] == -1.7


@pytest.mark.asyncio
async def test_calendar(async_client: AsyncClient, api_headers: dict, member, add_weights):
    await add_weights(member.id, [
        (date(2024, 6, 30), 61.0),
        (date(2024, 7, 1), 60.2),
        (date(2024, 7, 25), 58.5),
    ])

    response = await async_client.get(
        f"/stats/member/{member.id}/calendar/2024/7", params={"today": TODAY}, headers=api_headers
    )

    assert response.status_code == 200
    data = response.json()
    days = data["days"]
    assert len(days) == 42
    assert days[0]["date"] == "2024-06-30"
    assert days[0]["in_month"] is False
    # leading day of the previous month is not filled
    assert days[0]["record"] is None
    assert days[1]["record"]["weight"] == 60.2
    assert [d["date"] for d in days if d["is_today"]] == [TODAY]
    assert sum(1 for d in days if d["record"]) == 2


@pytest.mark.asyncio
async def test_calendar_invalid_month(async_client: AsyncClient, api_headers: dict, member):
    response = await async_client.get(f"/stats/member/{member.id}/calendar/2024/13", headers=api_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_dashboard(async_client: AsyncClient, api_headers: dict, member, add_weights, add_goal):
    await add_weights(member.id, [
        (date(2024, 6, 1), 62.0),
        (date(2024, 7, 1), 60.2),
        (date(2024, 7, 10), 59.4),
        (date(2024, 7, 25), 58.5),
    ])
    await add_goal(member.id, 60.2, 57.0)

    response = await async_client.get(
        f"/stats/member/{member.id}/dashboard", params={"today": TODAY}, headers=api_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["member"]["id"] == member.id
    assert data["latest_record"]["weight"] == 58.5
    assert data["trend"]["trend"] == "decreasing"
    assert data["trend"]["record_count"] == 3
    assert data["goal_progress"]["progress_percentage"] == 53.1
    assert [r["weight"] for r in data["recent_records"]] == [58.5, 59.4, 60.2, 62.0]
    assert data["record_count"] == 4


@pytest.mark.asyncio
async def test_dashboard_for_new_member(async_client: AsyncClient, api_headers: dict, member):
    response = await async_client.get(
        f"/stats/member/{member.id}/dashboard", params={"today": TODAY}, headers=api_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["latest_record"] is None
    assert data["trend"]["trend"] == "insufficient_data"
    assert data["goal_progress"] is None
    assert data["record_count"] == 0


@pytest.mark.asyncio
async def test_chart(async_client: AsyncClient, api_headers: dict, member, add_weights, add_goal):
    await add_weights(member.id, [
        (date(2024, 5, 1), 65.0),
        (date(2024, 7, 1), 60.0),
        (date(2024, 7, 15), 59.0),
    ])
    await add_goal(member.id, 60.0, 57.0)

    response = await async_client.get(
        f"/stats/member/{member.id}/chart", params={"today": TODAY, "period_days": 30}, headers=api_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert [r["weight"] for r in data["records"]] == [60.0, 59.0]
    assert [p["weight"] for p in data["trend_line"]] == pytest.approx([60.0, 59.0])
    stats = data["statistics"]
    assert stats["change"] == -1.0
    # -1.0 kg over 14 days
    assert stats["weekly_average"] == -0.5
    assert stats["goal_weight"] == 57.0


@pytest.mark.asyncio
async def test_chart_without_records(async_client: AsyncClient, api_headers: dict, member):
    response = await async_client.get(
        f"/stats/member/{member.id}/chart", params={"today": TODAY}, headers=api_headers
    )

    assert response.status_code == 200
    assert response.json()["records"] == []
    assert response.json()["trend_line"] == []
    assert response.json()["statistics"] is None
