"""API тесты для целей"""
from datetime import date

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app import services
from app.models import Goal

TODAY = "2024-07-25"


@pytest.mark.asyncio
async def test_plan_goal_does_not_save(async_client: AsyncClient, api_headers: dict, member, session: AsyncSession):
    response = await async_client.post(
        f"/goals/member/{member.id}/plan",
        params={"today": TODAY},
        json={"current_weight": 58.5, "target_weight": 57.0, "target_date": "2024-08-22"},
        headers=api_headers
    )

    assert response.status_code == 200
    data = response.json()
    plan = data["plan"]
    assert plan["goal_type"] == "lose"
    assert plan["estimated_days"] == 28
    assert plan["weekly_target"] == pytest.approx(0.375)
    assert plan["is_healthy_goal"] is True
    assert [p["week"] for p in data["projection"]] == [0, 1, 2, 3, 4]
    assert data["projection"][-1]["projected_weight"] == 57.0

    result = await session.execute(select(Goal))
    assert result.scalars().all() == []


@pytest.mark.asyncio
async def test_plan_uses_latest_record_when_current_weight_missing(async_client: AsyncClient, api_headers: dict,
                                                                   member, add_weights):
    await add_weights(member.id, [(date(2024, 7, 1), 60.2), (date(2024, 7, 25), 58.5)])

    response = await async_client.post(
        f"/goals/member/{member.id}/plan",
        params={"today": TODAY},
        json={"target_weight": 58.8, "target_date": "2024-09-01"},
        headers=api_headers
    )

    assert response.status_code == 200
    assert response.json()["plan"]["current_weight"] == 58.5
    assert response.json()["plan"]["goal_type"] == "maintain"


@pytest.mark.asyncio
async def test_plan_without_any_weight(async_client: AsyncClient, api_headers: dict, member):
    response = await async_client.post(
        f"/goals/member/{member.id}/plan",
        params={"today": TODAY},
        json={"target_weight": 57.0, "target_date": "2024-09-01"},
        headers=api_headers
    )

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "current_weight"


@pytest.mark.asyncio
async def test_set_goal_rejects_target_date_today(async_client: AsyncClient, api_headers: dict, member):
    response = await async_client.put(
        f"/goals/member/{member.id}",
        params={"today": TODAY},
        json={"current_weight": 70, "target_weight": 65, "target_date": TODAY},
        headers=api_headers
    )

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "target_date"


@pytest.mark.asyncio
async def test_set_goal_supersedes_previous(async_client: AsyncClient, api_headers: dict, member, session: AsyncSession):
    first = await async_client.put(
        f"/goals/member/{member.id}",
        params={"today": TODAY},
        json={"current_weight": 60.2, "target_weight": 57.0, "target_date": "2024-10-01"},
        headers=api_headers
    )
    assert first.status_code == 201
    assert first.json()["goal"]["start_weight"] == 60.2
    assert first.json()["goal"]["goal_type"] == "lose"

    # unhealthy pace is still saved
    second = await async_client.put(
        f"/goals/member/{member.id}",
        params={"today": TODAY},
        json={"current_weight": 60.2, "target_weight": 50.0, "target_date": "2024-08-01"},
        headers=api_headers
    )
    assert second.status_code == 201
    assert second.json()["plan"]["is_healthy_goal"] is False

    response = await async_client.get(f"/goals/member/{member.id}", headers=api_headers)
    assert response.status_code == 200
    assert response.json()["id"] == second.json()["goal"]["id"]
    assert response.json()["target_weight"] == 50.0

    history = await async_client.get(f"/goals/member/{member.id}/history", headers=api_headers)
    assert [g["is_active"] for g in history.json()] == [True, False]

    result = await session.execute(select(Goal).where(Goal.is_active.is_(True)))
    assert len(result.scalars().all()) == 1


@pytest.mark.asyncio
async def test_clear_goal(async_client: AsyncClient, api_headers: dict, member, add_goal):
    await add_goal(member.id, 60.2, 57.0)

    response = await async_client.delete(f"/goals/member/{member.id}", headers=api_headers)
    assert response.status_code == 200
    assert response.json() == {"cleared": 1}

    response = await async_client.get(f"/goals/member/{member.id}", headers=api_headers)
    assert response.status_code == 404

    history = await async_client.get(f"/goals/member/{member.id}/history", headers=api_headers)
    assert len(history.json()) == 1


@pytest.mark.asyncio
async def test_database_allows_one_active_goal_per_member(member, add_goal, session: AsyncSession):
    await add_goal(member.id, 60.2, 57.0, is_active=False)
    await add_goal(member.id, 60.2, 58.0, is_active=False)
    await add_goal(member.id, 60.2, 57.0)

    with pytest.raises(IntegrityError):
        await add_goal(member.id, 60.2, 56.0)
    await session.rollback()


@pytest.mark.asyncio
async def test_concurrent_set_goal_returns_conflict(async_client: AsyncClient, api_headers: dict, member,
                                                    add_goal, monkeypatch):
    existing = await add_goal(member.id, 60.2, 57.0)

    async def goal_inserted_after_deactivation(session, member_id):
        # another request saved its goal between our update and insert
        return 0

    monkeypatch.setattr(services, "_deactivate_goals", goal_inserted_after_deactivation)

    response = await async_client.put(
        f"/goals/member/{member.id}",
        params={"today": TODAY},
        json={"current_weight": 60.2, "target_weight": 55.0, "target_date": "2024-12-01"},
        headers=api_headers
    )

    assert response.status_code == 409

    response = await async_client.get(f"/goals/member/{member.id}", headers=api_headers)
    assert response.json()["id"] == existing.id
