from datetime import date, datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from settings.config import AppConfig
from web.main import app
from app.database import create_engine, create_session_maker, get_session
from app.models import FamilyMember, Goal, WeightRecord
from app.models.base import meta


TODAY = date(2024, 7, 25)


@pytest.fixture
def db_url(tmp_path):
    """TEST_DB_URL если задан, иначе отдельная SQLite база на каждый тест"""
    if AppConfig.TEST_DB_URL:
        if 'test' not in AppConfig.TEST_DB_URL:
            raise ValueError('You are trying to run tests on a prod/dev database')
        return AppConfig.TEST_DB_URL
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest_asyncio.fixture
async def test_engine(db_url):
    engine = create_engine(db_url)
    async with engine.begin() as conn:
        await conn.run_sync(meta.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(meta.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(test_engine):
    """Подменяет get_session в приложении на тестовую базу"""
    maker = create_session_maker(test_engine)

    async def override_get_session():
        async with maker() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield maker
    app.dependency_overrides.pop(get_session, None)


@pytest.fixture
def api_headers():
    """Заголовки с API ключом для тестов"""
    return {"X-API-Key": AppConfig.API_KEY}


@pytest_asyncio.fixture
async def async_client(session_maker) -> AsyncClient:
    """Async HTTP client для тестов API"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def session(session_maker) -> AsyncSession:
    """Async database session для тестов"""
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def member(session) -> FamilyMember:
    member = FamilyMember(account_id="family-1", name="엄마", relation="self", gender="f")
    session.add(member)
    await session.commit()
    await session.refresh(member)
    return member


@pytest.fixture
def add_weights(session):
    """add_weights(member_id, [(date, weight), ...]) - записи с возрастающим created_at"""

    async def _add_weights(member_id: int, weights) -> list:
        return await create_weights(session, member_id, weights)

    return _add_weights


async def create_weights(session: AsyncSession, member_id: int, weights) -> list:
    records = []
    created = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for i, item in enumerate(weights):
        record_date, weight = item[0], item[1]
        memo = item[2] if len(item) > 2 else ""
        record = WeightRecord(
            member_id=member_id,
            date=record_date,
            weight=weight,
            memo=memo,
            created_at=created + timedelta(minutes=i),
        )
        session.add(record)
        records.append(record)
    await session.commit()
    return records


@pytest.fixture
def add_goal(session):
    async def _add_goal(member_id: int, start: float, target: float, goal_type: str = "lose",
                        target_date: date = TODAY + timedelta(days=60), is_active: bool = True) -> Goal:
        return await create_goal(session, member_id, start, target, goal_type, target_date, is_active)

    return _add_goal


async def create_goal(session: AsyncSession, member_id: int, start: float, target: float, goal_type: str,
                      target_date: date, is_active: bool) -> Goal:
    goal = Goal(
        member_id=member_id,
        start_weight=start,
        target_weight=target,
        target_date=target_date,
        goal_type=goal_type,
        weekly_target=0.4,
        is_active=is_active,
    )
    session.add(goal)
    await session.commit()
    await session.refresh(goal)
    return goal
