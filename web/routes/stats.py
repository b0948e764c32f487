"""API роуты для статистики: тренд, прогресс цели, календарь, главный экран"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, status, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas import TrendResult, GoalProgress, WeightStats, CalendarResponse, ChartResponse, DashboardResponse
from app.services import get_weight_trend, get_goal_progress, get_weight_stats, get_chart, get_calendar, get_dashboard
from app.database import get_session
from app.utils.error_handler import handle_api_errors
from settings.config import AppConfig


router = APIRouter()


@router.get(
    "/member/{member_id}/trend",
    response_model=TrendResult,
    status_code=status.HTTP_200_OK,
    summary="Тренд веса за период"
)
@handle_api_errors
async def trend_endpoint(
    member_id: int = Path(..., description="Family member ID"),
    period_days: int = Query(AppConfig.TREND_PERIOD_DAYS, ge=1, le=3650),
    today: Optional[date] = Query(None, description="Defaults to the current date"),
    session: AsyncSession = Depends(get_session)
):
    return await get_weight_trend(
        session=session,
        member_id=member_id,
        period_days=period_days,
        today=today or date.today(),
    )


@router.get(
    "/member/{member_id}/progress",
    response_model=Optional[GoalProgress],
    status_code=status.HTTP_200_OK,
    summary="Прогресс активной цели"
)
@handle_api_errors
async def progress_endpoint(
    member_id: int = Path(..., description="Family member ID"),
    session: AsyncSession = Depends(get_session)
):
    """null если нет активной цели или записей"""
    return await get_goal_progress(session=session, member_id=member_id)


@router.get(
    "/member/{member_id}/summary",
    response_model=Optional[WeightStats],
    status_code=status.HTTP_200_OK,
    summary="Сводная статистика веса"
)
@handle_api_errors
async def summary_endpoint(
    member_id: int = Path(..., description="Family member ID"),
    period_days: int = Query(AppConfig.TREND_PERIOD_DAYS, ge=1, le=3650),
    today: Optional[date] = Query(None, description="Defaults to the current date"),
    session: AsyncSession = Depends(get_session)
):
    return await get_weight_stats(
        session=session,
        member_id=member_id,
        period_days=period_days,
        today=today or date.today(),
    )


@router.get(
    "/member/{member_id}/calendar/{year}/{month}",
    response_model=CalendarResponse,
    status_code=status.HTTP_200_OK,
    summary="Календарь месяца"
)
@handle_api_errors
async def calendar_endpoint(
    member_id: int = Path(..., description="Family member ID"),
    year: int = Path(..., ge=1900, le=2999),
    month: int = Path(..., ge=1, le=12),
    week_starts_on_sunday: bool = Query(True),
    today: Optional[date] = Query(None, description="Defaults to the current date"),
    session: AsyncSession = Depends(get_session)
):
    """42 дня (6 недель), записи только для дней выбранного месяца"""
    return await get_calendar(
        session=session,
        member_id=member_id,
        year=year,
        month=month,
        today=today or date.today(),
        week_starts_on_sunday=week_starts_on_sunday,
    )


@router.get(
    "/member/{member_id}/dashboard",
    response_model=DashboardResponse,
    status_code=status.HTTP_200_OK,
    summary="Данные главного экрана"
)
@handle_api_errors
async def dashboard_endpoint(
    member_id: int = Path(..., description="Family member ID"),
    today: Optional[date] = Query(None, description="Defaults to the current date"),
    session: AsyncSession = Depends(get_session)
):
    return await get_dashboard(session=session, member_id=member_id, today=today or date.today())


@router.get(
    "/member/{member_id}/chart",
    response_model=ChartResponse,
    status_code=status.HTTP_200_OK,
    summary="Данные графика веса"
)
@handle_api_errors
async def chart_endpoint(
    member_id: int = Path(..., description="Family member ID"),
    period_days: int = Query(AppConfig.TREND_PERIOD_DAYS, ge=1, le=3650, description="7, 30, 90 or 730 in the app"),
    today: Optional[date] = Query(None, description="Defaults to the current date"),
    session: AsyncSession = Depends(get_session)
):
    """Записи сначала старые, линия тренда по порядковому номеру записи"""
    return await get_chart(
        session=session,
        member_id=member_id,
        period_days=period_days,
        today=today or date.today(),
    )
