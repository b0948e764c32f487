"""API роуты для целей"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, status, Depends, Body, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas import GoalRequest, GoalResponse, GoalPlanResponse, SetGoalResponse
from app.services import plan_member_goal, save_member_goal, get_active_goal, clear_goal, goal_history
from app.database import get_session
from app.utils.error_handler import handle_api_errors, NotFoundError


router = APIRouter()


@router.post(
    "/member/{member_id}/plan",
    response_model=GoalPlanResponse,
    status_code=status.HTTP_200_OK,
    summary="Рассчитать цель без сохранения"
)
@handle_api_errors
async def plan_goal_endpoint(
    member_id: int = Path(..., description="Family member ID"),
    request: GoalRequest = Body(...),
    today: Optional[date] = Query(None, description="Defaults to the current date"),
    session: AsyncSession = Depends(get_session)
):
    """Темп, тип цели, подсказка о здоровом темпе и точки для графика"""
    return await plan_member_goal(
        session=session,
        member_id=member_id,
        request=request,
        today=today or date.today(),
    )


@router.put(
    "/member/{member_id}",
    response_model=SetGoalResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Установить новую цель"
)
@handle_api_errors
async def set_goal_endpoint(
    member_id: int = Path(..., description="Family member ID"),
    request: GoalRequest = Body(...),
    today: Optional[date] = Query(None, description="Defaults to the current date"),
    session: AsyncSession = Depends(get_session)
):
    """Новая цель заменяет активную. Без current_weight берется последняя запись"""
    return await save_member_goal(
        session=session,
        member_id=member_id,
        request=request,
        today=today or date.today(),
    )


@router.get(
    "/member/{member_id}",
    response_model=GoalResponse,
    status_code=status.HTTP_200_OK,
    summary="Активная цель"
)
@handle_api_errors
async def get_goal_endpoint(
    member_id: int = Path(..., description="Family member ID"),
    session: AsyncSession = Depends(get_session)
):
    goal = await get_active_goal(session=session, member_id=member_id)
    if goal is None:
        raise NotFoundError(f"No active goal for member {member_id}")
    return GoalResponse.model_validate(goal)


@router.delete(
    "/member/{member_id}",
    status_code=status.HTTP_200_OK,
    summary="Снять активную цель"
)
@handle_api_errors
async def clear_goal_endpoint(
    member_id: int = Path(..., description="Family member ID"),
    session: AsyncSession = Depends(get_session)
):
    cleared = await clear_goal(session=session, member_id=member_id)
    return {"cleared": cleared}


@router.get(
    "/member/{member_id}/history",
    response_model=List[GoalResponse],
    status_code=status.HTTP_200_OK,
    summary="История целей"
)
@handle_api_errors
async def goal_history_endpoint(
    member_id: int = Path(..., description="Family member ID"),
    session: AsyncSession = Depends(get_session)
):
    return await goal_history(session=session, member_id=member_id)
