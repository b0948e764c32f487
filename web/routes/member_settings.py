"""API роуты для настроек члена семьи"""
from fastapi import APIRouter, status, Depends, Body, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas import MemberSettingsResponse, UpdateSettingsRequest
from app.services import get_settings, update_settings
from app.database import get_session
from app.utils.error_handler import handle_api_errors


router = APIRouter()


@router.get(
    "/member/{member_id}",
    response_model=MemberSettingsResponse,
    status_code=status.HTTP_200_OK,
    summary="Настройки члена семьи"
)
@handle_api_errors
async def get_settings_endpoint(
    member_id: int = Path(..., description="Family member ID"),
    session: AsyncSession = Depends(get_session)
):
    """При первом обращении создаются настройки по умолчанию"""
    return await get_settings(session=session, member_id=member_id)


@router.patch(
    "/member/{member_id}",
    response_model=MemberSettingsResponse,
    status_code=status.HTTP_200_OK,
    summary="Обновить настройки"
)
@handle_api_errors
async def update_settings_endpoint(
    member_id: int = Path(..., description="Family member ID"),
    request: UpdateSettingsRequest = Body(...),
    session: AsyncSession = Depends(get_session)
):
    return await update_settings(session=session, member_id=member_id, update_data=request)
