"""API роуты для экспорта и импорта данных аккаунта"""
from typing import Any, Dict

from fastapi import APIRouter, status, Depends, Body, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas import ExportDocument, ImportResponse
from app.services import export_account_data, import_account_data
from app.database import get_session
from app.utils.error_handler import handle_api_errors


router = APIRouter()


@router.get(
    "/export/{account_id}",
    response_model=ExportDocument,
    status_code=status.HTTP_200_OK,
    summary="Экспорт всех данных аккаунта"
)
@handle_api_errors
async def export_endpoint(
    account_id: str = Path(..., description="Account ID"),
    session: AsyncSession = Depends(get_session)
):
    return await export_account_data(session=session, account_id=account_id)


@router.post(
    "/import/{account_id}",
    response_model=ImportResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Импорт данных из файла экспорта"
)
@handle_api_errors
async def import_endpoint(
    account_id: str = Path(..., description="Account ID"),
    payload: Dict[str, Any] = Body(...),
    session: AsyncSession = Depends(get_session)
):
    """Документ в формате экспорта, обязателен список members"""
    return await import_account_data(session=session, account_id=account_id, payload=payload)
