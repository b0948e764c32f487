"""API роуты для членов семьи"""
from typing import List

from fastapi import APIRouter, status, Depends, Body, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas import MemberResponse, CreateMemberRequest, UpdateMemberRequest
from app.services import create_member, list_members, get_member_by_id, update_member, deactivate_member
from app.database import get_session
from app.utils.error_handler import handle_api_errors


router = APIRouter()


@router.post(
    "",
    response_model=MemberResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Добавить члена семьи"
)
@handle_api_errors
async def create_member_endpoint(
    request: CreateMemberRequest = Body(...),
    session: AsyncSession = Depends(get_session)
):
    return await create_member(session=session, data=request)


@router.get(
    "",
    response_model=List[MemberResponse],
    status_code=status.HTTP_200_OK,
    summary="Члены семьи аккаунта"
)
@handle_api_errors
async def list_members_endpoint(
    account_id: str = Query(..., min_length=1, description="Account ID"),
    session: AsyncSession = Depends(get_session)
):
    return await list_members(session=session, account_id=account_id)


@router.get(
    "/{member_id}",
    response_model=MemberResponse,
    status_code=status.HTTP_200_OK,
    summary="Получить члена семьи"
)
@handle_api_errors
async def get_member_endpoint(
    member_id: int = Path(..., description="Family member ID"),
    session: AsyncSession = Depends(get_session)
):
    return await get_member_by_id(session=session, member_id=member_id)


@router.patch(
    "/{member_id}",
    response_model=MemberResponse,
    status_code=status.HTTP_200_OK,
    summary="Обновить данные члена семьи"
)
@handle_api_errors
async def update_member_endpoint(
    member_id: int = Path(..., description="Family member ID"),
    request: UpdateMemberRequest = Body(...),
    session: AsyncSession = Depends(get_session)
):
    """Обновить имя, отношение, дату рождения или пол"""
    return await update_member(session=session, member_id=member_id, update_data=request)


@router.delete(
    "/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удалить члена семьи"
)
@handle_api_errors
async def delete_member_endpoint(
    member_id: int = Path(..., description="Family member ID"),
    session: AsyncSession = Depends(get_session)
):
    """Член семьи деактивируется, история записей сохраняется"""
    await deactivate_member(session=session, member_id=member_id)
