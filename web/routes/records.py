"""API роуты для записей веса"""
from datetime import date
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, status, Depends, Body, Path, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas import CreateRecordRequest, UpdateRecordRequest, RecordResponse, RecordListItem, RecordPeriod, RecordSort
from app.services import (
    add_record, update_record, delete_record, recent_descending, range_ascending, list_records, export_records_csv
)
from app.database import get_session
from app.utils.error_handler import handle_api_errors


router = APIRouter()


@router.post(
    "",
    response_model=RecordResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Добавить запись веса"
)
@handle_api_errors
async def create_record_endpoint(
    request: CreateRecordRequest = Body(...),
    today: Optional[date] = Query(None, description="Defaults to the current date"),
    session: AsyncSession = Depends(get_session)
):
    return await add_record(
        session=session,
        member_id=request.member_id,
        weight=request.weight,
        record_date=request.date,
        memo=request.memo,
        today=today,
    )


@router.get(
    "/member/{member_id}/recent",
    response_model=List[RecordResponse],
    status_code=status.HTTP_200_OK,
    summary="Последние записи, сначала новые"
)
@handle_api_errors
async def recent_records_endpoint(
    member_id: int = Path(..., description="Family member ID"),
    limit: int = Query(100, ge=1, le=100),
    session: AsyncSession = Depends(get_session)
):
    records = await recent_descending(session=session, member_id=member_id, limit=limit)
    return [RecordResponse.model_validate(record) for record in records]


@router.get(
    "/member/{member_id}/range",
    response_model=List[RecordResponse],
    status_code=status.HTTP_200_OK,
    summary="Записи за период, сначала старые"
)
@handle_api_errors
async def range_records_endpoint(
    member_id: int = Path(..., description="Family member ID"),
    start: date = Query(...),
    end: date = Query(...),
    session: AsyncSession = Depends(get_session)
):
    records = await range_ascending(session=session, member_id=member_id, start=start, end=end)
    return [RecordResponse.model_validate(record) for record in records]


@router.patch(
    "/{record_id}",
    response_model=RecordResponse,
    status_code=status.HTTP_200_OK,
    summary="Изменить запись веса"
)
@handle_api_errors
async def update_record_endpoint(
    record_id: int = Path(..., description="Weight record ID"),
    request: UpdateRecordRequest = Body(...),
    session: AsyncSession = Depends(get_session)
):
    return await update_record(session=session, record_id=record_id, update_data=request)


@router.delete(
    "/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удалить запись веса"
)
@handle_api_errors
async def delete_record_endpoint(
    record_id: int = Path(..., description="Weight record ID"),
    session: AsyncSession = Depends(get_session)
):
    await delete_record(session=session, record_id=record_id)


@router.get(
    "/member/{member_id}/list",
    response_model=List[RecordListItem],
    status_code=status.HTTP_200_OK,
    summary="Список записей с поиском, фильтром и сортировкой"
)
@handle_api_errors
async def list_records_endpoint(
    member_id: int = Path(..., description="Family member ID"),
    search: Optional[str] = Query(None, max_length=100, description="Memo, weight or date fragment"),
    period: RecordPeriod = Query(RecordPeriod.ALL),
    sort: RecordSort = Query(RecordSort.LATEST),
    today: Optional[date] = Query(None, description="Defaults to the current date"),
    session: AsyncSession = Depends(get_session)
):
    """change - разница с записью, которая идет следующей в списке"""
    return await list_records(
        session=session,
        member_id=member_id,
        today=today or date.today(),
        search=search,
        period=period,
        sort=sort,
    )


@router.get(
    "/member/{member_id}/export.csv",
    response_class=Response,
    status_code=status.HTTP_200_OK,
    summary="Выгрузить список записей в CSV"
)
@handle_api_errors
async def export_records_csv_endpoint(
    member_id: int = Path(..., description="Family member ID"),
    search: Optional[str] = Query(None, max_length=100),
    period: RecordPeriod = Query(RecordPeriod.ALL),
    sort: RecordSort = Query(RecordSort.LATEST),
    today: Optional[date] = Query(None, description="Defaults to the current date"),
    session: AsyncSession = Depends(get_session)
):
    filename, content = await export_records_csv(
        session=session,
        member_id=member_id,
        today=today or date.today(),
        search=search,
        period=period,
        sort=sort,
    )
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )
