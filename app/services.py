"""Бизнес-логика: члены семьи, записи веса, цели, статистика, настройки, экспорт"""
import logging
import math
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, select, update, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.analytics import (
    analyze_trend,
    build_month_grid,
    compute_progress,
    filter_records,
    plan_goal,
    project_path,
    project_records,
    records_to_csv,
    regression_line,
    sort_records,
    summarize_weights,
    with_changes,
)
from app.analytics.planner import classify_goal, parse_weight
from app.analytics.rounding import round1
from app.models import FamilyMember, Goal, MemberSettings, WeightRecord
from app.schemas import (
    CalendarResponse,
    ChartResponse,
    CreateMemberRequest,
    DashboardResponse,
    ExportDocument,
    ExportedGoal,
    ExportedMember,
    ExportedRecord,
    GoalPlan,
    GoalPlanResponse,
    GoalProgress,
    GoalRequest,
    GoalResponse,
    ImportResponse,
    MemberResponse,
    MemberSettingsResponse,
    RecordListItem,
    RecordPeriod,
    RecordResponse,
    RecordSort,
    SetGoalResponse,
    Theme,
    TrendResult,
    UpdateMemberRequest,
    UpdateRecordRequest,
    UpdateSettingsRequest,
    WeightStats,
    WeightUnit,
    MAX_MEMO_LENGTH,
    MAX_WEIGHT_KG,
)
from app.utils.error_handler import ConflictError, ImportFormatError, NotFoundError, ValidationError
from settings.config import AppConfig

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"


# Family member services
async def get_active_member(session: AsyncSession, member_id: int) -> FamilyMember:
    """Возвращает активного члена семьи или NotFoundError"""
    member = await session.get(FamilyMember, member_id)
    if member is None or not member.is_active:
        raise NotFoundError(f"Family member {member_id} not found")
    return member


async def create_member(session: AsyncSession, data: CreateMemberRequest) -> MemberResponse:
    """Добавляет члена семьи в аккаунт"""
    member = FamilyMember(
        account_id=data.account_id,
        name=data.name.strip(),
        relation=data.relation.value,
        birth_date=data.birth_date,
        gender=data.gender,
    )
    session.add(member)
    await session.commit()
    await session.refresh(member)

    logger.info("Created family member %s for account %s", member.id, member.account_id)
    return MemberResponse.model_validate(member)


async def list_members(session: AsyncSession, account_id: str) -> List[MemberResponse]:
    """Активные члены семьи аккаунта в порядке добавления"""
    stmt = (
        select(FamilyMember)
        .where(and_(FamilyMember.account_id == account_id, FamilyMember.is_active.is_(True)))
        .order_by(FamilyMember.created_at, FamilyMember.id)
    )
    result = await session.execute(stmt)
    members = result.scalars().all()

    logger.info("Retrieved %d family members for account %s", len(members), account_id)
    return [MemberResponse.model_validate(member) for member in members]


async def get_member_by_id(session: AsyncSession, member_id: int) -> MemberResponse:
    member = await get_active_member(session, member_id)
    return MemberResponse.model_validate(member)


async def update_member(session: AsyncSession, member_id: int, update_data: UpdateMemberRequest) -> MemberResponse:
    """Обновляет имя, отношение, дату рождения или пол"""
    member = await get_active_member(session, member_id)

    update_dict = update_data.model_dump(exclude_unset=True, exclude_none=True)
    if not update_dict:
        return MemberResponse.model_validate(member)

    if "relation" in update_dict:
        update_dict["relation"] = update_data.relation.value
    if "name" in update_dict:
        update_dict["name"] = update_dict["name"].strip()

    for field, value in update_dict.items():
        setattr(member, field, value)

    await session.commit()
    await session.refresh(member)

    logger.info("Updated family member %s: fields=%s", member_id, list(update_dict.keys()))
    return MemberResponse.model_validate(member)


async def deactivate_member(session: AsyncSession, member_id: int) -> None:
    """Удаляет члена семьи (is_active=False), записи и цели остаются"""
    member = await get_active_member(session, member_id)
    member.is_active = False
    await session.commit()
    logger.info("Deactivated family member %s", member_id)


# Weight record services (Record Store)
def validate_record_weight(weight) -> float:
    """Вес записи округляется до 0.1, округленное значение должно быть в (0, 1000) кг"""
    if weight is None:
        raise ValidationError("weight is required", field="weight")
    if isinstance(weight, bool) or not isinstance(weight, (int, float)):
        raise ValidationError("weight must be a number", field="weight")
    if not math.isfinite(weight):
        raise ValidationError("weight must be a number", field="weight")

    rounded = round1(weight)
    if not 0 < rounded < MAX_WEIGHT_KG:
        raise ValidationError(f"Weight must be between 0 and {MAX_WEIGHT_KG:g} kg", field="weight")
    return rounded


def validate_memo(memo: Optional[str]) -> str:
    memo = (memo or "").strip()
    if len(memo) > MAX_MEMO_LENGTH:
        raise ValidationError(f"Memo must be at most {MAX_MEMO_LENGTH} characters", field="memo")
    return memo


async def add_record(
    session: AsyncSession,
    member_id: int,
    weight: float,
    record_date: Optional[date] = None,
    memo: Optional[str] = None,
    today: Optional[date] = None,
) -> RecordResponse:
    """Добавляет запись веса. Без даты запись ставится на today"""
    await get_active_member(session, member_id)

    record = WeightRecord(
        member_id=member_id,
        date=record_date or today or date.today(),
        weight=validate_record_weight(weight),
        memo=validate_memo(memo),
    )
    session.add(record)
    await session.commit()
    await session.refresh(record)

    logger.info("Added weight record %s for member %s: %.1f kg on %s", record.id, member_id, record.weight, record.date)
    return RecordResponse.model_validate(record)


async def get_record(session: AsyncSession, record_id: int) -> WeightRecord:
    record = await session.get(WeightRecord, record_id)
    if record is None:
        raise NotFoundError(f"Weight record {record_id} not found")
    return record


async def update_record(session: AsyncSession, record_id: int, update_data: UpdateRecordRequest) -> RecordResponse:
    """Изменяет вес, дату или заметку записи"""
    record = await get_record(session, record_id)
    await get_active_member(session, record.member_id)

    update_dict = update_data.model_dump(exclude_unset=True, exclude_none=True)
    if "weight" in update_dict:
        update_dict["weight"] = validate_record_weight(update_dict["weight"])
    if "memo" in update_dict:
        update_dict["memo"] = validate_memo(update_dict["memo"])

    for field, value in update_dict.items():
        setattr(record, field, value)

    await session.commit()
    await session.refresh(record)

    logger.info("Updated weight record %s: fields=%s", record_id, list(update_dict.keys()))
    return RecordResponse.model_validate(record)


async def delete_record(session: AsyncSession, record_id: int) -> None:
    record = await get_record(session, record_id)
    await session.delete(record)
    await session.commit()
    logger.info("Deleted weight record %s", record_id)


async def recent_descending(session: AsyncSession, member_id: int, limit: Optional[int] = None) -> List[WeightRecord]:
    """Последние записи, сначала новые.

    Записи за один день: позже созданная считается более новой.
    """
    await get_active_member(session, member_id)
    limit = max(1, min(limit or AppConfig.RECENT_RECORDS_LIMIT, AppConfig.RECENT_RECORDS_LIMIT))

    stmt = (
        select(WeightRecord)
        .where(WeightRecord.member_id == member_id)
        .order_by(WeightRecord.date.desc(), WeightRecord.created_at.desc(), WeightRecord.id.desc())
        .limit(limit)
    )
    result = await session.execute(stmt)
    records = list(result.scalars().all())

    logger.info("Retrieved %d recent weight records for member %s", len(records), member_id)
    return records


async def range_ascending(session: AsyncSession, member_id: int, start: date, end: date) -> List[WeightRecord]:
    """Записи за [start, end] включительно, сначала старые"""
    if start > end:
        raise ValidationError("start must not be after end", field="start")
    await get_active_member(session, member_id)

    stmt = (
        select(WeightRecord)
        .where(and_(
            WeightRecord.member_id == member_id,
            WeightRecord.date >= start,
            WeightRecord.date <= end,
        ))
        .order_by(WeightRecord.date, WeightRecord.created_at, WeightRecord.id)
    )
    result = await session.execute(stmt)
    records = list(result.scalars().all())

    logger.info("Retrieved %d weight records for member %s between %s and %s", len(records), member_id, start, end)
    return records


async def latest_record(session: AsyncSession, member_id: int) -> Optional[WeightRecord]:
    records = await recent_descending(session, member_id, limit=1)
    return records[0] if records else None


async def count_records(session: AsyncSession, member_id: int) -> int:
    stmt = select(func.count()).select_from(WeightRecord).where(WeightRecord.member_id == member_id)
    result = await session.execute(stmt)
    return result.scalar_one()


async def all_ascending(session: AsyncSession, member_id: int) -> List[WeightRecord]:
    """Все записи члена семьи, сначала старые"""
    await get_active_member(session, member_id)
    stmt = (
        select(WeightRecord)
        .where(WeightRecord.member_id == member_id)
        .order_by(WeightRecord.date, WeightRecord.created_at, WeightRecord.id)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_records(
    session: AsyncSession,
    member_id: int,
    today: date,
    search: Optional[str] = None,
    period: RecordPeriod = RecordPeriod.ALL,
    sort: RecordSort = RecordSort.LATEST,
) -> List[RecordListItem]:
    """Список записей с поиском, фильтром по месяцу и изменением веса"""
    records = await all_ascending(session, member_id)
    listed = sort_records(filter_records(records, today, search, period), sort)

    logger.info(
        "Listed %d of %d weight records for member %s (period=%s, sort=%s)",
        len(listed), len(records), member_id, period.value, sort.value,
    )
    return with_changes(listed)


async def export_records_csv(
    session: AsyncSession,
    member_id: int,
    today: date,
    search: Optional[str] = None,
    period: RecordPeriod = RecordPeriod.ALL,
    sort: RecordSort = RecordSort.LATEST,
) -> Tuple[str, str]:
    """CSV тех же записей, что и в списке. Возвращает (имя файла, содержимое)"""
    member = await get_active_member(session, member_id)
    records = await all_ascending(session, member_id)
    listed = sort_records(filter_records(records, today, search, period), sort)
    if not listed:
        raise NotFoundError(f"No weight records to export for member {member_id}")

    logger.info("Exported %d weight records to CSV for member %s", len(listed), member_id)
    return f"{member.name}_weight_records.csv", records_to_csv(listed)


# Goal services (Goal Store)
async def get_active_goal(session: AsyncSession, member_id: int) -> Optional[Goal]:
    await get_active_member(session, member_id)

    stmt = (
        select(Goal)
        .where(and_(Goal.member_id == member_id, Goal.is_active.is_(True)))
        .order_by(Goal.created_at.desc(), Goal.id.desc())
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def _deactivate_goals(session: AsyncSession, member_id: int) -> int:
    stmt = (
        update(Goal)
        .where(and_(Goal.member_id == member_id, Goal.is_active.is_(True)))
        .values(is_active=False, updated_at=datetime.now(timezone.utc))
    )
    result = await session.execute(stmt)
    return result.rowcount


async def set_goal(session: AsyncSession, member_id: int, plan: GoalPlan) -> Goal:
    """Сохраняет новую активную цель, предыдущие активные цели деактивируются.

    Уникальный индекс по активной цели не дает параллельному set_goal оставить
    две активные цели: проигравший запрос получает ConflictError.
    """
    await get_active_member(session, member_id)

    superseded = await _deactivate_goals(session, member_id)
    goal = Goal(
        member_id=member_id,
        start_weight=plan.current_weight,
        target_weight=plan.target_weight,
        target_date=plan.target_date,
        goal_type=plan.goal_type.value,
        weekly_target=plan.weekly_target,
    )
    session.add(goal)
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise ConflictError(f"Active goal for member {member_id} was changed concurrently") from e
    await session.refresh(goal)

    logger.info("Set goal %s for member %s (%s, superseded %d)", goal.id, member_id, goal.goal_type, superseded)
    return goal


async def clear_goal(session: AsyncSession, member_id: int) -> int:
    """Снимает активную цель без создания новой"""
    await get_active_member(session, member_id)
    cleared = await _deactivate_goals(session, member_id)
    await session.commit()
    logger.info("Cleared %d active goals for member %s", cleared, member_id)
    return cleared


async def goal_history(session: AsyncSession, member_id: int) -> List[GoalResponse]:
    """Все цели члена семьи, сначала новые"""
    await get_active_member(session, member_id)
    stmt = (
        select(Goal)
        .where(Goal.member_id == member_id)
        .order_by(Goal.created_at.desc(), Goal.id.desc())
    )
    result = await session.execute(stmt)
    goals = result.scalars().all()

    logger.info("Retrieved %d goals for member %s", len(goals), member_id)
    return [GoalResponse.model_validate(goal) for goal in goals]


async def _resolve_current_weight(session: AsyncSession, member_id: int, request: GoalRequest):
    """Текущий вес из запроса, иначе из последней записи"""
    if request.current_weight is not None:
        return request.current_weight
    record = await latest_record(session, member_id)
    return record.weight if record is not None else None


async def plan_member_goal(
    session: AsyncSession,
    member_id: int,
    request: GoalRequest,
    today: date,
) -> GoalPlanResponse:
    """Рассчитывает цель без сохранения (для подсказки и графика)"""
    await get_active_member(session, member_id)
    current_weight = await _resolve_current_weight(session, member_id, request)

    plan = plan_goal(current_weight, request.target_weight, request.target_date, today)
    projection = list(project_path(plan.current_weight, plan.target_weight, plan.weekly_target))

    logger.info("Planned goal for member %s: %s, %.2f kg/week", member_id, plan.goal_type.value, plan.weekly_target)
    return GoalPlanResponse(plan=plan, projection=projection)


async def save_member_goal(
    session: AsyncSession,
    member_id: int,
    request: GoalRequest,
    today: date,
) -> SetGoalResponse:
    """Проверяет и сохраняет цель. Нездоровый темп не мешает сохранению"""
    await get_active_member(session, member_id)
    current_weight = await _resolve_current_weight(session, member_id, request)

    plan = plan_goal(current_weight, request.target_weight, request.target_date, today)
    if not plan.is_healthy_goal:
        logger.info(
            "Goal for member %s is outside the healthy weekly range: %.2f kg/week (%.2f-%.2f)",
            member_id, plan.weekly_target, plan.healthy_weekly_min, plan.healthy_weekly_max,
        )

    goal = await set_goal(session, member_id, plan)
    return SetGoalResponse(goal=GoalResponse.model_validate(goal), plan=plan)


# Statistics services
async def _window(session: AsyncSession, member_id: int, period_days: int, today: date) -> List[WeightRecord]:
    if period_days < 1:
        raise ValidationError("period_days must be positive", field="period_days")
    return await range_ascending(session, member_id, today - timedelta(days=period_days), today)


async def get_weight_trend(session: AsyncSession, member_id: int, period_days: int, today: date) -> TrendResult:
    """Тренд веса за последние period_days дней"""
    records = await _window(session, member_id, period_days, today)
    # analyze_trend ждет сначала новые записи
    return analyze_trend(list(reversed(records)), period_days)


async def get_goal_progress(session: AsyncSession, member_id: int) -> Optional[GoalProgress]:
    """Прогресс активной цели по последней записи"""
    goal = await get_active_goal(session, member_id)
    if goal is None:
        return None
    record = await latest_record(session, member_id)
    if record is None:
        return None
    return compute_progress(goal, record.weight)


async def get_weight_stats(session: AsyncSession, member_id: int, period_days: int, today: date) -> Optional[WeightStats]:
    records = await _window(session, member_id, period_days, today)
    goal = await get_active_goal(session, member_id)
    return summarize_weights(records, period_days, goal.target_weight if goal is not None else None)


async def get_chart(session: AsyncSession, member_id: int, period_days: int, today: date) -> ChartResponse:
    """Записи за период для графика, линия тренда и статистика"""
    records = await _window(session, member_id, period_days, today)
    goal = await get_active_goal(session, member_id)

    return ChartResponse(
        period_days=period_days,
        records=[RecordResponse.model_validate(r) for r in records],
        trend_line=regression_line(records),
        statistics=summarize_weights(records, period_days, goal.target_weight if goal is not None else None),
    )


async def get_calendar(
    session: AsyncSession,
    member_id: int,
    year: int,
    month: int,
    today: date,
    week_starts_on_sunday: bool = True,
) -> CalendarResponse:
    """Календарь месяца с записями по дням"""
    grid = build_month_grid(year, month, week_starts_on_sunday)
    month_start = date(year, month, 1)
    month_end = (month_start + timedelta(days=32)).replace(day=1) - timedelta(days=1)

    records = await range_ascending(session, member_id, month_start, month_end)
    return CalendarResponse(
        year=year,
        month=month,
        days=project_records(grid, records, year, month, today),
    )


async def get_dashboard(session: AsyncSession, member_id: int, today: date) -> DashboardResponse:
    """Главный экран: последний вес, тренд за 30 дней, прогресс цели"""
    member = await get_active_member(session, member_id)

    recent = await recent_descending(session, member_id, limit=AppConfig.DASHBOARD_RECENT_LIMIT)
    trend = await get_weight_trend(session, member_id, AppConfig.TREND_PERIOD_DAYS, today)
    goal = await get_active_goal(session, member_id)
    progress = compute_progress(goal, recent[0].weight) if recent else None

    return DashboardResponse(
        member=MemberResponse.model_validate(member),
        latest_record=RecordResponse.model_validate(recent[0]) if recent else None,
        trend=trend,
        goal_progress=progress,
        recent_records=[RecordResponse.model_validate(r) for r in recent],
        record_count=await count_records(session, member_id),
    )


# Settings services
def set_unit(settings: MemberSettings, unit: WeightUnit) -> None:
    settings.unit = WeightUnit(unit).value


def set_theme(settings: MemberSettings, theme: Theme) -> None:
    settings.theme = Theme(theme).value


def set_daily_reminder(settings: MemberSettings, enabled: bool) -> None:
    settings.daily_reminder = bool(enabled)


def set_reminder_time(settings: MemberSettings, reminder_time: str) -> None:
    settings.reminder_time = reminder_time


def set_goal_achievement_alert(settings: MemberSettings, enabled: bool) -> None:
    settings.goal_achievement_alert = bool(enabled)


SETTINGS_SETTERS = {
    "unit": set_unit,
    "theme": set_theme,
    "daily_reminder": set_daily_reminder,
    "reminder_time": set_reminder_time,
    "goal_achievement_alert": set_goal_achievement_alert,
}


async def _get_or_create_settings(session: AsyncSession, member_id: int) -> MemberSettings:
    await get_active_member(session, member_id)
    settings = await session.get(MemberSettings, member_id)
    if settings is None:
        settings = MemberSettings(member_id=member_id)
        session.add(settings)
        await session.commit()
        await session.refresh(settings)
        logger.info("Created default settings for member %s", member_id)
    return settings


async def get_settings(session: AsyncSession, member_id: int) -> MemberSettingsResponse:
    settings = await _get_or_create_settings(session, member_id)
    return MemberSettingsResponse.model_validate(settings)


async def update_settings(session: AsyncSession, member_id: int, update_data: UpdateSettingsRequest) -> MemberSettingsResponse:
    """Применяет сеттер для каждого переданного поля"""
    settings = await _get_or_create_settings(session, member_id)

    update_dict = update_data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_dict.items():
        SETTINGS_SETTERS[field](settings, value)

    await session.commit()
    await session.refresh(settings)

    logger.info("Updated settings for member %s: fields=%s", member_id, list(update_dict.keys()))
    return MemberSettingsResponse.model_validate(settings)


# Export / import services
async def export_account_data(session: AsyncSession, account_id: str) -> ExportDocument:
    """Выгружает всех активных членов семьи аккаунта с записями и активной целью"""
    stmt = (
        select(FamilyMember)
        .where(and_(FamilyMember.account_id == account_id, FamilyMember.is_active.is_(True)))
        .order_by(FamilyMember.created_at, FamilyMember.id)
    )
    result = await session.execute(stmt)
    members = result.scalars().all()

    exported = []
    for member in members:
        records_stmt = (
            select(WeightRecord)
            .where(WeightRecord.member_id == member.id)
            .order_by(WeightRecord.date, WeightRecord.created_at, WeightRecord.id)
        )
        records = (await session.execute(records_stmt)).scalars().all()
        goal = await get_active_goal(session, member.id)

        exported.append(ExportedMember(
            name=member.name,
            relation=member.relation,
            birth_date=member.birth_date,
            gender=member.gender,
            weight_records=[
                ExportedRecord(date=r.date, weight=r.weight, memo=r.memo) for r in records
            ],
            goal=ExportedGoal(
                start_weight=goal.start_weight,
                target_weight=goal.target_weight,
                target_date=goal.target_date,
                goal_type=goal.goal_type,
                weekly_target=goal.weekly_target,
            ) if goal is not None else None,
        ))

    total_records = sum(len(m.weight_records) for m in exported)
    logger.info("Exported %d members and %d records for account %s", len(exported), total_records, account_id)

    return ExportDocument(
        version=EXPORT_VERSION,
        exported_at=datetime.now(timezone.utc),
        account_id=account_id,
        members=exported,
    )


def parse_import_members(payload: dict) -> List[ExportedMember]:
    """Проверяет структуру файла импорта"""
    if not isinstance(payload, dict):
        raise ImportFormatError("Import document must be a JSON object")
    members = payload.get("members")
    if not isinstance(members, list):
        raise ImportFormatError("Import document must contain a 'members' list")
    if len(members) > AppConfig.MAX_IMPORT_MEMBERS:
        raise ImportFormatError(f"Too many members: {len(members)} (max {AppConfig.MAX_IMPORT_MEMBERS})")

    try:
        return [ExportedMember.model_validate(member) for member in members]
    except PydanticValidationError as e:
        raise ImportFormatError(f"Invalid member entry: {e.errors()[0]['msg']}") from e


def validate_import_goal(goal: ExportedGoal) -> Goal:
    """Цель из файла импорта: веса в (0, 1000], goal_type совпадает с весами"""
    start = parse_weight(goal.start_weight, "start_weight")
    target = parse_weight(goal.target_weight, "target_weight")
    expected_type = classify_goal(target - start)
    if goal.goal_type != expected_type:
        raise ValidationError(
            f"goal_type {goal.goal_type.value} does not match weights ({expected_type.value} expected)",
            field="goal_type",
        )
    return Goal(
        start_weight=round1(start),
        target_weight=round1(target),
        target_date=goal.target_date,
        goal_type=expected_type.value,
        weekly_target=goal.weekly_target,
    )


async def import_account_data(session: AsyncSession, account_id: str, payload: dict) -> ImportResponse:
    """Импортирует членов семьи, записи и цели в аккаунт. Все или ничего"""
    members = parse_import_members(payload)

    records_count = 0
    goals_count = 0
    try:
        for exported in members:
            name = exported.name.strip()
            if not name:
                raise ValidationError("Member name must not be blank", field="name")

            member = FamilyMember(
                account_id=account_id,
                name=name,
                relation=exported.relation.value,
                birth_date=exported.birth_date,
                gender=exported.gender,
            )
            session.add(member)
            await session.flush()

            for exported_record in exported.weight_records:
                session.add(WeightRecord(
                    member_id=member.id,
                    date=exported_record.date,
                    weight=validate_record_weight(exported_record.weight),
                    memo=validate_memo(exported_record.memo),
                ))
                records_count += 1

            if exported.goal is not None:
                goal = validate_import_goal(exported.goal)
                goal.member_id = member.id
                session.add(goal)
                goals_count += 1

        await session.commit()
    except ValidationError:
        await session.rollback()
        raise

    logger.info(
        "Imported %d members, %d records, %d goals for account %s",
        len(members), records_count, goals_count, account_id,
    )
    return ImportResponse(members_count=len(members), records_count=records_count, goals_count=goals_count)
