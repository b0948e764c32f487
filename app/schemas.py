"""Pydantic схемы для API и результатов расчетов"""
import re
from datetime import date, date as DateType, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict, field_validator


MAX_WEIGHT_KG = 1000.0
MAX_MEMO_LENGTH = 100
REMINDER_TIME_RE = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')


class Trend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"
    INSUFFICIENT_DATA = "insufficient_data"


class GoalType(str, Enum):
    LOSE = "lose"
    GAIN = "gain"
    MAINTAIN = "maintain"


class Relation(str, Enum):
    SELF = "self"
    SPOUSE = "spouse"
    CHILD = "child"
    PARENT = "parent"
    OTHER = "other"


class WeightUnit(str, Enum):
    KG = "kg"
    LB = "lb"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class ChangeDirection(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"
    STABLE = "stable"


class RecordSort(str, Enum):
    LATEST = "latest"
    OLDEST = "oldest"
    HIGHEST = "highest"
    LOWEST = "lowest"


class RecordPeriod(str, Enum):
    ALL = "all"
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"


# Derived values (not persisted)

class TrendResult(BaseModel):
    """Направление изменения веса за период"""
    trend: Trend
    change: float
    period_days: int
    record_count: int


class GoalProgress(BaseModel):
    """Прогресс по активной цели"""
    progress_percentage: float = Field(..., ge=0, le=100)
    current_weight: float
    target_weight: float
    remaining_weight: float
    goal_type: GoalType


class GoalPlan(BaseModel):
    """Расчет темпа для новой цели"""
    current_weight: float
    target_weight: float
    target_date: date
    required_change: float
    estimated_days: int
    estimated_date: date
    weeks: float
    weekly_target: float
    weekly_recommended: float
    healthy_weekly_min: float
    healthy_weekly_max: float
    is_healthy_goal: bool
    goal_type: GoalType


class ProjectionPoint(BaseModel):
    week: int
    projected_weight: float


class WeightStats(BaseModel):
    """Сводная статистика веса за период"""
    latest: float
    oldest: float
    change: float
    average: float
    min: float
    max: float
    record_count: int
    period_days: int
    weekly_average: float = Field(..., description="change / max(1, days between first and last record) * 7")
    goal_weight: Optional[float] = None


class TrendLinePoint(BaseModel):
    """Точка линии тренда (линейная регрессия по порядковому номеру записи)"""
    index: int
    weight: float


class WeightChange(BaseModel):
    value: float
    direction: ChangeDirection


# Family members

class CreateMemberRequest(BaseModel):
    """Запрос на добавление члена семьи"""
    account_id: str = Field(..., min_length=1, max_length=128)
    name: str = Field(..., min_length=1, max_length=50)
    relation: Relation = Relation.SELF
    birth_date: Optional[date] = None
    gender: Optional[str] = Field(default=None, description="Gender (m or f)")

    @field_validator('gender')
    @classmethod
    def validate_gender(cls, v: Optional[str]) -> Optional[str]:
        """Validate gender is either m or f"""
        if v is not None and v not in ('m', 'f'):
            raise ValueError('Gender must be either "m" or "f"')
        return v


class UpdateMemberRequest(BaseModel):
    """Запрос на обновление члена семьи"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    relation: Optional[Relation] = None
    birth_date: Optional[date] = None
    gender: Optional[str] = None

    @field_validator('gender')
    @classmethod
    def validate_gender(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in ('m', 'f'):
            raise ValueError('Gender must be either "m" or "f"')
        return v


class MemberResponse(BaseModel):
    """Ответ с данными члена семьи"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    account_id: str
    name: str
    relation: Relation
    birth_date: Optional[date]
    gender: Optional[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime


# Weight records

class CreateRecordRequest(BaseModel):
    """Запрос на добавление записи веса.

    Вес и дата проверяются в сервисе, чтобы ошибка указывала на поле
    так же, как для целей.
    """
    member_id: int
    weight: float
    date: Optional[DateType] = None
    memo: str = ""


class UpdateRecordRequest(BaseModel):
    """Запрос на изменение записи веса"""
    weight: Optional[float] = None
    date: Optional[DateType] = None
    memo: Optional[str] = None


class RecordResponse(BaseModel):
    """Запись веса"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    member_id: int
    date: DateType
    weight: float
    memo: str
    created_at: datetime
    updated_at: datetime


class RecordListItem(RecordResponse):
    """Запись в списке с изменением относительно следующей записи списка"""
    change: Optional[WeightChange] = None


# Goals

class GoalRequest(BaseModel):
    """Запрос на расчет или сохранение цели"""
    current_weight: Optional[float] = None
    target_weight: Optional[float] = None
    target_date: Optional[date] = None


class GoalResponse(BaseModel):
    """Цель члена семьи"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    member_id: int
    start_weight: float
    target_weight: float
    target_date: date
    goal_type: GoalType
    weekly_target: float
    is_active: bool
    created_at: datetime
    updated_at: datetime


class GoalPlanResponse(BaseModel):
    plan: GoalPlan
    projection: List[ProjectionPoint]


class SetGoalResponse(BaseModel):
    goal: GoalResponse
    plan: GoalPlan


# Statistics

class CalendarDay(BaseModel):
    """Ячейка календаря"""
    date: DateType
    in_month: bool
    is_today: bool
    record: Optional[RecordResponse] = None


class ChartResponse(BaseModel):
    """Данные графика: записи за период, линия тренда и статистика"""
    period_days: int
    records: List[RecordResponse]
    trend_line: List[TrendLinePoint]
    statistics: Optional[WeightStats]


class CalendarResponse(BaseModel):
    year: int
    month: int
    days: List[CalendarDay]


class DashboardResponse(BaseModel):
    """Данные главного экрана"""
    member: MemberResponse
    latest_record: Optional[RecordResponse]
    trend: TrendResult
    goal_progress: Optional[GoalProgress]
    recent_records: List[RecordResponse]
    record_count: int


# Settings

class MemberSettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    member_id: int
    unit: WeightUnit
    theme: Theme
    daily_reminder: bool
    reminder_time: str
    goal_achievement_alert: bool
    updated_at: datetime


class UpdateSettingsRequest(BaseModel):
    """Типизированное обновление настроек: каждое поле меняется своим сеттером"""
    unit: Optional[WeightUnit] = None
    theme: Optional[Theme] = None
    daily_reminder: Optional[bool] = None
    reminder_time: Optional[str] = Field(default=None, description="HH:MM")
    goal_achievement_alert: Optional[bool] = None

    @field_validator('reminder_time')
    @classmethod
    def validate_reminder_time(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not REMINDER_TIME_RE.match(v):
            raise ValueError('Reminder time must be in HH:MM format')
        return v


# Export / import

class ExportedRecord(BaseModel):
    date: DateType
    weight: float
    memo: str = ""


class ExportedGoal(BaseModel):
    start_weight: float = Field(..., gt=0, le=MAX_WEIGHT_KG)
    target_weight: float = Field(..., gt=0, le=MAX_WEIGHT_KG)
    target_date: date
    goal_type: GoalType
    weekly_target: float = Field(..., ge=0)


class ExportedMember(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    relation: Relation = Relation.SELF
    birth_date: Optional[date] = None
    gender: Optional[str] = None
    weight_records: List[ExportedRecord] = Field(default_factory=list)
    goal: Optional[ExportedGoal] = None


class ExportDocument(BaseModel):
    version: str = "1.0"
    exported_at: datetime
    account_id: str
    members: List[ExportedMember]


class ImportResponse(BaseModel):
    members_count: int
    records_count: int
    goals_count: int
