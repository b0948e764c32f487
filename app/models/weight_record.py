"""Модель записи веса члена семьи"""
from datetime import date as DateType, datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric
from sqlmodel import SQLModel, Field, Column


class WeightRecord(SQLModel, table=True):
    """Измерение веса за день. Несколько записей за один день допустимы"""
    __tablename__ = "weight_records"

    __table_args__ = (
        Index("idx_weight_records_member_id_date", "member_id", "date"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    member_id: int = Field(
        sa_column=Column(Integer, ForeignKey("family_members.id"), nullable=False),
        description="Family member ID"
    )
    date: DateType = Field(nullable=False, description="Day of the measurement")
    weight: float = Field(
        sa_column=Column(Numeric(5, 1, asdecimal=False), nullable=False),
        description="Weight in kg (1 decimal place)"
    )
    memo: str = Field(default="", max_length=100, nullable=False, description="Free text, up to 100 chars")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
        sa_type=DateTime(timezone=True),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"onupdate": lambda: datetime.now(timezone.utc)},
    )
