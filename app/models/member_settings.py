"""SQLModel для настроек члена семьи"""
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer
from sqlmodel import Field, SQLModel, Column


class MemberSettings(SQLModel, table=True):
    """Настройки приложения, одна строка на члена семьи"""
    __tablename__ = "member_settings"

    member_id: int = Field(
        sa_column=Column(Integer, ForeignKey("family_members.id"), primary_key=True),
        description="Family member ID"
    )

    unit: str = Field(default="kg", nullable=False, description="kg or lb")
    theme: str = Field(default="light", nullable=False, description="light/dark/system")

    # Notifications
    daily_reminder: bool = Field(default=True, nullable=False)
    reminder_time: str = Field(default="08:00", nullable=False, description="HH:MM")
    goal_achievement_alert: bool = Field(default=True, nullable=False)

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"onupdate": lambda: datetime.now(timezone.utc)},
    )
