"""SQLModel для целей по весу"""
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, text
from sqlmodel import Field, SQLModel, Index, Column


class Goal(SQLModel, table=True):
    """Цель члена семьи. Активна не более одной, старые цели только деактивируются"""
    __tablename__ = "goals"
    __table_args__ = (
        Index("idx_goals_member_id_is_active", "member_id", "is_active"),
        # one active goal per member
        Index(
            "uq_goals_member_id_active",
            "member_id",
            unique=True,
            sqlite_where=text("is_active"),
            postgresql_where=text("is_active"),
        ),
    )

    # Primary key
    id: Optional[int] = Field(
        default=None,
        primary_key=True,
        description="Unique goal ID"
    )

    member_id: int = Field(
        sa_column=Column(Integer, ForeignKey("family_members.id"), nullable=False),
        description="Family member ID"
    )

    # Goal details
    start_weight: float = Field(
        sa_column=Column(Numeric(5, 1, asdecimal=False), nullable=False),
        description="Weight when the goal was set (kg)"
    )
    target_weight: float = Field(
        sa_column=Column(Numeric(5, 1, asdecimal=False), nullable=False),
        description="Target weight (kg)"
    )
    target_date: date = Field(
        nullable=False,
        description="Date the target should be reached by"
    )
    goal_type: str = Field(
        nullable=False,
        description="lose/gain/maintain"
    )
    weekly_target: float = Field(
        default=0.0,
        nullable=False,
        description="Required weekly change (kg, >= 0)"
    )

    is_active: bool = Field(
        default=True,
        nullable=False,
        description="Only one active goal per member"
    )

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
        sa_type=DateTime(timezone=True),
        description="Время создания записи"
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"onupdate": lambda: datetime.now(timezone.utc)},
        description="Время последнего обновления"
    )
