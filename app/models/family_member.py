"""SQLModel для членов семьи"""
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel, Index


class FamilyMember(SQLModel, table=True):
    """Член семьи, чей вес отслеживается. Принадлежит аккаунту account_id"""
    __tablename__ = "family_members"
    __table_args__ = (
        Index("idx_family_members_account_id", "account_id"),
    )

    # Primary key
    id: Optional[int] = Field(
        default=None,
        primary_key=True,
        description="Unique member ID"
    )

    # Owning login account (opaque)
    account_id: str = Field(
        nullable=False,
        description="Account that manages this member"
    )

    # Profile
    name: str = Field(
        nullable=False,
        description="Display name (1-50 chars)"
    )
    relation: str = Field(
        default="self",
        nullable=False,
        description="self/spouse/child/parent/other"
    )
    birth_date: Optional[date] = Field(
        default=None,
        nullable=True,
        description="Date of birth"
    )
    gender: Optional[str] = Field(
        default=None,
        nullable=True,
        description="Gender (m or f)"
    )

    # Soft delete
    is_active: bool = Field(
        default=True,
        nullable=False,
        description="False after the member was removed"
    )

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
        sa_type=DateTime(timezone=True),
        description="Record creation timestamp"
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"onupdate": lambda: datetime.now(timezone.utc)},
        description="Record last update timestamp"
    )
