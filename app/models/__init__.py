"""Database models"""
from app.models.family_member import FamilyMember
from app.models.goal import Goal
from app.models.member_settings import MemberSettings
from app.models.weight_record import WeightRecord

__all__ = ["FamilyMember", "Goal", "MemberSettings", "WeightRecord"]
