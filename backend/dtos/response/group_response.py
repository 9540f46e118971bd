"""
Group, worship service and special event Response DTOs
"""

from datetime import datetime, time
from typing import List, Optional

from pydantic import BaseModel, Field

from constants import DayOfWeek, GroupRole
from .user_response import UserSummaryResponse


class CategoryResponse(BaseModel):
    id_category: int
    name_category: str

    class Config:
        from_attributes = True


class ScheduledResponse(BaseModel):
    """Fields common to groups, worship services and special events."""

    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    day_of_week: Optional[DayOfWeek] = None
    hour: Optional[time] = None
    user_responsible: Optional[UserSummaryResponse] = None

    class Config:
        from_attributes = True


class GroupResponse(ScheduledResponse):
    id_group: int
    category: Optional[CategoryResponse] = None
    instructors: List[UserSummaryResponse] = Field(default_factory=list)


class WorshipResponse(ScheduledResponse):
    id_worship: int


class SpecialEventResponse(ScheduledResponse):
    id_special_event: int
    number_of_slots: Optional[int] = None
    available_slots: Optional[int] = Field(None, description="Slots left; None when unlimited")


class PublicSpecialEventResponse(BaseModel):
    """Special event as listed to anonymous visitors."""

    id_special_event: int
    name: str
    address: Optional[str] = None
    day_of_week: Optional[DayOfWeek] = None
    hour: Optional[time] = None
    available_slots: Optional[int] = None

    class Config:
        from_attributes = True


class MemberResponse(BaseModel):
    """A user's membership in a group, worship service or special event."""

    user: UserSummaryResponse
    role: Optional[GroupRole] = None
    joined_at: datetime

    class Config:
        from_attributes = True
