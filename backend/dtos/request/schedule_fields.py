"""
Fields shared by the save bodies of groups, worship services and special
events.
"""

from datetime import time
from typing import Annotated, Optional

from pydantic import BaseModel

from binding import Model, Unique, rule
from constants import DayOfWeek
from .user_request import UserRefDTO


class ScheduleFields(BaseModel):
    """Name, meeting time and responsible user."""

    name: Annotated[Optional[str], Unique(" is already registered")] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    day_of_week: Optional[DayOfWeek] = None
    hour: Optional[time] = None
    user_responsible: Annotated[Optional[UserRefDTO], Model()] = None

    @rule("day_of_week", mode="before")
    def normalize_day_of_week(cls, value):
        # Clients send day names in any case
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @rule("name")
    def validate_name(cls, value):
        value = value.strip()
        if not value:
            raise ValueError("Name must not be blank")
        return value
