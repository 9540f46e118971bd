"""
Worship Request DTOs
"""

from typing import Annotated, Optional

from binding import Identity
from .schedule_fields import ScheduleFields


class WorshipSaveDTO(ScheduleFields):
    id_worship: Annotated[Optional[int], Identity()] = None
