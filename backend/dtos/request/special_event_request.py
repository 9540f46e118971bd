"""
Special Event Request DTOs
"""

from typing import Annotated, List, Optional

from pydantic import BaseModel

from binding import Identity, Model, rule
from .schedule_fields import ScheduleFields
from .user_request import UserRefDTO


class SpecialEventMemberDTO(BaseModel):
    """A user registered on the event when it is created."""

    user: Annotated[UserRefDTO, Model()]


class SpecialEventSaveDTO(ScheduleFields):
    """
    Create or update a special event.

    ``members`` pre-registers users on a new event; each entry becomes a
    SpecialEventMember whose user reference is resolved in turn.
    """

    id_special_event: Annotated[Optional[int], Identity()] = None
    number_of_slots: Optional[int] = None
    members: Annotated[
        Optional[List[SpecialEventMemberDTO]],
        Model(is_list=True, has_nested_model=True)
    ] = None

    @rule("number_of_slots")
    def validate_slots(cls, value):
        if value < 1:
            raise ValueError("Number of slots must be at least 1")
        return value
