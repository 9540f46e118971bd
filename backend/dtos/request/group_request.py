"""
Group Request DTOs
"""

from typing import Annotated, List, Optional

from pydantic import BaseModel, Field

from binding import Identity, Model
from models import User
from .category_request import CategoryRefDTO
from .schedule_fields import ScheduleFields


class GroupSaveDTO(ScheduleFields):
    """
    Create or update a group.

    ``category`` and ``user_responsible`` reference existing rows by id and
    ``instructor_ids`` lists instructor user ids. When no responsible user is
    sent, the caller becomes responsible for a new group.
    """

    id_group: Annotated[Optional[int], Identity()] = None
    category: Annotated[Optional[CategoryRefDTO], Model()] = None
    instructor_ids: Annotated[
        Optional[List[int]],
        Model(is_list=True, element_type=User, target="instructors")
    ] = None


class GroupAssignInstructorsDTO(BaseModel):
    """Users to add as instructors of a group."""

    instructor_ids: Annotated[
        List[int],
        Model(is_list=True, element_type=User, target="instructors")
    ] = Field(min_length=1)


class JoinRequestDTO(BaseModel):
    """Join a group, worship service or special event by id."""

    id: int = Field(description="Id of the group, worship service or special event")
