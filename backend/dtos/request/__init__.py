"""
Request DTOs

Bodies accepted by the API. Binding markers (Identity, Unique, Model) on
their fields drive the create/update decision, the uniqueness checks and
reference population performed by ``binding.Binding``.
"""

from .category_request import CategoryRefDTO, CategorySaveDTO
from .group_request import GroupAssignInstructorsDTO, GroupSaveDTO, JoinRequestDTO
from .special_event_request import SpecialEventMemberDTO, SpecialEventSaveDTO
from .user_request import UserRefDTO, UserSaveDTO
from .worship_request import WorshipSaveDTO

__all__ = [
    'CategoryRefDTO',
    'CategorySaveDTO',
    'GroupAssignInstructorsDTO',
    'GroupSaveDTO',
    'JoinRequestDTO',
    'SpecialEventMemberDTO',
    'SpecialEventSaveDTO',
    'UserRefDTO',
    'UserSaveDTO',
    'WorshipSaveDTO',
]
