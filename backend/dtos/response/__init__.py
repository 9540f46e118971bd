"""
Response DTOs

Payloads placed in the ``data`` field of the ``Message`` envelope. They are
built from ORM rows with ``model_validate`` and never expose password hashes.
"""

from .message_response import Message
from .user_response import UserPageResponse, UserResponse, UserSummaryResponse
from .group_response import (
    CategoryResponse,
    GroupResponse,
    MemberResponse,
    PublicSpecialEventResponse,
    SpecialEventResponse,
    WorshipResponse,
)

__all__ = [
    'CategoryResponse',
    'GroupResponse',
    'MemberResponse',
    'Message',
    'PublicSpecialEventResponse',
    'SpecialEventResponse',
    'UserPageResponse',
    'UserResponse',
    'UserSummaryResponse',
    'WorshipResponse',
]
