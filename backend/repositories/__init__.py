"""
Repository layer for data access abstraction.

This package contains repository classes that encapsulate database queries
and provide a clean interface for data access operations.
"""

from .base_repository import BaseRepository
from .entity_store import EntityStore
from .user_repository import UserRepository
from .group_repository import GroupRepository
from .category_repository import CategoryRepository
from .worship_repository import WorshipRepository
from .special_event_repository import SpecialEventRepository
from .app_config_repository import AppConfigRepository

__all__ = [
    "BaseRepository",
    "EntityStore",
    "UserRepository",
    "GroupRepository",
    "CategoryRepository",
    "WorshipRepository",
    "SpecialEventRepository",
    "AppConfigRepository",
]
