"""
Entity store used by the binding pipeline.

Gives the binding layer a single persistence handle over every entity type,
backed by one BaseRepository per model for the lifetime of a request session.
"""

from typing import Any, Dict, Optional, Type, TypeVar
from sqlalchemy.orm import Session

from .base_repository import BaseRepository

T = TypeVar('T')


class EntityStore:
    """Persistence store facade over typed repositories."""

    def __init__(self, db: Session):
        self.db = db
        self._repositories: Dict[type, BaseRepository] = {}

    def repository(self, entity_type: Type[T]) -> BaseRepository[T]:
        """Return the repository for ``entity_type``, creating it on first use."""
        repo = self._repositories.get(entity_type)
        if repo is None:
            repo = BaseRepository(self.db, entity_type)
            self._repositories[entity_type] = repo
        return repo

    def exists(self, entity_type: type, field: str, value: Any, exclude_id: Any = None) -> bool:
        return self.repository(entity_type).exists_by(field, value, exclude_id=exclude_id)

    def find_by_id(self, entity_type: Type[T], entity_id: Any) -> Optional[T]:
        return self.repository(entity_type).get_by_id(entity_id)

    def find_one_by(self, entity_type: Type[T], field: str, value: Any) -> Optional[T]:
        return self.repository(entity_type).find_one_by(field, value)
