"""
Worship repository for worship-service data access operations.
"""

from typing import Optional
from sqlalchemy.orm import Session, joinedload

from models import Worship, WorshipMember
from .base_repository import BaseRepository


class WorshipRepository(BaseRepository[Worship]):
    """Repository for Worship model operations."""

    def __init__(self, db: Session):
        super().__init__(db, Worship)

    def get_with_members(self, worship_id: int) -> Optional[Worship]:
        return self.db.query(self.model).options(
            joinedload(self.model.members).joinedload(WorshipMember.user)
        ).filter(self.model.id_worship == worship_id).first()

    def get_membership(self, worship_id: int, user_id: int) -> Optional[WorshipMember]:
        return self.db.query(WorshipMember).filter(
            WorshipMember.worship_id == worship_id,
            WorshipMember.user_id == user_id
        ).first()
