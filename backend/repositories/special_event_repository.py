"""
Special event repository for event-specific data access operations.
"""

from typing import List, Optional
from sqlalchemy.orm import Session, joinedload, selectinload

from models import SpecialEvent, SpecialEventMember
from .base_repository import BaseRepository


class SpecialEventRepository(BaseRepository[SpecialEvent]):
    """Repository for SpecialEvent model operations."""

    def __init__(self, db: Session):
        super().__init__(db, SpecialEvent)

    def get_with_members(self, event_id: int) -> Optional[SpecialEvent]:
        return self.db.query(self.model).options(
            joinedload(self.model.members).joinedload(SpecialEventMember.user)
        ).filter(self.model.id_special_event == event_id).first()

    def get_all_with_members(self) -> List[SpecialEvent]:
        """
        Get all events with members loaded, for slot counting.

        Returns:
            Events ordered by name
        """
        return self.db.query(self.model).options(
            selectinload(self.model.members)
        ).order_by(self.model.name).all()

    def get_membership(self, event_id: int, user_id: int) -> Optional[SpecialEventMember]:
        return self.db.query(SpecialEventMember).filter(
            SpecialEventMember.special_event_id == event_id,
            SpecialEventMember.user_id == user_id
        ).first()
