"""
Worship Service
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from exceptions import NotFoundError
from models import User, Worship, WorshipMember
from repositories.worship_repository import WorshipRepository
from utils.logging_utils import log_operation
from .base_service import BaseService
from .membership import assign_responsible, ensure_not_member, load_or_raise, require_schedule

logger = logging.getLogger(__name__)


class WorshipService(BaseService):
    """Service for worship services and their attendees."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.worship_repo = WorshipRepository(db)

    def list_all(self) -> List[Worship]:
        return self.db.query(Worship).order_by(Worship.name).all()

    @log_operation("save_worship")
    def save(self, worship: Worship, principal: Optional[User] = None) -> Worship:
        if worship.id_worship is None:
            require_schedule(worship)
            assign_responsible(worship, principal)
        stored = self.persist(worship)
        logger.info(f"Worship saved: {stored.name} ({stored.id_worship})")
        return stored

    @log_operation("join_worship")
    def join(self, worship_id: int, user: User) -> WorshipMember:
        worship = load_or_raise(self.db, Worship, worship_id)
        ensure_not_member(self.worship_repo.get_membership(worship_id, user.id_user), user, "worship")
        membership = WorshipMember(worship=worship, user=user)
        self.db.add(membership)
        self.commit()
        self.db.refresh(membership)
        return membership

    def members(self, worship_id: int) -> List[WorshipMember]:
        worship = self.worship_repo.get_with_members(worship_id)
        if worship is None:
            raise NotFoundError(Worship, worship_id)
        return list(worship.members)
