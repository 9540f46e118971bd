"""
Special Event Service

Special events have a limited number of slots. Members registered with the
event on creation and members joining later both count against it.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from exceptions import BusinessRuleError, NotFoundError
from models import SpecialEvent, SpecialEventMember, User
from repositories.special_event_repository import SpecialEventRepository
from utils.logging_utils import log_operation
from .base_service import BaseService
from .membership import assign_responsible, ensure_not_member, load_or_raise, require_schedule

logger = logging.getLogger(__name__)


class SpecialEventService(BaseService):
    """Service for special events and their registrations."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.event_repo = SpecialEventRepository(db)

    def list_all(self) -> List[SpecialEvent]:
        return self.event_repo.get_all_with_members()

    def list_public(self) -> List[SpecialEvent]:
        """Events that still have room, for anonymous visitors."""
        return [
            event for event in self.event_repo.get_all_with_members()
            if event.available_slots is None or event.available_slots > 0
        ]

    @log_operation("save_special_event")
    def save(self, event: SpecialEvent, principal: Optional[User] = None) -> SpecialEvent:
        """
        Persist a special event bound from a save request.

        Raises:
            ValidationError: If a new event lacks a name or day
            BusinessRuleError: If a user is listed twice or the listed members
                exceed the number of slots
        """
        if event.id_special_event is None:
            require_schedule(event)
            assign_responsible(event, principal)
        self._check_members(event)
        stored = self.persist(event)
        logger.info(f"Special event saved: {stored.name} ({stored.id_special_event})")
        return stored

    def _check_members(self, event: SpecialEvent):
        user_ids = [member.user.id_user for member in event.members if member.user is not None]
        if len(user_ids) != len(set(user_ids)):
            raise BusinessRuleError("A user is listed more than once")
        if event.number_of_slots is not None and len(event.members) > event.number_of_slots:
            raise BusinessRuleError(
                f"{len(event.members)} members exceed the {event.number_of_slots} available slots"
            )

    @log_operation("join_special_event")
    def join(self, event_id: int, user: User) -> SpecialEventMember:
        """
        Register ``user`` on a special event.

        Raises:
            NotFoundError: If the event does not exist
            BusinessRuleError: If the user is registered already or no slot is left
        """
        event = load_or_raise(self.db, SpecialEvent, event_id)
        ensure_not_member(self.event_repo.get_membership(event_id, user.id_user), user, "special event")
        if event.available_slots == 0:
            logger.info(f"Special event {event_id} is full")
            raise BusinessRuleError("There are no slots left for this event")
        membership = SpecialEventMember(special_event=event, user=user)
        self.db.add(membership)
        self.commit()
        self.db.refresh(membership)
        return membership

    def members(self, event_id: int) -> List[SpecialEventMember]:
        event = self.event_repo.get_with_members(event_id)
        if event is None:
            raise NotFoundError(SpecialEvent, event_id)
        return list(event.members)
