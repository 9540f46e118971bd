"""
Group Service

Handles business logic for groups: saving, instructor assignment,
lookups by category and instructor, and membership.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from binding import GraphPopulator
from constants import Authority, GroupRole
from dtos.request import GroupAssignInstructorsDTO
from exceptions import NotFoundError
from models import Group, GroupMember, User
from repositories.entity_store import EntityStore
from repositories.group_repository import GroupRepository
from utils.logging_utils import log_operation
from .base_service import BaseService
from .membership import assign_responsible, ensure_not_member, require_schedule

logger = logging.getLogger(__name__)


class GroupService(BaseService):
    """Service for group-related business logic."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.group_repo = GroupRepository(db)
        self.populator = GraphPopulator(EntityStore(db))

    def list_all(self) -> List[Group]:
        return self.db.query(Group).order_by(Group.name).all()

    def get(self, group_id: int) -> Group:
        group = self.group_repo.get_by_id(group_id)
        if group is None:
            raise NotFoundError(Group, group_id)
        return group

    @log_operation("save_group")
    def save(self, group: Group, principal: Optional[User] = None) -> Group:
        """
        Persist a group bound from a save request.

        A new group needs a name and a meeting day; the caller becomes the
        responsible user unless one was referenced.

        Args:
            group: New entity (create) or persisted entity with changes merged
            principal: Authenticated caller

        Returns:
            The stored group
        """
        if group.id_group is None:
            require_schedule(group)
            assign_responsible(group, principal)
        stored = self.persist(group)
        logger.info(f"Group saved: {stored.name} ({stored.id_group})")
        return stored

    @log_operation("assign_instructors")
    def assign_instructors(self, group_id: int, dto: GroupAssignInstructorsDTO) -> Group:
        """
        Add instructors to an existing group.

        Every id is resolved before the group is touched, so an unknown id
        leaves the group unchanged. Users without the INSTRUCTOR authority are
        skipped, and users already assigned are not added twice.

        Raises:
            NotFoundError: If the group or any referenced user is missing
        """
        group = self.get(group_id)
        resolved = self.populator.resolve_references(dto, Group)

        assigned = {user.id_user for user in group.instructors}
        for user in resolved.get("instructors", []):
            if not user.has_authority(Authority.INSTRUCTOR):
                logger.warning(f"User {user.id_user} is not an INSTRUCTOR, skipping")
                continue
            if user.id_user in assigned:
                continue
            group.instructors.append(user)
            assigned.add(user.id_user)

        return self.persist(group)

    def find_instructor_groups(self, instructor: User) -> List[Group]:
        return self.group_repo.get_by_instructor(instructor)

    def find_by_category(self, name_category: str) -> List[Group]:
        return self.group_repo.get_by_category_name(name_category)

    @log_operation("join_group")
    def join(self, group_id: int, user: User) -> GroupMember:
        """
        Register ``user`` as a member of a group.

        Raises:
            NotFoundError: If the group does not exist
            BusinessRuleError: If the user already belongs to it
        """
        group = self.get(group_id)
        ensure_not_member(self.group_repo.get_membership(group_id, user.id_user), user, "group")
        membership = self.group_repo.add_member(group, user, GroupRole.MEMBER)
        self.commit()
        self.db.refresh(membership)
        return membership

    def members(self, group_id: int) -> List[GroupMember]:
        group = self.group_repo.get_with_members(group_id)
        if group is None:
            raise NotFoundError(Group, group_id)
        return list(group.members)

    @log_operation("delete_group")
    def delete(self, group_id: int):
        self.group_repo.delete(self.get(group_id))
        self.commit()
