"""
Group repository for group-specific data access operations.
"""

from typing import List, Optional
from sqlalchemy.orm import Session, joinedload

from models import Group, GroupMember, Category, User, group_instructors
from constants import GroupRole
from .base_repository import BaseRepository


class GroupRepository(BaseRepository[Group]):
    """Repository for Group model operations."""

    def __init__(self, db: Session):
        super().__init__(db, Group)

    def get_with_members(self, group_id: int) -> Optional[Group]:
        """
        Get a group with its members and their users eagerly loaded.

        Args:
            group_id: Group primary key

        Returns:
            Group instance with members, or None if not found
        """
        return self.db.query(self.model).options(
            joinedload(self.model.members).joinedload(GroupMember.user)
        ).filter(self.model.id_group == group_id).first()

    def get_by_category_name(self, name_category: str) -> List[Group]:
        """
        Find groups whose category has the given name.

        Args:
            name_category: Category name

        Returns:
            Groups ordered by name
        """
        return self.db.query(self.model).join(self.model.category).filter(
            Category.name_category == name_category
        ).order_by(self.model.name).all()

    def get_by_instructor(self, user: User) -> List[Group]:
        """
        Find groups where the user is an assigned instructor.

        Args:
            user: Instructor

        Returns:
            Groups ordered by name
        """
        return self.db.query(self.model).join(
            group_instructors, group_instructors.c.group_id == self.model.id_group
        ).filter(
            group_instructors.c.user_id == user.id_user
        ).order_by(self.model.name).all()

    def get_membership(self, group_id: int, user_id: int) -> Optional[GroupMember]:
        return self.db.query(GroupMember).filter(
            GroupMember.group_id == group_id,
            GroupMember.user_id == user_id
        ).first()

    def add_member(self, group: Group, user: User, role: GroupRole = GroupRole.MEMBER) -> GroupMember:
        membership = GroupMember(group=group, user=user, role=role)
        self.db.add(membership)
        self.db.flush()
        return membership
