"""
User repository for user-specific data access operations.
"""

from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from models import User, LoginLog
from .base_repository import BaseRepository
from .specifications import Specification


class UserRepository(BaseRepository[User]):
    """Repository for User model operations."""

    def __init__(self, db: Session):
        super().__init__(db, User)

    def get_by_username(self, username: str) -> Optional[User]:
        """
        Find a user by login name.

        Args:
            username: Login name (e-mail)

        Returns:
            User or None if not found
        """
        return self.db.query(self.model).filter(self.model.username == username).first()

    def exists_by_username(self, username: str) -> bool:
        return self.exists_by('username', username)

    def find_page(
        self,
        spec: Specification[User],
        page: int,
        size: int,
        descending: bool = True
    ) -> Tuple[List[User], int]:
        """
        Retrieve one page of users matching a specification.

        Args:
            spec: Filter specification
            page: Zero-based page number
            size: Page size
            descending: Order by id descending when True

        Returns:
            Tuple of (users on the page, total matching users)
        """
        query = spec.apply(self.db.query(self.model))
        total = query.count()
        order = self.model.id_user.desc() if descending else self.model.id_user.asc()
        users = query.order_by(order).offset(page * size).limit(size).all()
        return users, total

    def log_login(self, log: LoginLog) -> LoginLog:
        self.db.add(log)
        self.db.flush()
        return log
