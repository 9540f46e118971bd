"""
User Service

Business rules for user accounts: registration, updates, listing and
enabling/disabling.
"""

import logging
import math
from typing import Optional

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Session

from constants import AppConfigKeys, Authority, Pagination
from dtos.response import UserPageResponse, UserResponse
from exceptions import BusinessRuleError, NotFoundError, ValidationError
from models import User
from repositories.app_config_repository import AppConfigRepository
from repositories.specifications import all_of
from repositories.user_repository import UserRepository
from repositories.user_specifications import field_contains, field_equals, has_authority
from utils.logging_utils import log_operation
from .auth_service import hash_password
from .base_service import BaseService

logger = logging.getLogger(__name__)


class UserService(BaseService):
    """Service for user-related business logic."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.user_repo = UserRepository(db)
        self.config_repo = AppConfigRepository(db)

    @log_operation("save_user")
    def save(self, user: User, registered_by: Optional[str] = None) -> User:
        """
        Persist a user bound from a save request.

        New users need a username and a password; they get the configured
        default authority when no role was sent. On update the password is
        re-hashed only when the request changed it.

        Args:
            user: New entity (create) or persisted entity with changes merged
            registered_by: Username of the caller, stored on new accounts

        Returns:
            The stored user

        Raises:
            ValidationError: If a new user lacks username or password
            CollisionError: If the username is taken concurrently
        """
        if user.id_user is None:
            self._prepare_new(user, registered_by)
        else:
            self._rehash_if_changed(user)
        return self.persist(user)

    def _prepare_new(self, user: User, registered_by: Optional[str]):
        violations = []
        if not user.username:
            violations.append({"field": "username", "message": "Field required", "rejected_value": None})
        if not user.password:
            violations.append({"field": "password", "message": "Field required", "rejected_value": None})
        if violations:
            raise ValidationError("Request body failed validation", violations)

        user.password = hash_password(user.password)
        user.user_register = registered_by
        if not user.authority_entries:
            default = self.config_repo.get_value(AppConfigKeys.DEFAULT_AUTHORITY, Authority.MEMBER.value)
            user.set_authorities([default])

    def _rehash_if_changed(self, user: User):
        history = sa_inspect(user).attrs.password.history
        if not history.has_changes():
            return
        if user.password:
            user.password = hash_password(user.password)
        else:
            # An explicit null keeps the stored hash
            user.password = history.deleted[0] if history.deleted else None

    def get(self, user_id: int) -> User:
        user = self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError(User, user_id)
        return user

    def find_page(
        self,
        page: int = Pagination.DEFAULT_PAGE,
        size: int = Pagination.DEFAULT_SIZE,
        username: Optional[str] = None,
        names: Optional[str] = None,
        residency_city: Optional[str] = None,
        authority: Optional[Authority] = None,
        enabled: Optional[bool] = None
    ) -> UserPageResponse:
        """
        List users matching every given filter, newest first.

        Text filters match case-insensitive fragments; filters left as None
        are ignored.
        """
        size = max(1, min(size, Pagination.MAX_SIZE))
        page = max(page, 0)
        spec = all_of([
            field_contains("username", username),
            field_contains("names", names),
            field_contains("residency_city", residency_city),
            has_authority(authority),
            field_equals("enabled", enabled),
        ])
        users, total = self.user_repo.find_page(spec, page, size)
        return UserPageResponse(
            content=[UserResponse.model_validate(u) for u in users],
            page=page,
            size=size,
            total_elements=total,
            total_pages=math.ceil(total / size) if total else 0,
        )

    @log_operation("toggle_user_enabled")
    def toggle_enabled(self, user_id: int, principal_name: str) -> User:
        """
        Flip the enabled flag of a user.

        Raises:
            NotFoundError: If the user does not exist
            BusinessRuleError: If callers try to disable their own account
        """
        user = self.get(user_id)
        if user.username == principal_name:
            raise BusinessRuleError("You cannot disable your own account")
        user.enabled = not user.enabled
        logger.info(f"User {user.username} enabled={user.enabled}")
        return self.persist(user)
