"""
Authenticated principal injection.

``Principal`` is a FastAPI dependency that turns the username of the verified
bearer token into the value a handler asks for:

- ``Principal(str)``: the username itself
- ``Principal(User)``: the persisted user (or, with ``populate=False``, a
  transient User carrying only the username)
- ``Principal(SomeEntity)``: the first row of ``SomeEntity`` whose
  ``user_field`` relationship points at the caller
"""

import logging
from typing import Any

from fastapi import Depends
from sqlalchemy.orm import Session

from database import get_db
from exceptions import NotFoundError
from models import User
from repositories.entity_store import EntityStore
from utils.security import get_principal_name

logger = logging.getLogger(__name__)


class Principal:
    """
    Principal directive for a handler parameter.

    Args:
        target: ``str``, the User model, or an entity with a user relationship
        populate: Load persisted rows instead of building transient ones
        username_field: User attribute matched against the principal name
        user_field: Relationship on ``target`` that references the user

    Example:
        @router.get("/me")
        def me(user: User = Depends(Principal(User))):
            ...
    """

    def __init__(
        self,
        target: type = str,
        populate: bool = True,
        username_field: str = "username",
        user_field: str = "user"
    ):
        self.target = target
        self.populate = populate
        self.username_field = username_field
        self.user_field = user_field

    def __call__(
        self,
        principal_name: str = Depends(get_principal_name),
        db: Session = Depends(get_db)
    ) -> Any:
        return PrincipalResolver(EntityStore(db)).resolve(self, principal_name)


class PrincipalResolver:
    def __init__(self, store: EntityStore, user_type: type = User):
        self.store = store
        self.user_type = user_type

    def resolve(self, directive: Principal, principal_name: str) -> Any:
        """
        Resolve ``principal_name`` according to ``directive``.

        Raises:
            NotFoundError: If populating and the user, or the target row
                linked to it, does not exist
            StructuralConfigError: If a configured field is not mapped
        """
        if directive.target is str:
            return principal_name

        if not directive.populate:
            user = self.user_type()
            setattr(user, directive.username_field, principal_name)
            if directive.target is self.user_type:
                return user
            entity = directive.target()
            setattr(entity, directive.user_field, user)
            return entity

        user = self.store.find_one_by(self.user_type, directive.username_field, principal_name)
        if user is None:
            logger.info(f"Principal {principal_name!r} has no user row")
            raise NotFoundError(self.user_type, principal_name)
        if directive.target is self.user_type:
            return user

        entity = self.store.find_one_by(directive.target, directive.user_field, user)
        if entity is None:
            raise NotFoundError(directive.target, principal_name)
        return entity
