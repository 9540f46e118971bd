"""
Dependency injection providers for FastAPI.

Factory functions creating the request-scoped services. Every factory
depends on ``get_db``, which FastAPI resolves once per request, so the
services, the body bindings and the principal resolver of one request share
a single session.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from database import get_db
from services.auth_service import AuthService
from services.category_service import CategoryService
from services.group_service import GroupService
from services.special_event_service import SpecialEventService
from services.user_service import UserService
from services.worship_service import WorshipService
from utils.jwt_util import JwtUtil
from utils.security import get_jwt_util


def get_auth_service(
    db: Session = Depends(get_db),
    jwt_util: JwtUtil = Depends(get_jwt_util)
) -> AuthService:
    """
    Factory function for creating AuthService instances.

    Args:
        db: Database session
        jwt_util: Token issuer

    Returns:
        AuthService instance
    """
    return AuthService(db, jwt_util)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


def get_category_service(db: Session = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


def get_group_service(db: Session = Depends(get_db)) -> GroupService:
    return GroupService(db)


def get_worship_service(db: Session = Depends(get_db)) -> WorshipService:
    return WorshipService(db)


def get_special_event_service(db: Session = Depends(get_db)) -> SpecialEventService:
    return SpecialEventService(db)
