"""
User endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from binding import Binding, Principal
from constants import Authority, Pagination
from dependencies import get_user_service
from dtos.request import UserSaveDTO
from dtos.response import Message, UserResponse
from models import User
from services.user_service import UserService
from utils.jwt_util import TokenClaims
from utils.security import require_authorities

router = APIRouter(prefix="/users", tags=["users"])

admin_only = require_authorities(Authority.ADMIN)


@router.post("/save", response_model=Message)
def save_user(
    claims: TokenClaims = Depends(admin_only),
    user: User = Depends(Binding(UserSaveDTO, User)),
    service: UserService = Depends(get_user_service)
):
    """Create a user, or update the one named by ``id_user``."""
    created = user.id_user is None
    stored = service.save(user, registered_by=claims.username)
    return Message.ok(
        UserResponse.model_validate(stored),
        "User registered" if created else "User updated"
    )


@router.get("/me", response_model=Message)
def get_me(user: User = Depends(Principal(User))):
    return Message.ok(UserResponse.model_validate(user))


@router.get("/{user_id}", response_model=Message)
def get_user(
    user_id: int,
    claims: TokenClaims = Depends(admin_only),
    service: UserService = Depends(get_user_service)
):
    return Message.ok(UserResponse.model_validate(service.get(user_id)))


@router.get("", response_model=Message)
def list_users(
    page: int = Query(Pagination.DEFAULT_PAGE, ge=0),
    size: int = Query(Pagination.DEFAULT_SIZE, ge=1, le=Pagination.MAX_SIZE),
    username: Optional[str] = Query(None, description="Username contains (case-insensitive)"),
    names: Optional[str] = Query(None, description="Names contain (case-insensitive)"),
    residency_city: Optional[str] = Query(None),
    authority: Optional[Authority] = Query(None),
    enabled: Optional[bool] = Query(None),
    claims: TokenClaims = Depends(admin_only),
    service: UserService = Depends(get_user_service)
):
    """Paged, filtered user list, newest first."""
    page_data = service.find_page(
        page=page,
        size=size,
        username=username,
        names=names,
        residency_city=residency_city,
        authority=authority,
        enabled=enabled,
    )
    return Message.ok(page_data)


@router.put("/{user_id}/toggle-enabled", response_model=Message)
def toggle_enabled(
    user_id: int,
    claims: TokenClaims = Depends(admin_only),
    service: UserService = Depends(get_user_service)
):
    user = service.toggle_enabled(user_id, claims.username)
    return Message.ok(
        UserResponse.model_validate(user),
        "User enabled" if user.enabled else "User disabled"
    )
