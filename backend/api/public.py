"""
Endpoints reachable without an access token.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Response

from constants import TokenHeaders
from dependencies import get_auth_service, get_special_event_service
from dtos.response import Message, PublicSpecialEventResponse
from exceptions import AuthenticationError
from services.auth_service import AuthService
from services.special_event_service import SpecialEventService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/public", tags=["public"])


@router.post("/refreshToken", response_model=Message)
def refresh_token(
    response: Response,
    authorization: Optional[str] = Header(None),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Exchange the refresh token sent as ``Authorization: Bearer <token>``
    for a new token pair.
    """
    if not authorization or not authorization.startswith(TokenHeaders.BEARER_PREFIX):
        raise AuthenticationError(
            "Authorization header not present or not starting with Bearer",
            error="missing_token"
        )
    tokens = auth_service.refresh(authorization[len(TokenHeaders.BEARER_PREFIX):].strip())
    response.headers[TokenHeaders.AUTHORIZATION] = TokenHeaders.BEARER_PREFIX + tokens.access_token
    response.headers[TokenHeaders.REFRESH_TOKEN] = tokens.refresh_token
    response.headers[TokenHeaders.AUTHORITIES] = ",".join(tokens.authorities)
    return Message.ok(message="Token refreshed")


@router.get("/specialEvents", response_model=Message)
def public_special_events(service: SpecialEventService = Depends(get_special_event_service)):
    """Special events that still accept registrations."""
    events = service.list_public()
    return Message.ok([PublicSpecialEventResponse.model_validate(e) for e in events])
