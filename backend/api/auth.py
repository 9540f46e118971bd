"""
Login endpoint.

Credentials arrive as form fields; the tokens are returned in response
headers, with the granted authorities in the envelope as well.
"""

import logging

from fastapi import APIRouter, Depends, Form, Request, Response

from constants import TokenHeaders
from dependencies import get_auth_service
from dtos.response import Message
from services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=Message)
def login(
    request: Request,
    response: Response,
    username: str = Form(...),
    password: str = Form(...),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Authenticate and return access and refresh tokens in headers."""
    tokens = auth_service.login(
        username,
        password,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    response.headers[TokenHeaders.AUTHORIZATION] = TokenHeaders.BEARER_PREFIX + tokens.access_token
    response.headers[TokenHeaders.REFRESH_TOKEN] = tokens.refresh_token
    response.headers[TokenHeaders.AUTHORITIES] = ",".join(tokens.authorities)
    return Message.ok({"authorities": tokens.authorities}, "Login successful")
