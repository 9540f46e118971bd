"""
Authentication and authorization dependencies.

Handlers declare what they need through FastAPI dependencies:

    @router.get("/users")
    def list_users(claims: TokenClaims = Depends(require_authorities(Authority.ADMIN))):
        ...

Failures raise AuthenticationError (401) or AuthorizationError (403), which
the registered exception handlers render into the response envelope.
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from constants import Authority
from exceptions import AuthenticationError, AuthorizationError
from utils.jwt_util import JwtUtil, TokenClaims
from utils.logging_utils import set_logging_context

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_jwt_util() -> JwtUtil:
    return JwtUtil()


def get_authenticated_claims(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    jwt_util: JwtUtil = Depends(get_jwt_util)
) -> TokenClaims:
    """
    Verify the bearer token of the current request.

    Returns:
        Claims of the access token

    Raises:
        AuthenticationError: If the token is missing or invalid
    """
    if credentials is None or not credentials.credentials.strip():
        logger.info(f"Missing bearer token for {request.method} {request.url.path}")
        raise AuthenticationError("Authentication required", error="missing_token")

    claims = jwt_util.verify_token(credentials.credentials.strip())
    request.state.principal = claims.username
    set_logging_context(principal=claims.username)
    return claims


def get_principal_name(claims: TokenClaims = Depends(get_authenticated_claims)) -> str:
    """Username of the authenticated caller."""
    return claims.username


def require_authorities(*authorities: Authority):
    """
    Build a dependency that admits callers holding any of ``authorities``.

    Args:
        *authorities: Accepted authorities

    Returns:
        FastAPI dependency returning the verified claims
    """
    required = [a.value for a in authorities]

    def checker(claims: TokenClaims = Depends(get_authenticated_claims)) -> TokenClaims:
        if not any(a in claims.authorities for a in required):
            logger.warning(f"{claims.username} lacks any of {required}")
            raise AuthorizationError("Access denied", required=required)
        return claims

    return checker
