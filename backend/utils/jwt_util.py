"""
JWT access and refresh token handling.

Access tokens carry the username in ``sub`` and the granted authorities in
``authorities``. Refresh tokens are signed with a separate secret and only
carry the username; they are exchanged for a new access token.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from config.settings import Settings, get_settings
from exceptions import AuthenticationError

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass
class TokenClaims:
    """Verified token contents"""

    username: str
    token_type: str
    authorities: List[str] = field(default_factory=list)
    expires_at: Optional[datetime] = None


class JwtUtil:
    """Creates and verifies signed tokens with the configured secrets."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def create_access_token(self, username: str, authorities: List[str]) -> str:
        """
        Create a signed access token.

        Args:
            username: Token subject
            authorities: Authority names granted to the subject

        Returns:
            Encoded JWT
        """
        return self._encode(
            {"sub": username, "type": ACCESS_TOKEN_TYPE, "authorities": list(authorities)},
            self.settings.jwt_secret,
            self.settings.access_token_minutes,
        )

    def create_refresh_token(self, username: str) -> str:
        return self._encode(
            {"sub": username, "type": REFRESH_TOKEN_TYPE},
            self.settings.jwt_refresh_secret,
            self.settings.refresh_token_minutes,
        )

    def verify_token(self, token: str) -> TokenClaims:
        """
        Verify an access token.

        Raises:
            AuthenticationError: If the token is expired, tampered with or
                is not an access token
        """
        return self._decode(token, self.settings.jwt_secret, ACCESS_TOKEN_TYPE)

    def verify_refresh_token(self, token: str) -> TokenClaims:
        return self._decode(token, self.settings.jwt_refresh_secret, REFRESH_TOKEN_TYPE)

    def _encode(self, claims: dict, secret: str, minutes: int) -> str:
        now = datetime.now(timezone.utc)
        payload = dict(claims)
        payload["iat"] = now
        payload["exp"] = now + timedelta(minutes=minutes)
        return jwt.encode(payload, secret, algorithm=self.settings.jwt_algorithm)

    def _decode(self, token: str, secret: str, expected_type: str) -> TokenClaims:
        try:
            payload = jwt.decode(token, secret, algorithms=[self.settings.jwt_algorithm])
        except ExpiredSignatureError:
            logger.info("Rejected expired token")
            raise AuthenticationError("Token has expired", error="token_expired")
        except JWTError as e:
            logger.info(f"Rejected invalid token: {e}")
            raise AuthenticationError("Invalid token", error="invalid_token")

        username = payload.get("sub")
        if not username or payload.get("type") != expected_type:
            raise AuthenticationError("Invalid token", error="invalid_token")

        expires_at = None
        if payload.get("exp") is not None:
            expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)

        return TokenClaims(
            username=username,
            token_type=expected_type,
            authorities=list(payload.get("authorities", [])),
            expires_at=expires_at,
        )
