"""
Authentication Service

Password hashing, credential checks, login auditing and token issuing.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from passlib.context import CryptContext
from sqlalchemy.orm import Session

from exceptions import AuthenticationError
from models import LoginLog, User
from repositories.user_repository import UserRepository
from utils.jwt_util import JwtUtil
from .base_service import BaseService

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Stored value is not a recognised hash
        logger.warning("Stored password hash could not be parsed")
        return False


@dataclass
class TokenPair:
    access_token: str
    refresh_token: str
    authorities: List[str]


class AuthService(BaseService):
    """Service for login and token refresh."""

    def __init__(self, db: Session, jwt_util: Optional[JwtUtil] = None):
        super().__init__(db)
        self.user_repo = UserRepository(db)
        self.jwt_util = jwt_util or JwtUtil()

    def authenticate(
        self,
        username: str,
        password: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ) -> User:
        """
        Check credentials and record the attempt.

        Every attempt, successful or not, is written to the login log.

        Raises:
            AuthenticationError: On unknown user, wrong password or a
                disabled account
        """
        normalized = (username or "").strip().lower()
        user = self.user_repo.get_by_username(normalized)
        authenticated = user is not None and verify_password(password, user.password)

        self.user_repo.log_login(LoginLog(
            user_id=user.id_user if user else None,
            username=normalized,
            ip_address=ip_address,
            user_agent=user_agent,
            authenticated=authenticated and user.enabled,
        ))
        self.commit()

        if not authenticated:
            logger.info(f"Failed login for {normalized!r}")
            raise AuthenticationError("Bad credentials", error="bad_credentials")
        if not user.enabled:
            logger.info(f"Login attempt on disabled account {normalized!r}")
            raise AuthenticationError("User account is disabled", error="user_disabled")
        return user

    def issue_tokens(self, user: User) -> TokenPair:
        authorities = [a.value for a in user.authorities]
        return TokenPair(
            access_token=self.jwt_util.create_access_token(user.username, authorities),
            refresh_token=self.jwt_util.create_refresh_token(user.username),
            authorities=authorities,
        )

    def login(
        self,
        username: str,
        password: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ) -> TokenPair:
        user = self.authenticate(username, password, ip_address, user_agent)
        logger.info(f"User {user.username} logged in")
        return self.issue_tokens(user)

    def refresh(self, refresh_token: str) -> TokenPair:
        """
        Exchange a refresh token for a new token pair.

        Authorities are re-read from the database so role changes take
        effect on refresh.

        Raises:
            AuthenticationError: If the token is invalid or the account is
                gone or disabled
        """
        claims = self.jwt_util.verify_refresh_token(refresh_token)
        user = self.user_repo.get_by_username(claims.username)
        if user is None or not user.enabled:
            raise AuthenticationError("Account is not active", error="user_disabled")
        return self.issue_tokens(user)
