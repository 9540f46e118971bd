"""
User-specific Specifications

Concrete specifications for the filtered user listing. Each factory returns
None when its filter value is None so callers can pass raw query parameters
straight to ``all_of``.
"""

from typing import Optional
from models import User, UserAuthority
from constants import Authority
from .specifications import Specification


class UserHasAuthoritySpec(Specification[User]):
    """Users holding a given authority."""

    def __init__(self, authority: Authority):
        self.authority = authority

    def is_satisfied_by(self, user: User) -> bool:
        return self.authority in user.authorities

    def to_sql_filter(self):
        return User.authority_entries.any(UserAuthority.authority == self.authority)


class UserFieldContainsSpec(Specification[User]):
    """Users whose text column contains a fragment, case-insensitive."""

    def __init__(self, field: str, fragment: str):
        self.field = field
        self.fragment = fragment

    def is_satisfied_by(self, user: User) -> bool:
        value = getattr(user, self.field) or ''
        return self.fragment.lower() in value.lower()

    def to_sql_filter(self):
        return getattr(User, self.field).ilike(f"%{self.fragment}%")


class UserFieldEqualsSpec(Specification[User]):
    """Users whose column equals a value."""

    def __init__(self, field: str, value):
        self.field = field
        self.value = value

    def is_satisfied_by(self, user: User) -> bool:
        return getattr(user, self.field) == self.value

    def to_sql_filter(self):
        return getattr(User, self.field) == self.value


def has_authority(authority: Optional[Authority]) -> Optional[Specification[User]]:
    return UserHasAuthoritySpec(authority) if authority is not None else None


def field_contains(field: str, fragment: Optional[str]) -> Optional[Specification[User]]:
    return UserFieldContainsSpec(field, fragment) if fragment else None


def field_equals(field: str, value) -> Optional[Specification[User]]:
    return UserFieldEqualsSpec(field, value) if value is not None else None
