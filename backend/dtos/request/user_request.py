"""
User Request DTOs

Bodies accepted by the user endpoints and the user references embedded in
other requests.
"""

import re
from typing import Annotated, Optional

from pydantic import BaseModel, Field

from binding import Identity, Unique, rule
from constants import Authority

USERNAME_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class UserRefDTO(BaseModel):
    """Reference to an existing user by id."""

    id_user: Annotated[Optional[int], Identity()] = None


class UserSaveDTO(BaseModel):
    """
    Create or update a user account.

    Without ``id_user`` a new account is built; ``username`` and ``password``
    are then required. With ``id_user`` only the fields sent are changed.
    """

    id_user: Annotated[Optional[int], Identity()] = None
    username: Annotated[Optional[str], Unique(" is already registered")] = None
    password: Optional[str] = Field(None, description="Plain text; hashed before storage")
    role: Optional[str] = Field(None, description="One of ADMIN, INSTRUCTOR, MEMBER")
    enabled: Optional[bool] = None
    age: Optional[int] = None
    names: Optional[str] = None
    phone: Optional[str] = None
    paternal_surname: Optional[str] = None
    maternal_surname: Optional[str] = None
    residency_city: Optional[str] = None
    number_dependents: Optional[int] = None
    dependents: Optional[str] = None

    @rule("username")
    def validate_username(cls, value):
        value = value.strip().lower()
        if not USERNAME_PATTERN.match(value):
            raise ValueError("Username must be an email address")
        return value

    @rule("password")
    def validate_password(cls, value):
        if len(value) < 4:
            raise ValueError("Password must be at least 4 characters")
        return value

    @rule("role")
    def validate_role(cls, value):
        try:
            return Authority(value.upper()).value
        except ValueError:
            allowed = ", ".join(a.value for a in Authority)
            raise ValueError(f"Role must be one of {allowed}")

    @rule("age", "number_dependents")
    def validate_non_negative(cls, value):
        if value < 0:
            raise ValueError("Must not be negative")
        return value
