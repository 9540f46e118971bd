"""
User Response DTOs
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from constants import Authority


class UserResponse(BaseModel):
    """
    User details returned by the API.

    The password hash is never exposed.
    """

    id_user: int = Field(description="User ID")
    username: str = Field(description="Login email")
    enabled: bool = Field(description="Whether the account can log in")
    date_register: Optional[datetime] = Field(None, description="Registration timestamp")
    user_register: Optional[str] = Field(None, description="Username of the registering admin")
    authorities: List[Authority] = Field(default_factory=list, description="Granted authorities")
    age: Optional[int] = None
    names: Optional[str] = None
    phone: Optional[str] = None
    paternal_surname: Optional[str] = None
    maternal_surname: Optional[str] = None
    residency_city: Optional[str] = None
    number_dependents: Optional[int] = None
    dependents: Optional[str] = None

    class Config:
        """Pydantic configuration."""
        from_attributes = True


class UserSummaryResponse(BaseModel):
    """Short user view embedded in group, worship and event responses."""

    id_user: int
    username: str
    names: Optional[str] = None
    paternal_surname: Optional[str] = None

    class Config:
        from_attributes = True


class UserPageResponse(BaseModel):
    """One page of a filtered user listing."""

    content: List[UserResponse] = Field(description="Users on this page")
    page: int = Field(description="Zero-based page index")
    size: int = Field(description="Requested page size")
    total_elements: int = Field(description="Users matching the filters")
    total_pages: int = Field(description="Number of pages")
