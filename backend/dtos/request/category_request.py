"""
Category Request DTOs
"""

from typing import Annotated, Optional

from pydantic import BaseModel

from binding import Identity, Unique, rule


class CategoryRefDTO(BaseModel):
    """Reference to an existing category by id."""

    id_category: Annotated[Optional[int], Identity()] = None


class CategorySaveDTO(BaseModel):
    id_category: Annotated[Optional[int], Identity()] = None
    name_category: Annotated[str, Unique(" category already exists")]

    @rule("name_category")
    def validate_name(cls, value):
        value = value.strip()
        if not value:
            raise ValueError("Category name must not be blank")
        return value
