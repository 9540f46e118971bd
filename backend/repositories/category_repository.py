"""
Category repository for category-specific data access operations.
"""

from typing import Optional
from sqlalchemy.orm import Session

from models import Category
from .base_repository import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """Repository for Category model operations."""

    def __init__(self, db: Session):
        super().__init__(db, Category)

    def get_by_name(self, name_category: str) -> Optional[Category]:
        return self.db.query(self.model).filter(self.model.name_category == name_category).first()

    def exists_by_name(self, name_category: str) -> bool:
        return self.exists_by('name_category', name_category)
