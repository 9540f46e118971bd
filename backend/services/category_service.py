"""
Category Service
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from models import Category
from repositories.category_repository import CategoryRepository
from .base_service import BaseService

logger = logging.getLogger(__name__)


class CategoryService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.category_repo = CategoryRepository(db)

    def list_all(self) -> List[Category]:
        return self.db.query(Category).order_by(Category.name_category).all()

    def save(self, category: Category) -> Category:
        stored = self.persist(category)
        logger.info(f"Category saved: {stored.name_category}")
        return stored
