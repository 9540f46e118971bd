"""
App config repository for key/value settings stored in the database.
"""

from typing import Dict, Optional
from sqlalchemy.orm import Session

from models import AppConfig
from .base_repository import BaseRepository


class AppConfigRepository(BaseRepository[AppConfig]):
    """Repository for AppConfig model operations."""

    def __init__(self, db: Session):
        super().__init__(db, AppConfig)

    def get_value(self, key: str, default: Optional[str] = None) -> Optional[str]:
        entry = self.get_by_id(key)
        return entry.config_value if entry else default

    def set_default(self, key: str, value: str) -> bool:
        """
        Insert a config entry unless the key is already present.

        Returns:
            True if the entry was inserted
        """
        if self.get_by_id(key) is not None:
            return False
        self.create(AppConfig(config_key=key, config_value=value))
        return True

    def as_dict(self) -> Dict[str, Optional[str]]:
        return {entry.config_key: entry.config_value for entry in self.get_all()}
