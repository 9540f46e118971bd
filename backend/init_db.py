"""
Schema creation and default data.

``init_database`` is run from the application lifespan. Seeding is
idempotent: rows that already exist are left untouched, so it is safe on
every start.
"""

import logging
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from config.settings import Settings, get_settings
from constants import DEFAULT_APP_CONFIG, DEFAULT_CATEGORIES, Authority
from database import Base, SessionLocal, engine
from models import Category, User
from repositories.app_config_repository import AppConfigRepository
from repositories.category_repository import CategoryRepository
from repositories.user_repository import UserRepository
from services.auth_service import hash_password

logger = logging.getLogger(__name__)


def seed_defaults(db: Session, settings: Settings) -> dict:
    """
    Insert default categories, app config entries and the admin account.

    Returns:
        Counts of inserted rows per kind
    """
    inserted = {"categories": 0, "config": 0, "admin": 0}

    categories = CategoryRepository(db)
    for name in DEFAULT_CATEGORIES:
        if not categories.exists_by_name(name):
            categories.create(Category(name_category=name))
            inserted["categories"] += 1

    config = AppConfigRepository(db)
    for key, value in DEFAULT_APP_CONFIG.items():
        if config.set_default(key, value):
            inserted["config"] += 1

    users = UserRepository(db)
    if not users.exists_by_username(settings.admin_username):
        admin = User(
            username=settings.admin_username,
            password=hash_password(settings.admin_password),
            names="Administrator",
            user_register="system",
        )
        admin.set_authorities([Authority.ADMIN])
        users.create(admin)
        inserted["admin"] = 1
        logger.warning(f"Created default admin account {settings.admin_username}")

    db.commit()
    return inserted


def init_database(bind: Optional[Engine] = None, settings: Optional[Settings] = None):
    """
    Create missing tables and seed defaults when enabled.

    Args:
        bind: Engine to use; defaults to the application engine
        settings: Configuration; defaults to the environment settings
    """
    settings = settings or get_settings()
    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    logger.info("Database schema ready")

    if not settings.seed_defaults:
        return

    db = Session(bind=bind) if bind is not engine else SessionLocal()
    try:
        inserted = seed_defaults(db, settings)
        if any(inserted.values()):
            logger.info(f"Seeded defaults: {inserted}")
    finally:
        db.close()
