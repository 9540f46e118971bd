"""
Base Service

Unit-of-work helpers shared by the entity services. Entities handed in by
the binding layer are added, flushed and committed here; database integrity
failures are translated into application errors.
"""

import logging
import re
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from exceptions import BusinessRuleError, CollisionError

logger = logging.getLogger(__name__)

# sqlite: "UNIQUE constraint failed: users.username"
# postgres: "Key (username)=(ana@example.com) already exists"
_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: (?:\w+\.)?(\w+)")
_POSTGRES_UNIQUE = re.compile(r"Key \((\w+)[^)]*\)=\(([^)]*)\)")


def collision_from(error: IntegrityError) -> Optional[CollisionError]:
    """Build a CollisionError from a unique-constraint violation, if it is one."""
    text = str(error.orig)
    match = _SQLITE_UNIQUE.search(text)
    if match:
        return CollisionError(match.group(1), None, " field value is already registered")
    match = _POSTGRES_UNIQUE.search(text)
    if match:
        return CollisionError(match.group(1), match.group(2), " field value is already registered")
    return None


class BaseService:
    """Owns the session of one request and its commit."""

    def __init__(self, db: Session):
        self.db = db

    def persist(self, entity: Any) -> Any:
        """
        Add ``entity`` to the session, commit and refresh it.

        Works for new entities from the create path and for persisted ones
        merged on the update path.

        Raises:
            CollisionError: If a unique constraint rejected the write
            BusinessRuleError: On any other integrity violation
        """
        self.db.add(entity)
        self.commit()
        self.db.refresh(entity)
        return entity

    def commit(self):
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            collision = collision_from(e)
            if collision is not None:
                logger.info(f"Commit rejected by unique constraint on {collision.field}")
                raise collision
            logger.warning(f"Commit rejected by integrity constraint: {e.orig}")
            raise BusinessRuleError("The data violates a database constraint")
