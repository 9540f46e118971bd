"""
Shared rules for joining groups, worship services and special events.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from exceptions import BusinessRuleError, NotFoundError, ValidationError
from models import User

logger = logging.getLogger(__name__)


def require_schedule(entity, day_required: bool = True):
    """
    Reject a new group, worship service or event without a name or day.

    Raises:
        ValidationError: Listing every missing field
    """
    violations = []
    if not entity.name:
        violations.append({"field": "name", "message": "Field required", "rejected_value": None})
    if day_required and entity.day_of_week is None:
        violations.append({"field": "day_of_week", "message": "Field required", "rejected_value": None})
    if violations:
        raise ValidationError("Request body failed validation", violations)


def assign_responsible(entity, principal: Optional[User]):
    if entity.user_responsible is None and principal is not None:
        entity.user_responsible = principal


def load_or_raise(db: Session, entity_type: type, entity_id):
    entity = db.get(entity_type, entity_id)
    if entity is None:
        raise NotFoundError(entity_type, entity_id)
    return entity


def ensure_not_member(existing, user: User, label: str):
    if existing is not None:
        logger.info(f"{user.username} is already a member of {label}")
        raise BusinessRuleError(f"User is already a member of this {label}")
