"""
Uniqueness checks for request DTOs.

Walks a DTO depth-first in field declaration order, descending into nested
Model fields, and stops at the first Unique field whose value is already
registered. Violations are not aggregated.
"""

import logging
from typing import Any

from pydantic import BaseModel

from exceptions import CollisionError
from repositories.entity_store import EntityStore
from .directives import ModelRule, plan_for
from .identity import resolve_identity

logger = logging.getLogger(__name__)


class UniquenessValidator:
    """Checks Unique directives against the persistence store."""

    def __init__(self, store: EntityStore):
        self.store = store

    def check_unique(self, dto: Any, entity_type: type) -> None:
        """
        Raise on the first Unique field that collides with a persisted row.

        The row whose primary key equals the DTO's identity is left out of
        the check, so resubmitting an unchanged value on update is allowed.
        Null values are not checked.

        Args:
            dto: Decoded request DTO, or a nested DTO during recursion
            entity_type: Entity the DTO maps onto

        Raises:
            CollisionError: On the first collision found
            StructuralConfigError: If a directive does not match the entity
        """
        if not isinstance(dto, BaseModel):
            return
        plan = plan_for(type(dto), entity_type)
        exclude_id = resolve_identity(dto)

        for rule in plan.rules:
            value = getattr(dto, rule.field)
            if value is None:
                continue
            if isinstance(rule, ModelRule):
                if rule.nested_type is None:
                    continue
                if rule.is_list:
                    for item in value:
                        self.check_unique(item, rule.destination)
                else:
                    self.check_unique(value, rule.destination)
            elif self.store.exists(entity_type, rule.column, value, exclude_id=exclude_id):
                logger.info(
                    f"Unique field collision on {entity_type.__name__}.{rule.column}",
                    extra={"field": rule.field}
                )
                raise CollisionError(rule.field, value, rule.message)
