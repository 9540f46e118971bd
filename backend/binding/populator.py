"""
Reference population for request DTOs.

Replaces the identifiers held in a DTO's Model fields with the persisted
entities they name and assigns them to the destination entity. Every
reference is resolved before any attribute is assigned, so a missing row
leaves the destination untouched.
"""

import logging
from typing import Any, Dict, TypeVar

from pydantic import BaseModel

from exceptions import NotFoundError
from repositories.entity_store import EntityStore
from .directives import ModelRule, plan_for
from .identity import reference_id
from .mapper import to_entity

logger = logging.getLogger(__name__)

E = TypeVar('E')


class GraphPopulator:
    """Resolves Model fields into persisted entities."""

    def __init__(self, store: EntityStore):
        self.store = store

    def populate(self, dto: BaseModel, destination: E) -> E:
        """
        Assign the entities referenced by ``dto`` onto ``destination``.

        Model fields holding None are skipped and leave the destination
        attribute as it was.

        Args:
            dto: Decoded request DTO
            destination: Entity to populate (new or persisted)

        Returns:
            The destination entity

        Raises:
            NotFoundError: If any referenced id has no persisted row
            StructuralConfigError: If a directive does not match the entity
        """
        resolved = self.resolve_references(dto, type(destination))
        for target, value in resolved.items():
            setattr(destination, target, value)
        return destination

    def resolve_references(self, dto: BaseModel, entity_type: type) -> Dict[str, Any]:
        """
        Resolve every Model field of ``dto`` without touching any entity.

        Returns:
            Mapping of relationship attribute name to entity or list of entities
        """
        plan = plan_for(type(dto), entity_type)
        resolved: Dict[str, Any] = {}
        for rule in plan.model_rules:
            value = getattr(dto, rule.field)
            if value is None:
                continue
            if rule.is_list:
                resolved[rule.target] = [self._resolve_item(rule, item) for item in value]
            else:
                resolved[rule.target] = self._resolve_item(rule, value)
        return resolved

    def _resolve_item(self, rule: ModelRule, item: Any) -> Any:
        if rule.has_nested_model:
            # New element entity built from the nested DTO, then populated in turn
            element = to_entity(item, rule.destination)
            return self.populate(item, element)
        return self._load(rule.destination, reference_id(item))

    def _load(self, entity_type: type, entity_id: Any) -> Any:
        entity = self.store.find_by_id(entity_type, entity_id)
        if entity is None:
            logger.info(f"Referenced {entity_type.__name__} {entity_id!r} not found")
            raise NotFoundError(entity_type, entity_id)
        return entity
