"""
DTO to entity field mapping.

Copies DTO values onto entity attributes with the same name. Writable
attributes are the entity's mapped columns (primary key excluded) and plain
properties that define a setter. Identity and Model fields are never copied;
references are the populator's job.
"""

import logging
from functools import lru_cache
from typing import Any, FrozenSet, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import inspect as sa_inspect

from .directives import schema_for

logger = logging.getLogger(__name__)

E = TypeVar('E')


@lru_cache(maxsize=None)
def writable_attributes(entity_type: type) -> FrozenSet[str]:
    mapper = sa_inspect(entity_type)
    primary_keys = {mapper.get_property_by_column(column).key for column in mapper.primary_key}
    names = {attr.key for attr in mapper.column_attrs if attr.key not in primary_keys}
    for klass in entity_type.__mro__:
        for name, value in vars(klass).items():
            if isinstance(value, property) and value.fset is not None:
                names.add(name)
    return frozenset(names)


@lru_cache(maxsize=None)
def _skipped_fields(dto_type: type) -> FrozenSet[str]:
    schema = schema_for(dto_type)
    skipped = set(schema.model_fields)
    if schema.identity_field:
        skipped.add(schema.identity_field)
    return frozenset(skipped)


def _mappable(dto: BaseModel, entity_type: type, names) -> dict[str, Any]:
    writable = writable_attributes(entity_type)
    skipped = _skipped_fields(type(dto))
    return {
        name: getattr(dto, name)
        for name in type(dto).model_fields
        if name in names and name in writable and name not in skipped
    }


def to_entity(dto: BaseModel, entity_type: Type[E]) -> E:
    """
    Build a new, transient entity from a DTO.

    Args:
        dto: Decoded request DTO
        entity_type: Mapped entity class

    Returns:
        New entity with matching non-null fields copied and the primary key
        unset, so column defaults still apply
    """
    entity = entity_type()
    for name, value in _mappable(dto, entity_type, type(dto).model_fields).items():
        if value is None:
            continue
        setattr(entity, name, value)
    return entity


def merge(dto: BaseModel, entity: E) -> E:
    """
    Copy the fields present in the request payload onto an existing entity.

    Fields the client did not send are left untouched, as are the primary
    key and every relationship.

    Args:
        dto: Decoded request DTO
        entity: Persisted entity

    Returns:
        The same entity, modified in place
    """
    values = _mappable(dto, type(entity), dto.model_fields_set)
    for name, value in values.items():
        setattr(entity, name, value)
    logger.debug(f"Merged {sorted(values)} onto {type(entity).__name__}")
    return entity
