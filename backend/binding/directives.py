"""
Binding directives and the per-type schema registry.

Request DTOs declare how their fields relate to persisted entities with
markers placed inside ``typing.Annotated``::

    class GroupSaveDTO(BaseModel):
        id_group: Annotated[Optional[int], Identity()] = None
        name: Annotated[str, Unique(" group name is already registered")]
        category: Annotated[Optional[CategoryRefDTO], Model()] = None
        instructor_ids: Annotated[list[int], Model(is_list=True, target="instructors")] = []

Markers are read once per DTO type into a ``DtoSchema`` and resolved once per
(DTO type, entity type) pair into a ``BindingPlan`` whose rules name real
mapped columns and relationships. Both are cached for the process lifetime.
"""

import types
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Annotated, Any, Optional, Tuple, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel
from sqlalchemy import inspect as sa_inspect

from exceptions import StructuralConfigError


@dataclass(frozen=True)
class Identity:
    """Marks the DTO field holding the entity primary key."""


@dataclass(frozen=True)
class Unique:
    """
    Marks a scalar field whose value must not already exist in the destination
    entity's table. ``column`` defaults to the DTO field name.
    """
    message: str = " field value is already registered"
    column: Optional[str] = None


@dataclass(frozen=True)
class Model:
    """
    Marks a field that references persisted entities.

    Attributes:
        is_list: The field holds a list of references
        element_type: Entity type of the referenced rows; defaults to the
            target relationship's class
        has_nested_model: Elements are new entities built from nested DTOs
            that carry further Model fields, rather than plain references
        target: Relationship attribute on the entity; defaults to the DTO
            field name
    """
    is_list: bool = False
    element_type: Optional[type] = None
    has_nested_model: bool = False
    target: Optional[str] = None


class DirectiveKind(str, Enum):
    UNIQUE = 'UNIQUE'
    MODEL = 'MODEL'


@dataclass(frozen=True)
class FieldDirective:
    name: str
    kind: DirectiveKind
    marker: Any
    # DTO class of nested values; None when values are plain identifiers
    nested_type: Optional[type] = None


@dataclass(frozen=True)
class DtoSchema:
    """Directives declared on one DTO type, in field declaration order."""
    dto_type: type
    identity_field: Optional[str]
    directives: Tuple[FieldDirective, ...]

    @property
    def model_fields(self) -> Tuple[str, ...]:
        return tuple(d.name for d in self.directives if d.kind is DirectiveKind.MODEL)


@dataclass(frozen=True)
class UniqueRule:
    field: str
    column: str
    message: str


@dataclass(frozen=True)
class ModelRule:
    field: str
    target: str
    destination: type
    is_list: bool
    has_nested_model: bool
    nested_type: Optional[type]


@dataclass(frozen=True)
class BindingPlan:
    """Directives of a DTO type resolved against one entity type."""
    dto_type: type
    entity_type: type
    identity_field: Optional[str]
    rules: Tuple[Union[UniqueRule, ModelRule], ...]

    @property
    def model_rules(self) -> Tuple[ModelRule, ...]:
        return tuple(r for r in self.rules if isinstance(r, ModelRule))


def _strip_optional(annotation):
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _strip_annotated(annotation):
    if get_origin(annotation) is Annotated:
        return get_args(annotation)[0]
    return annotation


def _nested_type(dto_type: type, name: str, annotation, is_list: bool) -> Optional[type]:
    inner = _strip_optional(_strip_annotated(annotation))
    if is_list:
        if get_origin(inner) not in (list, tuple):
            raise StructuralConfigError(
                f"{dto_type.__name__}.{name} is declared is_list but is not a list",
                owner=dto_type,
                field=name
            )
        args = get_args(inner)
        inner = _strip_optional(args[0]) if args else Any
    if isinstance(inner, type) and issubclass(inner, BaseModel):
        return inner
    return None


@lru_cache(maxsize=None)
def schema_for(dto_type: type) -> DtoSchema:
    """
    Read the directive markers declared on a DTO type.

    Args:
        dto_type: pydantic model class

    Returns:
        Cached DtoSchema

    Raises:
        StructuralConfigError: On conflicting or misplaced markers
    """
    if not (isinstance(dto_type, type) and issubclass(dto_type, BaseModel)):
        raise StructuralConfigError(f"{dto_type!r} is not a pydantic model", field=None)

    hints = get_type_hints(dto_type, include_extras=True)
    identity_field = None
    directives = []

    for name in dto_type.model_fields:
        annotation = hints.get(name)
        markers = get_args(annotation)[1:] if get_origin(annotation) is Annotated else ()
        unique = [m for m in markers if isinstance(m, Unique)]
        model = [m for m in markers if isinstance(m, Model)]

        if any(isinstance(m, Identity) for m in markers):
            if identity_field is not None:
                raise StructuralConfigError(
                    f"{dto_type.__name__} declares more than one Identity field",
                    owner=dto_type,
                    field=name
                )
            identity_field = name

        if unique and model:
            raise StructuralConfigError(
                f"{dto_type.__name__}.{name} cannot be both Unique and Model",
                owner=dto_type,
                field=name
            )
        if model:
            marker = model[0]
            directives.append(FieldDirective(
                name=name,
                kind=DirectiveKind.MODEL,
                marker=marker,
                nested_type=_nested_type(dto_type, name, annotation, marker.is_list),
            ))
        elif unique:
            directives.append(FieldDirective(name=name, kind=DirectiveKind.UNIQUE, marker=unique[0]))

    return DtoSchema(dto_type=dto_type, identity_field=identity_field, directives=tuple(directives))


@lru_cache(maxsize=None)
def plan_for(dto_type: type, entity_type: type) -> BindingPlan:
    """
    Resolve a DTO type's directives against an entity's mapper.

    Args:
        dto_type: pydantic model class
        entity_type: SQLAlchemy mapped class

    Returns:
        Cached BindingPlan

    Raises:
        StructuralConfigError: If a directive names a column or relationship
            the entity does not have, or disagrees with its shape
    """
    schema = schema_for(dto_type)
    mapper = sa_inspect(entity_type, raiseerr=False)
    if mapper is None:
        raise StructuralConfigError(f"{entity_type!r} is not a mapped entity")

    columns = {attr.key for attr in mapper.column_attrs}
    rules = []

    for directive in schema.directives:
        marker = directive.marker
        if directive.kind is DirectiveKind.UNIQUE:
            column = marker.column or directive.name
            if column not in columns:
                raise StructuralConfigError(
                    f"{entity_type.__name__} has no column '{column}' for unique field "
                    f"{dto_type.__name__}.{directive.name}",
                    owner=entity_type,
                    field=column
                )
            rules.append(UniqueRule(field=directive.name, column=column, message=marker.message))
            continue

        target = marker.target or directive.name
        if target not in mapper.relationships:
            raise StructuralConfigError(
                f"{entity_type.__name__} has no relationship '{target}' for model field "
                f"{dto_type.__name__}.{directive.name}",
                owner=entity_type,
                field=target
            )
        relationship = mapper.relationships[target]
        if relationship.uselist != marker.is_list:
            raise StructuralConfigError(
                f"{dto_type.__name__}.{directive.name} is_list={marker.is_list} but "
                f"{entity_type.__name__}.{target} is {'a collection' if relationship.uselist else 'scalar'}",
                owner=dto_type,
                field=directive.name
            )
        destination = relationship.mapper.class_
        if marker.element_type is not None:
            if not issubclass(marker.element_type, destination):
                raise StructuralConfigError(
                    f"{marker.element_type.__name__} is not a {destination.__name__}",
                    owner=dto_type,
                    field=directive.name
                )
            destination = marker.element_type
        if marker.has_nested_model and directive.nested_type is None:
            raise StructuralConfigError(
                f"{dto_type.__name__}.{directive.name} has nested models but is not typed as a DTO",
                owner=dto_type,
                field=directive.name
            )
        if (not marker.has_nested_model and directive.nested_type is not None
                and schema_for(directive.nested_type).identity_field is None):
            raise StructuralConfigError(
                f"{directive.nested_type.__name__} is used as a reference but has no Identity field",
                owner=directive.nested_type,
                field=directive.name
            )
        rules.append(ModelRule(
            field=directive.name,
            target=target,
            destination=destination,
            is_list=marker.is_list,
            has_nested_model=marker.has_nested_model,
            nested_type=directive.nested_type,
        ))

    return BindingPlan(
        dto_type=dto_type,
        entity_type=entity_type,
        identity_field=schema.identity_field,
        rules=tuple(rules),
    )
