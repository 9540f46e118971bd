"""
Declarative request binding.

Turns request bodies into entities: decode into a DTO, enforce uniqueness
directives, then either build a new entity (populating references) or merge
onto the persisted one. Also injects the authenticated principal.
"""

from .directives import BindingPlan, DtoSchema, Identity, Model, Unique, plan_for, schema_for
from .identity import reference_id, resolve_identity
from .mapper import merge, to_entity
from .populator import GraphPopulator
from .principal import Principal, PrincipalResolver
from .resolver import Binding, BindingResolver
from .uniqueness import UniquenessValidator
from .validation import rule, violations_from

__all__ = [
    'Binding',
    'BindingPlan',
    'BindingResolver',
    'DtoSchema',
    'GraphPopulator',
    'Identity',
    'Model',
    'Principal',
    'PrincipalResolver',
    'Unique',
    'UniquenessValidator',
    'merge',
    'plan_for',
    'reference_id',
    'resolve_identity',
    'rule',
    'schema_for',
    'to_entity',
    'violations_from',
]
