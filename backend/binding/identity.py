"""Identity lookup for request DTOs."""

from typing import Any, Optional

from pydantic import BaseModel

from .directives import schema_for


def resolve_identity(dto: Any) -> Optional[Any]:
    """
    Return the value of the DTO's Identity field.

    Returns None when the DTO is None, its type declares no Identity field,
    or the field is null. Never raises for a well-formed DTO.
    """
    if not isinstance(dto, BaseModel):
        return None
    identity_field = schema_for(type(dto)).identity_field
    if identity_field is None:
        return None
    return getattr(dto, identity_field, None)


def reference_id(item: Any) -> Optional[Any]:
    """Identity of a reference: a nested DTO's Identity value, or the item itself."""
    if isinstance(item, BaseModel):
        return resolve_identity(item)
    return item
