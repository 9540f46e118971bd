"""
Request body binding.

``Binding`` is used as a FastAPI dependency on a handler parameter whose
declared type is an entity. The wire payload is decoded into the binding's
DTO type first, then turned into the entity:

- no identity in the payload: a new entity is built from the DTO and, with
  ``populate=True``, its references are resolved (create path)
- identity present: the persisted entity is loaded and the sent fields are
  merged onto it (update path)

Uniqueness directives are checked before either path. Nothing is committed
here; the service receiving the entity owns the write-back.
"""

import logging
from typing import Any, Optional, Type, Union

from fastapi import Depends, Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from database import get_db
from exceptions import EmptyBodyError, NotFoundError, ValidationError
from repositories.entity_store import EntityStore
from .identity import resolve_identity
from .mapper import merge, to_entity
from .populator import GraphPopulator
from .uniqueness import UniquenessValidator
from .validation import validation_context, violations_from

logger = logging.getLogger(__name__)


async def read_body(request: Request) -> bytes:
    return await request.body()


class Binding:
    """
    Per-parameter binding directive.

    Args:
        dto_type: pydantic model the request body is decoded into
        entity_type: Entity handed to the handler
        validate: Run the DTO's declarative ``@rule`` validators
        populate: Resolve Model references on the create path

    Example:
        @router.post("/save")
        def save(group: Group = Depends(Binding(GroupSaveDTO, Group, populate=True))):
            ...
    """

    def __init__(
        self,
        dto_type: Type[BaseModel],
        entity_type: type,
        validate: bool = True,
        populate: bool = False
    ):
        self.dto_type = dto_type
        self.entity_type = entity_type
        self.validate = validate
        self.populate = populate

    def __repr__(self) -> str:
        return (
            f"Binding({self.dto_type.__name__} -> {self.entity_type.__name__}, "
            f"validate={self.validate}, populate={self.populate})"
        )

    def __call__(self, raw_body: bytes = Depends(read_body), db: Session = Depends(get_db)) -> Any:
        return BindingResolver(db).resolve(self, raw_body)


class BindingResolver:
    """Runs the decode, uniqueness, create/update pipeline for one request."""

    def __init__(self, db: Session):
        self.store = EntityStore(db)
        self.uniqueness = UniquenessValidator(self.store)
        self.populator = GraphPopulator(self.store)

    def resolve(self, binding: Binding, raw_body: Union[bytes, str, dict, None]) -> Any:
        """
        Turn a raw request body into the bound entity.

        Args:
            binding: Parameter directive
            raw_body: Body bytes, a JSON string, or an already-parsed dict

        Returns:
            New transient entity (create) or the persisted entity with the
            payload merged in (update)

        Raises:
            EmptyBodyError: If the body is empty or JSON null
            ValidationError: With every decoding and rule violation
            CollisionError: On the first Unique field already registered
            NotFoundError: If the identity or a reference has no row
        """
        dto = self.decode(binding, raw_body)
        return self.bind(binding, dto)

    def decode(self, binding: Binding, raw_body: Union[bytes, str, dict, None]) -> BaseModel:
        if raw_body is None:
            raise EmptyBodyError()
        if isinstance(raw_body, (bytes, str)):
            stripped = raw_body.strip()
            if not stripped or stripped in (b"null", "null"):
                raise EmptyBodyError()

        context = validation_context(binding.validate)
        try:
            if isinstance(raw_body, (bytes, str)):
                return binding.dto_type.model_validate_json(raw_body, context=context)
            return binding.dto_type.model_validate(raw_body, context=context)
        except PydanticValidationError as e:
            violations = violations_from(e)
            logger.info(
                f"{binding.dto_type.__name__} rejected with {len(violations)} violation(s)"
            )
            raise ValidationError("Request body failed validation", violations)

    def bind(self, binding: Binding, dto: BaseModel) -> Any:
        entity_id = resolve_identity(dto)
        self.uniqueness.check_unique(dto, binding.entity_type)

        if entity_id is None:
            entity = to_entity(dto, binding.entity_type)
            if binding.populate:
                self.populator.populate(dto, entity)
            logger.debug(f"Bound new {binding.entity_type.__name__} from {type(dto).__name__}")
            return entity

        entity = self._load(binding.entity_type, entity_id)
        merge(dto, entity)
        logger.debug(f"Bound {binding.entity_type.__name__} {entity_id!r} for update")
        return entity

    def _load(self, entity_type: type, entity_id: Any) -> Optional[Any]:
        entity = self.store.find_by_id(entity_type, entity_id)
        if entity is None:
            raise NotFoundError(entity_type, entity_id)
        return entity
