"""
Declarative DTO validation helpers.

Type decoding is always enforced by pydantic. Field rules declared with
``@rule(...)`` are the declarative layer a Binding can switch off with
``validate=False``: they read the flag from the pydantic validation context.
"""

from typing import Any, Callable, List

from pydantic import ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError

VALIDATE_CONTEXT_KEY = "validate"


def validation_context(validate: bool) -> dict:
    return {VALIDATE_CONTEXT_KEY: validate}


def should_validate(info: ValidationInfo) -> bool:
    context = info.context or {}
    return bool(context.get(VALIDATE_CONTEXT_KEY, True))


def rule(*fields: str, mode: str = "after") -> Callable:
    """
    Declare a field rule that runs only when declarative validation is on.

    The decorated function receives ``(cls, value)`` for non-null values and
    must return the (possibly normalised) value or raise ValueError. With
    ``mode="before"`` it sees the raw input ahead of type coercion.

    Example:
        @rule("role")
        def validate_role(cls, value):
            return Authority(value).value
    """
    def decorator(func: Callable) -> Any:
        def checked(cls, value, info: ValidationInfo):
            if value is None or not should_validate(info):
                return value
            return func(cls, value)

        checked.__name__ = func.__name__
        checked.__qualname__ = func.__qualname__
        checked.__doc__ = func.__doc__
        return field_validator(*fields, mode=mode)(checked)

    return decorator


def violations_from(error: PydanticValidationError) -> List[dict]:
    """
    Flatten a pydantic error into field violations.

    Returns:
        List of dicts with ``field``, ``message`` and ``rejected_value``
    """
    violations = []
    for item in error.errors(include_url=False):
        location = ".".join(str(part) for part in item.get("loc", ()))
        rejected = item.get("input")
        # A body-level error carries the whole raw payload as its input
        if not item.get("loc") or isinstance(rejected, (bytes, bytearray, dict, list)):
            rejected = None
        violations.append({
            "field": location or "body",
            "message": item.get("msg", "Invalid value"),
            "rejected_value": rejected,
        })
    return violations
