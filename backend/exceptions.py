"""
Custom exception classes for the application.

This module defines domain-specific exceptions that provide better error handling
and clearer error messages throughout the application. None of them is retried or
recovered inside the binding pipeline; they all propagate to the HTTP boundary where
utils.error_handlers translates them into the response envelope.
"""
from typing import Any


class ApplicationError(Exception):
    """Base exception for all application errors"""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class EmptyBodyError(ApplicationError):
    """Raised when the request body decodes to nothing"""

    def __init__(self, message: str | None = None):
        super().__init__(
            message or "Conversion content failed, make sure that content body is not empty."
        )


class ValidationError(ApplicationError):
    """
    Raised when declarative field validation fails.

    Carries every violation found, as dicts with ``field``, ``message``
    and ``rejected_value`` keys.
    """

    def __init__(self, message: str, violations: list[dict] | None = None):
        self.violations = violations or []
        details = {"violations": self.violations} if self.violations else {}
        super().__init__(message, details)


class CollisionError(ApplicationError):
    """Raised when a unique field value is already registered"""

    def __init__(self, field: str, value: Any, message: str):
        self.field = field
        self.value = value
        super().__init__(f"{field}{message}", {"field": field, "value": value})


class NotFoundError(ApplicationError):
    """Raised when an identifier does not resolve to a persisted row"""

    def __init__(self, entity_type: type | str, entity_id: Any):
        self.entity_type = entity_type if isinstance(entity_type, str) else entity_type.__name__
        self.entity_id = entity_id
        super().__init__(
            f"'{self.entity_type}' not found.",
            {"type": self.entity_type, "id": entity_id}
        )


class StructuralConfigError(ApplicationError):
    """
    Raised when a binding directive names a field, column or relationship
    that does not exist. Indicates a programming error.
    """

    def __init__(self, message: str, owner: type | None = None, field: str | None = None):
        details = {}
        if owner is not None:
            details["owner"] = owner.__name__
        if field is not None:
            details["field"] = field
        super().__init__(message, details)


class AuthenticationError(ApplicationError):
    """Raised when credentials or tokens are missing or invalid"""

    def __init__(self, message: str, error: str | None = None):
        details = {"error": error} if error else {}
        super().__init__(message, details)


class AuthorizationError(ApplicationError):
    """Raised when the authenticated user lacks a required authority"""

    def __init__(self, message: str, required: list[str] | None = None):
        details = {"required": required} if required else {}
        super().__init__(message, details)


class BusinessRuleError(ApplicationError):
    """Raised when a request is well-formed but breaks a domain rule"""
    pass
