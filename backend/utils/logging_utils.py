"""
Request-scoped logging context.

The request logging middleware stores ``request_id``, ``method``, ``path``
and, once the bearer token is verified, ``principal`` in a ContextVar.
``ContextFilter`` copies those values onto every record so handlers can
format them, and ``StructuredLogger`` merges them into ``extra``.
"""

import inspect
import logging
from contextvars import ContextVar
from functools import wraps
from typing import Any, Dict, Optional

_logging_context: ContextVar[Dict[str, Any]] = ContextVar('logging_context', default={})

CONTEXT_FIELDS = ('request_id', 'method', 'path', 'principal')


def set_logging_context(**kwargs):
    """
    Add values to the logging context of the current request.

    Example:
        set_logging_context(request_id="abc-123", principal="ana@example.com")
    """
    context = _logging_context.get().copy()
    context.update(kwargs)
    _logging_context.set(context)


def clear_logging_context():
    _logging_context.set({})


class ContextFilter(logging.Filter):
    """Copies the request context onto log records; missing keys become '-'."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = _logging_context.get()
        for key in CONTEXT_FIELDS:
            if not hasattr(record, key):
                setattr(record, key, context.get(key, '-'))
        return True


class StructuredLogger:
    """
    Logger wrapper that merges the request context into ``extra``.

    Usage:
        logger = StructuredLogger(__name__)
        logger.info("Member joined group", extra={"group_id": group.id_group})
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _add_context(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        context = _logging_context.get().copy()
        if extra:
            context.update(extra)
        return context

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self.logger.debug(message, extra=self._add_context(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self.logger.info(message, extra=self._add_context(extra))

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self.logger.warning(message, extra=self._add_context(extra))

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None, exc_info: bool = False):
        self.logger.error(message, extra=self._add_context(extra), exc_info=exc_info)


def log_operation(operation_name: str):
    """
    Decorator logging the start and outcome of a service operation.

    Entity ids passed as keyword arguments are added to the record.

    Example:
        @log_operation("join_group")
        def join(self, group_id: int, username: str): ...
    """
    id_keys = ("user_id", "group_id", "worship_id", "special_event_id")

    def decorator(func):
        def _context(kwargs) -> Dict[str, Any]:
            context = {"operation": operation_name}
            for key in id_keys:
                if key in kwargs:
                    context[key] = kwargs[key]
            return context

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            logger = StructuredLogger(func.__module__)
            context = _context(kwargs)
            logger.debug(f"Starting {operation_name}", extra=context)
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                context["error_type"] = type(e).__name__
                logger.info(f"Failed {operation_name}: {e}", extra=context)
                raise
            logger.info(f"Completed {operation_name}", extra=context)
            return result

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            logger = StructuredLogger(func.__module__)
            context = _context(kwargs)
            logger.debug(f"Starting {operation_name}", extra=context)
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                context["error_type"] = type(e).__name__
                logger.info(f"Failed {operation_name}: {e}", extra=context)
                raise
            logger.info(f"Completed {operation_name}", extra=context)
            return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
