"""
Utility functions and HTTP-boundary helpers.
"""

from .error_handlers import register_exception_handlers

__all__ = ["register_exception_handlers"]
