"""
Application-wide constants and configuration keys.

This module centralizes all magic strings and numbers used throughout the application
to improve maintainability and reduce duplication.
"""
from enum import Enum


class Authority(str, Enum):
    """
    Roles granted to a user account.

    Carried in the access token ``authorities`` claim and checked by the
    authorization dependencies.
    """

    ADMIN = 'ADMIN'
    INSTRUCTOR = 'INSTRUCTOR'
    MEMBER = 'MEMBER'


class GroupRole(str, Enum):
    """Role a user holds inside a group, worship service or special event"""

    INSTRUCTOR = 'INSTRUCTOR'
    MEMBER = 'MEMBER'


class DayOfWeek(str, Enum):
    """Day a group, worship service or special event meets"""

    MONDAY = 'MONDAY'
    TUESDAY = 'TUESDAY'
    WEDNESDAY = 'WEDNESDAY'
    THURSDAY = 'THURSDAY'
    FRIDAY = 'FRIDAY'
    SATURDAY = 'SATURDAY'
    SUNDAY = 'SUNDAY'


class AppConfigKeys:
    """Keys stored in the app_config table"""

    CHURCH_NAME = 'church_name'
    PUBLIC_EVENTS_ENABLED = 'public_events_enabled'
    DEFAULT_AUTHORITY = 'default_authority'


DEFAULT_APP_CONFIG = {
    AppConfigKeys.CHURCH_NAME: 'Camino de Vida',
    AppConfigKeys.PUBLIC_EVENTS_ENABLED: 'true',
    AppConfigKeys.DEFAULT_AUTHORITY: Authority.MEMBER.value,
}


DEFAULT_CATEGORIES = [
    'Teología',
    'Alpha',
    'Mujeres',
    'Hombres',
    'Escuela para padres',
    'Matrimonios',
    'Crecimiento Espiritual',
    'GP Fit',
]


class TokenHeaders:
    """Response headers written by the login endpoint"""

    AUTHORIZATION = 'Authorization'
    REFRESH_TOKEN = 'refresh_token'
    AUTHORITIES = 'authorities'
    ERROR = 'error'
    BEARER_PREFIX = 'Bearer '


class Pagination:
    """Defaults for paged listings"""

    DEFAULT_PAGE = 0
    DEFAULT_SIZE = 10
    MAX_SIZE = 100


class HTTPStatus:
    """HTTP status codes used throughout the application"""

    # Success
    OK = 200
    CREATED = 201
    NO_CONTENT = 204

    # Client Errors
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    CONFLICT = 409
    UNPROCESSABLE_ENTITY = 422

    # Server Errors
    INTERNAL_SERVER_ERROR = 500
