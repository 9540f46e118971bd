"""
Runtime Configuration

Reads the service configuration from environment variables once at startup.
Every key is prefixed with CHURCH_ so the backend can share a host
environment with other services.

Includes:
- Database location
- JWT signing secrets and token lifetimes
- Logging level and log directory
- Default data seeding switches
"""
import os
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

ENV_PREFIX = "CHURCH_"

_DEV_SECRET = "dev-only-access-secret-change-me-in-every-deployment"
_DEV_REFRESH_SECRET = "dev-only-refresh-secret-change-me-in-every-deployment"


def _env(key: str, default: str) -> str:
    return os.environ.get(f"{ENV_PREFIX}{key}", default)


def _env_bool(key: str, default: bool) -> bool:
    value = os.environ.get(f"{ENV_PREFIX}{key}")
    if value is None:
        return default
    return value.lower() in ('true', '1', 'yes')


def _env_int(key: str, default: int) -> int:
    value = os.environ.get(f"{ENV_PREFIX}{key}")
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {ENV_PREFIX}{key}: {value!r}, using {default}")
        return default


@dataclass(frozen=True)
class Settings:
    """Immutable view of the environment configuration"""

    data_dir: Path
    database_url: str
    log_dir: Path
    log_level: str
    jwt_secret: str
    jwt_refresh_secret: str
    jwt_algorithm: str
    access_token_minutes: int
    refresh_token_minutes: int
    seed_defaults: bool
    admin_username: str
    admin_password: str

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache()
def get_settings() -> Settings:
    """
    Build the settings object from the environment.

    The result is cached; tests that change the environment must call
    ``get_settings.cache_clear()``.

    Returns:
        Settings instance
    """
    data_dir = Path(_env("DATA_DIR", str(Path.home() / ".church-services")))
    database_url = _env("DB_URL", f"sqlite:///{data_dir / 'church.db'}")

    jwt_secret = _env("JWT_SECRET", _DEV_SECRET)
    if jwt_secret == _DEV_SECRET:
        logger.warning("CHURCH_JWT_SECRET not set - using development secret")

    return Settings(
        data_dir=data_dir,
        database_url=database_url,
        log_dir=Path(_env("LOG_DIR", str(data_dir / "logs"))),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
        jwt_secret=jwt_secret,
        jwt_refresh_secret=_env("JWT_REFRESH_SECRET", _DEV_REFRESH_SECRET),
        jwt_algorithm=_env("JWT_ALGORITHM", "HS512"),
        access_token_minutes=_env_int("ACCESS_TOKEN_MINUTES", 8 * 60),
        refresh_token_minutes=_env_int("REFRESH_TOKEN_MINUTES", 8 * 60),
        seed_defaults=_env_bool("SEED_DEFAULTS", True),
        admin_username=_env("ADMIN_USERNAME", "admin@church.local"),
        admin_password=_env("ADMIN_PASSWORD", "admin"),
    )
