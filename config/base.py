"""
Settings shared by every environment.

Values come from environment variables (a ``.env`` file is loaded by
``app.py``) and are grouped per concern. Environment subclasses adjust
the defaults in ``_setup_environment``.
"""

import os
from dataclasses import dataclass
from typing import List


def _get_bool(name: str, default: bool) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")


def _get_int(name: str, default: int) -> int:
    """Integer variable; unparsable values fall back to ``default``."""
    try:
        return int(os.getenv(name, str(default)))
    except (ValueError, TypeError):
        return default


def _get_list(name: str, default: List[str] = None, separator: str = ",") -> List[str]:
    """Comma-separated variable as a list of trimmed, non-empty items."""
    raw = os.getenv(name, "")
    if not raw.strip():
        return list(default or [])
    return [item.strip() for item in raw.split(separator) if item.strip()]


@dataclass
class DatabaseConfig:
    """SQLAlchemy engine settings; pool values are ignored for SQLite."""
    url: str = ""
    pool_size: int = 20
    max_overflow: int = 40
    pool_timeout: int = 5
    pool_recycle: int = 1800
    echo: bool = False

    @classmethod
    def from_env(cls) -> 'DatabaseConfig':
        return cls(
            url=os.getenv("DATABASE_URL", ""),
            pool_size=_get_int("DB_POOL_SIZE", 20),
            max_overflow=_get_int("DB_MAX_OVERFLOW", 40),
            pool_timeout=_get_int("DB_POOL_TIMEOUT", 5),
            pool_recycle=_get_int("DB_POOL_RECYCLE", 1800),
            echo=_get_bool("DB_ECHO", False),
        )


@dataclass
class AuthConfig:
    """Token signing, password policy and CORS origins."""
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    token_ttl_minutes: int = 60
    password_min_length: int = 6
    allowed_origins: List[str] = None

    @classmethod
    def from_env(cls) -> 'AuthConfig':
        return cls(
            jwt_secret=os.getenv("JWT_SECRET", ""),
            jwt_algorithm=os.getenv("JWT_ALG", "HS256"),
            token_ttl_minutes=_get_int("JWT_TTL_MINUTES", 60),
            password_min_length=_get_int("PASSWORD_MIN_LENGTH", 6),
            allowed_origins=_get_list("ALLOWED_ORIGINS", ["*"]),
        )


@dataclass
class PaginationConfig:
    """Default and maximum page sizes for list endpoints."""
    default_limit: int = 10
    max_limit: int = 100

    @classmethod
    def from_env(cls) -> 'PaginationConfig':
        return cls(
            default_limit=_get_int("PAGE_DEFAULT_LIMIT", 10),
            max_limit=_get_int("PAGE_MAX_LIMIT", 100),
        )


class BaseConfig:
    """
    All settings of the Bookstore API in one object.

    Subclasses override ``_setup_environment`` to adjust defaults for a
    particular deployment environment.
    """

    def __init__(self):
        self.app_name: str = "Bookstore API"
        self.app_version: str = "1.0.0"
        self.debug: bool = _get_bool("DEBUG", False)
        self.environment: str = os.getenv("BOOKSTORE_ENV", "development")

        self.database = DatabaseConfig.from_env()
        self.auth = AuthConfig.from_env()
        self.pagination = PaginationConfig.from_env()

        self._setup_environment()

    def _setup_environment(self):
        """Hook for environment-specific defaults."""
        pass

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")

    @property
    def is_testing(self) -> bool:
        return self.environment.lower() in ("testing", "test")

    def validate(self) -> List[str]:
        """
        Check the settings the API cannot run without.

        Returns:
            Human-readable problems, empty when the configuration is usable
        """
        errors = []

        if not self.database.url:
            errors.append("DATABASE_URL is not configured")

        if not self.auth.jwt_secret:
            errors.append("JWT_SECRET is not configured")

        if self.pagination.max_limit < 1:
            errors.append("PAGE_MAX_LIMIT must be at least 1")

        if self.pagination.default_limit > self.pagination.max_limit:
            errors.append("PAGE_DEFAULT_LIMIT cannot exceed PAGE_MAX_LIMIT")

        return errors
