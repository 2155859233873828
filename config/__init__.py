"""
Configuration for the Bookstore API.

``get_config()`` returns the settings object for the current environment,
chosen by ``BOOKSTORE_ENV`` (development when unset):

    from config import get_config

    cfg = get_config()
    cfg.database.url
    cfg.auth.token_ttl_minutes
    cfg.pagination.max_limit
"""

import os

from config.base import BaseConfig
from config.development import DevelopmentConfig
from config.production import ProductionConfig
from config.testing import TestingConfig

_ENVIRONMENTS = {
    "development": DevelopmentConfig,
    "dev": DevelopmentConfig,
    "production": ProductionConfig,
    "prod": ProductionConfig,
    "testing": TestingConfig,
    "test": TestingConfig,
}


def get_config(environment: str = None) -> BaseConfig:
    """
    Build the configuration for an environment.

    Args:
        environment: 'development', 'production' or 'testing' (or a short
                     alias); read from BOOKSTORE_ENV when None. Unknown
                     names fall back to development.
    """
    if environment is None:
        environment = os.getenv("BOOKSTORE_ENV", "development")
    config_class = _ENVIRONMENTS.get(environment.lower(), DevelopmentConfig)
    return config_class()


__all__ = [
    "BaseConfig",
    "DevelopmentConfig",
    "ProductionConfig",
    "TestingConfig",
    "get_config",
]
