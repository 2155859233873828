"""
Logging setup for the Bookstore API.

``LOG_LEVEL`` sets the root level; each component can be tuned on its own
through the ``LOG_LEVEL_*`` variables below (e.g. ``LOG_LEVEL_TRANSACTIONS=DEBUG``
to trace stock reservations without flooding the rest of the output).
"""

import os
import logging


# Component loggers and the environment variable overriding their level
_COMPONENT_LOGGERS = {
    "bookstore.api": "LOG_LEVEL_API",
    "services.transaction_service": "LOG_LEVEL_TRANSACTIONS",
    "services.statistics_service": "LOG_LEVEL_STATISTICS",
    "services.catalog_service": "LOG_LEVEL_CATALOG",
    "services.auth_service": "LOG_LEVEL_AUTH",
    "repositories": "LOG_LEVEL_REPOSITORIES",
}


def configure_logging():
    """Install the root handler and apply per-component levels."""
    default_name = os.getenv("LOG_LEVEL", "INFO").upper()
    default_level = getattr(logging, default_name, logging.INFO)

    logging.basicConfig(
        level=default_level,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    levels = {
        name: os.getenv(env_key, default_name).upper()
        for name, env_key in _COMPONENT_LOGGERS.items()
    }
    # Statement logging is opt-in (DB_ECHO or LOG_LEVEL_SQL=INFO)
    levels["sqlalchemy.engine"] = os.getenv("LOG_LEVEL_SQL", "WARNING").upper()

    for name, level_name in levels.items():
        logging.getLogger(name).setLevel(getattr(logging, level_name, default_level))
