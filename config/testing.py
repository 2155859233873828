"""Settings for the test suite."""

import os

from config.base import BaseConfig, DatabaseConfig


class TestingConfig(BaseConfig):
    """In-memory database and short-lived tokens signed with a fixed key."""

    def _setup_environment(self):
        # Unhandled errors must render the JSON 500 envelope, not a traceback page
        self.debug = False

        # Tests inject their own engine; this one only backs app startup
        self.database = DatabaseConfig(url="sqlite://", echo=False)

        if not self.auth.jwt_secret:
            self.auth.jwt_secret = "test-secret"
        self.auth.token_ttl_minutes = 5
        self.auth.allowed_origins = ["*"]

        os.environ.setdefault("LOG_LEVEL", "DEBUG")

    def validate(self):
        return []
