"""Settings for the deployed bookstore API."""

import os

from config.base import BaseConfig

MIN_PRODUCTION_SECRET_LENGTH = 32


class ProductionConfig(BaseConfig):
    """Requires a server database, a strong signing key and explicit origins."""

    def _setup_environment(self):
        self.debug = False

        # No implicit wildcard; only origins listed in ALLOWED_ORIGINS
        if not os.getenv("ALLOWED_ORIGINS", "").strip():
            self.auth.allowed_origins = []

        os.environ.setdefault("LOG_LEVEL", "INFO")

    def validate(self):
        """Strict checks; any entry here means the deployment is misconfigured."""
        errors = super().validate()

        # Concurrent stock reservation needs real row locks
        if self.database.url.startswith("sqlite"):
            errors.append("SQLite is not supported in production")

        if self.auth.jwt_secret and len(self.auth.jwt_secret) < MIN_PRODUCTION_SECRET_LENGTH:
            errors.append(
                f"JWT_SECRET must be at least {MIN_PRODUCTION_SECRET_LENGTH} characters in production"
            )

        if "*" in (self.auth.allowed_origins or []):
            errors.append("Wildcard CORS origins are not allowed in production")

        if self.pagination.max_limit > 100:
            errors.append("PAGE_MAX_LIMIT above 100 is not allowed in production")

        return errors
