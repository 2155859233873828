"""Settings for running the bookstore locally."""

import logging
import os

from config.base import BaseConfig

logger = logging.getLogger(__name__)

DEV_JWT_SECRET = "dev_secret"


class DevelopmentConfig(BaseConfig):
    """Local SQLite database, a fixed signing key and local frontends."""

    def _setup_environment(self):
        self.debug = True

        # Local SQLite file unless a real database is configured
        if not self.database.url:
            self.database.url = "sqlite:///./bookstore.db"

        if not self.auth.jwt_secret:
            self.auth.jwt_secret = DEV_JWT_SECRET

        # Storefront dev servers (CRA, uvicorn docs, Vite)
        if not self.auth.allowed_origins or self.auth.allowed_origins == ["*"]:
            self.auth.allowed_origins = [
                f"http://{host}:{port}"
                for host in ("localhost", "127.0.0.1")
                for port in (3000, 8000, 5173)
            ]

        os.environ.setdefault("LOG_LEVEL", "DEBUG")

    def validate(self):
        """Problems that block startup; dev-only shortcuts are only logged."""
        errors = super().validate()

        if self.auth.jwt_secret == DEV_JWT_SECRET:
            logger.warning(
                "Development config warning: JWT_SECRET not set - tokens are signed "
                "with the development key"
            )
        if self.database.url.startswith("sqlite:///./"):
            logger.info("Development database: %s", self.database.url)

        return errors
