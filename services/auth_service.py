"""
Auth Service - account registration and password login.
"""

from __future__ import annotations
import logging

from passlib.context import CryptContext  # type: ignore

from config import get_config
from domain.models import UserRecord
from repositories.user_repository import UserRepository
from shared.exceptions import (
    AuthenticationError,
    DuplicateEntityError,
    NotFoundError,
    UnexpectedError,
    ValidationError,
)
from utils.auth import mint_jwt_token

logger = logging.getLogger(__name__)

_pwd_ctx = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(raw: str) -> str:
    return _pwd_ctx.hash(raw)


def verify_password(raw: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    try:
        return _pwd_ctx.verify(raw, str(hashed))
    except ValueError:
        # Unrecognised or corrupted hash
        return False


class AuthService:
    def __init__(self, users: UserRepository):
        self.users = users

    def register(self, username: str, email: str, password: str) -> UserRecord:
        email = email.lower().strip()
        min_length = get_config().auth.password_min_length
        errors = []
        if not username or not username.strip():
            errors.append({"msg": "username is required", "path": "username"})
        if len(password or "") < min_length:
            errors.append({
                "msg": f"Password must be at least {min_length} characters",
                "path": "password",
            })
        if errors:
            raise ValidationError(errors)

        if self.users.email_exists(email):
            raise DuplicateEntityError("Email already exists", field="email")

        user = self.users.create_user(username.strip(), email, hash_password(password))
        logger.info("user %s registered", user.id)
        return user

    def login(self, email: str, password: str) -> str:
        """Check credentials and return a signed access token."""
        found = self.users.get_credentials(email.lower().strip())
        if found is None or not verify_password(password, found[1]):
            logger.info("failed login for %s", email)
            raise AuthenticationError("Invalid credentials")
        user = found[0]
        token = mint_jwt_token(f"u:{user.id}")
        if not token:
            raise UnexpectedError("mint_token", details={"reason": "auth not configured"})
        return token

    def get_user(self, user_id: str) -> UserRecord:
        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User")
        return user
