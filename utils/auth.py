from __future__ import annotations

from datetime import datetime, timedelta

from fastapi import Request  # type: ignore

import jwt  # type: ignore

from config import get_config
from shared.exceptions import AuthenticationError


def jwt_secret() -> str | None:
    val = get_config().auth.jwt_secret
    return val if val else None


def jwt_algorithm() -> str:
    return get_config().auth.jwt_algorithm


def mint_jwt_token(
    subject: str,
    *,
    ttl_minutes: int | None = None,
) -> str | None:
    secret = jwt_secret()
    if not secret:
        return None
    if ttl_minutes is None:
        ttl_minutes = get_config().auth.token_ttl_minutes
    now = datetime.utcnow()
    payload = {
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int(
            (now + timedelta(minutes=ttl_minutes)).timestamp()
        ),
    }
    return jwt.encode(payload, secret, algorithm=jwt_algorithm())


def verify_jwt_token(token: str) -> dict | None:
    secret = jwt_secret()
    if not secret:
        return None
    try:
        data = jwt.decode(
            token,
            secret,
            algorithms=[jwt_algorithm()],
        )
        return data if isinstance(data, dict) else None
    except jwt.PyJWTError:
        return None


def user_id_from_subject(subject: str | None) -> str | None:
    """Parse the user id out of a ``u:<id>`` token subject."""
    if not subject or not subject.startswith("u:"):
        return None
    user_id = subject.split(":", 1)[1]
    return user_id or None


def require_user(request: Request) -> str:
    """FastAPI dependency returning the authenticated user's id.

    Expects ``Authorization: Bearer <jwt>``.
    """
    auth = request.headers.get("authorization")
    if not auth:
        raise AuthenticationError("Authorization header missing")
    parts = auth.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise AuthenticationError("Invalid authorization header")
    data = verify_jwt_token(parts[1])
    user_id = user_id_from_subject(data.get("sub") if data else None)
    if user_id is None:
        raise AuthenticationError("Invalid or expired token")
    return user_id
