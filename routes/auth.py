from __future__ import annotations

from fastapi import APIRouter, Depends  # type: ignore
from fastapi.responses import JSONResponse  # type: ignore
from pydantic import BaseModel, EmailStr  # type: ignore
from sqlalchemy.orm import sessionmaker  # type: ignore

from core.db import get_session_factory
from repositories.user_repository import UserRepository
from services.auth_service import AuthService
from shared.utilities import create_success_response
from utils.auth import require_user

router = APIRouter(prefix="/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    username: str
    email: EmailStr
    password: str


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


def get_auth_service(
    session_factory: sessionmaker = Depends(get_session_factory),
) -> AuthService:
    return AuthService(UserRepository(session_factory))


@router.post("/register", status_code=201)
def register(
    payload: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    user = service.register(payload.username, payload.email, payload.password)
    return JSONResponse(
        create_success_response(user.to_dict(), message="User registered successfully"),
        status_code=201,
    )


@router.post("/login")
def login(
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> dict:
    token = service.login(payload.email, payload.password)
    return create_success_response({"token": token}, message="Login successful")


@router.get("/me")
def me(
    user_id: str = Depends(require_user),
    service: AuthService = Depends(get_auth_service),
) -> dict:
    user = service.get_user(user_id)
    return create_success_response(user.to_dict(), message="Get profile successfully")
