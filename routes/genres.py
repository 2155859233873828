from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query  # type: ignore
from fastapi.responses import JSONResponse  # type: ignore
from pydantic import BaseModel  # type: ignore
from sqlalchemy.orm import sessionmaker  # type: ignore

from core.db import get_session_factory
from repositories.genre_repository import GenreRepository
from services.catalog_service import GenreService
from shared.utilities import create_success_response
from utils.auth import require_user
from utils.pagination import meta_response, parse_pagination

router = APIRouter(prefix="/genre", tags=["genres"])


class GenreCreateRequest(BaseModel):
    name: str
    description: Optional[str] = None


class GenreUpdateRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


def get_genre_service(
    session_factory: sessionmaker = Depends(get_session_factory),
) -> GenreService:
    return GenreService(GenreRepository(session_factory))


@router.post("", status_code=201)
def create_genre(
    payload: GenreCreateRequest,
    _user: str = Depends(require_user),
    service: GenreService = Depends(get_genre_service),
) -> JSONResponse:
    genre = service.create_genre(payload.name, payload.description)
    data = {
        "id": genre.id,
        "name": genre.name,
        "createdAt": genre.created_at.isoformat() if genre.created_at else None,
    }
    return JSONResponse(
        create_success_response(data, message="Genre created successfully"),
        status_code=201,
    )


@router.get("")
def list_genres(
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    search: str = Query(""),
    orderByName: Optional[Literal["asc", "desc"]] = Query(None),
    _user: str = Depends(require_user),
    service: GenreService = Depends(get_genre_service),
) -> dict:
    p = parse_pagination(page, limit)
    total, genres = service.list_genres(p.skip, p.limit, search=search, order_by_name=orderByName)
    return create_success_response(
        [{"id": g.id, "name": g.name} for g in genres],
        message="Get all genre successfully",
        meta=meta_response(p.page, p.limit, total),
    )


@router.get("/{genre_id}")
def get_genre(
    genre_id: str,
    _user: str = Depends(require_user),
    service: GenreService = Depends(get_genre_service),
) -> dict:
    genre = service.get_genre(genre_id)
    return create_success_response(genre.to_dict(), message="Get genre detail successfully")


@router.patch("/{genre_id}")
def update_genre(
    genre_id: str,
    payload: GenreUpdateRequest,
    _user: str = Depends(require_user),
    service: GenreService = Depends(get_genre_service),
) -> dict:
    genre = service.update_genre(genre_id, name=payload.name, description=payload.description)
    data = {
        "id": genre.id,
        "name": genre.name,
        "updatedAt": genre.updated_at.isoformat() if genre.updated_at else None,
    }
    return create_success_response(data, message="Genre updated successfully")


@router.delete("/{genre_id}")
def delete_genre(
    genre_id: str,
    _user: str = Depends(require_user),
    service: GenreService = Depends(get_genre_service),
) -> dict:
    service.delete_genre(genre_id)
    return {"success": True, "message": "Genre removed successfully"}
