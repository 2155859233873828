from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Depends, Query  # type: ignore
from fastapi.responses import JSONResponse  # type: ignore
from pydantic import BaseModel, ConfigDict, Field  # type: ignore
from sqlalchemy.orm import sessionmaker  # type: ignore

from core.db import get_session_factory
from repositories.book_repository import BookRepository
from repositories.genre_repository import GenreRepository
from services.catalog_service import BookService
from shared.utilities import create_success_response
from utils.auth import require_user
from utils.pagination import meta_response, parse_pagination

router = APIRouter(prefix="/books", tags=["books"])

Order = Optional[Literal["asc", "desc"]]


class BookPayload(BaseModel):
    """Book fields as sent by clients (camelCase)."""
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    writer: Optional[str] = None
    publisher: Optional[str] = None
    isbn: Optional[str] = None
    description: Optional[str] = None
    # Numeric fields stay untyped here; the service reports bad values
    publication_year: Any = Field(default=None, alias="publicationYear")
    condition: Optional[str] = None
    price: Any = None
    stock_quantity: Any = Field(default=None, alias="stockQuantity")
    genre_id: Optional[str] = Field(default=None, alias="genreId")

    def to_fields(self, *, drop_unset: bool) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=drop_unset, by_alias=False)


def get_book_service(
    session_factory: sessionmaker = Depends(get_session_factory),
) -> BookService:
    return BookService(BookRepository(session_factory), GenreRepository(session_factory))


def _list_filters(
    search: str = Query(""),
    condition: Optional[str] = Query(None),
    orderByTitle: Order = Query(None),
    orderByPublishDate: Order = Query(None),
) -> Dict[str, Any]:
    return {
        "search": search,
        "condition": condition,
        "order_by_title": orderByTitle,
        "order_by_publish_date": orderByPublishDate,
    }


def _summary(book) -> Dict[str, Any]:
    data = book.to_dict()
    data.pop("genreId", None)
    data.pop("isbn", None)
    data.pop("condition", None)
    return data


@router.post("", status_code=201)
def create_book(
    payload: BookPayload,
    _user: str = Depends(require_user),
    service: BookService = Depends(get_book_service),
) -> JSONResponse:
    book, restored = service.create_book(payload.to_fields(drop_unset=False))
    if restored:
        return JSONResponse(
            create_success_response(book.to_dict(), message="Book restored successfully"),
            status_code=200,
        )
    data = {
        "id": book.id,
        "title": book.title,
        "createdAt": book.created_at.isoformat() if book.created_at else None,
    }
    return JSONResponse(
        create_success_response(data, message="Book added successfully"),
        status_code=201,
    )


@router.get("")
def list_books(
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    filters: Dict[str, Any] = Depends(_list_filters),
    _user: str = Depends(require_user),
    service: BookService = Depends(get_book_service),
) -> dict:
    p = parse_pagination(page, limit)
    total, books = service.list_books(p.skip, p.limit, **filters)
    return create_success_response(
        [_summary(b) for b in books],
        message="Get all book successfully",
        meta=meta_response(p.page, p.limit, total),
    )


@router.get("/genre/{genre_id}")
def list_books_by_genre(
    genre_id: str,
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    filters: Dict[str, Any] = Depends(_list_filters),
    _user: str = Depends(require_user),
    service: BookService = Depends(get_book_service),
) -> dict:
    p = parse_pagination(page, limit)
    total, books = service.list_books_by_genre(genre_id, p.skip, p.limit, **filters)
    return create_success_response(
        [_summary(b) for b in books],
        message="Get all book by genre successfully",
        meta=meta_response(p.page, p.limit, total),
    )


@router.get("/{book_id}")
def get_book(
    book_id: str,
    _user: str = Depends(require_user),
    service: BookService = Depends(get_book_service),
) -> dict:
    book = service.get_book(book_id)
    return create_success_response(_summary(book), message="Get book detail successfully")


@router.patch("/{book_id}")
def update_book(
    book_id: str,
    payload: BookPayload,
    _user: str = Depends(require_user),
    service: BookService = Depends(get_book_service),
) -> dict:
    book = service.update_book(book_id, payload.to_fields(drop_unset=True))
    data = book.to_dict()
    data.pop("genre", None)
    data["updatedAt"] = book.updated_at.isoformat() if book.updated_at else None
    return create_success_response(data, message="Book updated successfully")


@router.delete("/{book_id}")
def delete_book(
    book_id: str,
    _user: str = Depends(require_user),
    service: BookService = Depends(get_book_service),
) -> dict:
    service.delete_book(book_id)
    return {"success": True, "message": "Book removed successfully"}
