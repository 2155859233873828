from __future__ import annotations

from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query  # type: ignore
from fastapi.responses import JSONResponse  # type: ignore
from pydantic import BaseModel, ConfigDict, Field  # type: ignore
from sqlalchemy.orm import sessionmaker  # type: ignore

from core.db import get_session_factory
from repositories.book_repository import BookRepository
from repositories.genre_repository import GenreRepository
from repositories.transaction_repository import TransactionRepository
from repositories.user_repository import UserRepository
from services.statistics_service import StatisticsService
from services.transaction_service import TransactionService
from shared.utilities import create_success_response
from utils.auth import require_user
from utils.pagination import meta_response, parse_pagination

router = APIRouter(prefix="/transactions", tags=["transactions"])


class TransactionItemIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Values are checked by the service so every bad line is reported together
    book_id: Any = Field(default=None, alias="bookId")
    quantity: Any = None


class TransactionCreateRequest(BaseModel):
    items: Optional[List[TransactionItemIn]] = None


def get_transaction_service(
    session_factory: sessionmaker = Depends(get_session_factory),
) -> TransactionService:
    return TransactionService(
        books=BookRepository(session_factory),
        transactions=TransactionRepository(session_factory),
        users=UserRepository(session_factory),
    )


def get_statistics_service(
    session_factory: sessionmaker = Depends(get_session_factory),
) -> StatisticsService:
    return StatisticsService(
        transactions=TransactionRepository(session_factory),
        books=BookRepository(session_factory),
        genres=GenreRepository(session_factory),
    )


@router.post("", status_code=201)
def create_transaction(
    payload: TransactionCreateRequest,
    user_id: str = Depends(require_user),
    service: TransactionService = Depends(get_transaction_service),
) -> JSONResponse:
    record = service.create_transaction(user_id, payload.items)
    return JSONResponse(
        create_success_response(
            record.to_dict(), message="Transaction created successfully"
        ),
        status_code=201,
    )


@router.get("")
def list_transactions(
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    _user: str = Depends(require_user),
    service: TransactionService = Depends(get_transaction_service),
) -> dict:
    p = parse_pagination(page, limit)
    total, records = service.list_transactions(p.skip, p.limit)
    return create_success_response(
        [r.to_dict() for r in records],
        message="Get all transactions successfully",
        meta=meta_response(p.page, p.limit, total),
    )


# Registered before /{transaction_id} so the literal path wins
@router.get("/statistics")
def transaction_statistics(
    _user: str = Depends(require_user),
    service: StatisticsService = Depends(get_statistics_service),
) -> dict:
    stats = service.get_statistics()
    return create_success_response(
        stats.to_dict(), message="Get transaction statistics successfully"
    )


@router.get("/{transaction_id}")
def get_transaction(
    transaction_id: str,
    _user: str = Depends(require_user),
    service: TransactionService = Depends(get_transaction_service),
) -> dict:
    record = service.get_transaction(transaction_id)
    return create_success_response(
        record.to_dict(), message="Get transaction detail successfully"
    )
