"""
Bookstore API application setup.

- Registers route modules from `routes/*`
- Maps service-layer exceptions to JSON envelopes
- Creates missing tables on startup
"""

import logging
from datetime import datetime

from dotenv import load_dotenv  # type: ignore
from fastapi import FastAPI, Request  # type: ignore
from fastapi.exceptions import RequestValidationError  # type: ignore
from fastapi.middleware.cors import CORSMiddleware  # type: ignore
from fastapi.responses import JSONResponse  # type: ignore
from starlette.exceptions import HTTPException as StarletteHTTPException  # type: ignore

# ───────────────────── env / init ─────────────────────
load_dotenv()

from config import get_config  # noqa: E402
from core.db import init_db  # noqa: E402
from logging_config import configure_logging  # noqa: E402
from shared.exceptions import (  # noqa: E402
    BookstoreError,
    create_error_response,
    handle_exception,
    status_code_for,
)

from routes.auth import router as auth_router  # noqa: E402
from routes.books import router as books_router  # noqa: E402
from routes.genres import router as genres_router  # noqa: E402
from routes.transactions import router as transactions_router  # noqa: E402

configure_logging()
logger = logging.getLogger("bookstore.api")

_config = get_config()

app = FastAPI(
    title=_config.app_name,
    version=_config.app_version,
    debug=_config.debug,
    description="Bookstore catalog, sales and statistics API",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_config.auth.allowed_origins or [],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(books_router)
app.include_router(genres_router)
app.include_router(transactions_router)


@app.exception_handler(BookstoreError)
def _bookstore_error_handler(request: Request, exc: BookstoreError) -> JSONResponse:
    handle_exception(exc, logger, context={"path": request.url.path, "method": request.method})
    return JSONResponse(create_error_response(exc), status_code=status_code_for(exc))


@app.exception_handler(RequestValidationError)
def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"msg": err.get("msg", "invalid value"), "path": ".".join(loc)})
    return JSONResponse(
        {"success": False, "message": "Validation error", "data": errors},
        status_code=422,
    )


@app.exception_handler(StarletteHTTPException)
def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == 404 and message == "Not Found":
        message = "Endpoint not found"
    return JSONResponse(
        {"success": False, "message": message},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    handle_exception(exc, logger, context={"path": request.url.path, "method": request.method})
    return JSONResponse(create_error_response(exc), status_code=status_code_for(exc))


@app.on_event("startup")
def _prepare_database() -> None:
    for problem in _config.validate():
        logger.warning("config: %s", problem)
    init_db()


@app.get("/health-check")
def health() -> dict:
    return {
        "success": True,
        "message": "ok",
        "version": app.version,
        "date": datetime.utcnow().date().isoformat(),
    }


if __name__ == "__main__":
    import os

    import uvicorn  # type: ignore

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
