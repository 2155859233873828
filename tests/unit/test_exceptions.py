import logging

import pytest

from shared.exceptions import (
    AuthenticationError,
    ConflictError,
    DuplicateEntityError,
    InsufficientStockError,
    NotFoundError,
    RepositoryConnectionError,
    UnexpectedError,
    ValidationError,
    create_error_response,
    handle_exception,
    status_code_for,
)


@pytest.mark.parametrize(
    "exc, status",
    [
        (ValidationError.single("x is required", "x"), 422),
        (NotFoundError("Book", ["b1"]), 404),
        (InsufficientStockError("b1", "Dune", 3, 1), 400),
        (DuplicateEntityError("Email already exists", field="email"), 409),
        (AuthenticationError(), 401),
        (ConflictError(), 409),
        (UnexpectedError("op"), 500),
        (RepositoryConnectionError("books"), 500),
        (RuntimeError("boom"), 500),
    ],
)
def test_status_codes(exc, status):
    assert status_code_for(exc) == status


def test_not_found_lists_every_identifier():
    exc = NotFoundError("Book", ["a", "b"])

    assert exc.message == "Book not found: a, b"
    assert exc.identifiers == ["a", "b"]


def test_not_found_without_identifiers():
    assert NotFoundError("User").message == "User not found"


def test_validation_envelope_carries_field_errors():
    exc = ValidationError([{"msg": "bookId is required", "path": "items[0].bookId"}])

    assert create_error_response(exc) == {
        "success": False,
        "message": "Validation error",
        "data": [{"msg": "bookId is required", "path": "items[0].bookId"}],
    }


def test_caller_fault_envelope_uses_message():
    exc = InsufficientStockError("b1", "Dune", 3, 1)

    assert create_error_response(exc) == {"success": False, "message": "Not enough stock for Dune"}


def test_unexpected_envelope_hides_cause():
    exc = UnexpectedError("insert", original_exception=RuntimeError("password=hunter2"))

    body = create_error_response(exc)

    assert body == {"success": False, "message": "Internal server error"}
    assert create_error_response(KeyError("secret")) == body


def test_to_dict_includes_original_error():
    exc = ConflictError(original_exception=RuntimeError("database is locked"))

    data = exc.to_dict()

    assert data["code"] == "conflict"
    assert data["original_error"] == "database is locked"


def test_handle_exception_log_levels(caplog):
    logger = logging.getLogger("tests.exceptions")

    with caplog.at_level(logging.DEBUG, logger="tests.exceptions"):
        handle_exception(NotFoundError("Book", ["x"]), logger)
        handle_exception(ConflictError(), logger)
        handle_exception(UnexpectedError("op", original_exception=RuntimeError("db down")), logger)
        result = handle_exception(ValueError("bad"), logger, context={"path": "/x"})

    levels = [r.levelno for r in caplog.records]
    assert levels == [logging.INFO, logging.WARNING, logging.ERROR, logging.ERROR]
    assert result["type"] == "ValueError"
    assert result["context"] == {"path": "/x"}
