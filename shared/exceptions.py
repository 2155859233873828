"""
Custom exceptions and error handling utilities.

This module centralizes all custom exceptions used throughout the application
and provides utilities for consistent error handling and reporting. Every
exception carries the HTTP status it maps to, so the API layer can render it
without knowing the concrete type.
"""

from typing import Dict, Any, Optional, List, Sequence
import logging


# =================== BASE EXCEPTIONS ===================

class BookstoreError(Exception):
    """Base exception for all Bookstore application errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = None,
        details: Dict[str, Any] = None,
        original_exception: Exception = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.replace("Error", "").lower()
        self.details = details or {}
        self.original_exception = original_exception

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logs and diagnostics."""
        result = {
            "error": self.message,
            "code": self.code,
            "type": self.__class__.__name__
        }

        if self.details:
            result["details"] = self.details

        if self.original_exception:
            result["original_error"] = str(self.original_exception)

        return result


# =================== CALLER-FAULT EXCEPTIONS ===================

class ValidationError(BookstoreError):
    """Raised when request input is malformed or missing.

    ``errors`` holds one ``{"msg", "path"}`` entry per offending field.
    """

    status_code = 422

    def __init__(self, errors: List[Dict[str, str]], message: str = "Validation error"):
        super().__init__(
            message=message,
            code="validation_error",
            details={"errors": errors}
        )
        self.errors = errors

    @classmethod
    def single(cls, msg: str, path: str) -> "ValidationError":
        return cls([{"msg": msg, "path": path}])


class NotFoundError(BookstoreError):
    """Raised when one or more referenced entities do not exist."""

    status_code = 404

    def __init__(self, entity_type: str, identifiers: Sequence[str] = ()):
        identifiers = [str(i) for i in identifiers]
        message = f"{entity_type} not found"
        if identifiers:
            message += f": {', '.join(identifiers)}"
        super().__init__(
            message=message,
            code="not_found",
            details={
                "entity_type": entity_type,
                "identifiers": identifiers,
            }
        )
        self.entity_type = entity_type
        self.identifiers = identifiers


class InsufficientStockError(BookstoreError):
    """Raised when the requested quantity exceeds the available stock."""

    status_code = 400

    def __init__(self, book_id: str, title: str, requested: int, available: int):
        super().__init__(
            message=f"Not enough stock for {title}",
            code="insufficient_stock",
            details={
                "book_id": book_id,
                "title": title,
                "requested": requested,
                "available": available,
            }
        )
        self.book_id = book_id
        self.title = title
        self.requested = requested
        self.available = available


class DuplicateEntityError(BookstoreError):
    """Raised when a create or update would clash with a unique value."""

    status_code = 409

    def __init__(self, message: str, field: str = None):
        super().__init__(
            message=message,
            code="duplicate_entity",
            details={"field": field} if field else None
        )
        self.field = field


class AuthenticationError(BookstoreError):
    """Raised when the caller is not (or no longer) authenticated."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message=message, code="unauthorized")


# =================== CONCURRENCY / INFRASTRUCTURE EXCEPTIONS ===================

class ConflictError(BookstoreError):
    """Raised when a concurrent modification invalidated the request.

    Nothing was committed, so the same request can be retried unchanged.
    """

    status_code = 409

    def __init__(
        self,
        message: str = "Request conflicted with a concurrent update, please retry",
        original_exception: Exception = None
    ):
        super().__init__(
            message=message,
            code="conflict",
            original_exception=original_exception
        )


class UnexpectedError(BookstoreError):
    """Raised when storage or infrastructure fails.

    The message is safe to show to callers; the cause is kept for logging only.
    """

    status_code = 500

    def __init__(
        self,
        operation: str,
        original_exception: Exception = None,
        details: Dict[str, Any] = None
    ):
        super().__init__(
            message="Internal server error",
            code="unexpected_error",
            details={"operation": operation, **(details or {})},
            original_exception=original_exception
        )
        self.operation = operation


class RepositoryConnectionError(UnexpectedError):
    """Raised when the database is not configured or cannot be reached."""

    def __init__(self, repository_name: str, original_exception: Exception = None):
        super().__init__(
            operation=f"connect:{repository_name}",
            original_exception=original_exception
        )
        self.repository_name = repository_name


# =================== ERROR HANDLING UTILITIES ===================

def handle_exception(
    exception: Exception,
    logger: logging.Logger,
    context: Dict[str, Any] = None
) -> Dict[str, Any]:
    """
    Log an exception with the level its kind deserves.

    Caller-fault errors are logged at INFO, conflicts at WARNING and
    everything else at ERROR with the traceback.

    Returns:
        Dictionary representation of the error
    """
    if isinstance(exception, BookstoreError):
        error_dict = exception.to_dict()
        extra = {
            "error_code": exception.code,
            "details": exception.details,
            "context": context
        }
        if isinstance(exception, UnexpectedError):
            logger.error(
                f"UnexpectedError during {exception.operation}: {exception.original_exception}",
                extra=extra,
                exc_info=exception.original_exception or exception
            )
        elif isinstance(exception, ConflictError):
            logger.warning(f"ConflictError: {exception.message}", extra=extra)
        else:
            logger.info(f"{exception.__class__.__name__}: {exception.message}", extra=extra)
    else:
        error_dict = {
            "error": str(exception),
            "code": "unexpected_error",
            "type": exception.__class__.__name__
        }
        logger.error(f"Unexpected error: {str(exception)}", extra={
            "exception_type": exception.__class__.__name__,
            "context": context
        }, exc_info=exception)

    if context:
        error_dict["context"] = context

    return error_dict


def create_error_response(exception: Exception) -> Dict[str, Any]:
    """
    Create the failure envelope returned to API callers.

    Validation failures include the offending fields under ``data``;
    unexpected failures never expose internal detail.
    """
    if isinstance(exception, ValidationError):
        return {
            "success": False,
            "message": exception.message,
            "data": exception.errors
        }
    if isinstance(exception, BookstoreError) and not isinstance(exception, UnexpectedError):
        return {"success": False, "message": exception.message}
    return {"success": False, "message": "Internal server error"}


def status_code_for(exception: Exception) -> int:
    """HTTP status code for an exception raised by the service layer."""
    if isinstance(exception, BookstoreError):
        return exception.status_code
    return 500


# =================== EXPORT ALL EXCEPTIONS ===================

__all__ = [
    # Base exceptions
    "BookstoreError",

    # Caller-fault exceptions
    "ValidationError",
    "NotFoundError",
    "InsufficientStockError",
    "DuplicateEntityError",
    "AuthenticationError",

    # Concurrency and infrastructure exceptions
    "ConflictError",
    "UnexpectedError",
    "RepositoryConnectionError",

    # Utility functions
    "handle_exception",
    "create_error_response",
    "status_code_for",
]
