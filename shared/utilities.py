"""
Common utility functions used throughout the application.
"""

from typing import Any, Dict, Optional


def create_success_response(
    data: Any = None,
    message: str = "",
    meta: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Create standardized success envelope.

    Args:
        data: Response data
        message: Success message
        meta: Pagination metadata for list responses

    Returns:
        ``{"success": True, "message": ..., "data": ...}`` plus ``meta``
        when given
    """
    response = {"success": True, "message": message, "data": data}
    if meta is not None:
        response["meta"] = meta
    return response
