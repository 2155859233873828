"""
Reusable validators and validation utilities.

Each validator collects ``{"msg", "path"}`` entries so a caller sees every
offending field of a request at once instead of fixing them one by one.
"""

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from domain.models import BookCondition
from shared.exceptions import ValidationError


def is_strict_int(value: Any) -> bool:
    """True for real integers; booleans are not quantities or prices."""
    return isinstance(value, int) and not isinstance(value, bool)


def _item_field(item: Any, *names: str) -> Any:
    if isinstance(item, Mapping):
        for name in names:
            if name in item:
                return item[name]
        return None
    for name in names:
        if hasattr(item, name):
            return getattr(item, name)
    return None


# =================== PURCHASE VALIDATION ===================

def aggregate_purchase_items(items: Any) -> Dict[str, int]:
    """
    Validate purchase line items and merge repeated books.

    Args:
        items: Sequence of ``{bookId, quantity}`` mappings or objects with
            ``book_id``/``quantity`` attributes

    Returns:
        Aggregated quantity per book id, ordered by first appearance in
        ``items``

    Raises:
        ValidationError: If items is empty or any line is malformed
    """
    if not isinstance(items, (list, tuple)) or len(items) == 0:
        raise ValidationError.single("Items cannot be empty", "items")

    errors: List[Dict[str, str]] = []
    aggregated: Dict[str, int] = {}

    for index, item in enumerate(items):
        path = f"items[{index}]"
        book_id = _item_field(item, "bookId", "book_id")
        quantity = _item_field(item, "quantity")

        line_ok = True
        if not isinstance(book_id, str) or not book_id.strip():
            errors.append({"msg": "bookId is required", "path": f"{path}.bookId"})
            line_ok = False
        if not is_strict_int(quantity) or quantity <= 0:
            errors.append({
                "msg": "quantity must be a positive integer",
                "path": f"{path}.quantity",
            })
            line_ok = False

        if line_ok:
            key = book_id.strip()
            aggregated[key] = aggregated.get(key, 0) + quantity

    if errors:
        raise ValidationError(errors)

    return aggregated


# =================== CATALOG VALIDATION ===================

def book_field_errors(
    price: Any = None,
    stock_quantity: Any = None,
    publication_year: Any = None,
    condition: Any = None,
    require_price_and_stock: bool = True,
) -> List[Dict[str, str]]:
    """
    Check the numeric and enum fields of a book payload.

    Returns:
        List of ``{"msg", "path"}`` entries (empty when valid)
    """
    errors: List[Dict[str, str]] = []
    current_year = datetime.utcnow().year

    if publication_year is not None:
        if not is_strict_int(publication_year):
            errors.append({"msg": "publicationYear must be an integer", "path": "publicationYear"})
        elif publication_year <= 0 or publication_year > current_year:
            errors.append({
                "msg": f"publicationYear must be between 1 and {current_year}",
                "path": "publicationYear",
            })

    if price is None:
        if require_price_and_stock:
            errors.append({"msg": "price is required", "path": "price"})
    elif not is_strict_int(price) or price <= 0:
        errors.append({"msg": "price must be an integer greater than 0", "path": "price"})

    if stock_quantity is None:
        if require_price_and_stock:
            errors.append({"msg": "stockQuantity is required", "path": "stockQuantity"})
    elif not is_strict_int(stock_quantity) or stock_quantity < 0:
        errors.append({"msg": "stockQuantity must be an integer >= 0", "path": "stockQuantity"})

    if condition is not None and condition not in BookCondition.__members__:
        allowed = ", ".join(BookCondition.__members__)
        errors.append({"msg": f"condition must be one of {allowed}", "path": "condition"})

    return errors


def validate_required_text(value: Optional[str], path: str) -> List[Dict[str, str]]:
    if value is None or not str(value).strip():
        return [{"msg": f"{path} is required", "path": path}]
    return []
