from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from config import get_config


@dataclass(frozen=True)
class Page:
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def _to_int(raw: Any, default: int) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def parse_pagination(page: Optional[Any] = None, limit: Optional[Any] = None) -> Page:
    """Clamp page to >= 1 and limit to 1..max_limit."""
    cfg = get_config().pagination
    p = max(1, _to_int(page if page is not None else 1, 1))
    lim = _to_int(limit if limit is not None else cfg.default_limit, cfg.default_limit)
    lim = max(1, min(cfg.max_limit, lim))
    return Page(page=p, limit=lim)


def meta_response(page: int, limit: int, total: int) -> Dict[str, Any]:
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "page": page,
        "limit": limit,
        "prev": page - 1 if page > 1 else None,
        "next": page + 1 if page < total_pages else None,
        "total": total,
        "totalPages": total_pages,
    }
