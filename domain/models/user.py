"""
User domain model.

Account data exposed to the rest of the application; the password hash
never leaves the repository layer.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional
from datetime import datetime


@dataclass(frozen=True)
class UserRecord:
    """Domain model for application users."""

    id: str
    username: str
    email: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_orm(cls, row: Any) -> UserRecord:
        return cls(
            id=row.id,
            username=row.username,
            email=row.email,
            created_at=row.created_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
