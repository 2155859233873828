import uuid
from datetime import datetime
from sqlalchemy import (  # type: ignore
    Column,
    BigInteger,
    Integer,
    String,
    DateTime,
    ForeignKey,
    CheckConstraint,
)
from sqlalchemy.orm import relationship  # type: ignore

from core.db import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(
        String(36), ForeignKey("users.id"), nullable=False, index=True
    )
    user = relationship("User")
    # price x quantity of two INTEGER columns can exceed 2**31
    total_amount = Column(BigInteger, nullable=False)
    created_at = Column(
        DateTime, nullable=False, default=datetime.utcnow, index=True
    )
    items = relationship(
        "TransactionItem",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionItem.position",
    )

    __table_args__ = (
        CheckConstraint("total_amount >= 0", name="ck_transaction_total_non_negative"),
    )


class TransactionItem(Base):
    __tablename__ = "transaction_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    transaction_id = Column(
        String(36), ForeignKey("transactions.id"), nullable=False, index=True
    )
    transaction = relationship("Transaction", back_populates="items")
    book_id = Column(
        String(36), ForeignKey("books.id"), nullable=False, index=True
    )
    book = relationship("Book")
    position = Column(Integer, nullable=False, default=0)
    quantity = Column(Integer, nullable=False)
    price = Column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_transaction_item_quantity_positive"),
    )


__all__ = ["Transaction", "TransactionItem"]
