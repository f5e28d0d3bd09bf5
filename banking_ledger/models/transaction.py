"""
Transaction model.

A transaction is the header that groups two or more lines.
It is written once, together with its lines, and never
updated or deleted: the ledger is append-only.

The caller-supplied reference is unique across the ledger and
doubles as the idempotency key: a resubmitted request fails on
the unique constraint instead of booking the money twice.
"""

from datetime import datetime

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from banking_ledger.models.base import Base, utcnow


class Transaction(Base):
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    reference: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, index=True
    )

    lines: Mapped[list["TransactionLine"]] = relationship(
        back_populates="transaction",
        order_by="TransactionLine.id",
    )

    def __repr__(self) -> str:
        return f"<Transaction {self.reference}>"
