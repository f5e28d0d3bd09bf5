"""
Transaction line model.

Each line is one side of a double-entry transaction: a credit
or a debit of a positive amount against one account. Within a
transaction the credits and debits sum to the same total. That
invariant is enforced by the LedgerStore before anything is
written; the table enforces the per-row rules.
"""

from datetime import datetime

from sqlalchemy import (
    BigInteger, DateTime, ForeignKey,
    CheckConstraint, UniqueConstraint,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from banking_ledger.models.base import Base, utcnow
from banking_ledger.models.enums import LinePurpose


class TransactionLine(Base):
    __tablename__ = "transaction_lines"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transaction_lines_positive_amount"),
        # An account appears at most once per transaction
        UniqueConstraint(
            "account_id", "transaction_id",
            name="uq_transaction_lines_account_transaction",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id"), nullable=False, index=True
    )
    transaction_id: Mapped[int] = mapped_column(
        ForeignKey("transactions.id"), nullable=False, index=True
    )
    purpose: Mapped[LinePurpose] = mapped_column(
        SAEnum(
            LinePurpose,
            name="line_purpose_enum",
            create_constraint=True,
        ),
        nullable=False,
    )
    # Minor units
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    transaction: Mapped["Transaction"] = relationship(back_populates="lines")
    account: Mapped["Account"] = relationship()

    def __repr__(self) -> str:
        return f"<TransactionLine {self.purpose.value} {self.amount}>"
