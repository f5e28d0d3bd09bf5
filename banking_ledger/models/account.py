"""
Account model.

An account is where transaction lines are posted. It does not
store a balance: the balance is always derived from its lines.

Accounts are soft-disabled, never deleted. A disabled account
keeps its history but can no longer take part in transactions.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from banking_ledger.models.base import Base, utcnow
from banking_ledger.models.enums import AccountStatus


class Account(Base):
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    # Issued once at creation and never changed
    account_number: Mapped[str] = mapped_column(
        String(32), unique=True, nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    status: Mapped[AccountStatus] = mapped_column(
        SAEnum(
            AccountStatus,
            name="account_status_enum",
            create_constraint=True,
        ),
        nullable=False,
        default=AccountStatus.ACTIVE,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )
    disabled_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, default=None
    )

    user: Mapped["User"] = relationship(back_populates="accounts")

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE

    def disable(self) -> None:
        """Move the account to DISABLED and stamp the time."""
        self.status = AccountStatus.DISABLED
        self.disabled_at = utcnow()

    def __repr__(self) -> str:
        return f"<Account {self.account_number} ({self.status.value})>"
