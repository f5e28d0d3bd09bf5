"""
User model.

Represents an account holder. A user can own several accounts.
Users are password-less; authentication is not part of the ledger.
"""

from datetime import datetime

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from banking_ledger.models.base import Base, utcnow


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    accounts: Mapped[list["Account"]] = relationship(back_populates="user")

    def __repr__(self) -> str:
        return f"<User {self.email}>"
