"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from banking_ledger.models.base import Base
from banking_ledger.models.enums import (
    AccountStatus,
    LinePurpose,
    TransferKind,
)
from banking_ledger.models.user import User
from banking_ledger.models.account import Account
from banking_ledger.models.transaction import Transaction
from banking_ledger.models.transaction_line import TransactionLine

__all__ = [
    "Base",
    "AccountStatus",
    "LinePurpose",
    "TransferKind",
    "User",
    "Account",
    "Transaction",
    "TransactionLine",
]
