"""Business logic services."""

from banking_ledger.services.ledger_store import LedgerStore
from banking_ledger.services.account_directory import AccountDirectory
from banking_ledger.services.user_service import UserService
from banking_ledger.services.ledger_engine import LedgerEngine

__all__ = ["LedgerStore", "AccountDirectory", "UserService", "LedgerEngine"]
