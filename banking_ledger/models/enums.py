"""
Shared enumerations for database models.

Using Python enums mapped to database enums ensures that
only valid values can be stored. An invalid purpose or
account status is caught at the database level, not just
in Python validation.
"""

import enum


class AccountStatus(str, enum.Enum):
    """Lifecycle of an account. Accounts are never deleted."""
    ACTIVE = "ACTIVE"
    DISABLED = "DISABLED"


class LinePurpose(str, enum.Enum):
    """Direction of a transaction line."""
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"


class TransferKind(str, enum.Enum):
    """How a transfer request is booked."""
    SYSTEM_DEPOSIT = "SYSTEM_DEPOSIT"
    PEER_TRANSFER = "PEER_TRANSFER"
