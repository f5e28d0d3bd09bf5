"""
Pydantic schemas for account operations.
"""

from datetime import datetime

from pydantic import BaseModel

from banking_ledger.models.enums import AccountStatus


class AccountCreate(BaseModel):
    """Request to open a new account for an existing user."""
    user_id: int


class AccountResponse(BaseModel):
    id: int
    account_number: str
    user_id: int
    status: AccountStatus
    created_at: datetime
    updated_at: datetime
    disabled_at: datetime | None

    model_config = {"from_attributes": True}


class AccountBalanceResponse(BaseModel):
    """Balance derived from the account's transaction lines."""
    account_id: int
    account_number: str
    status: AccountStatus
    balance: int
