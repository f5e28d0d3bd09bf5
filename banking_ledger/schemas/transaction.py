"""
Pydantic schemas for transaction operations.

TransactionResponse is also the read model the LedgerStore builds
when it reassembles joined rows, so it is the single shape a
transaction leaves the ledger in.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from banking_ledger.models.enums import LinePurpose
from banking_ledger.money import PositiveAmount


class TransferRequest(BaseModel):
    """
    A request to move money from sender to recipient.

    When sender is the root account number this is a deposit from
    outside the ledger; when recipient is, it is a withdrawal.
    """
    reference: str = Field(min_length=1, max_length=255)
    sender: str = Field(min_length=1, max_length=32)
    recipient: str = Field(min_length=1, max_length=32)
    amount: PositiveAmount

    @field_validator("reference")
    @classmethod
    def reference_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("reference must not be blank")
        return v


class LineSpec(BaseModel):
    """A line about to be written."""
    account_id: int
    purpose: LinePurpose
    amount: PositiveAmount


class TransactionLineResponse(BaseModel):
    id: int
    account_id: int
    transaction_id: int
    purpose: LinePurpose
    amount: int
    created_at: datetime

    model_config = {"from_attributes": True}


class TransactionResponse(BaseModel):
    id: int
    reference: str
    created_at: datetime
    lines: list[TransactionLineResponse]

    model_config = {"from_attributes": True}
