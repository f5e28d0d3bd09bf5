"""
Transaction API endpoints.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from banking_ledger.api.dependencies import get_app_logger
from banking_ledger.api.errors import to_http_exception
from banking_ledger.errors import LedgerError
from banking_ledger.models.base import get_db
from banking_ledger.schemas.transaction import (
    TransferRequest,
    TransactionResponse,
)
from banking_ledger.services.ledger_engine import LedgerEngine

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.post("", response_model=TransactionResponse, status_code=201)
def create_transaction(
    request: TransferRequest,
    db: Session = Depends(get_db),
    logger: logging.Logger = Depends(get_app_logger),
):
    """
    Move money between two accounts.

    Use the root account number as sender to deposit money into
    the ledger, or as recipient to withdraw it.
    """
    engine = LedgerEngine(db, logger)
    try:
        return engine.transfer(request)
    except LedgerError as e:
        raise to_http_exception(e)


@router.get("", response_model=list[TransactionResponse])
def get_account_transactions(
    account_id: int,
    db: Session = Depends(get_db),
    logger: logging.Logger = Depends(get_app_logger),
):
    """Transactions an account took part in, newest first."""
    engine = LedgerEngine(db, logger)
    try:
        return engine.get_account_transactions(account_id)
    except LedgerError as e:
        raise to_http_exception(e)


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    logger: logging.Logger = Depends(get_app_logger),
):
    engine = LedgerEngine(db, logger)
    try:
        return engine.get_transaction(transaction_id)
    except LedgerError as e:
        raise to_http_exception(e)
