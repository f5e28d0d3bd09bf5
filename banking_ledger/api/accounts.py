"""
Account API endpoints.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from banking_ledger.api.dependencies import get_app_logger
from banking_ledger.api.errors import to_http_exception
from banking_ledger.errors import LedgerError
from banking_ledger.models.base import get_db
from banking_ledger.schemas.account import (
    AccountCreate,
    AccountResponse,
    AccountBalanceResponse,
)
from banking_ledger.services.account_directory import AccountDirectory
from banking_ledger.services.ledger_engine import LedgerEngine

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    request: AccountCreate,
    db: Session = Depends(get_db),
    logger: logging.Logger = Depends(get_app_logger),
):
    """Open a new active account with a freshly issued account number."""
    directory = AccountDirectory(db, logger)
    try:
        return directory.create_account(request.user_id)
    except LedgerError as e:
        raise to_http_exception(e)


@router.get("", response_model=list[AccountResponse])
def get_user_accounts(
    user_id: int,
    db: Session = Depends(get_db),
    logger: logging.Logger = Depends(get_app_logger),
):
    """Active accounts belonging to a user."""
    directory = AccountDirectory(db, logger)
    return directory.resolve_by_user(user_id)


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: int,
    db: Session = Depends(get_db),
    logger: logging.Logger = Depends(get_app_logger),
):
    directory = AccountDirectory(db, logger)
    try:
        return directory.resolve_by_id(account_id, include_disabled=True)
    except LedgerError as e:
        raise to_http_exception(e)


@router.patch("/{account_id}/disable", response_model=AccountResponse)
def disable_account(
    account_id: int,
    db: Session = Depends(get_db),
    logger: logging.Logger = Depends(get_app_logger),
):
    """
    Disable an account.

    The account keeps its history but can no longer send or
    receive money. There is no way back to active.
    """
    directory = AccountDirectory(db, logger)
    try:
        return directory.disable(account_id)
    except LedgerError as e:
        raise to_http_exception(e)


@router.get("/{account_id}/balance", response_model=AccountBalanceResponse)
def get_account_balance(
    account_id: int,
    db: Session = Depends(get_db),
    logger: logging.Logger = Depends(get_app_logger),
):
    """Get the balance derived from the account's transaction lines."""
    engine = LedgerEngine(db, logger)
    try:
        return engine.get_account_balance(account_id)
    except LedgerError as e:
        raise to_http_exception(e)
