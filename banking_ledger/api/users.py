"""
User API endpoints.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from banking_ledger.api.dependencies import get_app_logger
from banking_ledger.api.errors import to_http_exception
from banking_ledger.errors import LedgerError
from banking_ledger.models.base import get_db
from banking_ledger.schemas.user import UserCreate, UserResponse
from banking_ledger.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserResponse, status_code=201)
def create_user(
    request: UserCreate,
    db: Session = Depends(get_db),
    logger: logging.Logger = Depends(get_app_logger),
):
    """Create a new password-less user."""
    service = UserService(db, logger)
    try:
        return service.create_user(request.email)
    except LedgerError as e:
        raise to_http_exception(e)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    logger: logging.Logger = Depends(get_app_logger),
):
    service = UserService(db, logger)
    try:
        return service.get_user(user_id)
    except LedgerError as e:
        raise to_http_exception(e)
