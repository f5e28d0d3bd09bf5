"""
Mapping from ledger errors to HTTP errors.

Routes stay thin: they call a service and hand any LedgerError
to to_http_exception.
"""

from fastapi import HTTPException

from banking_ledger.errors import (
    AccountNotFoundError,
    AlreadyDisabledError,
    DuplicateEmailError,
    DuplicateReferenceError,
    LedgerError,
    LedgerValidationError,
    StorageError,
    TransactionNotFoundError,
    UserNotFoundError,
)

# Checked in order; the first matching class wins
STATUS_CODES: list[tuple[type[LedgerError], int]] = [
    (LedgerValidationError, 422),
    (AccountNotFoundError, 404),
    (UserNotFoundError, 404),
    (TransactionNotFoundError, 404),
    (DuplicateReferenceError, 409),
    (DuplicateEmailError, 409),
    (AlreadyDisabledError, 409),
    (StorageError, 503),
]


def to_http_exception(error: LedgerError) -> HTTPException:
    for error_class, status_code in STATUS_CODES:
        if isinstance(error, error_class):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))
