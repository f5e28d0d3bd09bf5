"""
Ledger error taxonomy.

Three families, handled differently by callers:

- Validation errors: the request itself is malformed. Terminal.
- Domain errors: the request is well formed but the ledger refuses it
  (unknown account, not enough money, reused reference). Terminal.
- Storage errors: the database could not complete the atomic unit.
  The unit is always rolled back first, so retrying is safe; a retry
  of an already-committed request is caught by reference uniqueness.

Validation and domain errors are ValueErrors so that code catching
ValueError at the service boundary keeps working.
"""


class LedgerError(Exception):
    """Base class for every error raised by the ledger."""


# --- Validation ---

class LedgerValidationError(LedgerError, ValueError):
    """Bad input shape or range."""


class InvalidAmountError(LedgerValidationError):

    def __init__(self, amount, reason: str = "must be a positive integer"):
        self.amount = amount
        super().__init__(f"Invalid amount {amount!r}: {reason}")


class InvalidReferenceError(LedgerValidationError):

    def __init__(self, reference):
        self.reference = reference
        super().__init__("Transaction reference must be a non-empty string")


class InvalidTransferError(LedgerValidationError):
    """Transfer request that cannot form a valid transaction."""


# --- Domain ---

class DomainError(LedgerError, ValueError):
    """Well-formed request the ledger refuses."""


class UserNotFoundError(DomainError):

    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


class DuplicateEmailError(DomainError):

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"User with email '{email}' already exists")


class AccountNotFoundError(DomainError):

    def __init__(self, account_number=None, account_id=None):
        self.account_number = account_number
        self.account_id = account_id
        if account_number is not None:
            message = f"Account {account_number} not found"
        else:
            message = f"Account with id {account_id} not found"
        super().__init__(message)


class AlreadyDisabledError(DomainError):

    def __init__(self, account_id):
        self.account_id = account_id
        super().__init__(f"Account {account_id} is already disabled")


class ProtectedAccountError(DomainError):
    """Operation not permitted on the root account."""


class InsufficientFundsError(DomainError):

    def __init__(self, account_number: str, balance: int, amount: int):
        self.account_number = account_number
        self.balance = balance
        self.amount = amount
        super().__init__(
            f"Insufficient funds in account {account_number}: "
            f"available={balance}, requested={amount}"
        )


class BalanceLimitError(DomainError):
    """A transfer would push a balance past what the ledger can store."""

    def __init__(self, account_number: str, balance: int, amount: int):
        self.account_number = account_number
        self.balance = balance
        self.amount = amount
        super().__init__(
            f"Moving {amount} would take account {account_number} "
            f"past the ledger limit: balance={balance}"
        )


class DuplicateReferenceError(DomainError):

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(f"Transaction reference '{reference}' already exists")


class UnbalancedTransactionError(DomainError):
    """Lines that violate the double-entry rules."""


class TransactionNotFoundError(DomainError):

    def __init__(self, transaction_id):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id} not found")


# --- Storage ---

class StorageError(LedgerError):
    """The atomic unit could not complete and was rolled back."""
