"""
Ledger engine: turns a transfer request into a committed transaction.

This service enforces the ledger rules:
1. Amounts are positive integers in minor units
2. Both participants resolve to active accounts
3. A peer transfer never spends more than the sender's balance
4. Every transaction balances (credits = debits)
5. No balance leaves the range the BIGINT columns can hold
6. Everything is written in one atomic unit, or not at all

Two kinds of transfer exist, decided once up front:

    SYSTEM_DEPOSIT  sender is the root account (money entering the
                    ledger). No funds check, the root account's
                    balance goes negative by the total deposited.
                        CREDIT recipient
                        DEBIT  root
    PEER_TRANSFER   any other sender, including a withdrawal to
                    the root account. Funds are checked.
                        DEBIT  sender
                        CREDIT recipient

Retries are the caller's business. Every failure rolls the unit
back first, and a retried request that did commit the first time
fails with DuplicateReferenceError instead of moving money twice.
"""

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from banking_ledger.errors import (
    AccountNotFoundError,
    BalanceLimitError,
    DomainError,
    InsufficientFundsError,
    InvalidReferenceError,
    InvalidTransferError,
    StorageError,
)
from banking_ledger.logging_config import get_logger
from banking_ledger.models.account import Account
from banking_ledger.models.enums import LinePurpose, TransferKind
from banking_ledger.money import MAX_AMOUNT, parse_positive_amount
from banking_ledger.schemas.account import AccountBalanceResponse
from banking_ledger.schemas.transaction import (
    LineSpec,
    TransactionResponse,
    TransferRequest,
)
from banking_ledger.services.account_directory import AccountDirectory
from banking_ledger.services.ledger_store import LedgerStore


class LedgerEngine:
    """
    All money movements pass through this service.

    The engine owns the atomic unit of a transfer: participant
    lookup, balance check and line inserts share one database
    transaction, which is committed only when all of them succeed.
    """

    def __init__(self, db: Session, logger: logging.Logger | None = None):
        self.db = db
        self.logger = logger or get_logger("engine")
        self.directory = AccountDirectory(db, self.logger)
        self.store = LedgerStore(db, self.logger)

    def classify(self, sender: str) -> TransferKind:
        if self.directory.is_root(sender):
            return TransferKind.SYSTEM_DEPOSIT
        return TransferKind.PEER_TRANSFER

    def transfer(self, request: TransferRequest) -> TransactionResponse:
        """Book an already-bound TransferRequest."""
        return self.create_transaction(
            request.reference, request.sender, request.recipient, request.amount
        )

    def create_transaction(
        self,
        reference: str,
        sender: str,
        recipient: str,
        amount,
    ) -> TransactionResponse:
        """
        Move `amount` minor units from sender to recipient.

        Raises:
            InvalidAmountError: amount is not a positive integer
            InvalidReferenceError: reference is empty
            InvalidTransferError: sender and recipient are the same
            AccountNotFoundError: a participant is unknown or disabled
            InsufficientFundsError: a peer transfer exceeds the balance
            BalanceLimitError: a deposit would pass the ledger limit
            DuplicateReferenceError: the reference was used before
            StorageError: the unit could not be committed
        """
        amount = parse_positive_amount(amount)
        if not isinstance(reference, str) or not reference.strip():
            raise InvalidReferenceError(reference)
        if sender == recipient:
            raise InvalidTransferError("Cannot transfer to the same account")

        kind = self.classify(sender)
        log_context = {
            "reference": reference,
            "kind": kind.value,
            "amount": amount,
        }

        try:
            with self.store.atomic():
                if kind == TransferKind.SYSTEM_DEPOSIT:
                    lines = self._deposit_lines(recipient, amount)
                    transaction = self.store.commit_transaction(reference, lines)
                else:
                    sender_account, lines = self._peer_transfer_lines(
                        sender, recipient, amount
                    )
                    transaction = self.store.commit_transaction(reference, lines)
                    self._guard_non_negative(sender_account, amount)
        except DomainError as e:
            self.logger.warning(
                "transaction rejected",
                extra={**log_context, "reason": type(e).__name__},
            )
            raise
        except StorageError:
            self.logger.exception("transaction failed", extra=log_context)
            raise
        except SQLAlchemyError as e:
            self.logger.exception("transaction failed", extra=log_context)
            raise StorageError(
                f"Transaction {reference} could not be committed"
            ) from e

        self.logger.info(
            "transaction committed",
            extra={**log_context, "transaction_id": transaction.id},
        )
        return transaction

    def get_balance(self, account_id: int) -> int:
        """Balance of an account, disabled accounts included."""
        return self.get_account_balance(account_id).balance

    def get_account_balance(self, account_id: int) -> AccountBalanceResponse:
        with self._reading("balance", account_id=account_id):
            account = self.directory.resolve_by_id(
                account_id, include_disabled=True
            )
            balance = self.store.get_balance(account_id)

        return AccountBalanceResponse(
            account_id=account.id,
            account_number=account.account_number,
            status=account.status,
            balance=balance,
        )

    def get_transaction(self, transaction_id: int) -> TransactionResponse:
        with self._reading("transaction", transaction_id=transaction_id):
            return self.store.get_transaction(transaction_id)

    def get_account_transactions(
        self, account_id: int
    ) -> list[TransactionResponse]:
        """History of an account, newest first. Disabled accounts included."""
        with self._reading("history", account_id=account_id):
            self.directory.resolve_by_id(account_id, include_disabled=True)
            return self.store.get_transactions_by_account(account_id)

    @contextmanager
    def _reading(self, what: str, **context):
        """Turn database failures during a read into StorageError."""
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            self.logger.exception("%s read failed", what, extra=context)
            raise StorageError(f"Could not read {what}") from e

    def _deposit_lines(self, recipient: str, amount: int) -> list[LineSpec]:
        root = self.directory.ensure_root_account()
        accounts = self.directory.resolve_by_numbers({recipient})
        if recipient not in accounts:
            raise AccountNotFoundError(recipient)

        self._check_ledger_limit(root, amount)

        return [
            LineSpec(
                account_id=accounts[recipient].id,
                purpose=LinePurpose.CREDIT,
                amount=amount,
            ),
            LineSpec(
                account_id=root.id,
                purpose=LinePurpose.DEBIT,
                amount=amount,
            ),
        ]

    def _peer_transfer_lines(
        self, sender: str, recipient: str, amount: int
    ) -> tuple[Account, list[LineSpec]]:
        """
        Lock the participants, check funds, and build the lines.

        The root account is never locked: as a recipient it takes no
        funds check, and locking it would serialise every withdrawal.
        """
        numbers = {sender, recipient}
        if self.directory.is_root(recipient):
            recipient_account = self.directory.ensure_root_account()
            numbers.discard(recipient)
        else:
            recipient_account = None

        accounts = self.directory.resolve_by_numbers(numbers, lock=True)
        for number in sorted(numbers):
            if number not in accounts:
                raise AccountNotFoundError(number)

        sender_account = accounts[sender]
        if recipient_account is None:
            recipient_account = accounts[recipient]

        # Read under the lock: no concurrent unit can spend this balance
        balance = self.store.get_balance(sender_account.id)
        if amount > balance:
            raise InsufficientFundsError(sender, balance, amount)

        return sender_account, [
            LineSpec(
                account_id=sender_account.id,
                purpose=LinePurpose.DEBIT,
                amount=amount,
            ),
            LineSpec(
                account_id=recipient_account.id,
                purpose=LinePurpose.CREDIT,
                amount=amount,
            ),
        ]

    def _check_ledger_limit(self, root: Account, amount: int) -> None:
        """
        Refuse a deposit that would put more than MAX_AMOUNT in the ledger.

        The money held by all other accounts together is minus the root
        balance, so bounding the root bounds every balance.
        """
        balance = self.store.get_balance(root.id)
        if balance < amount - MAX_AMOUNT:
            raise BalanceLimitError(root.account_number, balance, amount)

    def _guard_non_negative(self, sender_account: Account, amount: int) -> None:
        """Re-read the sender's balance after the write; never below zero."""
        balance = self.store.get_balance(sender_account.id)
        if balance < 0:
            raise InsufficientFundsError(
                sender_account.account_number, balance + amount, amount
            )
