"""
Ledger store: the persistence contract the ledger engine needs.

It writes a transaction header and its lines as one unit, derives
balances from lines, and reads transactions back with their lines.

Nothing here commits. Writes flush inside the unit opened by the
caller (see atomic()), so a failure anywhere in that unit leaves
no rows behind.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence

from sqlalchemy import select, func, case
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from banking_ledger.errors import (
    DuplicateReferenceError,
    StorageError,
    TransactionNotFoundError,
    UnbalancedTransactionError,
)
from banking_ledger.logging_config import get_logger
from banking_ledger.models.base import atomic
from banking_ledger.models.enums import LinePurpose
from banking_ledger.models.transaction import Transaction
from banking_ledger.models.transaction_line import TransactionLine
from banking_ledger.schemas.transaction import LineSpec, TransactionResponse


def validate_lines(lines: Sequence[LineSpec]) -> None:
    """
    Enforce the double-entry rules on a set of lines.

    - at least two lines
    - every amount strictly positive
    - no account appears twice
    - total credits equal total debits
    """
    if len(lines) < 2:
        raise UnbalancedTransactionError(
            "A transaction needs at least two lines"
        )

    account_ids = [line.account_id for line in lines]
    if len(set(account_ids)) != len(account_ids):
        raise UnbalancedTransactionError(
            "An account can appear only once in a transaction"
        )

    if any(line.amount <= 0 for line in lines):
        raise UnbalancedTransactionError("Line amounts must be positive")

    total_credits = sum(
        line.amount for line in lines if line.purpose == LinePurpose.CREDIT
    )
    total_debits = sum(
        line.amount for line in lines if line.purpose == LinePurpose.DEBIT
    )
    if total_credits != total_debits:
        raise UnbalancedTransactionError(
            f"Transaction does not balance: "
            f"credits={total_credits}, debits={total_debits}"
        )


def group_transaction_rows(
    rows: Iterable[Mapping],
) -> list[TransactionResponse]:
    """
    Reassemble joined (transaction, line) rows into transactions.

    Each row carries the transaction columns (id, reference,
    created_at) and one line (line_id, line_account_id,
    line_purpose, line_amount, line_created_at).

    Transactions come out in the order their first row was seen,
    each exactly once. Lines keep the order of their rows. A line
    id that repeats is ignored, so a join that fans out cannot
    duplicate lines.
    """
    grouped: dict = {}
    seen_lines: set = set()

    for row in rows:
        transaction = grouped.get(row["id"])
        if transaction is None:
            transaction = grouped[row["id"]] = {
                "id": row["id"],
                "reference": row["reference"],
                "created_at": row["created_at"],
                "lines": [],
            }

        line_id = row["line_id"]
        if line_id is None or line_id in seen_lines:
            continue
        seen_lines.add(line_id)
        transaction["lines"].append({
            "id": line_id,
            "account_id": row["line_account_id"],
            "transaction_id": row["id"],
            "purpose": row["line_purpose"],
            "amount": row["line_amount"],
            "created_at": row["line_created_at"],
        })

    return [TransactionResponse.model_validate(t) for t in grouped.values()]


class LedgerStore:

    def __init__(self, db: Session, logger: logging.Logger | None = None):
        self.db = db
        self.logger = logger or get_logger("store")

    def atomic(self):
        """Open the unit a transfer's reads and writes share."""
        return atomic(self.db)

    def reference_exists(self, reference: str) -> bool:
        return self.db.execute(
            select(Transaction.id).where(Transaction.reference == reference)
        ).first() is not None

    def commit_transaction(
        self, reference: str, lines: Sequence[LineSpec]
    ) -> TransactionResponse:
        """
        Write a transaction header and all of its lines.

        The lines are validated first; nothing is written for an
        unbalanced set. The reference must be unused: the check
        here gives a clean error in the common case, and the unique
        constraint catches a concurrent writer at flush time.
        """
        validate_lines(lines)

        if self.reference_exists(reference):
            raise DuplicateReferenceError(reference)

        transaction = Transaction(reference=reference)
        self.db.add(transaction)
        try:
            self.db.flush()
        except IntegrityError as e:
            if "reference" in str(e.orig):
                raise DuplicateReferenceError(reference) from e
            raise StorageError(f"Could not write transaction {reference}") from e

        transaction.lines = [
            TransactionLine(
                account_id=line.account_id,
                purpose=line.purpose,
                amount=line.amount,
            )
            for line in lines
        ]
        try:
            self.db.flush()
        except IntegrityError as e:
            raise StorageError(
                f"Could not write lines of transaction {reference}"
            ) from e

        self.logger.debug(
            "transaction written",
            extra={"transaction_id": transaction.id, "line_count": len(lines)},
        )
        return TransactionResponse.model_validate(transaction)

    def get_balance(self, account_id: int) -> int:
        """
        Derive an account's balance: sum of credits minus sum of debits.

        Balances are never stored, so they cannot drift from the
        lines. An account with no lines has a balance of 0.

        Lines are summed as one signed total, not as gross credits and
        debits, which grow without bound. Summed in insertion order each
        running total is a past balance, and the engine keeps balances
        within MAX_AMOUNT.
        """
        signed_amount = case(
            (TransactionLine.purpose == LinePurpose.CREDIT, TransactionLine.amount),
            else_=-TransactionLine.amount,
        )
        balance = self.db.execute(
            select(func.coalesce(func.sum(signed_amount), 0))
            .where(TransactionLine.account_id == account_id)
        ).scalar_one()
        return int(balance)

    def get_transaction(self, transaction_id: int) -> TransactionResponse:
        rows = self.db.execute(
            self._joined_lines()
            .where(Transaction.id == transaction_id)
            .order_by(TransactionLine.id)
        ).mappings()

        transactions = group_transaction_rows(rows)
        if not transactions:
            raise TransactionNotFoundError(transaction_id)
        return transactions[0]

    def get_transactions_by_account(
        self, account_id: int
    ) -> list[TransactionResponse]:
        """
        Every transaction the account took part in, newest first.

        Each transaction comes back with all of its lines, not just
        the line of this account. Transactions created in the same
        instant are ordered by id, highest first.
        """
        touched = select(TransactionLine.transaction_id).where(
            TransactionLine.account_id == account_id
        )
        rows = self.db.execute(
            self._joined_lines()
            .where(Transaction.id.in_(touched))
            .order_by(
                Transaction.created_at.desc(),
                Transaction.id.desc(),
                TransactionLine.id,
            )
        ).mappings()
        return group_transaction_rows(rows)

    def _joined_lines(self):
        """One row per (transaction, line) pair."""
        return select(
            Transaction.id,
            Transaction.reference,
            Transaction.created_at,
            TransactionLine.id.label("line_id"),
            TransactionLine.account_id.label("line_account_id"),
            TransactionLine.purpose.label("line_purpose"),
            TransactionLine.amount.label("line_amount"),
            TransactionLine.created_at.label("line_created_at"),
        ).join(TransactionLine, TransactionLine.transaction_id == Transaction.id)
