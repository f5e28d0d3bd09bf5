"""
Account directory: issuing, resolving and disabling accounts.

Account numbers are random digit strings. Random numbers can
collide, so uniqueness is never assumed: each insert runs in a
savepoint and a collision on the unique account_number column
simply draws a new number, up to a fixed number of attempts.

Issued numbers always start with 1-9, so a generated number can
never be mistaken for the all-zero root account number.
"""

import logging
import secrets
from collections.abc import Callable, Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from banking_ledger.config import get_settings
from banking_ledger.errors import (
    AccountNotFoundError,
    AlreadyDisabledError,
    ProtectedAccountError,
    StorageError,
    UserNotFoundError,
)
from banking_ledger.logging_config import get_logger
from banking_ledger.models.account import Account
from banking_ledger.models.base import atomic
from banking_ledger.models.enums import AccountStatus
from banking_ledger.models.user import User


def generate_account_number(length: int) -> str:
    """
    Draw a random account number of `length` digits.

    The output space is 9 * 10**(length - 1) numbers. Callers must
    still handle collisions; see AccountDirectory.create_account.
    """
    if length < 2:
        raise ValueError("account numbers need at least 2 digits")
    first = secrets.choice("123456789")
    rest = "".join(secrets.choice("0123456789") for _ in range(length - 1))
    return first + rest


class AccountDirectory:
    """
    Resolves account numbers and ids to account records.

    create_account and disable run their own atomic unit.
    resolve_* and ensure_root_account only read or flush, so they
    can take part in a larger unit owned by the caller (the
    LedgerEngine resolves participants inside its transfer unit).
    """

    def __init__(
        self,
        db: Session,
        logger: logging.Logger | None = None,
        number_generator: Callable[[int], str] = generate_account_number,
    ):
        self.db = db
        self.logger = logger or get_logger("accounts")
        self.number_generator = number_generator
        self.settings = get_settings()

    @property
    def root_account_number(self) -> str:
        return self.settings.ROOT_ACCOUNT_NUMBER

    def is_root(self, account_number: str) -> bool:
        return account_number == self.root_account_number

    def create_account(self, user_id: int) -> Account:
        """
        Open a new active account for a user.

        Raises UserNotFoundError if the user does not exist and
        StorageError if no free account number was found.
        """
        max_attempts = self.settings.ACCOUNT_NUMBER_MAX_ATTEMPTS
        length = self.settings.ACCOUNT_NUMBER_LENGTH

        with atomic(self.db):
            user = self.db.get(User, user_id)
            if not user:
                raise UserNotFoundError(user_id)

            for attempt in range(1, max_attempts + 1):
                number = self.number_generator(length)
                if self.is_root(number):
                    continue
                try:
                    with self.db.begin_nested():
                        account = Account(account_number=number, user_id=user.id)
                        self.db.add(account)
                        self.db.flush()
                except IntegrityError:
                    self.logger.warning(
                        "account number collision, retrying",
                        extra={"attempt": attempt},
                    )
                    continue
                break
            else:
                raise StorageError(
                    f"Could not issue a unique account number "
                    f"after {max_attempts} attempts"
                )

        self.logger.info(
            "account created",
            extra={"account_id": account.id, "user_id": user.id},
        )
        return account

    def ensure_root_account(self) -> Account:
        """
        Return the root account, creating it on first use.

        The root account stands for the world outside the ledger.
        It is owned by a system user and is never disabled. Does not
        commit; the row becomes permanent with the caller's unit.
        """
        root = self._get_by_number(self.root_account_number)
        if root is not None:
            return root

        try:
            with self.db.begin_nested():
                email = self.settings.ROOT_USER_EMAIL
                user = self.db.execute(
                    select(User).where(User.email == email)
                ).scalar_one_or_none()
                if user is None:
                    user = User(email=email)
                    self.db.add(user)
                    self.db.flush()
                root = Account(
                    account_number=self.root_account_number,
                    user_id=user.id,
                )
                self.db.add(root)
                self.db.flush()
        except IntegrityError:
            # Created concurrently by another unit
            root = self._get_by_number(self.root_account_number)
            if root is None:
                raise StorageError("Root account could not be created")
        else:
            self.logger.info("root account created", extra={"account_id": root.id})

        return root

    def resolve_by_numbers(
        self, numbers: Iterable[str], lock: bool = False
    ) -> dict[str, Account]:
        """
        Resolve account numbers to active accounts in one query.

        Numbers that are unknown or disabled are simply absent from
        the result. With lock=True the rows are locked FOR UPDATE in
        id order, so two units locking the same pair cannot deadlock.
        """
        numbers = set(numbers)
        if not numbers:
            return {}

        stmt = (
            select(Account)
            .where(
                Account.account_number.in_(numbers),
                Account.status == AccountStatus.ACTIVE,
            )
            .order_by(Account.id)
        )
        if lock:
            stmt = stmt.with_for_update().execution_options(
                populate_existing=True
            )

        accounts = self.db.execute(stmt).scalars().all()
        return {a.account_number: a for a in accounts}

    def resolve_by_id(
        self, account_id: int, include_disabled: bool = False
    ) -> Account:
        account = self.db.get(Account, account_id)
        if not account or (not include_disabled and not account.is_active):
            raise AccountNotFoundError(account_id=account_id)
        return account

    def resolve_by_user(self, user_id: int) -> list[Account]:
        """Active accounts owned by a user, oldest first."""
        accounts = self.db.execute(
            select(Account)
            .where(
                Account.user_id == user_id,
                Account.status == AccountStatus.ACTIVE,
            )
            .order_by(Account.created_at, Account.id)
        ).scalars().all()
        return list(accounts)

    def disable(self, account_id: int) -> Account:
        """
        Soft-disable an account.

        The account keeps its lines and history. Disabling a missing
        account raises AccountNotFoundError; disabling it twice raises
        AlreadyDisabledError. The root account cannot be disabled.
        """
        with atomic(self.db):
            account = self.db.get(Account, account_id, with_for_update=True)
            if not account:
                raise AccountNotFoundError(account_id=account_id)
            if self.is_root(account.account_number):
                raise ProtectedAccountError("The root account cannot be disabled")
            if not account.is_active:
                raise AlreadyDisabledError(account_id)

            account.disable()
            self.db.flush()

        self.logger.info("account disabled", extra={"account_id": account.id})
        return account

    def _get_by_number(self, account_number: str) -> Account | None:
        return self.db.execute(
            select(Account).where(Account.account_number == account_number)
        ).scalar_one_or_none()
