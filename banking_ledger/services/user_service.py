"""
User service: creating and looking up account holders.
"""

import logging

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from banking_ledger.config import get_settings
from banking_ledger.errors import DuplicateEmailError, UserNotFoundError
from banking_ledger.logging_config import get_logger
from banking_ledger.models.base import atomic
from banking_ledger.models.user import User


class UserService:

    def __init__(self, db: Session, logger: logging.Logger | None = None):
        self.db = db
        self.logger = logger or get_logger("users")
        self.settings = get_settings()

    def create_user(self, email: str) -> User:
        """
        Create a new user. Emails are unique, compared case-insensitively.

        The root user's email is taken from the start: the system user
        owning the root account is created by the AccountDirectory only.
        """
        email = email.strip().lower()
        if email == self.settings.ROOT_USER_EMAIL.strip().lower():
            raise DuplicateEmailError(email)

        try:
            with atomic(self.db):
                if self.get_user_by_email(email) is not None:
                    raise DuplicateEmailError(email)
                user = User(email=email)
                self.db.add(user)
                self.db.flush()
        except IntegrityError as e:
            # Lost a race with a concurrent insert of the same email
            raise DuplicateEmailError(email) from e

        self.logger.info("user created", extra={"user_id": user.id})
        return user

    def get_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if not user:
            raise UserNotFoundError(user_id)
        return user

    def get_user_by_email(self, email: str) -> User | None:
        return self.db.execute(
            select(User).where(func.lower(User.email) == email.strip().lower())
        ).scalar_one_or_none()
