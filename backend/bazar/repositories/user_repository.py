"""
User Repository - Data Access Layer for Users (credential store)

Author: Bazar
Date: 2026-10-19
"""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from bazar.domain.user import User, UserCredentials, normalize_email
from bazar.models import User as UserModel


class UserRepository:
    """
    Repository for User data access

    Emails are normalized before every write and lookup. Writes are
    flushed, not committed: the calling service owns the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[UserCredentials]:
        """
        Find user by email, including the password hash

        Args:
            email: Email in any casing

        Returns:
            UserCredentials or None if not found
        """
        row = self.db.execute(
            select(UserModel).where(UserModel.email == normalize_email(email))
        ).scalar_one_or_none()
        if not row:
            return None
        return UserCredentials.model_validate(row)

    def find_by_id(self, user_id: int) -> Optional[User]:
        row = self.db.get(UserModel, user_id)
        if not row:
            return None
        return User.model_validate(row)

    def email_exists(self, email: str) -> bool:
        return self.db.execute(
            select(UserModel.id).where(UserModel.email == normalize_email(email))
        ).first() is not None

    def create(self, name: str, email: str, password_hash: str) -> User:
        """
        Insert a new user

        Raises:
            sqlalchemy.exc.IntegrityError: email already taken (on flush)
        """
        row = UserModel(name=name, email=normalize_email(email), password_hash=password_hash)
        self.db.add(row)
        self.db.flush()
        return User.model_validate(row)
