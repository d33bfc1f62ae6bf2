"""
Auth Service
Registration and login against the credential store

Author: Bazar
Date: 2026-10-19
"""
import logging
from functools import lru_cache
from typing import Tuple

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bazar.core.auth import TokenService
from bazar.core.config import settings
from bazar.core.errors import DuplicateEmail, InvalidCredentials, PersistenceFailure, UserNotFound
from bazar.domain.user import User, normalize_email
from bazar.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    """Hash checked when the email is unknown, so both failures cost the same"""
    return pwd_context.hash("bazar-timing-equalizer")


class AuthService:
    """
    Service for user registration and login

    Handles:
    - Case-insensitive email uniqueness
    - bcrypt hashing (plaintext is never stored or logged)
    - Token issuance on register and login
    """

    def __init__(self, db: Session, tokens: TokenService):
        self.db = db
        self.tokens = tokens
        self.users = UserRepository(db)

    def _issue_for(self, user: User) -> str:
        return self.tokens.issue(user.id, name=user.name, email=user.email)

    def register(self, name: str, email: str, password: str) -> Tuple[str, User]:
        """
        Create a user and log them in

        Args:
            name: Display name
            email: Email (normalized before storage)
            password: Plaintext secret, hashed before it touches the store

        Returns:
            Tuple of (token, user)

        Raises:
            DuplicateEmail: the normalized email is already registered
            PersistenceFailure: the lookup or the insert hit a store error
        """
        email = normalize_email(email)
        try:
            taken = self.users.email_exists(email)
        except SQLAlchemyError:
            logger.exception("Failed to check email availability")
            raise PersistenceFailure()

        if taken:
            logger.info(f"Registration rejected, email already registered: {email}")
            raise DuplicateEmail()

        password_hash = pwd_context.hash(password)

        try:
            user = self.users.create(name=name, email=email, password_hash=password_hash)
            self.db.commit()
        except IntegrityError:
            # Concurrent registration with the same email won the race
            self.db.rollback()
            logger.info(f"Registration rejected by unique constraint: {email}")
            raise DuplicateEmail()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to store new user")
            raise PersistenceFailure()

        logger.info(f"Registered user {user.id} ({email})")
        return self._issue_for(user), user

    def login(self, email: str, password: str) -> Tuple[str, User]:
        """
        Check credentials and issue a token

        Raises:
            InvalidCredentials: unknown email or wrong password (same error)
            PersistenceFailure: the credential lookup failed
        """
        try:
            credentials = self.users.find_by_email(email)
        except SQLAlchemyError:
            logger.exception("Failed to look up credentials")
            raise PersistenceFailure()

        if credentials is None:
            pwd_context.verify(password, _dummy_hash())
            logger.info(f"Failed login for {normalize_email(email)}")
            raise InvalidCredentials()

        if not pwd_context.verify(password, credentials.password_hash):
            logger.info(f"Failed login for {credentials.email}")
            raise InvalidCredentials()

        user = User.model_validate(credentials.model_dump(exclude={"password_hash"}))
        logger.info(f"User {user.id} logged in")
        return self._issue_for(user), user

    def get_user(self, user_id: int) -> User:
        try:
            user = self.users.find_by_id(user_id)
        except SQLAlchemyError:
            logger.exception(f"Failed to load user {user_id}")
            raise PersistenceFailure()

        if user is None:
            raise UserNotFound()
        return user
