"""
Unit tests for UserRepository (credential store)
"""
import pytest
from sqlalchemy.exc import IntegrityError

from bazar.domain.user import User, UserCredentials
from bazar.repositories.user_repository import UserRepository


class TestUserRepository:
    """Test UserRepository methods"""

    def test_create_normalizes_email(self, db_session):
        user = UserRepository(db_session).create("Ana", "  Ana@X.com ", "hash")
        db_session.commit()

        assert isinstance(user, User)
        assert user.id is not None
        assert user.email == "ana@x.com"

    def test_find_by_email_ignores_case(self, db_session):
        repo = UserRepository(db_session)
        repo.create("Ana", "ana@x.com", "hash")
        db_session.commit()

        found = repo.find_by_email("ANA@x.COM")

        assert isinstance(found, UserCredentials)
        assert found.password_hash == "hash"

    def test_find_by_email_returns_none_when_not_found(self, db_session):
        assert UserRepository(db_session).find_by_email("nobody@x.com") is None

    def test_public_user_has_no_password_hash(self, db_session):
        repo = UserRepository(db_session)
        created = repo.create("Ana", "ana@x.com", "hash")
        db_session.commit()

        user = repo.find_by_id(created.id)

        assert user.name == "Ana"
        assert "password_hash" not in user.model_dump()

    def test_find_by_id_returns_none_when_not_found(self, db_session):
        assert UserRepository(db_session).find_by_id(404) is None

    def test_email_exists(self, db_session):
        repo = UserRepository(db_session)
        repo.create("Ana", "ana@x.com", "hash")
        db_session.commit()

        assert repo.email_exists("Ana@X.com") is True
        assert repo.email_exists("bea@x.com") is False

    def test_unique_constraint_rejects_same_email_in_other_case(self, db_session):
        repo = UserRepository(db_session)
        repo.create("Ana", "ana@x.com", "hash")
        db_session.commit()

        with pytest.raises(IntegrityError):
            repo.create("Ana Bis", "ANA@x.com", "hash2")
        db_session.rollback()
