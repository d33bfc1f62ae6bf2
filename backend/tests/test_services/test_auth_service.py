"""
Tests for AuthService (register / login / get_user)
"""
from unittest.mock import patch

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from bazar.core.errors import DuplicateEmail, InvalidCredentials, PersistenceFailure, UserNotFound
from bazar.models import User as UserModel
from bazar.services import auth_service as auth_module
from bazar.services.auth_service import AuthService


@pytest.fixture
def service(db_session, token_service):
    return AuthService(db_session, token_service)


class TestRegister:

    def test_register_returns_token_for_new_user(self, service, token_service):
        token, user = service.register("Ana", "ana@x.com", "s3cret1")

        claims = token_service.verify(token)
        assert claims.subject_id == user.id
        assert claims.claims["email"] == "ana@x.com"
        assert claims.claims["name"] == "Ana"

    def test_password_is_stored_hashed(self, service, db_session):
        _, user = service.register("Ana", "ana@x.com", "s3cret1")

        row = db_session.get(UserModel, user.id)
        assert row.password_hash != "s3cret1"
        assert auth_module.pwd_context.verify("s3cret1", row.password_hash)

    def test_duplicate_email_in_other_case_is_rejected(self, service, db_session):
        service.register("Ana", "ana@x.com", "s3cret1")

        with pytest.raises(DuplicateEmail):
            service.register("Otra Ana", "ANA@X.com", "another1")

        assert db_session.query(UserModel).count() == 1

    def test_unique_constraint_race_maps_to_duplicate_email(self, service):
        with patch.object(
            service.users, "create",
            side_effect=IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed")),
        ):
            with pytest.raises(DuplicateEmail):
                service.register("Ana", "ana@x.com", "s3cret1")

    def test_store_failure_maps_to_persistence_failure(self, service):
        with patch.object(
            service.users, "create",
            side_effect=OperationalError("INSERT", {}, Exception("disk I/O error")),
        ):
            with pytest.raises(PersistenceFailure):
                service.register("Ana", "ana@x.com", "s3cret1")

    def test_email_lookup_failure_maps_to_persistence_failure(self, service, db_session):
        with patch.object(
            service.users, "email_exists",
            side_effect=OperationalError("SELECT", {}, Exception("connection lost")),
        ):
            with pytest.raises(PersistenceFailure):
                service.register("Ana", "ana@x.com", "s3cret1")

        assert db_session.query(UserModel).count() == 0


class TestLogin:

    def test_login_with_correct_password(self, service, registered_user, token_service):
        _, registered = registered_user

        token, user = service.login("ana@x.com", "s3cret1")

        assert user.id == registered.id
        assert token_service.verify(token).subject_id == registered.id

    def test_login_email_is_case_insensitive(self, service, registered_user):
        _, user = service.login("  Ana@X.COM", "s3cret1")

        assert user.email == "ana@x.com"

    def test_wrong_password_and_unknown_email_fail_the_same_way(self, service, registered_user):
        with pytest.raises(InvalidCredentials) as wrong_password:
            service.login("ana@x.com", "wrong-password")
        with pytest.raises(InvalidCredentials) as unknown_email:
            service.login("nadie@x.com", "s3cret1")

        assert wrong_password.value.to_dict() == unknown_email.value.to_dict()

    def test_unknown_email_still_checks_a_hash(self, service):
        with patch.object(auth_module.pwd_context, "verify", return_value=False) as verify:
            with pytest.raises(InvalidCredentials):
                service.login("nadie@x.com", "s3cret1")

        verify.assert_called_once()

    def test_user_returned_by_login_has_no_hash(self, service, registered_user):
        _, user = service.login("ana@x.com", "s3cret1")

        assert "password_hash" not in user.model_dump()

    def test_credential_lookup_failure_is_not_invalid_credentials(self, service, registered_user):
        with patch.object(
            service.users, "find_by_email",
            side_effect=OperationalError("SELECT", {}, Exception("connection lost")),
        ):
            with pytest.raises(PersistenceFailure):
                service.login("ana@x.com", "s3cret1")


class TestGetUser:

    def test_get_user(self, service, registered_user):
        _, registered = registered_user

        assert service.get_user(registered.id).email == "ana@x.com"

    def test_get_unknown_user(self, service):
        with pytest.raises(UserNotFound):
            service.get_user(12345)

    def test_store_failure(self, service):
        with patch.object(
            service.users, "find_by_id",
            side_effect=OperationalError("SELECT", {}, Exception("connection lost")),
        ):
            with pytest.raises(PersistenceFailure):
                service.get_user(1)
