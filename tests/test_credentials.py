"""Tests for password hashing and access tokens."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from src.config import get_settings
from src.models.enums import Role
from src.models.user import User
from src.services.credentials import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from src.services.errors import Unauthorized


class TestPasswordHashing:
    """Tests for hash_password and verify_password."""

    def test_verify_matches_original(self):
        hashed = hash_password("s3cret-pass")
        assert verify_password("s3cret-pass", hashed) is True

    def test_verify_rejects_other_password(self):
        hashed = hash_password("s3cret-pass")
        assert verify_password("s3cret-pasS", hashed) is False

    def test_hash_is_salted(self):
        """The same input hashes differently each time."""
        assert hash_password("same") != hash_password("same")

    def test_hash_is_not_plaintext(self):
        assert "s3cret-pass" not in hash_password("s3cret-pass")

    def test_verify_empty_hash(self):
        assert verify_password("anything", "") is False


class TestUserPasswordStorage:
    """Tests for how the User model stores passwords."""

    def test_password_assignment_hashes(self):
        user = User(name="A", email="a@example.com", password="plain-pass", role=Role.USER)
        assert user.password_hash != "plain-pass"
        assert verify_password("plain-pass", user.password_hash)

    def test_resave_does_not_rehash(self, db):
        """Saving a user twice without a new password keeps the same hash."""
        user = User(name="A", email="a@example.com", password="plain-pass", role=Role.USER)
        db.add(user)
        db.commit()
        db.refresh(user)
        first_hash = user.password_hash

        user.description = "changed"
        db.commit()
        db.refresh(user)

        assert user.password_hash == first_hash

    def test_new_password_rehashes(self, db):
        user = User(name="A", email="a@example.com", password="plain-pass", role=Role.USER)
        db.add(user)
        db.commit()
        first_hash = user.password_hash

        user.password = "other-pass"
        db.commit()
        db.refresh(user)

        assert user.password_hash != first_hash
        assert verify_password("other-pass", user.password_hash)


class TestAccessTokens:
    """Tests for create_access_token and decode_access_token."""

    def test_round_trip_claims(self):
        token = create_access_token(42, Role.ORGANIZATION)
        claims = decode_access_token(token)
        assert claims.id == 42
        assert claims.role == Role.ORGANIZATION

    def test_token_expires_in_one_hour(self):
        settings = get_settings()
        token = create_access_token(1, "user")
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        expires = datetime.fromtimestamp(payload["exp"], UTC)
        remaining = expires - datetime.now(UTC)
        assert timedelta(minutes=59) < remaining <= timedelta(minutes=60)

    def test_expired_token_rejected(self):
        settings = get_settings()
        token = jwt.encode(
            {"id": "1", "role": "user", "exp": datetime.now(UTC) - timedelta(seconds=1)},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(Unauthorized):
            decode_access_token(token)

    def test_wrong_signature_rejected(self):
        settings = get_settings()
        token = jwt.encode(
            {"id": "1", "role": "admin", "exp": datetime.now(UTC) + timedelta(minutes=5)},
            "someone-elses-secret",
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(Unauthorized):
            decode_access_token(token)

    def test_malformed_token_rejected(self):
        with pytest.raises(Unauthorized):
            decode_access_token("definitely.not.a-token")

    def test_missing_claims_rejected(self):
        settings = get_settings()
        token = jwt.encode(
            {"sub": "1", "exp": datetime.now(UTC) + timedelta(minutes=5)},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(Unauthorized):
            decode_access_token(token)
