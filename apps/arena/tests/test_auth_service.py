"""
Unit tests for authentication service.
Tests password hashing, JWT tokens and email normalization.
"""
import pytest
from datetime import timedelta
from arena.services import auth_service


class TestPasswordHashing:
    """Tests for password hashing and verification."""

    def test_hash_password_is_salted(self):
        password = "secret123"
        hash1 = auth_service.hash_password(password)
        hash2 = auth_service.hash_password(password)

        assert hash1 != hash2
        assert auth_service.verify_password(password, hash1)
        assert auth_service.verify_password(password, hash2)

    def test_verify_password_incorrect(self):
        password_hash = auth_service.hash_password("secret123")
        assert auth_service.verify_password("wrong", password_hash) is False

    def test_verify_password_empty(self):
        password_hash = auth_service.hash_password("secret123")
        assert auth_service.verify_password("", password_hash) is False
        assert auth_service.verify_password("secret123", "") is False

    def test_verify_password_malformed_hash(self):
        assert auth_service.verify_password("secret123", "not-a-bcrypt-hash") is False


class TestJWTTokens:
    """Tests for JWT token creation and verification."""

    def test_round_trip(self):
        token = auth_service.create_access_token({"user_id": 7})
        decoded = auth_service.verify_token(token)
        assert decoded["user_id"] == 7
        assert "exp" in decoded

    def test_verify_token_invalid(self):
        assert auth_service.verify_token("invalid_token_string") is None

    def test_verify_token_expired(self):
        token = auth_service.create_access_token({"user_id": 7}, expires_delta=timedelta(seconds=-1))
        assert auth_service.verify_token(token) is None

    def test_verify_token_wrong_secret(self):
        import jwt

        forged = jwt.encode({"user_id": 7}, "some-other-secret", algorithm="HS256")
        assert auth_service.verify_token(forged) is None


class TestEmailNormalization:
    def test_lowercases_and_strips(self):
        assert auth_service.normalize_email("  Alice@Example.COM ") == "alice@example.com"

    @pytest.mark.parametrize("email", ["", "no-at-sign", "a@b", "two words@example.com"])
    def test_rejects_malformed(self, email):
        with pytest.raises(ValueError, match="Invalid email"):
            auth_service.normalize_email(email)
