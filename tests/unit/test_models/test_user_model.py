"""Tests for user models."""

import pytest
from pydantic import ValidationError

from src.models.user import User, UserCreate, UserUpdate
from tests.utils.assertions import assert_valid_user
from tests.utils.factories import create_user_row


@pytest.mark.unit
class TestUserCreate:

    def test_valid_registration(self):
        payload = UserCreate(username="jane_doe", email="Jane@Example.COM", password="Secret123")
        assert payload.email == "jane@example.com"

    @pytest.mark.parametrize("username", ["ab", "a" * 31, "jane-doe", "jane doe!", ""])
    def test_invalid_username(self, username):
        with pytest.raises(ValidationError):
            UserCreate(username=username, email="jane@example.com", password="Secret123")

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            UserCreate(username="jane_doe", email="not-an-email", password="Secret123")

    @pytest.mark.parametrize("password,reason", [
        ("Ab1", "at least 6 characters"),
        ("secret123", "uppercase"),
        ("SECRET123", "lowercase"),
        ("SecretPass", "number"),
        ("Aa1" + "x" * 70, "at most 72 bytes"),
        ("Aa1" + "é" * 35, "at most 72 bytes"),
    ])
    def test_weak_password(self, password, reason):
        with pytest.raises(ValidationError, match=reason):
            UserCreate(username="jane_doe", email="jane@example.com", password=password)


@pytest.mark.unit
class TestUserUpdate:

    def test_changes_skip_unset_fields(self):
        assert UserUpdate(email="New@Example.com").changes() == {"email": "new@example.com"}

    def test_empty(self):
        assert UserUpdate().changes() == {}

    def test_weak_password_rejected(self):
        with pytest.raises(ValidationError):
            UserUpdate(password="short")


@pytest.mark.unit
def test_user_response_hides_password():
    user = User.model_validate(create_user_row(password_hash="$2b$04$secret"))
    response = user.to_response()
    assert_valid_user(response)
    assert "$2b$04$secret" not in repr(user)


@pytest.mark.unit
def test_password_at_bcrypt_limit_is_accepted():
    password = "Aa1" + "x" * 69
    assert len(password.encode("utf-8")) == 72
    assert UserCreate(username="jane_doe", email="jane@example.com", password=password).password == password
    with pytest.raises(ValidationError, match="at most 72 bytes"):
        UserUpdate(password=password + "x")
