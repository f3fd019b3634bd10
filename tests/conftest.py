"""Shared pytest fixtures and configuration."""

import os
import pytest
from freezegun import freeze_time

# Set test environment variables before any application module reads them
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-with-enough-length-for-hs256")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_FORMAT", "text")

from src.models.user import User
from src.services.auth import hash_password, issue_token
from src.services.task_repository import TaskRepository
from src.services.user_repository import UserRepository
from tests.utils.factories import FIXED_NOW, TEST_PASSWORD, create_user_row
from tests.utils.fake_supabase import FakeSupabaseClient



@pytest.fixture
def fixed_now():
    """The instant every time-dependent test is pinned to."""
    return FIXED_NOW


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2024-12-09 12:00:00") as frozen_time:
        yield frozen_time


@pytest.fixture
def fake_supabase():
    """In-memory Supabase client."""
    return FakeSupabaseClient()


@pytest.fixture
def task_repository(fake_supabase, fixed_now):
    return TaskRepository(fake_supabase, clock=lambda: fixed_now)


@pytest.fixture
def user_repository(fake_supabase):
    return UserRepository(fake_supabase)


@pytest.fixture
def stored_user(fake_supabase):
    """A registered user whose password is TEST_PASSWORD."""
    row = create_user_row(username="test_user", email="test@example.com", password_hash=hash_password(TEST_PASSWORD))
    fake_supabase.tables.setdefault("users", []).append(row)
    return User.model_validate(row)


@pytest.fixture
def other_user(fake_supabase):
    row = create_user_row(username="other_user", email="other@example.com")
    fake_supabase.tables.setdefault("users", []).append(row)
    return User.model_validate(row)


@pytest.fixture
def auth_token(stored_user):
    return issue_token(stored_user.id)


@pytest.fixture
def patch_repositories(monkeypatch, task_repository, user_repository):
    """Point every API module at the in-memory repositories."""
    modules = [
        "api.tasks.index",
        "api.tasks.item",
        "api.tasks.statistics",
        "api.auth.register",
        "api.auth.login",
        "api.auth.profile",
        "api.auth.verify",
    ]
    for module in modules:
        imported = __import__(module, fromlist=["handler"])
        if hasattr(imported, "get_task_repository"):
            monkeypatch.setattr(imported, "get_task_repository", lambda: task_repository)
        if hasattr(imported, "get_user_repository"):
            monkeypatch.setattr(imported, "get_user_repository", lambda: user_repository)
    return task_repository, user_repository
