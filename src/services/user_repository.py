"""User persistence on top of the Supabase ``users`` table."""

from datetime import datetime, timezone
from typing import Any, Optional

from supabase import Client
from ulid import ULID

from src.models.user import User, UserCreate, UserUpdate
from src.services.supabase_client import SupabaseClient, get_supabase_client
from src.utils.errors import DuplicateUserError, SupabaseError, UserNotFoundError
from src.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)

USERS_TABLE = "users"


def generate_user_id() -> str:
    """Generate a text-based user ID (ULID format)."""
    return str(ULID())


class UserRepository:
    """Storage access for users. The Supabase client is injected."""

    def __init__(self, client: Client):
        self.client = client

    async def _find_one(self, column: str, value: Any) -> Optional[User]:
        async with SupabaseClient(self.client) as client:
            try:
                result = client.table(USERS_TABLE).select("*").eq(column, value).execute()
            except Exception as e:
                raise SupabaseError(f"Failed to get user by {column}: {e}") from e
        return User.model_validate(result.data[0]) if result.data else None

    async def get_by_id(self, user_id: str) -> Optional[User]:
        return await self._find_one("id", user_id)

    async def get_by_username(self, username: str) -> Optional[User]:
        return await self._find_one("username", username)

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self._find_one("email", email.lower())

    async def create(self, payload: UserCreate, password_hash: str) -> User:
        """Insert a user. Rejects usernames and emails that are already taken."""
        if await self.get_by_username(payload.username):
            raise DuplicateUserError("Username already exists")
        if await self.get_by_email(payload.email):
            raise DuplicateUserError("Email already exists")

        row = {
            "id": generate_user_id(),
            "username": payload.username,
            "email": payload.email,
            "password": password_hash,
        }

        async with SupabaseClient(self.client) as client:
            try:
                result = client.table(USERS_TABLE).insert(row).execute()
            except Exception as e:
                if "duplicate key" in str(e).lower():
                    raise DuplicateUserError("Username or email already exists") from e
                raise SupabaseError(f"Failed to create user: {e}") from e

        if not result.data:
            raise SupabaseError("Failed to create user: no data returned")

        user = User.model_validate(result.data[0])
        logger.info("User created", user_id=mask_user_id(user.id))
        return user

    async def update(self, user_id: str, payload: UserUpdate, password_hash: Optional[str] = None) -> User:
        """Update email and/or password (already hashed by the caller)."""
        updates = payload.changes()
        updates.pop("password", None)
        if password_hash:
            updates["password"] = password_hash

        if "email" in updates:
            owner = await self.get_by_email(updates["email"])
            if owner and owner.id != user_id:
                raise DuplicateUserError(
                    "Email is already registered to another account", error="Email already exists"
                )

        updates["updated_at"] = datetime.now(timezone.utc).isoformat()

        async with SupabaseClient(self.client) as client:
            try:
                result = client.table(USERS_TABLE).update(updates).eq("id", user_id).execute()
            except Exception as e:
                raise SupabaseError(f"Failed to update user: {e}") from e

        if not result.data:
            raise UserNotFoundError(f"User {user_id} does not exist")
        return User.model_validate(result.data[0])

    async def delete(self, user_id: str) -> bool:
        """Delete a user; the store cascades to their tasks."""
        async with SupabaseClient(self.client) as client:
            try:
                result = client.table(USERS_TABLE).delete().eq("id", user_id).execute()
            except Exception as e:
                raise SupabaseError(f"Failed to delete user: {e}") from e
        return bool(result.data)


def get_user_repository() -> UserRepository:
    """User repository bound to the shared Supabase client."""
    return UserRepository(get_supabase_client())
