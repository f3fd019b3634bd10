"""Password hashing, JWT issuance and request authentication."""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import bcrypt
import jwt

from src.models.task import Task
from src.models.user import User, UserCreate, UserLogin, UserUpdate
from src.services.user_repository import UserRepository
from src.utils.config import AppConfig
from src.utils.errors import AuthenticationError, AuthorizationError, TaskManagerError, TaskNotFoundError
from src.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=AppConfig.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a bcrypt hash; malformed hashes never match."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def get_jwt_secret() -> str:
    """Get JWT signing secret from configuration."""
    secret = AppConfig.JWT_SECRET.strip()
    if not secret:
        raise TaskManagerError("JWT_SECRET not set", error="Configuration error")
    return secret


def issue_token(user_id: str, now: Optional[datetime] = None) -> str:
    """Sign an access token for ``user_id``."""
    issued_at = now or datetime.now(timezone.utc)
    claims = {
        "userId": user_id,
        "iat": issued_at,
        "exp": issued_at + timedelta(hours=AppConfig.JWT_EXPIRES_IN_HOURS),
    }
    return jwt.encode(claims, get_jwt_secret(), algorithm=AppConfig.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """Verify a token and return its claims."""
    try:
        claims = jwt.decode(token, get_jwt_secret(), algorithms=[AppConfig.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError(
            "The authentication token has expired", error="Token expired"
        ) from e
    except jwt.InvalidTokenError as e:
        raise AuthenticationError(
            "The provided token is invalid", error="Invalid token"
        ) from e

    if not claims.get("userId"):
        raise AuthenticationError("The provided token is invalid", error="Invalid token")
    return claims


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


async def authenticate_request(authorization: Optional[str], users: UserRepository) -> User:
    """Resolve a bearer credential to the owning user."""
    token = extract_bearer_token(authorization)
    if not token:
        raise AuthenticationError(
            "Please provide a valid authentication token", error="Access token required"
        )

    claims = decode_token(token)
    user = await users.get_by_id(claims["userId"])
    if user is None:
        raise AuthenticationError("User not found", error="Invalid token")
    return user


def require_ownership(task: Optional[Task], user: User) -> Task:
    """Return ``task`` if ``user`` owns it."""
    if task is None:
        raise TaskNotFoundError("The specified task does not exist")
    if task.user_id != user.id:
        logger.warning(
            "Ownership check failed",
            task_id=task.id,
            user_id=mask_user_id(user.id),
        )
        raise AuthorizationError("You can only access your own resources")
    return task


async def register(payload: UserCreate, users: UserRepository) -> tuple[User, str]:
    """Create an account and sign a token for it."""
    user = await users.create(payload, hash_password(payload.password))
    return user, issue_token(user.id)


async def login(credentials: UserLogin, users: UserRepository) -> tuple[User, str]:
    """Check credentials and sign a token."""
    user = await users.get_by_username(credentials.username)
    if user is None or not verify_password(credentials.password, user.password):
        logger.info("Login rejected", username=credentials.username)
        raise AuthenticationError("Invalid username or password", error="Invalid credentials")
    return user, issue_token(user.id)


async def update_profile(user: User, payload: UserUpdate, users: UserRepository) -> User:
    password_hash = hash_password(payload.password) if payload.password else None
    return await users.update(user.id, payload, password_hash=password_hash)
